from __future__ import annotations

from models.schema import COL_PRODUCTION
from repos.history_repo import HistoryRepository


class ProductionRepository(HistoryRepository):
    collection = COL_PRODUCTION
    key_field = "date"
