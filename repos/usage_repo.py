from __future__ import annotations

from models.schema import COL_USAGE
from repos.history_repo import HistoryRepository


class UsageRepository(HistoryRepository):
    collection = COL_USAGE
    key_field = "date"
