from __future__ import annotations

from models.schema import COL_TURNAROUND
from repos.history_repo import HistoryRepository


class TurnaroundRepository(HistoryRepository):
    collection = COL_TURNAROUND
    key_field = "date"
