from __future__ import annotations

from models.schema import COL_BYPASS
from repos.history_repo import HistoryRepository


class BypassRepository(HistoryRepository):
    # Keyed by location; keeps the order locations were first seen.
    collection = COL_BYPASS
    key_field = "location"
    sort_desc = False
