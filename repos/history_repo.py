from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from ingest.merge import MergePolicy, MergeResult, upsert_records
from storage.json_store import JsonDocumentStore, get_store


class HistoryRepository:
    """Ordered collection with exactly one record per natural key."""

    collection: str = ""
    key_field: str = "date"
    sort_desc: bool = True

    def __init__(self, store: Optional[JsonDocumentStore] = None):
        self.store = store or get_store()

    def list_all(self) -> List[Dict[str, Any]]:
        return self.store.read(self.collection, default=[])

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        for rec in self.list_all():
            if rec.get(self.key_field) == key:
                return rec
        return None

    def upsert(self, records: Iterable[Dict[str, Any]], policy: Optional[MergePolicy] = None) -> MergeResult:
        # The transaction holds this collection's lock from load through merge to the file write.
        with self.store.transaction(self.collection, default=[]) as box:
            return upsert_records(box.value, records, self.key_field, policy=policy, sort_desc=self.sort_desc)

    def clear(self) -> None:
        self.store.replace(self.collection, [])
