from __future__ import annotations

from typing import Any, Dict, Optional

from models.schema import DOC_DETAILED_WASTAGE, DOC_PRODUCT_USAGE, DOC_PRODUCT_WASTAGE, DOC_STOCK_DOSES
from storage.json_store import JsonDocumentStore, get_store


class SnapshotRepository:
    """A single document replaced wholesale on every upload; no history kept."""

    document: str = ""

    def __init__(self, store: Optional[JsonDocumentStore] = None):
        self.store = store or get_store()

    def get(self) -> Dict[str, Any]:
        doc = self.store.read(self.document, default={})
        # Older data files held an empty list before the first upload.
        return doc if isinstance(doc, dict) else {}

    def replace(self, doc: Dict[str, Any]) -> None:
        self.store.replace(self.document, doc)


class ProductUsageRepository(SnapshotRepository):
    document = DOC_PRODUCT_USAGE


class ProductWastageRepository(SnapshotRepository):
    document = DOC_PRODUCT_WASTAGE


class DetailedWastageRepository(SnapshotRepository):
    document = DOC_DETAILED_WASTAGE


class StockDosesRepository(SnapshotRepository):
    document = DOC_STOCK_DOSES
