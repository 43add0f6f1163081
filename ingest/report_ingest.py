from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from config.settings import settings
from ingest.aggregation import HistoryAggregation, SnapshotAggregation
from ingest.aggregators import (
    bypass,
    detailed_wastage,
    product_usage,
    product_wastage,
    production,
    stock_doses,
    turnaround,
    usage,
)
from ingest.errors import ReportIngestError, ReportSchemaError
from ingest.dates import utc_now_iso
from ingest.merge import MergePolicy
from ingest.spreadsheet import read_sheet_rows, rows_as_records
from models.schema import HISTORY_COLLECTIONS
from ops.metrics import Timer
from repos.bypass_repo import BypassRepository
from repos.history_repo import HistoryRepository
from repos.production_repo import ProductionRepository
from repos.snapshot_repo import (
    DetailedWastageRepository,
    ProductUsageRepository,
    ProductWastageRepository,
    SnapshotRepository,
    StockDosesRepository,
)
from repos.turnaround_repo import TurnaroundRepository
from repos.usage_repo import UsageRepository
from storage.json_store import JsonDocumentStore, get_store

log = logging.getLogger("dosedash.ingest.report")

REPORT_KINDS = (
    "production",
    "turnaround",
    "bypass",
    "usage",
    "product-usage",
    "product-wastage",
    "detailed-wastage",
    "stock-doses",
)


class UnknownReportKind(ValueError):
    pass


class ReportIngestService:
    """
    Runs one uploaded report through read -> aggregate -> merge/replace -> persist.

    Reading and aggregation happen before any collection is touched, so a rejected
    file never mutates stored state.
    """

    def __init__(self, store: Optional[JsonDocumentStore] = None, policy: Optional[MergePolicy] = None):
        self.store = store or get_store()
        self.policy = policy
        self._handlers: Dict[str, Callable[..., Dict[str, Any]]] = {
            "production": self.ingest_production,
            "turnaround": self.ingest_turnaround,
            "bypass": self.ingest_bypass,
            "usage": self.ingest_usage,
            "product-usage": self.ingest_product_usage,
            "product-wastage": self.ingest_product_wastage,
            "detailed-wastage": self.ingest_detailed_wastage,
            "stock-doses": self.ingest_stock_doses,
        }

    def ingest(self, kind: str, path: str | Path, **options: Any) -> Dict[str, Any]:
        handler = self._handlers.get(kind)
        if handler is None:
            raise UnknownReportKind(f"unknown report type: {kind}")
        t = Timer()
        name = Path(path).name
        try:
            results = handler(path, **options)
        except ReportIngestError as e:
            log.warning(
                "report_rejected",
                extra={"extra": {"report": kind, "file": name, "error_type": type(e).__name__, "message": str(e)}},
            )
            raise
        log.info(
            "report_ingest_metrics",
            extra={
                "extra": {
                    "report": kind,
                    "file": name,
                    "duration_ms": t.ms(),
                    **{k: v for k, v in results.items() if k != "warnings"},
                }
            },
        )
        return results

    # History collections

    def _upsert(self, agg: HistoryAggregation, repo: HistoryRepository) -> Dict[str, Any]:
        uploaded_at = utc_now_iso()
        records = [{**body, "uploaded_at": uploaded_at} for body in agg.buckets.values()]
        merged = repo.upsert(records, policy=self.policy)
        return {"added": merged.added, "updated": merged.updated, **agg.counters, **agg.warnings.as_dict()}

    def ingest_production(self, path: str | Path) -> Dict[str, Any]:
        agg = production.aggregate(read_sheet_rows(path))
        return self._upsert(agg, ProductionRepository(self.store))

    def ingest_bypass(self, path: str | Path) -> Dict[str, Any]:
        agg = bypass.aggregate(read_sheet_rows(path))
        return self._upsert(agg, BypassRepository(self.store))

    def ingest_usage(self, path: str | Path) -> Dict[str, Any]:
        agg = usage.aggregate(read_sheet_rows(path))
        return self._upsert(agg, UsageRepository(self.store))

    def ingest_turnaround(
        self,
        path: str | Path,
        report_date: Optional[str] = None,
        date_mode: Optional[str] = None,
    ) -> Dict[str, Any]:
        if report_date:
            try:
                report_date = date.fromisoformat(report_date).isoformat()
            except ValueError as e:
                raise ReportSchemaError(f"report_date must be YYYY-MM-DD, got {report_date!r}") from e
        agg = turnaround.aggregate(
            read_sheet_rows(path),
            date_mode=date_mode or settings.TURNAROUND_DATE_MODE,
            report_date=report_date,
            date_column=settings.TURNAROUND_DATE_COLUMN or None,
            terminal_status=settings.TURNAROUND_TERMINAL_STATUS,
        )
        return self._upsert(agg, TurnaroundRepository(self.store))

    # Snapshot documents

    def _replace(self, agg: SnapshotAggregation, repo: SnapshotRepository) -> Dict[str, Any]:
        repo.replace({**agg.document, "uploaded_at": utc_now_iso()})
        return {**agg.counters, **agg.warnings.as_dict()}

    def ingest_product_usage(self, path: str | Path) -> Dict[str, Any]:
        agg = product_usage.aggregate(rows_as_records(read_sheet_rows(path)))
        return self._replace(agg, ProductUsageRepository(self.store))

    def ingest_product_wastage(self, path: str | Path) -> Dict[str, Any]:
        agg = product_wastage.aggregate(rows_as_records(read_sheet_rows(path)))
        return self._replace(agg, ProductWastageRepository(self.store))

    def ingest_detailed_wastage(self, path: str | Path) -> Dict[str, Any]:
        agg = detailed_wastage.aggregate(rows_as_records(read_sheet_rows(path)))
        return self._replace(agg, DetailedWastageRepository(self.store))

    def ingest_stock_doses(self, path: str | Path) -> Dict[str, Any]:
        agg = stock_doses.aggregate(rows_as_records(read_sheet_rows(path)))
        return self._replace(agg, StockDosesRepository(self.store))

    def clear_history(self) -> None:
        """Reset the four history collections; snapshot documents are left alone."""
        for repo in (
            ProductionRepository(self.store),
            TurnaroundRepository(self.store),
            BypassRepository(self.store),
            UsageRepository(self.store),
        ):
            repo.clear()
        log.info("history_cleared", extra={"extra": {"collections": list(HISTORY_COLLECTIONS)}})
