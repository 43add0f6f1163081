from __future__ import annotations

import logging

from fastapi import APIRouter

from ingest.report_ingest import ReportIngestService

router = APIRouter()
log = logging.getLogger("dosedash.routers.admin")


@router.post("/clear")
def clear_all():
    # Snapshot documents (product usage, wastage, stock doses) are kept.
    ReportIngestService().clear_history()
    return {"success": True, "message": "All data cleared"}
