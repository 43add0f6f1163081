from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from config.settings import settings
from ingest.report_ingest import REPORT_KINDS, ReportIngestService
from ingest.staging import staged_upload

router = APIRouter()
log = logging.getLogger("dosedash.routers.uploads")


@router.post("/upload/{kind}")
def upload_report(kind: str, file: UploadFile = File(...), report_date: Optional[str] = Form(default=None)):
    if kind not in REPORT_KINDS:
        raise HTTPException(status_code=404, detail=f"unknown report type: {kind}")

    options = {}
    if kind == "turnaround" and report_date:
        options["report_date"] = report_date

    with staged_upload(file.file, file.filename or "", settings.UPLOAD_DIR) as path:
        results = ReportIngestService().ingest(kind, path, **options)

    log.info("report_uploaded", extra={"extra": {"report": kind, "filename": file.filename}})
    return {"success": True, "results": results}
