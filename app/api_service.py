from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ingest.errors import ReportIngestError
from ops.structured_logger import setup_logging
from storage.json_store import StoreWriteError
from utils.request_context import request_id_scope

from app.routers.admin import router as admin_router
from app.routers.bypass import router as bypass_router
from app.routers.health import router as health_router
from app.routers.production import router as production_router
from app.routers.snapshots import router as snapshots_router
from app.routers.summary import router as summary_router
from app.routers.turnaround import router as turnaround_router
from app.routers.uploads import router as uploads_router
from app.routers.usage import router as usage_router

setup_logging()

app = FastAPI(title="dosedash API", version="1.0.0")
log = logging.getLogger("dosedash.api")


def _get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id") or ""


def _log_request_event(level: int, event: str, request: Request, exc_info: bool = False, **fields) -> str:
    """Log one structured line for a failed request and return its request id."""
    rid = _get_request_id(request)
    payload = {"event": event, **fields, "path": request.url.path, "method": request.method, "request_id": rid}
    log.log(level, event, extra={"extra": payload}, exc_info=exc_info)
    return rid


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    with request_id_scope(request.headers.get("x-request-id")) as rid:
        request.state.request_id = rid
        response = await call_next(request)
    response.headers["X-Request-Id"] = rid
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    rid = _log_request_event(logging.WARNING, "http_exception", request, status_code=exc.status_code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail, "request_id": rid})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = _log_request_event(logging.WARNING, "validation_error", request)
    return JSONResponse(status_code=422, content={"detail": exc.errors(), "request_id": rid})


@app.exception_handler(ReportIngestError)
async def report_ingest_error_handler(request: Request, exc: ReportIngestError):
    # Schema problems are the uploader's fault (400); unreadable files are reported as 500.
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(StoreWriteError)
async def store_write_error_handler(request: Request, exc: StoreWriteError):
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _log_request_event(
        logging.ERROR,
        "internal_unhandled_exception",
        request,
        exc_info=True,
        error_type=type(exc).__name__,
        message=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": "internal_unhandled_exception", "request_id": rid})


# The dashboard front end is served from a different origin during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["health"])
app.include_router(uploads_router, prefix="/api", tags=["uploads"])
app.include_router(summary_router, prefix="/api", tags=["summary"])
app.include_router(production_router, prefix="/api/production", tags=["production"])
app.include_router(turnaround_router, prefix="/api/turnaround", tags=["turnaround"])
app.include_router(bypass_router, prefix="/api/bypass", tags=["bypass"])
app.include_router(usage_router, prefix="/api/usage", tags=["usage"])
app.include_router(snapshots_router, prefix="/api", tags=["snapshots"])
app.include_router(admin_router, prefix="/api", tags=["admin"])
