from __future__ import annotations

import os
import tempfile
import time
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter

from config.settings import settings

router = APIRouter()


def _data_dir_probe() -> Dict[str, Any]:
    """Create and remove a scratch file in DATA_DIR; no collection is touched."""
    try:
        Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".healthz.", dir=settings.DATA_DIR)
        os.close(fd)
        os.unlink(tmp)
        return {"ok": True, "path": str(Path(settings.DATA_DIR).resolve())}
    except OSError as e:
        return {"ok": False, "error_type": type(e).__name__, "message": str(e)}


@router.get("/health")
def health():
    probe = _data_dir_probe()
    return {
        "ok": bool(probe.get("ok", False)),
        "service": "dosedash-api",
        "environment": settings.ENVIRONMENT,
        "data_dir_writable": bool(probe.get("ok", False)),
        "data_dir": probe,
        "time_unix": time.time(),
    }
