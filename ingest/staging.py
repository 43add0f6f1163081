from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

log = logging.getLogger("dosedash.ingest.staging")

_SAFE_SUFFIX_RE = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


def _suffix_for(filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    return suffix if _SAFE_SUFFIX_RE.match(suffix) else ".xlsx"


@contextmanager
def staged_upload(source: BinaryIO, filename: str, upload_dir: str) -> Iterator[Path]:
    """
    Copy an uploaded stream to a temp file under `upload_dir` and yield its path.

    The temp file is removed when the block exits, whether ingest succeeded or raised.
    """
    Path(upload_dir).mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix="upload-", suffix=_suffix_for(filename), dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(source, out)
        yield Path(tmp)
    finally:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        except OSError as e:
            log.warning("staged_upload_cleanup_failed", extra={"extra": {"path": tmp, "error": str(e)}})
