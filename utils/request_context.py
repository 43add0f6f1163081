from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

# Read by the JSON log formatter so every line emitted while serving a request carries its id.
_request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    return _request_id_var.get() or ""


@contextmanager
def request_id_scope(rid: Optional[str] = None) -> Iterator[str]:
    rid = (rid or "").strip() or str(uuid.uuid4())
    token = _request_id_var.set(rid)
    try:
        yield rid
    finally:
        _request_id_var.reset(token)
