from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from config.settings import settings
from models.schema import SCHEMA_VERSION

log = logging.getLogger("dosedash.storage")


class StoreWriteError(Exception):
    def __init__(self, collection: str, message: str):
        super().__init__(f"failed to persist {collection}: {message}")
        self.collection = collection


class DocumentBox:
    """Mutable holder handed out by `JsonDocumentStore.transaction`.

    Callers may mutate `value` in place or rebind it; whatever it holds when the
    block exits cleanly is what gets written.
    """

    def __init__(self, value: Any):
        self.value = value


class JsonDocumentStore:
    """One human-readable JSON file per collection, cached in memory after first load.

    Writers are serialized per collection. A transaction works on a deep copy and
    the cache only sees the new value after the file has been replaced on disk,
    so a failed aggregation or write leaves both untouched.
    """

    def __init__(self, data_dir: str | os.PathLike[str]):
        self.data_dir = Path(data_dir)
        self._cache: Dict[str, Any] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.Lock()
                self._locks[name] = lock
            return lock

    def _load(self, name: str, default: Any) -> Any:
        if name in self._cache:
            return self._cache[name]
        path = self.path_for(name)
        if not path.exists():
            # Not cached: callers may ask for the same missing collection with different defaults.
            return copy.deepcopy(default)
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        # Files written before the envelope existed hold the bare payload.
        if isinstance(raw, dict) and "schema_version" in raw and "data" in raw:
            value = raw["data"]
        else:
            value = raw
        log.info(
            "collection_loaded",
            extra={"extra": {"collection": name, "path": str(path), "schema_version": raw.get("schema_version") if isinstance(raw, dict) else None}},
        )
        self._cache[name] = value
        return value

    def _write(self, name: str, value: Any) -> None:
        path = self.path_for(name)
        envelope = {"schema_version": SCHEMA_VERSION, "collection": name, "data": value}
        tmp_name: Optional[str] = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=str(self.data_dir))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(envelope, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            log.error(
                "collection_write_failed",
                extra={"extra": {"collection": name, "path": str(path), "error_type": type(e).__name__, "message": str(e)}},
                exc_info=True,
            )
            raise StoreWriteError(name, str(e)) from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def read(self, name: str, default: Any) -> Any:
        """Return a private copy of the collection (or `default` when nothing is stored)."""
        with self._lock_for(name):
            return copy.deepcopy(self._load(name, default))

    @contextmanager
    def transaction(self, name: str, default: Any) -> Iterator[DocumentBox]:
        with self._lock_for(name):
            box = DocumentBox(copy.deepcopy(self._load(name, default)))
            yield box
            self._write(name, box.value)
            self._cache[name] = box.value

    def replace(self, name: str, value: Any) -> None:
        with self.transaction(name, default=None) as box:
            box.value = value


_store: Optional[JsonDocumentStore] = None
_store_guard = threading.Lock()


def get_store() -> JsonDocumentStore:
    global _store
    with _store_guard:
        if _store is None:
            _store = JsonDocumentStore(settings.DATA_DIR)
        return _store
