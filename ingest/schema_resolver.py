from __future__ import annotations

import re
from datetime import datetime, time
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ingest.coerce import is_blank
from ingest.errors import ReportSchemaError

_HOUR_LABEL_RE = re.compile(r"^\s*(\d{1,2})\s*:")


def hour_from_label(cell: Any) -> Optional[int]:
    """Hour bucket for a header cell such as "8:00" or "14:30"; None when the cell is not an hour label."""
    if isinstance(cell, datetime):
        hour = cell.hour
    elif isinstance(cell, time):
        hour = cell.hour
    elif isinstance(cell, str):
        m = _HOUR_LABEL_RE.match(cell)
        if not m:
            return None
        hour = int(m.group(1))
    else:
        return None
    if 0 <= hour <= 23:
        return hour
    return None


def require_sentinel(header: Optional[List[Any]], sentinel: str) -> List[Any]:
    if not header or is_blank(header[0]) or str(header[0]).strip() != sentinel:
        raise ReportSchemaError(f"Invalid file format - expected {sentinel} in first column")
    return header


def resolve_hour_columns(header: Optional[List[Any]], sentinel: str) -> Dict[int, int]:
    """
    Map column index -> hour (0..23) for a header row whose first cell must be `sentinel`.

    Raises ReportSchemaError before any data row is looked at when the sentinel is
    missing. Header cells that are not hour labels are ignored.
    """
    header = require_sentinel(header, sentinel)
    hour_map: Dict[int, int] = {}
    for idx, cell in enumerate(header):
        if idx == 0:
            continue
        hour = hour_from_label(cell)
        if hour is not None:
            hour_map[idx] = hour
    return hour_map


def resolve_named_columns(header: Optional[List[Any]], labels: Mapping[str, str]) -> Dict[str, Optional[int]]:
    """Locate each field's column by exact label; fields whose label is absent resolve to None."""
    positions: Dict[str, int] = {}
    for idx, cell in enumerate(header or []):
        if is_blank(cell):
            continue
        positions.setdefault(str(cell).strip(), idx)
    return {field: positions.get(label) for field, label in labels.items()}


def require_columns(columns: Mapping[str, Optional[int]], labels: Mapping[str, str], fields: Iterable[str]) -> None:
    missing = [labels[f] for f in fields if columns.get(f) is None]
    if missing:
        raise ReportSchemaError(f"Invalid file format - missing required column(s): {', '.join(missing)}")


def cell(row: List[Any], index: Optional[int]) -> Any:
    """Value at `index`, or None when the column is unavailable or the row is short."""
    if index is None or index >= len(row):
        return None
    return row[index]


def pick(record: Mapping[str, Any], *aliases: str, default: Any = None) -> Any:
    """First non-blank value among accepted column aliases (e.g. "Name" or "name")."""
    for alias in aliases:
        value = record.get(alias)
        if not is_blank(value):
            return value
    return default
