from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from ingest.dates import utc_today


def parse_iso_date(value: Any) -> Optional[date]:
    try:
        return date.fromisoformat(str(value)[:10])
    except (TypeError, ValueError):
        return None


def cutoff_date(days: int, today: Optional[date] = None) -> date:
    return (today or utc_today()) - timedelta(days=int(days))


def within_window(
    records: Iterable[Dict[str, Any]],
    days: int,
    today: Optional[date] = None,
    key: str = "date",
) -> List[Dict[str, Any]]:
    """Records whose `key` date is on or after `today - days` (the boundary day is included)."""
    cutoff = cutoff_date(days, today)
    out = []
    for rec in records:
        d = parse_iso_date(rec.get(key))
        if d is not None and d >= cutoff:
            out.append(rec)
    return out


def ascending(records: Iterable[Dict[str, Any]], key: str = "date") -> List[Dict[str, Any]]:
    return sorted(records, key=lambda r: str(r.get(key) or ""))
