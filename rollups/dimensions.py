from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Optional, Sequence


def fold_dimension(
    records: Iterable[Dict[str, Any]],
    field: str,
    sums: Sequence[str],
    carry: Sequence[str] = (),
) -> Dict[str, Dict[str, Any]]:
    """
    Union one nested dimension map (e.g. `by_priority`) across records.

    Each value in `sums` is added per dimension key; `carry` fields (such as an
    NDC) are taken from the first record that has the key.
    """
    combined: Dict[str, Dict[str, Any]] = {}
    for rec in records:
        dim = rec.get(field) or {}
        for key, stats in dim.items():
            bucket = combined.get(key)
            if bucket is None:
                bucket = {name: 0 for name in sums}
                for name in carry:
                    bucket[name] = stats.get(name)
                combined[key] = bucket
            for name in sums:
                bucket[name] += stats.get(name) or 0
    return combined


def fold_hourly(records: Iterable[Dict[str, Any]], field: str = "hourly") -> Dict[int, int]:
    totals: Dict[int, int] = {}
    for rec in records:
        for hour, count in (rec.get(field) or {}).items():
            h = as_int(hour)
            if h is None:
                continue
            totals[h] = totals.get(h, 0) + (count or 0)
    return totals


def as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def limited(rows: list, limit: Optional[int]) -> list:
    return rows if limit is None else rows[: max(int(limit), 0)]
