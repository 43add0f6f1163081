from __future__ import annotations

import datetime
from typing import Any, List, Optional

from ingest.aggregation import HistoryAggregation
from ingest.coerce import is_blank, parse_number, to_int
from ingest.dates import excel_serial_to_iso
from ingest.schema_resolver import cell, resolve_hour_columns

SENTINEL = "EntryDate"


def _non_positive_serial(key: Any) -> bool:
    # Blank spacer rows export their key as 0 (or "0" from text sheets).
    if isinstance(key, datetime.date):
        return False
    num: Optional[float] = parse_number(key)
    return num is not None and num <= 0


def aggregate(rows: List[List[Any]]) -> HistoryAggregation:
    """
    Dose Order Prep Statistics by Date: one row per day, one column per hour.

    Rows sharing a date are summed into one bucket so `total_doses` always equals
    the sum of `hourly`.
    """
    header = rows[0] if rows else None
    hour_map = resolve_hour_columns(header, SENTINEL)

    agg = HistoryAggregation(key_field="date")
    processed = 0
    skipped = 0

    for n, row in enumerate(rows[1:], start=2):
        if not row or is_blank(row[0]) or _non_positive_serial(row[0]):
            continue
        date = excel_serial_to_iso(row[0])
        if date is None:
            skipped += 1
            agg.warnings.add(f"row {n}: {SENTINEL} value {row[0]!r} is not a date; row skipped")
            continue

        bucket = agg.buckets.get(date)
        if bucket is None:
            bucket = {"date": date, "total_doses": 0, "hourly": {}}
            agg.buckets[date] = bucket

        hourly = bucket["hourly"]
        for idx, hour in hour_map.items():
            count = to_int(cell(row, idx), agg.warnings, f"row {n} column {header[idx]}")
            key = str(hour)
            hourly[key] = hourly.get(key, 0) + count
        processed += 1

    for bucket in agg.buckets.values():
        bucket["total_doses"] = sum(bucket["hourly"].values())

    agg.counters = {"rows_processed": processed, "rows_skipped": skipped}
    return agg
