from __future__ import annotations

from typing import Any, List

from ingest.aggregation import HistoryAggregation
from ingest.coerce import is_blank, to_int, to_text
from ingest.schema_resolver import cell, resolve_hour_columns

SENTINEL = "Location"


def aggregate(rows: List[List[Any]]) -> HistoryAggregation:
    """Safety-scan bypass counts: one row per location, one column per hour."""
    header = rows[0] if rows else None
    hour_map = resolve_hour_columns(header, SENTINEL)

    agg = HistoryAggregation(key_field="location")
    processed = 0

    for n, row in enumerate(rows[1:], start=2):
        if not row or is_blank(row[0]):
            continue
        location = to_text(row[0])
        bucket = agg.buckets.get(location)
        if bucket is None:
            bucket = {"location": location, "total_bypasses": 0, "hourly": {}}
            agg.buckets[location] = bucket

        hourly = bucket["hourly"]
        for idx, hour in hour_map.items():
            count = to_int(cell(row, idx), agg.warnings, f"row {n} column {header[idx]}")
            key = str(hour)
            hourly[key] = hourly.get(key, 0) + count
        processed += 1

    for bucket in agg.buckets.values():
        bucket["total_bypasses"] = sum(bucket["hourly"].values())

    agg.counters = {"rows_processed": processed, "total_bypasses": sum(b["total_bypasses"] for b in agg.buckets.values())}
    return agg
