from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping

from config.settings import settings
from ingest.coerce import IngestWarnings


def new_warnings() -> IngestWarnings:
    return IngestWarnings(limit=settings.MAX_INGEST_WARNINGS)


@dataclass
class HistoryAggregation:
    """Buckets for one upload, keyed by natural key, ready to be upserted."""

    key_field: str
    buckets: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    counters: Dict[str, Any] = field(default_factory=dict)
    warnings: IngestWarnings = field(default_factory=new_warnings)


@dataclass
class SnapshotAggregation:
    """A whole replacement document for one upload."""

    document: Dict[str, Any] = field(default_factory=dict)
    counters: Dict[str, Any] = field(default_factory=dict)
    warnings: IngestWarnings = field(default_factory=new_warnings)


def bump(dimension: MutableMapping[str, Dict[str, Any]], key: str, **amounts: float) -> Dict[str, Any]:
    """Add `amounts` into `dimension[key]`, creating the bucket at zero on first sight."""
    bucket = dimension.get(key)
    if bucket is None:
        bucket = {name: 0 for name in amounts}
        dimension[key] = bucket
    for name, amount in amounts.items():
        bucket[name] = bucket.get(name, 0) + amount
    return bucket


def bump_count(counts: MutableMapping[str, int], key: str, amount: int = 1) -> None:
    counts[key] = counts.get(key, 0) + amount


def percent(part: float, whole: float, digits: int = 1) -> float:
    return round(part * 100 / whole, digits) if whole > 0 else 0


def average(total: float, count: int, digits: int = 1) -> float:
    return round(total / count, digits) if count > 0 else 0


def location_key(location: str) -> str:
    # Unit codes come as "4W-ROOM12-BED2"; rollups use the part before the first hyphen.
    return location.split("-")[0]
