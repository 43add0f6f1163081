from __future__ import annotations

from typing import Any, Dict, List

from rollups.dimensions import fold_hourly
from rollups.labels import format_hour


def summary(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Bypass totals per location, highest first. Bypass data is location-keyed, so there is no time window."""
    by_location: Dict[str, Dict[str, Any]] = {}
    for rec in records:
        loc = by_location.setdefault(rec.get("location"), {"total_bypasses": 0, "hourly": {}})
        loc["total_bypasses"] += rec.get("total_bypasses") or 0
        for hour, count in (rec.get("hourly") or {}).items():
            loc["hourly"][hour] = loc["hourly"].get(hour, 0) + (count or 0)
    out = [
        {"location": location, "total_bypasses": data["total_bypasses"], "hourly": data["hourly"]}
        for location, data in by_location.items()
    ]
    out.sort(key=lambda r: r["total_bypasses"], reverse=True)
    return out


def hourly(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    totals = fold_hourly(records)
    return [{"hour": h, "hour_label": format_hour(h), "bypasses": totals.get(h, 0)} for h in range(24)]
