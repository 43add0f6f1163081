from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from rollups.dimensions import as_int, round_half_up
from rollups.labels import format_hour
from rollups.window import ascending, parse_iso_date, within_window


def week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def week_label(monday: date) -> str:
    return f"Week of {monday:%b} {monday.day}"


def group_weekly(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sum daily production into ISO weeks (Monday start), unioning the hourly maps."""
    weeks: Dict[date, Dict[str, Any]] = {}
    for rec in records:
        d = parse_iso_date(rec.get("date"))
        if d is None:
            continue
        monday = week_start(d)
        week = weeks.get(monday)
        if week is None:
            week = {"date": week_label(monday), "total_doses": 0, "sort_key": rec["date"], "hourly": {}}
            weeks[monday] = week
        week["total_doses"] += rec.get("total_doses") or 0
        if rec["date"] < week["sort_key"]:
            week["sort_key"] = rec["date"]
        for hour, count in (rec.get("hourly") or {}).items():
            week["hourly"][hour] = week["hourly"].get(hour, 0) + (count or 0)
    return sorted(weeks.values(), key=lambda w: w["sort_key"])


def daily(
    records: List[Dict[str, Any]],
    days: int = 30,
    grouping: str = "daily",
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    filtered = within_window(records, days, today)
    if grouping == "weekly":
        return group_weekly(filtered)
    return ascending(filtered)


def hourly(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Doses per hour of day over the window; `avg_doses` is per day that reported the hour."""
    totals = {h: 0 for h in range(24)}
    day_counts = {h: 0 for h in range(24)}
    for rec in within_window(records, days, today):
        for hour, count in (rec.get("hourly") or {}).items():
            h = as_int(hour)
            if h not in totals:
                continue
            totals[h] += count or 0
            day_counts[h] += 1
    return [
        {
            "hour": h,
            "hour_label": format_hour(h),
            "total_doses": totals[h],
            "avg_doses": round_half_up(totals[h] / day_counts[h]) if day_counts[h] else 0,
        }
        for h in range(24)
    ]
