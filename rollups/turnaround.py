from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from ingest.aggregation import average
from rollups.dimensions import as_int, fold_dimension, limited
from rollups.labels import priority_label
from rollups.window import ascending, within_window

TIME_SUMS = ("count", "total_time")


def daily(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    return ascending(within_window(records, days, today))


def by_priority(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    folded = fold_dimension(within_window(records, days, today), "by_priority", TIME_SUMS)
    out = []
    for key, stats in folded.items():
        priority = as_int(key)
        if priority is None:
            continue
        out.append({
            "priority": priority,
            "priority_label": priority_label(priority),
            "count": stats["count"],
            "avg_turnaround": average(stats["total_time"], stats["count"]),
        })
    out.sort(key=lambda r: r["priority"])
    return out


def _ranked(folded: Dict[str, Dict[str, Any]], label: str) -> List[Dict[str, Any]]:
    out = [
        {label: key, "count": stats["count"], "avg_turnaround": average(stats["total_time"], stats["count"])}
        for key, stats in folded.items()
    ]
    out.sort(key=lambda r: r["count"], reverse=True)
    return out


def by_workstation(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    return _ranked(fold_dimension(within_window(records, days, today), "by_workstation", TIME_SUMS), "workstation")


def top_drugs(
    records: List[Dict[str, Any]],
    days: int = 30,
    limit: int = 20,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    folded = fold_dimension(within_window(records, days, today), "by_drug", TIME_SUMS)
    return limited(_ranked(folded, "drug"), limit)
