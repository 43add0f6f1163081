from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from ingest.aggregation import percent
from rollups.dimensions import fold_dimension, limited
from rollups.window import ascending, within_window

VOLUME_SUMS = ("used", "waste", "count")


def daily(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    return ascending(within_window(records, days, today))


def top_waste(
    records: List[Dict[str, Any]],
    days: int = 30,
    limit: int = 20,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    folded = fold_dimension(within_window(records, days, today), "by_product", VOLUME_SUMS, carry=("ndc",))
    out = []
    for product, stats in folded.items():
        total = stats["used"] + stats["waste"]
        out.append({
            "product": product,
            "ndc": stats.get("ndc") or "",
            "used_ml": round(stats["used"], 1),
            "waste_ml": round(stats["waste"], 1),
            "total_ml": round(total, 1),
            "waste_percent": percent(stats["waste"], total),
            "count": stats["count"],
        })
    out.sort(key=lambda r: r["waste_ml"], reverse=True)
    return limited(out, limit)


def by_location(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    folded = fold_dimension(within_window(records, days, today), "by_location", VOLUME_SUMS)
    out = [
        {
            "location": location,
            "used_ml": round(stats["used"], 1),
            "waste_ml": round(stats["waste"], 1),
            "waste_percent": percent(stats["waste"], stats["used"] + stats["waste"]),
            "count": stats["count"],
        }
        for location, stats in folded.items()
    ]
    out.sort(key=lambda r: r["waste_ml"], reverse=True)
    return out


def summary(records: List[Dict[str, Any]], days: int = 30, today: Optional[date] = None) -> Dict[str, Any]:
    filtered = within_window(records, days, today)
    total = sum(r.get("total_volume") or 0 for r in filtered)
    used = sum(r.get("used_volume") or 0 for r in filtered)
    waste = sum(r.get("waste_volume") or 0 for r in filtered)
    return {
        "total_volume_ml": round(total, 1),
        "used_volume_ml": round(used, 1),
        "waste_volume_ml": round(waste, 1),
        "waste_percent": percent(waste, total),
        "product_uses": sum(r.get("product_count") or 0 for r in filtered),
        "days_tracked": len(filtered),
    }
