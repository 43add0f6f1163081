from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from rollups.window import within_window


def dashboard_summary(
    production: List[Dict[str, Any]],
    turnaround: List[Dict[str, Any]],
    bypass: List[Dict[str, Any]],
    days: int = 30,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Headline numbers for the dashboard.

    Production and turnaround honor the window; bypass data has no date and is
    counted in full. `avg_turnaround_minutes` is the mean of the daily averages.
    """
    recent_production = within_window(production, days, today)
    total_doses = sum(r.get("total_doses") or 0 for r in recent_production)

    recent_turnaround = within_window(turnaround, days, today)
    avg_turnaround = (
        sum(r.get("avg_turnaround") or 0 for r in recent_turnaround) / len(recent_turnaround)
        if recent_turnaround
        else 0
    )

    total_bypasses = sum(r.get("total_bypasses") or 0 for r in bypass)
    bypass_rate = round(total_bypasses * 100 / total_doses, 2) if total_doses > 0 else 0

    dates = sorted(str(r.get("date")) for r in production if r.get("date"))
    return {
        "total_doses": total_doses,
        "days_tracked": len(recent_production),
        "avg_turnaround_minutes": round(avg_turnaround, 1),
        "total_bypasses": total_bypasses,
        "bypass_rate": bypass_rate,
        "data_range": {
            "production": {"start": dates[0], "end": dates[-1]} if dates else None,
        },
    }
