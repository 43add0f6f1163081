from __future__ import annotations

from typing import Any, Dict, List, Optional

from ingest.aggregation import HistoryAggregation, average, bump
from ingest.coerce import is_blank, to_float, to_int, to_text
from ingest.dates import excel_serial_to_iso, utc_today
from ingest.errors import ReportSchemaError
from ingest.schema_resolver import cell, require_columns, resolve_named_columns

COLUMNS = {
    "dose_id": "DoseID",
    "priority": "Priority",
    "dose_description": "DoseDescription",
    "status": "DoseStatus",
    "workstation": "WorkStation",
    "total_timeline": "Total Dose Timeline - Start to Sort (m)",
}

# "snapshot": every row of one upload is filed under a single report date.
# "row": each row carries its own date in a configured column.
DATE_MODE_SNAPSHOT = "snapshot"
DATE_MODE_ROW = "row"
DATE_MODES = (DATE_MODE_SNAPSHOT, DATE_MODE_ROW)


def drug_name(description: str) -> str:
    parts = description.split()
    return parts[0] if parts else ""


def _new_bucket() -> Dict[str, Any]:
    return {"count": 0, "total_time": 0.0, "by_priority": {}, "by_workstation": {}, "by_drug": {}}


def aggregate(
    rows: List[List[Any]],
    date_mode: str = DATE_MODE_SNAPSHOT,
    report_date: Optional[str] = None,
    date_column: Optional[str] = None,
    terminal_status: str = "Sorted",
) -> HistoryAggregation:
    """
    Dose turnaround report: only doses that reached `terminal_status` contribute.

    The export has no per-dose event date. In snapshot mode the whole upload is
    dated `report_date` (today, UTC, when not given), so re-uploading for the same
    report date overwrites that day. Row mode requires `date_column` and dates
    each dose by its own serial date.
    """
    if date_mode not in DATE_MODES:
        raise ValueError(f"unknown turnaround date mode: {date_mode}")
    if not rows:
        raise ReportSchemaError("Invalid file format - missing header row")

    header = rows[0]
    labels = dict(COLUMNS)
    if date_mode == DATE_MODE_ROW:
        if not date_column:
            raise ReportSchemaError("Turnaround row dating needs a date column to be configured")
        labels["event_date"] = date_column
    cols = resolve_named_columns(header, labels)
    if date_mode == DATE_MODE_ROW:
        require_columns(cols, labels, ["event_date"])

    snapshot_date = report_date or utc_today().isoformat()

    agg = HistoryAggregation(key_field="date")
    total_doses = 0
    not_terminal = 0
    undated = 0
    raw: Dict[str, Dict[str, Any]] = {}

    for n, row in enumerate(rows[1:], start=2):
        if not row or is_blank(cell(row, cols["dose_id"])):
            continue

        status = to_text(cell(row, cols["status"]))
        if status != terminal_status:
            not_terminal += 1
            continue

        if date_mode == DATE_MODE_ROW:
            date = excel_serial_to_iso(cell(row, cols["event_date"]))
            if date is None:
                undated += 1
                continue
        else:
            date = snapshot_date

        minutes = to_float(cell(row, cols["total_timeline"]), agg.warnings, f"row {n} column {COLUMNS['total_timeline']}")
        priority = str(to_int(cell(row, cols["priority"]), agg.warnings, f"row {n} column {COLUMNS['priority']}"))
        workstation = to_text(cell(row, cols["workstation"]), "Unknown")
        drug = drug_name(to_text(cell(row, cols["dose_description"])))

        bucket = raw.get(date)
        if bucket is None:
            bucket = _new_bucket()
            raw[date] = bucket
        bucket["count"] += 1
        bucket["total_time"] += minutes
        bump(bucket["by_priority"], priority, count=1, total_time=minutes)
        bump(bucket["by_workstation"], workstation, count=1, total_time=minutes)
        if drug:
            bump(bucket["by_drug"], drug, count=1, total_time=minutes)
        total_doses += 1

    for date, bucket in raw.items():
        agg.buckets[date] = {
            "date": date,
            "total_doses": bucket["count"],
            "avg_turnaround": average(bucket["total_time"], bucket["count"]),
            "by_priority": bucket["by_priority"],
            "by_workstation": bucket["by_workstation"],
            "by_drug": bucket["by_drug"],
        }

    agg.counters = {
        "total_doses": total_doses,
        "skipped_not_sorted": not_terminal,
        "skipped_undated": undated,
        "date_mode": date_mode,
    }
    if date_mode == DATE_MODE_SNAPSHOT:
        agg.counters["report_date"] = snapshot_date
    return agg
