from __future__ import annotations

from typing import Any, Dict, List

from ingest.aggregation import HistoryAggregation, bump, location_key, percent
from ingest.coerce import is_blank, to_float, to_text
from ingest.dates import excel_serial_to_iso
from ingest.errors import ReportSchemaError
from ingest.schema_resolver import cell, resolve_named_columns

COLUMNS = {
    "patient_location": "Patient Location",
    "prep_time": "Dose Preparation Time",
    "product_name": "Product Name",
    "product_ndc": "Product NDC",
    "total_volume": "Product Total Volume",
    "unused_volume": "Product Unused Volume",
}


def aggregate(rows: List[List[Any]]) -> HistoryAggregation:
    """
    Product usage/wastage per dose, folded into one record per preparation date.

    The unused volume of a product is its waste; used = total - unused.
    """
    if not rows:
        raise ReportSchemaError("Invalid file format - missing header row")
    header = rows[0]
    cols = resolve_named_columns(header, COLUMNS)

    agg = HistoryAggregation(key_field="date")
    total_records = 0
    total_waste = 0.0
    undated = 0
    raw: Dict[str, Dict[str, Any]] = {}

    for n, row in enumerate(rows[1:], start=2):
        if not row or is_blank(cell(row, cols["product_name"])):
            continue
        total_records += 1

        date = excel_serial_to_iso(cell(row, cols["prep_time"]))
        if date is None:
            undated += 1
            continue

        product = to_text(cell(row, cols["product_name"]), "Unknown")
        ndc = to_text(cell(row, cols["product_ndc"]))
        total_volume = to_float(cell(row, cols["total_volume"]), agg.warnings, f"row {n} column {COLUMNS['total_volume']}")
        waste = to_float(cell(row, cols["unused_volume"]), agg.warnings, f"row {n} column {COLUMNS['unused_volume']}")
        used = total_volume - waste
        location = location_key(to_text(cell(row, cols["patient_location"]), "Unknown"))

        total_waste += waste

        day = raw.get(date)
        if day is None:
            day = {"total_volume": 0.0, "used_volume": 0.0, "waste_volume": 0.0, "product_count": 0, "by_product": {}, "by_location": {}}
            raw[date] = day
        day["total_volume"] += total_volume
        day["used_volume"] += used
        day["waste_volume"] += waste
        day["product_count"] += 1

        prod = day["by_product"].get(product)
        if prod is None:
            prod = {"used": 0, "waste": 0, "count": 0, "ndc": ndc}
            day["by_product"][product] = prod
        prod["used"] += used
        prod["waste"] += waste
        prod["count"] += 1

        bump(day["by_location"], location, used=used, waste=waste, count=1)

    for date, day in raw.items():
        agg.buckets[date] = {
            "date": date,
            "total_volume": round(day["total_volume"], 2),
            "used_volume": round(day["used_volume"], 2),
            "waste_volume": round(day["waste_volume"], 2),
            "waste_percent": percent(day["waste_volume"], day["total_volume"]),
            "product_count": day["product_count"],
            "by_product": day["by_product"],
            "by_location": day["by_location"],
        }

    agg.counters = {
        "total_records": total_records,
        "total_waste_ml": round(total_waste, 2),
        "skipped_undated": undated,
    }
    return agg
