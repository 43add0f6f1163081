from __future__ import annotations

from typing import Any, Dict, List

from ingest.aggregation import SnapshotAggregation, bump, location_key
from ingest.coerce import to_float, to_text
from ingest.dates import excel_serial_to_iso


def is_stock_solution(description: str, product_name: str) -> bool:
    return "stock" in description.lower() or "stock" in product_name.lower()


def aggregate(records: List[Dict[str, Any]]) -> SnapshotAggregation:
    """
    Detailed usage/wastage export (dated, no patient names), rebuilt on every upload.

    Unlike the usage history collection this keeps a single document with per-date,
    per-product and per-location totals, and flags multi-dose and stock products.
    """
    agg = SnapshotAggregation()
    by_date: Dict[str, Dict[str, Any]] = {}
    by_product: Dict[str, Dict[str, Any]] = {}
    by_location: Dict[str, Dict[str, Any]] = {}
    total_records = 0
    total_waste = 0.0

    for n, rec in enumerate(records, start=1):
        date = excel_serial_to_iso(rec.get("Dose Preparation Time"))
        if date is None:
            continue

        where = f"record {n}"
        product = to_text(rec.get("Product Name"))
        total_volume = to_float(rec.get("Product Total Volume"), agg.warnings, f"{where} column Product Total Volume")
        waste = to_float(rec.get("Product Unused Volume"), agg.warnings, f"{where} column Product Unused Volume")
        used = total_volume - waste
        multi_dose = to_text(rec.get("Multi-Dose Product")) == "Yes"
        stock = is_stock_solution(to_text(rec.get("Dose Description")), product)
        location = location_key(to_text(rec.get("Patient Location"), "Unknown"))

        total_records += 1
        total_waste += waste

        day = bump(
            by_date, date,
            total_volume=total_volume, used_volume=used, waste_volume=waste,
            product_count=1, multi_dose_count=0, stock_count=0,
        )
        if multi_dose:
            day["multi_dose_count"] += 1
        if stock:
            day["stock_count"] += 1

        prod = by_product.get(product)
        if prod is None:
            # multi-dose / stock flags come from the first row seen for the product
            prod = {
                "ndc": to_text(rec.get("Product NDC")),
                "total_volume": 0.0,
                "used_volume": 0.0,
                "waste_volume": 0.0,
                "count": 0,
                "is_multi_dose": multi_dose,
                "is_stock": stock,
            }
            by_product[product] = prod
        prod["total_volume"] += total_volume
        prod["used_volume"] += used
        prod["waste_volume"] += waste
        prod["count"] += 1

        bump(by_location, location, total_volume=total_volume, used_volume=used, waste_volume=waste, count=1)

    dates = sorted(by_date)
    summary = {
        "total_records": total_records,
        "total_dates": len(by_date),
        "total_waste_ml": round(total_waste, 1),
        "date_range": {"start": dates[0] if dates else None, "end": dates[-1] if dates else None},
    }
    agg.document = {"by_date": by_date, "by_product": by_product, "by_location": by_location, "summary": summary}
    agg.counters = {"records": total_records, "dates": len(by_date), "total_waste_ml": round(total_waste, 2)}
    return agg
