from __future__ import annotations

from typing import Any, Dict, List

from ingest.aggregation import SnapshotAggregation, bump
from ingest.coerce import to_float, to_int, to_text
from ingest.schema_resolver import pick


def aggregate(records: List[Dict[str, Any]]) -> SnapshotAggregation:
    """Aggregate product wastage report: one entry per product, plus totals per product type."""
    agg = SnapshotAggregation()
    products: List[Dict[str, Any]] = []
    by_type: Dict[str, Dict[str, Any]] = {}
    total_waste_ml = 0.0
    total_waste_dollars = 0.0

    for n, rec in enumerate(records, start=1):
        name = to_text(pick(rec, "Name", "name"))
        if not name:
            continue
        where = f"record {n}"
        product_type = to_text(rec.get("Type"), "Unknown")
        size_ml = to_float(rec.get("Product Size(ml)"), agg.warnings, f"{where} column Product Size(ml)")
        cost = to_float(rec.get("Product Cost(Dollar Amount)"), agg.warnings, f"{where} column Product Cost(Dollar Amount)")
        partial = to_int(rec.get("Partial Products Count"), agg.warnings, f"{where} column Partial Products Count")
        waste_ml = to_float(rec.get("Total Wastage(mL)"), agg.warnings, f"{where} column Total Wastage(mL)")
        waste_dollars = to_float(rec.get("Total Wastage(Dollar Amount)"), agg.warnings, f"{where} column Total Wastage(Dollar Amount)")

        opened_ml = size_ml * partial
        products.append({
            "name": name,
            "ndc": to_text(pick(rec, "NDCcode", "NDC")),
            "type": product_type,
            "product_size_ml": size_ml,
            "product_cost": cost,
            "partial_count": partial,
            "waste_ml": round(waste_ml, 2),
            "waste_dollars": round(waste_dollars, 2),
            "waste_percent": round(waste_ml * 100 / opened_ml, 1) if size_ml > 0 and partial > 0 else 0,
        })

        bump(by_type, product_type, count=1, waste_ml=waste_ml, waste_dollars=waste_dollars)
        total_waste_ml += waste_ml
        total_waste_dollars += waste_dollars

    products.sort(key=lambda p: p["waste_ml"], reverse=True)

    summary = {
        "total_products": len(products),
        "total_waste_ml": round(total_waste_ml, 1),
        "total_waste_dollars": round(total_waste_dollars, 2),
        "total_partial_products": sum(p["partial_count"] for p in products),
    }
    agg.document = {"products": products, "by_type": by_type, "summary": summary}
    agg.counters = {
        "products": len(products),
        "total_waste_ml": round(total_waste_ml, 2),
        "total_waste_dollars": round(total_waste_dollars, 2),
    }
    return agg
