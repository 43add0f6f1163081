from __future__ import annotations

from typing import Any, Dict, List

from ingest.aggregation import SnapshotAggregation, bump_count
from ingest.coerce import to_int, to_text
from ingest.schema_resolver import pick


def aggregate(records: List[Dict[str, Any]]) -> SnapshotAggregation:
    """Aggregate product usage report (product x location), rebuilt on every upload."""
    agg = SnapshotAggregation()
    by_product: Dict[str, Dict[str, Any]] = {}
    by_location: Dict[str, Dict[str, Any]] = {}
    total_uses = 0
    total_doses = 0

    for n, rec in enumerate(records, start=1):
        name = to_text(pick(rec, "Name", "name"))
        if not name:
            continue
        ndc = to_text(pick(rec, "NDCcode", "NDC"))
        location = to_text(pick(rec, "Location Name", "Location"), "Unknown")
        product_count = to_int(rec.get("ProductCount"), agg.warnings, f"record {n} column ProductCount")
        dose_count = to_int(rec.get("DoseCount"), agg.warnings, f"record {n} column DoseCount")

        prod = by_product.get(name)
        if prod is None:
            prod = {"ndc": ndc, "product_count": 0, "dose_count": 0, "locations": {}}
            by_product[name] = prod
        prod["product_count"] += product_count
        prod["dose_count"] += dose_count
        bump_count(prod["locations"], location, product_count)

        loc = by_location.get(location)
        if loc is None:
            loc = {"product_count": 0, "dose_count": 0, "products": {}}
            by_location[location] = loc
        loc["product_count"] += product_count
        loc["dose_count"] += dose_count
        bump_count(loc["products"], name, product_count)

        total_uses += product_count
        total_doses += dose_count

    summary = {
        "total_products": len(by_product),
        "total_locations": len(by_location),
        "total_product_uses": total_uses,
        "total_doses": total_doses,
    }
    agg.document = {"by_product": by_product, "by_location": by_location, "summary": summary}
    agg.counters = {
        "products": summary["total_products"],
        "locations": summary["total_locations"],
        "total_product_uses": total_uses,
        "total_doses": total_doses,
    }
    return agg
