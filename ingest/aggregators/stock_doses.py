from __future__ import annotations

import re
from typing import Any, Dict, List

from ingest.aggregation import SnapshotAggregation
from ingest.coerce import to_int, to_text
from ingest.schema_resolver import pick

# Dose strings look like "DILUTION: BAXA - ASCORBIC ACID 100MG/ML DILUTION IN SW - 25ML" or "STOCK: ...".
_SIZE_RE = re.compile(r"(\d+\.?\d*)\s*(ML|MG|MCG|UNITS?)", re.I)
_PREFIX_RE = re.compile(r"^(DILUTION|STOCK):\s*", re.I)
_VENDOR_RE = re.compile(r"BAXA\s*-\s*", re.I)


def parse_dose(dose: str, total: int) -> Dict[str, Any]:
    upper = dose.upper()
    if upper.startswith("DILUTION:"):
        kind = "Dilution"
    elif upper.startswith("STOCK:"):
        kind = "Stock"
    else:
        kind = "Other"
    m = _SIZE_RE.search(dose)
    name = _VENDOR_RE.sub("", _PREFIX_RE.sub("", dose, count=1), count=1).strip()
    return {"name": name, "original": dose, "total": total, "size": m.group(0) if m else "", "type": kind}


def aggregate(records: List[Dict[str, Any]]) -> SnapshotAggregation:
    """Completed stock and dilution doses; anything not labelled DILUTION is filed with the stocks."""
    agg = SnapshotAggregation()
    stocks: List[Dict[str, Any]] = []
    dilutions: List[Dict[str, Any]] = []
    total_doses = 0

    for n, rec in enumerate(records, start=1):
        dose = to_text(pick(rec, "Dose", "dose"))
        if not dose:
            continue
        total = to_int(rec.get("Total"), agg.warnings, f"record {n} column Total")
        total_doses += total

        entry = parse_dose(dose, total)
        if entry["type"] == "Dilution":
            dilutions.append(entry)
        else:
            stocks.append(entry)

    stocks.sort(key=lambda e: e["total"], reverse=True)
    dilutions.sort(key=lambda e: e["total"], reverse=True)
    combined = sorted(stocks + dilutions, key=lambda e: e["total"], reverse=True)

    agg.document = {
        "stocks": stocks,
        "dilutions": dilutions,
        "all": combined,
        "summary": {
            "total_stock_types": len(stocks),
            "total_dilution_types": len(dilutions),
            "total_doses_made": total_doses,
        },
    }
    agg.counters = {"stocks": len(stocks), "dilutions": len(dilutions), "total_doses": total_doses}
    return agg
