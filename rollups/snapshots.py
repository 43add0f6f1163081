"""Read-side views over the snapshot documents (product usage, product wastage,
detailed wastage, stock doses). Each view falls back to an empty/zeroed shape
when nothing has been uploaded yet."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from ingest.aggregation import percent
from rollups.dimensions import limited
from rollups.window import cutoff_date, parse_iso_date

PRODUCT_USAGE_EMPTY = {"total_products": 0, "total_locations": 0, "total_product_uses": 0, "total_doses": 0}
PRODUCT_WASTAGE_EMPTY = {"total_products": 0, "total_waste_ml": 0, "total_waste_dollars": 0, "total_partial_products": 0}
DETAILED_WASTAGE_EMPTY = {"total_records": 0, "total_dates": 0, "total_waste_ml": 0}
STOCK_DOSES_EMPTY = {"total_stock_types": 0, "total_dilution_types": 0, "total_doses_made": 0}

WASTAGE_SORTS = ("waste_ml", "waste_dollars", "waste_percent")
DETAILED_SORTS = ("waste_volume", "waste_percent", "count")
STOCK_TYPES = ("all", "stock", "dilution")


def _summary(doc: Dict[str, Any], empty: Dict[str, Any]) -> Dict[str, Any]:
    return doc.get("summary") or dict(empty)


# Product usage


def product_usage_summary(doc: Dict[str, Any]) -> Dict[str, Any]:
    return _summary(doc, PRODUCT_USAGE_EMPTY)


def product_usage_by_location(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    out = [
        {
            "location": location,
            "product_count": data.get("product_count") or 0,
            "dose_count": data.get("dose_count") or 0,
            "unique_products": len(data.get("products") or {}),
        }
        for location, data in (doc.get("by_location") or {}).items()
        if location and location != "undefined"
    ]
    out.sort(key=lambda r: r["product_count"], reverse=True)
    return out


def product_usage_top_products(doc: Dict[str, Any], limit: int = 20) -> List[Dict[str, Any]]:
    out = [
        {
            "name": name,
            "ndc": data.get("ndc") or "",
            "product_count": data.get("product_count") or 0,
            "dose_count": data.get("dose_count") or 0,
            "locations_used": len(data.get("locations") or {}),
        }
        for name, data in (doc.get("by_product") or {}).items()
    ]
    out.sort(key=lambda r: r["product_count"], reverse=True)
    return limited(out, limit)


# Product wastage


def product_wastage_summary(doc: Dict[str, Any]) -> Dict[str, Any]:
    return _summary(doc, PRODUCT_WASTAGE_EMPTY)


def product_wastage_top(doc: Dict[str, Any], limit: int = 20, sort_by: str = "waste_ml") -> List[Dict[str, Any]]:
    if sort_by not in WASTAGE_SORTS:
        sort_by = "waste_ml"
    products = sorted(doc.get("products") or [], key=lambda p: p.get(sort_by) or 0, reverse=True)
    return limited(products, limit)


def product_wastage_by_type(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    out = [
        {
            "type": product_type,
            "product_count": data.get("count") or 0,
            "waste_ml": round(data.get("waste_ml") or 0, 1),
            "waste_dollars": round(data.get("waste_dollars") or 0, 2),
        }
        for product_type, data in (doc.get("by_type") or {}).items()
    ]
    out.sort(key=lambda r: r["waste_ml"], reverse=True)
    return out


# Detailed wastage


def _volumes(data: Dict[str, Any]) -> Dict[str, Any]:
    total = data.get("total_volume") or 0
    waste = data.get("waste_volume") or 0
    return {
        "total_volume": round(total, 1),
        "used_volume": round(data.get("used_volume") or 0, 1),
        "waste_volume": round(waste, 1),
        "waste_percent": percent(waste, total),
    }


def detailed_wastage_summary(doc: Dict[str, Any]) -> Dict[str, Any]:
    return _summary(doc, DETAILED_WASTAGE_EMPTY)


def detailed_wastage_daily(doc: Dict[str, Any], days: int = 30, today: Optional[date] = None) -> List[Dict[str, Any]]:
    cutoff = cutoff_date(days, today)
    out = []
    for day, data in (doc.get("by_date") or {}).items():
        d = parse_iso_date(day)
        if d is None or d < cutoff:
            continue
        out.append({
            "date": day,
            **_volumes(data),
            "product_count": data.get("product_count") or 0,
            "multi_dose_count": data.get("multi_dose_count") or 0,
            "stock_count": data.get("stock_count") or 0,
        })
    out.sort(key=lambda r: r["date"])
    return out


def detailed_wastage_by_product(
    doc: Dict[str, Any],
    limit: int = 25,
    sort_by: str = "waste_volume",
) -> List[Dict[str, Any]]:
    if sort_by not in DETAILED_SORTS:
        sort_by = "waste_volume"
    out = [
        {
            "name": name,
            "ndc": data.get("ndc") or "",
            **_volumes(data),
            "count": data.get("count") or 0,
            "is_multi_dose": bool(data.get("is_multi_dose")),
            "is_stock": bool(data.get("is_stock")),
        }
        for name, data in (doc.get("by_product") or {}).items()
    ]
    out.sort(key=lambda r: r[sort_by], reverse=True)
    return limited(out, limit)


def detailed_wastage_by_location(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    out = [
        {"location": location, **_volumes(data), "count": data.get("count") or 0}
        for location, data in (doc.get("by_location") or {}).items()
    ]
    out.sort(key=lambda r: r["waste_volume"], reverse=True)
    return out


# Stock doses


def stock_doses_summary(doc: Dict[str, Any]) -> Dict[str, Any]:
    return _summary(doc, STOCK_DOSES_EMPTY)


def stock_doses_all(doc: Dict[str, Any], limit: int = 50, dose_type: str = "all") -> List[Dict[str, Any]]:
    if dose_type == "stock":
        entries = doc.get("stocks") or []
    elif dose_type == "dilution":
        entries = doc.get("dilutions") or []
    else:
        entries = doc.get("all") or []
    return limited(list(entries), limit)


def stock_doses_top(doc: Dict[str, Any], limit: int = 20) -> List[Dict[str, Any]]:
    return limited(list(doc.get("all") or []), limit)
