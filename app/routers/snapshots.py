from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query

from config.settings import settings
from repos.snapshot_repo import (
    DetailedWastageRepository,
    ProductUsageRepository,
    ProductWastageRepository,
    StockDosesRepository,
)
from rollups import snapshots

router = APIRouter()


@router.get("/product-usage/summary")
def product_usage_summary():
    return snapshots.product_usage_summary(ProductUsageRepository().get())


@router.get("/product-usage/by-location")
def product_usage_by_location():
    return snapshots.product_usage_by_location(ProductUsageRepository().get())


@router.get("/product-usage/top-products")
def product_usage_top_products(limit: int = Query(default=20, ge=0)):
    return snapshots.product_usage_top_products(ProductUsageRepository().get(), limit=limit)


@router.get("/product-wastage/summary")
def product_wastage_summary():
    return snapshots.product_wastage_summary(ProductWastageRepository().get())


@router.get("/product-wastage/top-waste")
def product_wastage_top_waste(
    limit: int = Query(default=20, ge=0),
    sort_by: Literal["waste_ml", "waste_dollars", "waste_percent"] = Query(default="waste_ml", alias="sortBy"),
):
    return snapshots.product_wastage_top(ProductWastageRepository().get(), limit=limit, sort_by=sort_by)


@router.get("/product-wastage/by-type")
def product_wastage_by_type():
    return snapshots.product_wastage_by_type(ProductWastageRepository().get())


@router.get("/detailed-wastage/summary")
def detailed_wastage_summary():
    return snapshots.detailed_wastage_summary(DetailedWastageRepository().get())


@router.get("/detailed-wastage/daily")
def detailed_wastage_daily(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return snapshots.detailed_wastage_daily(DetailedWastageRepository().get(), days=days)


@router.get("/detailed-wastage/by-product")
def detailed_wastage_by_product(
    limit: int = Query(default=25, ge=0),
    sort_by: Literal["waste_volume", "waste_percent", "count"] = Query(default="waste_volume", alias="sortBy"),
):
    return snapshots.detailed_wastage_by_product(DetailedWastageRepository().get(), limit=limit, sort_by=sort_by)


@router.get("/detailed-wastage/by-location")
def detailed_wastage_by_location():
    return snapshots.detailed_wastage_by_location(DetailedWastageRepository().get())


@router.get("/stock-doses/summary")
def stock_doses_summary():
    return snapshots.stock_doses_summary(StockDosesRepository().get())


@router.get("/stock-doses/all")
def stock_doses_all(
    limit: int = Query(default=50, ge=0),
    dose_type: Literal["all", "stock", "dilution"] = Query(default="all", alias="type"),
):
    return snapshots.stock_doses_all(StockDosesRepository().get(), limit=limit, dose_type=dose_type)


@router.get("/stock-doses/top")
def stock_doses_top(limit: int = Query(default=20, ge=0)):
    return snapshots.stock_doses_top(StockDosesRepository().get(), limit=limit)
