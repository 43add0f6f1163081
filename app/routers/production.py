from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query

from config.settings import settings
from repos.production_repo import ProductionRepository
from rollups import production

router = APIRouter()


@router.get("/daily")
def production_daily(
    days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0),
    grouping: Literal["daily", "weekly"] = "daily",
):
    return production.daily(ProductionRepository().list_all(), days=days, grouping=grouping)


@router.get("/hourly")
def production_hourly(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return production.hourly(ProductionRepository().list_all(), days=days)
