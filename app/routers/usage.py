from __future__ import annotations

from fastapi import APIRouter, Query

from config.settings import settings
from repos.usage_repo import UsageRepository
from rollups import usage

router = APIRouter()


@router.get("/daily")
def usage_daily(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return usage.daily(UsageRepository().list_all(), days=days)


@router.get("/top-waste")
def usage_top_waste(
    days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0),
    limit: int = Query(default=20, ge=0),
):
    return usage.top_waste(UsageRepository().list_all(), days=days, limit=limit)


@router.get("/by-location")
def usage_by_location(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return usage.by_location(UsageRepository().list_all(), days=days)


@router.get("/summary")
def usage_summary(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return usage.summary(UsageRepository().list_all(), days=days)
