from __future__ import annotations

from fastapi import APIRouter, Query

from config.settings import settings
from repos.bypass_repo import BypassRepository
from repos.production_repo import ProductionRepository
from repos.turnaround_repo import TurnaroundRepository
from rollups.summary import dashboard_summary

router = APIRouter()


@router.get("/summary")
def summary(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return dashboard_summary(
        ProductionRepository().list_all(),
        TurnaroundRepository().list_all(),
        BypassRepository().list_all(),
        days=days,
    )
