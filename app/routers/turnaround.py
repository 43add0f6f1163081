from __future__ import annotations

from fastapi import APIRouter, Query

from config.settings import settings
from repos.turnaround_repo import TurnaroundRepository
from rollups import turnaround

router = APIRouter()


@router.get("/daily")
def turnaround_daily(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return turnaround.daily(TurnaroundRepository().list_all(), days=days)


@router.get("/by-priority")
def turnaround_by_priority(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return turnaround.by_priority(TurnaroundRepository().list_all(), days=days)


@router.get("/by-workstation")
def turnaround_by_workstation(days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0)):
    return turnaround.by_workstation(TurnaroundRepository().list_all(), days=days)


@router.get("/top-drugs")
def turnaround_top_drugs(
    days: int = Query(default=settings.DEFAULT_WINDOW_DAYS, ge=0),
    limit: int = Query(default=20, ge=0),
):
    return turnaround.top_drugs(TurnaroundRepository().list_all(), days=days, limit=limit)
