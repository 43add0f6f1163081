from __future__ import annotations

from fastapi import APIRouter

from repos.bypass_repo import BypassRepository
from rollups import bypass

router = APIRouter()


@router.get("/summary")
def bypass_summary():
    return bypass.summary(BypassRepository().list_all())


@router.get("/hourly")
def bypass_hourly():
    return bypass.hourly(BypassRepository().list_all())
