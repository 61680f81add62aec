# fireaudit/routers/dashboard.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..schemas import ActionListsOut, DashboardStatsOut, TimelineEventOut
from ..services.dashboard_service import action_lists, dashboard_stats, timeline

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsOut)
def stats(db: Session = Depends(get_db), p: Principal = Depends(get_principal)):
    return dashboard_stats(db)


@router.get("/action-lists", response_model=ActionListsOut)
def get_action_lists(
    today: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    """Urgent / pending / upcoming buckets of scheduled clients."""
    return action_lists(db, today=today)


@router.get("/timeline", response_model=list[TimelineEventOut])
def get_timeline(
    today: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return timeline(db, today=today)
