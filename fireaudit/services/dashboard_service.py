# fireaudit/services/dashboard_service.py
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from ..config import settings
from ..domain.compliance_engine import round_score
from ..domain.scheduling import bucket_action_lists, get_scheduling_status
from ..domain.statuses import InspectionStatus
from ..models import Client, Inspection
from ..schemas import ActionItemOut, ActionListsOut, DashboardStatsOut, TimelineEventOut

PAST_TIMELINE_LIMIT = 20


def _count(db: Session, status: Optional[InspectionStatus] = None) -> int:
    q = select(func.count(Inspection.id))
    if status is not None:
        q = q.where(Inspection.status == status.value)
    return int(db.scalar(q) or 0)


def dashboard_stats(db: Session) -> DashboardStatsOut:
    """
    Top cards. Compliance rate is the share of Completed inspections,
    100 when nothing has been inspected yet.
    """
    total = _count(db)
    completed = _count(db, InspectionStatus.COMPLETED)
    action_required = _count(db, InspectionStatus.ACTION_REQUIRED)

    critical_open = db.scalar(
        select(func.coalesce(func.sum(Inspection.critical_issues_count), 0)).where(
            Inspection.status == InspectionStatus.ACTION_REQUIRED.value
        )
    )

    return DashboardStatsOut(
        total_inspections=total,
        compliance_rate=round_score(completed, total),
        action_required=action_required,
        critical_open=int(critical_open or 0),
    )


def _scheduled_clients(db: Session) -> list[Client]:
    return list(
        db.scalars(
            select(Client)
            .where(Client.next_inspection_date.is_not(None))
            .order_by(Client.next_inspection_date)
        ).all()
    )


def action_lists(db: Session, *, today: Optional[date] = None) -> ActionListsOut:
    buckets = bucket_action_lists(
        _scheduled_clients(db),
        today=today,
        upcoming_limit=settings.dashboard_upcoming_limit,
        window_days=settings.scheduling_window_days,
    )
    return ActionListsOut(
        upcoming=[ActionItemOut(**x) for x in buckets.upcoming],
        pending=[ActionItemOut(**x) for x in buckets.pending],
        urgent=[ActionItemOut(**x) for x in buckets.urgent],
    )


def timeline(db: Session, *, today: Optional[date] = None) -> list[TimelineEventOut]:
    """Recent inspections (newest first) followed by every scheduled due date."""
    rows = db.execute(
        select(Inspection, Client.name)
        .join(Client, Client.id == Inspection.client_id)
        .order_by(desc(Inspection.created_at), desc(Inspection.id))
        .limit(PAST_TIMELINE_LIMIT)
    ).all()

    out: list[TimelineEventOut] = [
        TimelineEventOut(
            id=str(insp.id),
            client_name=name or "Unknown Client",
            date=insp.created_at.date(),
            status=insp.status,
            compliance_score=insp.compliance_score,
        )
        for insp, name in rows
    ]

    for c in _scheduled_clients(db):
        out.append(
            TimelineEventOut(
                id=f"future-{c.id}",
                client_name=c.name,
                date=c.next_inspection_date,
                status=get_scheduling_status(
                    c.next_inspection_date, today=today, window_days=settings.scheduling_window_days
                ).value,
            )
        )
    return out
