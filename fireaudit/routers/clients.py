# fireaudit/routers/clients.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, or_, select
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal, require_admin
from ..db import get_db
from ..domain.audit import audit_write
from ..domain.findings import Findings
from ..domain.statuses import ClientType, SchedulingStatus
from ..models import Client, Inspection, NotificationLog
from ..schemas import (
    ClientCreate,
    ClientOut,
    ClientUpdate,
    InspectionSummaryOut,
    NotificationOut,
    SchedulingOut,
)
from ..services.client_service import (
    blank_findings,
    client_out,
    create_client,
    scheduling_out,
    update_client,
)
from ..services.ownership import must_get_client

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=list[ClientOut])
def list_clients(
    q: Optional[str] = Query(default=None, description="name or address contains"),
    type: Optional[ClientType] = Query(default=None),
    scheduling: Optional[SchedulingStatus] = Query(default=None),
    today: Optional[date] = Query(default=None),
    limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    stmt = select(Client).order_by(Client.name)
    if q:
        like = f"%{q.strip()}%"
        stmt = stmt.where(or_(Client.name.ilike(like), Client.address.ilike(like)))
    if type is not None:
        stmt = stmt.where(Client.type == type.value)

    rows = db.scalars(stmt.limit(limit)).all()
    out = [client_out(r, today=today) for r in rows]
    if scheduling is not None:
        out = [c for c in out if c.scheduling_status == scheduling]
    return out


@router.post("", response_model=ClientOut, status_code=201)
def create(
    payload: ClientCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    try:
        row = create_client(db, payload=payload, actor_user_id=p.user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return client_out(row)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: int,
    today: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return client_out(must_get_client(db, client_id=client_id), today=today)


@router.patch("/{client_id}", response_model=ClientOut)
def patch_client(
    client_id: int,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    row = must_get_client(db, client_id=client_id)
    try:
        row = update_client(db, row=row, payload=payload, actor_user_id=p.user_id)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    return client_out(row)


@router.delete("/{client_id}", response_model=dict)
def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    row = must_get_client(db, client_id=client_id)
    audit_write(
        db,
        actor_user_id=p.user_id,
        action="client.delete",
        entity_type="Client",
        entity_id=str(row.id),
        before={"name": row.name, "address": row.address},
    )
    db.delete(row)
    db.commit()
    return {"ok": True, "client_id": client_id}


@router.get("/{client_id}/scheduling", response_model=SchedulingOut)
def client_scheduling(
    client_id: int,
    today: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return scheduling_out(must_get_client(db, client_id=client_id), today=today)


@router.get("/{client_id}/blank-findings", response_model=Findings)
def client_blank_findings(
    client_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    """Pre-populated findings for a new audit of this building."""
    return blank_findings(must_get_client(db, client_id=client_id))


@router.get("/{client_id}/inspections", response_model=list[InspectionSummaryOut])
def client_inspections(
    client_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    c = must_get_client(db, client_id=client_id)
    rows = db.scalars(
        select(Inspection)
        .where(Inspection.client_id == c.id)
        .order_by(desc(Inspection.created_at), desc(Inspection.id))
    ).all()
    return [
        InspectionSummaryOut(
            id=r.id,
            client_id=r.client_id,
            client_name=c.name,
            status=r.status,
            compliance_score=r.compliance_score,
            critical_issues_count=r.critical_issues_count,
            created_at=r.created_at,
        )
        for r in rows
    ]


@router.get("/{client_id}/notifications", response_model=list[NotificationOut])
def client_notifications(
    client_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    c = must_get_client(db, client_id=client_id)
    return db.scalars(
        select(NotificationLog)
        .where(NotificationLog.client_id == c.id)
        .order_by(desc(NotificationLog.created_at), desc(NotificationLog.id))
    ).all()
