# fireaudit/services/client_service.py
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..config import settings
from ..domain.audit import audit_write
from ..domain.findings import Findings
from ..domain.scheduling import days_until, get_scheduling_status
from ..domain.statuses import ClientType
from ..domain.structure import BuildingStructure, seed_findings
from ..models import Client
from ..schemas import ClientCreate, ClientOut, ClientStructureIn, ClientUpdate, SchedulingOut

log = logging.getLogger(__name__)


def build_structure(client_type: ClientType | str, s: ClientStructureIn) -> BuildingStructure:
    raw = BuildingStructure(
        basements=s.basements,
        podiums=s.podiums,
        floors=s.floors,
        rooms=list(s.rooms),
        systems=list(s.systems),
        refuge_floors=list(s.refuge_floors),
    )
    return raw.with_regenerated_map(client_type)


def client_structure(row: Client) -> BuildingStructure:
    return BuildingStructure.from_dict(row.structure)


def _snapshot(row: Client) -> dict:
    return {
        "name": row.name,
        "address": row.address,
        "phone": row.phone,
        "email": row.email,
        "type": row.type,
        "structure": row.structure,
        "next_inspection_date": row.next_inspection_date,
    }


def create_client(db: Session, *, payload: ClientCreate, actor_user_id: Optional[int]) -> Client:
    structure = build_structure(payload.type, payload.structure)
    row = Client(
        owner_user_id=actor_user_id,
        name=payload.name,
        address=payload.address,
        phone=payload.phone,
        email=payload.email,
        type=ClientType(payload.type).value,
        structure_json=json.dumps(structure.to_dict()),
        next_inspection_date=payload.next_inspection_date,
    )
    db.add(row)
    db.flush()
    audit_write(
        db,
        actor_user_id=actor_user_id,
        action="client.create",
        entity_type="Client",
        entity_id=str(row.id),
        after=_snapshot(row),
    )
    db.commit()
    db.refresh(row)
    log.info("client created", extra={"client_id": row.id, "user_id": actor_user_id})
    return row


def update_client(db: Session, *, row: Client, payload: ClientUpdate, actor_user_id: Optional[int]) -> Client:
    before = _snapshot(row)

    for k in ("name", "address", "phone", "email"):
        v = getattr(payload, k)
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError(f"{k} must not be blank")
            setattr(row, k, v)

    if payload.type is not None:
        row.type = ClientType(payload.type).value

    if payload.structure is not None or payload.type is not None:
        # counts changed or type changed: the floor map is rebuilt, never patched
        current = client_structure(row)
        s = payload.structure or ClientStructureIn(
            basements=current.basements,
            podiums=current.podiums,
            floors=current.floors,
            rooms=current.rooms,
            systems=current.systems,
            refuge_floors=current.refuge_floors,
        )
        row.structure_json = json.dumps(build_structure(row.type, s).to_dict())

    if payload.clear_next_inspection_date:
        row.next_inspection_date = None
    elif payload.next_inspection_date is not None:
        row.next_inspection_date = payload.next_inspection_date

    row.updated_at = datetime.utcnow()
    audit_write(
        db,
        actor_user_id=actor_user_id,
        action="client.update",
        entity_type="Client",
        entity_id=str(row.id),
        before=before,
        after=_snapshot(row),
    )
    db.commit()
    db.refresh(row)
    return row


def blank_findings(row: Client) -> Findings:
    return seed_findings(client_structure(row))


def client_out(row: Client, *, today: Optional[date] = None) -> ClientOut:
    return ClientOut(
        id=row.id,
        name=row.name,
        address=row.address,
        phone=row.phone,
        email=row.email,
        type=ClientType(row.type),
        structure=row.structure,
        next_inspection_date=row.next_inspection_date,
        scheduling_status=get_scheduling_status(
            row.next_inspection_date, today=today, window_days=settings.scheduling_window_days
        ),
        created_at=row.created_at,
    )


def scheduling_out(row: Client, *, today: Optional[date] = None) -> SchedulingOut:
    due = row.next_inspection_date
    return SchedulingOut(
        client_id=row.id,
        next_inspection_date=due,
        status=get_scheduling_status(due, today=today, window_days=settings.scheduling_window_days),
        days_until=days_until(due, today=today) if due is not None else None,
    )
