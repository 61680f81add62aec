# fireaudit/cli/seed_demo.py
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from fireaudit.db import SessionLocal, init_db
from fireaudit.domain.statuses import ClientType
from fireaudit.models import AppUser, Client
from fireaudit.schemas import ClientStructureIn
from fireaudit.services.client_service import build_structure


@dataclass(frozen=True)
class SeedResult:
    user_email: str
    client_id: Optional[int]
    next_inspection_date: Optional[date]


def _get_or_create_user(db: Session, email: str, display_name: str, role: str) -> AppUser:
    row = db.query(AppUser).filter(AppUser.email == email).one_or_none()
    if row:
        return row
    row = AppUser(email=email, display_name=display_name, role=role)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get_or_create_client(db: Session, owner: AppUser, today: date) -> Client:
    name = "Sunrise Heights CHS"
    row = db.query(Client).filter(Client.name == name).one_or_none()
    if row:
        return row

    structure = build_structure(
        ClientType.RESIDENTIAL,
        ClientStructureIn(basements=1, podiums=2, floors=12, refuge_floors=["Floor 7"]),
    )
    row = Client(
        owner_user_id=owner.id,
        name=name,
        address="Plot 14, Sector 9, Navi Mumbai",
        phone="+91 98200 12345",
        email="secretary@sunrise.example",
        type=ClientType.RESIDENTIAL.value,
        structure_json=json.dumps(structure.to_dict()),
        next_inspection_date=today + timedelta(days=5),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def seed_demo(
    *,
    user_email: str,
    user_name: str,
    create_sample_client: bool = True,
    today: Optional[date] = None,
) -> SeedResult:
    init_db()
    today = today or date.today()
    db = SessionLocal()
    try:
        user = _get_or_create_user(db, user_email.strip().lower(), user_name, role="admin")
        client = _get_or_create_client(db, user, today) if create_sample_client else None
        return SeedResult(
            user_email=str(user.email),
            client_id=int(client.id) if client else None,
            next_inspection_date=client.next_inspection_date if client else None,
        )
    finally:
        db.close()
