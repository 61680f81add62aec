# fireaudit/services/ownership.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..models import Client, Inspection


def must_get_client(db: Session, *, client_id: int) -> Client:
    row = db.get(Client, int(client_id))
    if not row:
        raise HTTPException(status_code=404, detail="client not found")
    return row


def must_get_inspection(db: Session, *, inspection_id: int) -> Inspection:
    row = db.get(Inspection, int(inspection_id))
    if not row:
        raise HTTPException(status_code=404, detail="inspection not found")
    return row
