# fireaudit/routers/notifications.py
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..auth import Principal, require_admin, require_inspector
from ..config import settings
from ..db import get_db
from ..schemas import AutoNotificationsOut, NotificationOut, ReminderIn
from ..services.notification_service import MANUAL_REMINDER, reminder_message, run_auto_notifications, send_notification
from ..services.ownership import must_get_client, must_get_inspection

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/reminder", response_model=NotificationOut, status_code=201)
def send_reminder(
    payload: ReminderIn,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_inspector),
):
    client = must_get_client(db, client_id=payload.client_id)
    if payload.inspection_id is not None:
        insp = must_get_inspection(db, inspection_id=payload.inspection_id)
        if insp.client_id != client.id:
            raise HTTPException(status_code=400, detail="inspection does not belong to client")

    message = (payload.message or "").strip() or reminder_message(client)
    return send_notification(
        db,
        client=client,
        type=MANUAL_REMINDER,
        message=message,
        recipient=payload.recipient,
        sent_by=p.user_id,
        inspection_id=payload.inspection_id,
    )


@router.post("/run-auto", response_model=AutoNotificationsOut)
def run_auto(
    today: Optional[date] = Query(default=None),
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    if not settings.auto_notifications_enabled:
        raise HTTPException(status_code=409, detail="auto notifications are disabled")
    return run_auto_notifications(db, today=today, sent_by=p.user_id)
