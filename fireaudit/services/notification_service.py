# fireaudit/services/notification_service.py
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Client, NotificationLog

log = logging.getLogger(__name__)

MANUAL_REMINDER = "Manual Reminder"
UPCOMING_INSPECTION = "Upcoming Inspection"
URGENT_ACTION = "Urgent Action"
REPORT_GENERATED = "Report Generated"

NOTIFICATION_TYPES = (MANUAL_REMINDER, UPCOMING_INSPECTION, URGENT_ACTION, REPORT_GENERATED)


def reminder_message(client: Client) -> str:
    due = client.next_inspection_date
    if due is None:
        return f"Routine inspection for {client.name} is not yet scheduled. Please schedule."
    return f"Routine Inspection for {client.name} is due on {due.strftime('%d/%m/%Y')}. Please schedule."


def send_notification(
    db: Session,
    *,
    client: Client,
    type: str,
    message: str,
    recipient: Optional[str] = None,
    sent_by: Optional[int] = None,
    inspection_id: Optional[int] = None,
    commit: bool = True,
) -> NotificationLog:
    """
    Record a notification. Delivery is a log line; the notification_logs row
    is the durable record shown in client history.
    """
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"unknown notification type: {type}")

    to = (recipient or client.email or "Admin").strip()
    log.info(
        "notification from %s to %s: %s",
        settings.notification_sender,
        to,
        message,
        extra={
            "sender": settings.notification_sender,
            "notification_type": type,
            "recipient": to,
            "client_id": client.id,
            "user_id": sent_by,
            "inspection_id": inspection_id,
        },
    )

    row = NotificationLog(
        client_id=client.id,
        inspection_id=inspection_id,
        sent_by=sent_by,
        type=type,
        recipient=to,
        message=message,
        status="Sent",
        due_date=client.next_inspection_date,
    )
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    return row


def _already_reminded(db: Session, client: Client) -> bool:
    return (
        db.scalar(
            select(NotificationLog.id).where(
                NotificationLog.client_id == client.id,
                NotificationLog.type == UPCOMING_INSPECTION,
                NotificationLog.due_date == client.next_inspection_date,
            )
        )
        is not None
    )


def run_auto_notifications(
    db: Session,
    *,
    today: Optional[date] = None,
    sent_by: Optional[int] = None,
) -> dict[str, int]:
    """
    Send "Upcoming Inspection" reminders for clients due within the window
    (today .. today + window days, inclusive). A client is reminded once per
    due date; a failure on one client is logged and the sweep continues.
    """
    today = today or date.today()
    horizon = today + timedelta(days=settings.scheduling_window_days)

    clients = db.scalars(
        select(Client)
        .where(Client.next_inspection_date.is_not(None))
        .where(Client.next_inspection_date >= today, Client.next_inspection_date <= horizon)
        .order_by(Client.next_inspection_date)
    ).all()

    out = {"checked": len(clients), "sent": 0, "skipped": 0, "failed": 0}
    for c in clients:
        if _already_reminded(db, c):
            out["skipped"] += 1
            continue
        try:
            send_notification(
                db,
                client=c,
                type=UPCOMING_INSPECTION,
                message=reminder_message(c),
                sent_by=sent_by,
            )
            out["sent"] += 1
        except Exception:
            db.rollback()
            out["failed"] += 1
            log.exception("auto notification failed", extra={"client_id": c.id})

    log.info("auto notifications sweep %s", out)
    return out
