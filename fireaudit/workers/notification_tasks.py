# fireaudit/workers/notification_tasks.py
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..config import settings
from ..db import SessionLocal
from ..middleware.request_id import bound_request_id, new_request_id
from ..services.notification_service import run_auto_notifications
from .celery_app import celery_app

log = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    name="fireaudit.workers.notification_tasks.send_upcoming_reminders",
)
def send_upcoming_reminders(self, today: Optional[str] = None) -> dict:
    """
    Daily sweep of clients due within the scheduling window.

    Idempotent per (client, due date), so a retry after a partial run only
    sends what is still missing.
    """
    if not settings.auto_notifications_enabled:
        return {"ok": True, "skipped": "disabled"}

    day = date.fromisoformat(today) if today else None
    db = SessionLocal()
    try:
        with bound_request_id(f"task-{self.request.id}" if self.request.id else new_request_id("task")):
            out = run_auto_notifications(db, today=day)
        return {"ok": True, **out}
    except Exception as exc:
        db.rollback()
        log.exception("reminder sweep failed", extra={"task_id": self.request.id})
        raise self.retry(exc=exc)
    finally:
        db.close()
