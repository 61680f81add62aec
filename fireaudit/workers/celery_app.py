# fireaudit/workers/celery_app.py
from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from ..config import settings

BROKER = settings.celery_broker_url or "redis://localhost:6379/0"
BACKEND = settings.celery_result_backend or "redis://localhost:6379/1"

celery_app = Celery(
    "fireaudit",
    broker=BROKER,
    backend=BACKEND,
    include=["fireaudit.workers.notification_tasks"],
)

celery_app.conf.update(
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    task_reject_on_worker_lost=True,
    task_track_started=True,
    timezone="UTC",
)

celery_app.conf.task_routes = {
    "fireaudit.workers.notification_tasks.*": {"queue": "notifications"},
}

# daily reminder sweep; run `celery -A fireaudit.workers.celery_app beat` alongside the worker
celery_app.conf.beat_schedule = {
    "upcoming-inspection-reminders": {
        "task": "fireaudit.workers.notification_tasks.send_upcoming_reminders",
        "schedule": crontab(hour=settings.reminder_sweep_hour_utc, minute=0),
    },
}
