# fireaudit/logging_config.py
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import settings
from .middleware.request_id import get_request_id

# Domain ids passed through `extra=` by services, tasks and the access log.
ENTITY_FIELDS = ("user_id", "client_id", "inspection_id", "notification_id", "task_id")
ACCESS_FIELDS = ("method", "path", "status_code", "latency_ms", "user_email")
SWEEP_FIELDS = ("sender", "notification_type", "recipient")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; unset extras are left out."""

    fields = ENTITY_FIELDS + ACCESS_FIELDS + SWEEP_FIELDS

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "env": settings.app_env,
            "message": record.getMessage(),
        }

        rid = get_request_id()
        if rid:
            payload["request_id"] = rid

        for k in self.fields:
            v = getattr(record, k, None)
            if v is not None:
                payload[k] = v

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> None:
    level = settings.log_level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    # replaces whatever uvicorn or celery installed so every line is JSON
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # the access middleware already logs each request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(settings.sql_log_level.upper())
