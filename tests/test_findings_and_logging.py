# tests/test_findings_and_logging.py
from __future__ import annotations

import json
import logging
from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from fireaudit.db import SessionLocal
from fireaudit.domain.findings import Findings, FloorExtinguisher
from fireaudit.domain.statuses import ExtinguisherType, HoseReelStatus, HydrantValveStatus
from fireaudit.logging_config import JsonFormatter
from fireaudit.middleware.request_id import bound_request_id, get_request_id
from fireaudit.middleware.structured_logging import path_entities
from fireaudit.models import Client
from fireaudit.workers.notification_tasks import send_upcoming_reminders


def test_status_lookup_tolerates_case_and_slash_spacing():
    assert HydrantValveStatus("Lugs/Wheel Missing") is HydrantValveStatus.LUGS_WHEEL_MISSING
    assert HoseReelStatus("jammed / stuck") is HoseReelStatus.JAMMED_STUCK
    with pytest.raises(ValueError):
        HoseReelStatus("Broken")


def test_findings_blob_ignores_unknown_keys():
    raw = json.dumps(
        {
            "floors": [{"name": "Ground", "extinguisher": {"status": "OK", "uiExpanded": True}}],
            "remarks": "ok",
            "draftVersion": 3,
        }
    )
    f = Findings.from_blob(raw)
    assert f.floors[0].name == "Ground"
    assert f.remarks == "ok"
    assert Findings.from_blob(None) == Findings()


def test_extinguisher_counts_must_be_non_negative():
    assert FloorExtinguisher(types={"CO2": 2}).types == {ExtinguisherType.CO2: 2}
    with pytest.raises(ValidationError):
        FloorExtinguisher(types={"ABC": -1})


def test_json_formatter_carries_extras():
    rec = logging.LogRecord("fireaudit.test", logging.INFO, __file__, 1, "submitted %s", ("x",), None)
    rec.client_id = 7
    out = json.loads(JsonFormatter().format(rec))
    assert out["message"] == "submitted x"
    assert out["level"] == "INFO"
    assert out["client_id"] == 7
    assert "inspection_id" not in out


def test_reminder_task_runs_the_sweep():
    db = SessionLocal()
    try:
        db.add(
            Client(
                name="Tide",
                address="1 Shore Rd",
                email="tide@example.com",
                next_inspection_date=date(2026, 3, 11) + timedelta(days=2),
            )
        )
        db.commit()
    finally:
        db.close()

    out = send_upcoming_reminders("2026-03-11")
    assert out == {"ok": True, "checked": 1, "sent": 1, "skipped": 0, "failed": 0}


def test_access_line_carries_path_entities():
    assert path_entities("/api/clients/12/scheduling") == {"client_id": 12}
    assert path_entities("/api/inspections/34/matrix") == {"inspection_id": 34}
    assert path_entities("/api/inspections/preview") == {}
    assert path_entities("/api/clients") == {}


def test_formatter_uses_the_bound_request_id():
    rec = logging.LogRecord("fireaudit.request", logging.INFO, __file__, 1, "GET /api/clients/3 -> 200", (), None)
    rec.client_id = 3
    rec.status_code = 200
    with bound_request_id("task-abc"):
        out = json.loads(JsonFormatter().format(rec))
    assert out["request_id"] == "task-abc"
    assert out["client_id"] == 3
    assert out["status_code"] == 200
    assert get_request_id() is None
    assert "request_id" not in json.loads(JsonFormatter().format(rec))


def test_request_id_is_echoed(client):
    r = client.get("/api/health", headers={"X-Request-ID": "trace-42"})
    assert r.headers["X-Request-ID"] == "trace-42"
    generated = client.get("/api/health").headers["X-Request-ID"]
    assert len(generated) == 32
