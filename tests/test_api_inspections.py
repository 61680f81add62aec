# tests/test_api_inspections.py
from __future__ import annotations

import json
from datetime import datetime, timedelta

from fireaudit.db import SessionLocal
from fireaudit.domain.scheduling import calculate_next_inspection_date
from fireaudit.models import Inspection

CLIENT = {
    "name": "Lakeview Residency",
    "address": "22 Lake Road",
    "phone": "9820012345",
    "email": "office@lakeview.example",
    "structure": {"basements": 0, "podiums": 0, "floors": 2, "systems": ["Hydrant Valve"], "rooms": ["Pump Room"]},
}


def _new_client(client, h) -> int:
    r = client.post("/api/clients", json=CLIENT, headers=h)
    assert r.status_code == 201, r.text
    return r.json()["id"]


def _ready_findings(client, cid: int, h) -> dict:
    f = client.get(f"/api/clients/{cid}/blank-findings", headers=h).json()
    for p in f["pumps"]:
        p["status"] = "Auto (Working)"
    f["remarks"] = "Routine quarterly audit."
    return f


def test_preview_does_not_persist(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = client.get(f"/api/clients/{cid}/blank-findings", headers=admin_headers).json()

    r = client.post("/api/inspections/preview", json={"findings": f}, headers=inspector_headers)
    assert r.status_code == 200
    body = r.json()
    # pumps are still unresolved and therefore excluded from the score
    assert body["score"] == 100
    assert body["status"] == "Completed"
    assert body["ready_to_submit"] is False
    assert body["problems"][0].startswith("Please select a status for the following pumps")
    assert "FINAL CONCLUSION: COMPLIANT" in body["narrative"]

    assert client.get("/api/inspections", headers=admin_headers).json() == []


def test_submit_clean_inspection_reschedules_client(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)

    r = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["compliance_score"] == 100
    assert body["critical_issues_count"] == 0
    assert body["status"] == "Completed"
    assert body["ai_summary"] == "Inspection completed. Score: 100%. 0 critical issues identified."
    assert body["findings"]["remarks"] == "Routine quarterly audit."

    expected = calculate_next_inspection_date(datetime.utcnow().date())
    assert body["next_inspection_date"] == expected.isoformat()
    client_row = client.get(f"/api/clients/{cid}", headers=admin_headers).json()
    assert client_row["next_inspection_date"] == expected.isoformat()


def test_submit_with_failures(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    f["floors"][0]["extinguisher"]["status"] = "Expired"
    f["floors"][0]["extinguisher"]["photo_url"] = "https://img/ext.jpg"
    f["floors"][1]["hydrant"]["valve"] = "Leaking"
    f["floors"][1]["hydrant"]["valve_photo_url"] = "https://img/valve.jpg"

    r = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers)
    assert r.status_code == 201, r.text
    body = r.json()
    # 4 floors x (3 + 1.5 + 1.5) + 1 system x 3 + 4 pumps x 5 + room (1 + 3) = 51; 4.5 lost
    assert body["compliance_score"] == 91
    assert body["critical_issues_count"] == 2
    assert body["status"] == "Action Required"
    assert "FINAL CONCLUSION: NON-COMPLIANT" in body["narrative"]

    m = client.get(f"/api/inspections/{body['id']}/matrix", headers=admin_headers).json()
    assert m["floors"][0]["extinguisher"] == "Expired"
    assert m["floors"][1]["hydrant_valve"] == "Leaking"
    assert m["compliance_score"] == 91


def test_submit_rejects_missing_photos(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    f["pumps"][0]["status"] = "Not Working"

    r = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers)
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["message"].startswith("Mandatory Photos Missing for Failed Items")
    assert detail["problems"] == ["Pump: Main Pump - Hydrant (Not Working)"]

    # nothing stored, schedule untouched
    assert client.get("/api/inspections", headers=admin_headers).json() == []
    assert client.get(f"/api/clients/{cid}", headers=admin_headers).json()["next_inspection_date"] is None


def test_submit_rejects_unknown_status(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    f["floors"][0]["extinguisher"]["status"] = "Kinda OK"
    r = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers)
    assert r.status_code == 422


def test_viewer_cannot_submit(client, admin_headers, viewer_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    r = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=viewer_headers)
    assert r.status_code == 403


def test_submit_for_missing_client(client, admin_headers):
    r = client.post("/api/inspections", json={"client_id": 4242, "findings": {}}, headers=admin_headers)
    assert r.status_code == 404


def test_list_and_get(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    iid = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers).json()["id"]

    rows = client.get("/api/inspections", params={"status": "Completed"}, headers=admin_headers).json()
    assert [r["id"] for r in rows] == [iid]
    assert rows[0]["client_name"] == "Lakeview Residency"
    assert client.get("/api/inspections", params={"status": "Action Required"}, headers=admin_headers).json() == []

    one = client.get(f"/api/inspections/{iid}", headers=admin_headers).json()
    assert [x["name"] for x in one["findings"]["floors"]] == ["Ground", "Floor 1", "Floor 2", "Terrace"]

    history = client.get(f"/api/clients/{cid}/inspections", headers=admin_headers).json()
    assert [h["id"] for h in history] == [iid]
    assert client.get("/api/inspections/777", headers=admin_headers).status_code == 404


def _backdate(inspection_id: int, days: int) -> None:
    db = SessionLocal()
    try:
        row = db.get(Inspection, inspection_id)
        row.created_at = datetime.utcnow() - timedelta(days=days)
        db.commit()
    finally:
        db.close()


def test_list_by_date_range(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    recent = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers).json()["id"]
    older = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers).json()["id"]
    _backdate(older, 60)

    def ids(**params):
        r = client.get("/api/inspections", params=params, headers=admin_headers)
        assert r.status_code == 200, r.text
        return [x["id"] for x in r.json()]

    assert ids(range="30d") == [recent]
    assert ids(range="90d") == [recent, older]
    assert ids(range="all") == [recent, older]

    since = (datetime.utcnow() - timedelta(days=70)).date().isoformat()
    until = (datetime.utcnow() - timedelta(days=50)).date().isoformat()
    assert ids(since=since, until=until) == [older]

    assert client.get("/api/inspections", params={"range": "7d"}, headers=admin_headers).status_code == 422
    bad = client.get("/api/inspections", params={"since": until, "until": since}, headers=admin_headers)
    assert bad.status_code == 400


def test_bulk_delete(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    a = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers).json()["id"]
    b = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers).json()["id"]
    keep = client.post("/api/inspections", json={"client_id": cid, "findings": f}, headers=inspector_headers).json()["id"]

    r = client.delete("/api/inspections", params={"ids": [a, b, 999]}, headers=inspector_headers)
    assert r.status_code == 403

    r = client.delete("/api/inspections", params={"ids": [b, a, 999]}, headers=admin_headers)
    assert r.status_code == 200, r.text
    assert r.json() == {"ok": True, "deleted": sorted([a, b]), "missing": [999]}

    assert [x["id"] for x in client.get("/api/inspections", headers=admin_headers).json()] == [keep]
    assert client.get(f"/api/inspections/{a}", headers=admin_headers).status_code == 404

    events = client.get("/api/audit", params={"action": "inspection.delete"}, headers=admin_headers).json()
    assert sorted(int(e["entity_id"]) for e in events) == sorted([a, b])
    assert json.loads(events[0]["before_json"])["client_id"] == cid

    assert client.delete("/api/inspections", headers=admin_headers).status_code == 422


def test_submit_audit_rows_share_the_request_id(client, admin_headers, inspector_headers):
    cid = _new_client(client, admin_headers)
    f = _ready_findings(client, cid, admin_headers)
    r = client.post(
        "/api/inspections",
        json={"client_id": cid, "findings": f},
        headers={**inspector_headers, "X-Request-ID": "audit-trail-1"},
    )
    assert r.status_code == 201
    assert r.headers["X-Request-ID"] == "audit-trail-1"
    iid = r.json()["id"]

    events = client.get("/api/audit", params={"request_id": "audit-trail-1"}, headers=admin_headers).json()
    assert [e["action"] for e in events] == ["client.reschedule", "inspection.submit"]

    submitted = json.loads(events[1]["after_json"])
    assert submitted["compliance_score"] == 100
    assert submitted["next_inspection_date"] == r.json()["next_inspection_date"]

    moved = json.loads(events[0]["after_json"])
    assert moved["inspection_id"] == iid
    assert json.loads(events[0]["before_json"]) == {"next_inspection_date": None}
