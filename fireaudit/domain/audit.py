# fireaudit/domain/audit.py
from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from ..middleware.request_id import get_request_id
from ..models import AuditEvent, Client, Inspection


def _dumps(v: Optional[dict[str, Any]]) -> Optional[str]:
    if v is None:
        return None
    return json.dumps(v, sort_keys=True, default=str)


def audit_write(
    db: Session,
    *,
    actor_user_id: Optional[int],
    action: str,
    entity_type: str,
    entity_id: str,
    before: Optional[dict[str, Any]] = None,
    after: Optional[dict[str, Any]] = None,
) -> AuditEvent:
    """
    Add an audit row to the caller's transaction; the caller commits it with
    the write it describes. The current request id is stamped on the row.
    """
    row = AuditEvent(
        actor_user_id=actor_user_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        before_json=_dumps(before),
        after_json=_dumps(after),
        request_id=get_request_id(),
        created_at=datetime.utcnow(),
    )
    db.add(row)
    return row


def inspection_snapshot(insp: Inspection) -> dict[str, Any]:
    return {
        "client_id": insp.client_id,
        "inspector_id": insp.inspector_id,
        "status": insp.status,
        "compliance_score": insp.compliance_score,
        "critical_issues_count": insp.critical_issues_count,
        "weights": [insp.obtained_weight, insp.total_weight],
        "next_inspection_date": insp.next_inspection_date,
    }


def audit_inspection_submitted(db: Session, *, actor_user_id: Optional[int], insp: Inspection) -> AuditEvent:
    return audit_write(
        db,
        actor_user_id=actor_user_id,
        action="inspection.submit",
        entity_type="Inspection",
        entity_id=str(insp.id),
        after=inspection_snapshot(insp),
    )


def audit_client_rescheduled(
    db: Session,
    *,
    actor_user_id: Optional[int],
    client: Client,
    previous_due: Optional[date],
    inspection_id: Optional[int] = None,
) -> AuditEvent:
    # inspection_id is the submission that moved the date, if any
    return audit_write(
        db,
        actor_user_id=actor_user_id,
        action="client.reschedule",
        entity_type="Client",
        entity_id=str(client.id),
        before={"next_inspection_date": previous_due},
        after={"next_inspection_date": client.next_inspection_date, "inspection_id": inspection_id},
    )


def audit_inspections_deleted(
    db: Session, *, actor_user_id: Optional[int], rows: Iterable[Inspection]
) -> list[AuditEvent]:
    """One row per removed inspection, holding its last scored state."""
    return [
        audit_write(
            db,
            actor_user_id=actor_user_id,
            action="inspection.delete",
            entity_type="Inspection",
            entity_id=str(r.id),
            before=inspection_snapshot(r),
        )
        for r in rows
    ]
