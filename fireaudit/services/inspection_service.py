# fireaudit/services/inspection_service.py
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..auth import Principal
from ..config import settings
from ..domain.audit import audit_client_rescheduled, audit_inspection_submitted, audit_inspections_deleted
from ..domain.compliance_engine import compute_compliance
from ..domain.findings import Findings
from ..domain.narrative import generate_summary
from ..domain.scheduling import calculate_next_inspection_date
from ..domain.submission import check_submission, validate_submission
from ..models import Client, Inspection
from ..schemas import CompliancePreviewOut, InspectionOut

log = logging.getLogger(__name__)


def auto_summary(score: int, critical_count: int) -> str:
    return f"Inspection completed. Score: {score}%. {critical_count} critical issues identified."


def preview(findings: Findings) -> CompliancePreviewOut:
    """Live score for an in-progress audit. Nothing is persisted."""
    result = compute_compliance(findings)
    chk = check_submission(findings, require_photos=settings.require_failure_photos)
    return CompliancePreviewOut(
        score=result.score,
        critical_count=result.critical_count,
        status=result.status,
        total_weight=result.total_weight,
        obtained_weight=result.obtained_weight,
        narrative=generate_summary(findings),
        ready_to_submit=chk.ok,
        problems=[chk.message()] if not chk.ok else [],
    )


def submit_inspection(
    db: Session,
    *,
    client: Client,
    findings: Findings,
    principal: Principal,
    now: Optional[datetime] = None,
) -> Inspection:
    """
    Validate, score and persist one inspection, then reschedule the client.

    Raises SubmissionError when preconditions fail; nothing is written then.
    The inspection row and the client's new due date commit together.
    """
    validate_submission(findings, require_photos=settings.require_failure_photos)

    now = now or datetime.utcnow()
    result = compute_compliance(findings)
    next_date = calculate_next_inspection_date(now.date(), months=settings.inspection_interval_months)

    insp = Inspection(
        client_id=client.id,
        inspector_id=principal.user_id,
        status=result.status.value,
        compliance_score=result.score,
        critical_issues_count=result.critical_count,
        total_weight=result.total_weight,
        obtained_weight=result.obtained_weight,
        findings_json=findings.to_blob(),
        ai_summary=auto_summary(result.score, result.critical_count),
        narrative=generate_summary(findings),
        next_inspection_date=next_date,
        created_at=now,
    )
    db.add(insp)

    previous_due = client.next_inspection_date
    client.next_inspection_date = next_date
    client.updated_at = now
    db.flush()

    audit_inspection_submitted(db, actor_user_id=principal.user_id, insp=insp)
    audit_client_rescheduled(
        db,
        actor_user_id=principal.user_id,
        client=client,
        previous_due=previous_due,
        inspection_id=insp.id,
    )
    db.commit()
    db.refresh(insp)

    log.info(
        "inspection submitted score=%s critical=%s next_due=%s",
        insp.compliance_score,
        insp.critical_issues_count,
        next_date.isoformat(),
        extra={"client_id": client.id, "inspection_id": insp.id, "user_id": principal.user_id},
    )
    return insp


def inspection_out(row: Inspection, *, include_findings: bool = True) -> InspectionOut:
    return InspectionOut(
        id=row.id,
        client_id=row.client_id,
        inspector_id=row.inspector_id,
        status=row.status,
        compliance_score=row.compliance_score,
        critical_issues_count=row.critical_issues_count,
        ai_summary=row.ai_summary,
        narrative=row.narrative,
        next_inspection_date=row.next_inspection_date,
        created_at=row.created_at,
        findings=Findings.from_blob(row.findings_json) if include_findings else None,
    )


REPORT_RANGES = {"30d": 30, "90d": 90, "all": None}


def report_window(
    range_: Optional[str] = None,
    *,
    since: Optional[date] = None,
    until: Optional[date] = None,
    today: Optional[date] = None,
) -> tuple[Optional[datetime], Optional[datetime]]:
    """
    [start, end) bounds on inspection created_at for a report listing.

    An explicit `since` / `until` (whole days, inclusive) wins over a named
    range. "30d" / "90d" count back from today; "all" or nothing is unbounded.
    """
    if range_ is not None and range_ not in REPORT_RANGES:
        raise ValueError(f"unknown range: {range_}")

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    if since is not None:
        start = datetime.combine(since, time.min)
    elif range_ and REPORT_RANGES[range_] is not None:
        start = datetime.combine((today or date.today()) - timedelta(days=REPORT_RANGES[range_]), time.min)
    if until is not None:
        end = datetime.combine(until + timedelta(days=1), time.min)

    if start is not None and end is not None and end <= start:
        raise ValueError("until must not be before since")
    return start, end


def delete_inspections(db: Session, *, ids: Iterable[int], principal: Principal) -> tuple[list[int], list[int]]:
    """
    Remove the given inspections in one transaction. Returns (deleted, missing).
    Client due dates are left as they are.
    """
    wanted = sorted({int(i) for i in ids})
    rows = db.scalars(select(Inspection).where(Inspection.id.in_(wanted))).all() if wanted else []
    found = {r.id for r in rows}

    audit_inspections_deleted(db, actor_user_id=principal.user_id, rows=rows)
    for r in rows:
        db.delete(r)
    db.commit()

    deleted = sorted(found)
    if deleted:
        log.info("inspections deleted ids=%s", deleted, extra={"user_id": principal.user_id})
    return deleted, [i for i in wanted if i not in found]
