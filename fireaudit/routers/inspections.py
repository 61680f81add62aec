# fireaudit/routers/inspections.py
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal, require_admin, require_inspector
from ..db import get_db
from ..domain.findings import Findings
from ..domain.matrix import build_matrix
from ..domain.statuses import InspectionStatus
from ..domain.submission import SubmissionError
from ..models import Client, Inspection
from ..schemas import (
    BulkDeleteOut,
    CompliancePreviewIn,
    CompliancePreviewOut,
    InspectionCreate,
    InspectionOut,
    InspectionSummaryOut,
)
from ..services.inspection_service import (
    delete_inspections,
    inspection_out,
    preview,
    report_window,
    submit_inspection,
)
from ..services.ownership import must_get_client, must_get_inspection

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.post("/preview", response_model=CompliancePreviewOut)
def preview_inspection(
    payload: CompliancePreviewIn,
    p: Principal = Depends(get_principal),
):
    """Score the findings as they stand. Nothing is stored."""
    return preview(payload.findings)


@router.post("", response_model=InspectionOut, status_code=201)
def create_inspection(
    payload: InspectionCreate,
    db: Session = Depends(get_db),
    p: Principal = Depends(require_inspector),
):
    client = must_get_client(db, client_id=payload.client_id)
    try:
        row = submit_inspection(db, client=client, findings=payload.findings, principal=p)
    except SubmissionError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "problems": e.problems})
    return inspection_out(row)


@router.get("", response_model=list[InspectionSummaryOut])
def list_inspections(
    status: Optional[InspectionStatus] = Query(default=None),
    client_id: Optional[int] = Query(default=None),
    range_: Optional[str] = Query(default=None, alias="range", pattern=r"^(30d|90d|all)$"),
    since: Optional[date] = Query(default=None),
    until: Optional[date] = Query(default=None),
    today: Optional[date] = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    q = (
        select(Inspection, Client.name)
        .join(Client, Client.id == Inspection.client_id)
        .order_by(desc(Inspection.created_at), desc(Inspection.id))
    )
    if status is not None:
        q = q.where(Inspection.status == status.value)
    if client_id is not None:
        q = q.where(Inspection.client_id == client_id)

    try:
        start, end = report_window(range_, since=since, until=until, today=today)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if start is not None:
        q = q.where(Inspection.created_at >= start)
    if end is not None:
        q = q.where(Inspection.created_at < end)

    return [
        InspectionSummaryOut(
            id=r.id,
            client_id=r.client_id,
            client_name=name,
            status=r.status,
            compliance_score=r.compliance_score,
            critical_issues_count=r.critical_issues_count,
            created_at=r.created_at,
        )
        for r, name in db.execute(q.limit(limit)).all()
    ]


@router.delete("", response_model=BulkDeleteOut)
def bulk_delete_inspections(
    ids: list[int] = Query(..., min_length=1, max_length=500),
    db: Session = Depends(get_db),
    p: Principal = Depends(require_admin),
):
    """Delete several inspections at once; unknown ids are reported, not fatal."""
    deleted, missing = delete_inspections(db, ids=ids, principal=p)
    return BulkDeleteOut(deleted=deleted, missing=missing)


@router.get("/{inspection_id}", response_model=InspectionOut)
def get_inspection(
    inspection_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    return inspection_out(must_get_inspection(db, inspection_id=inspection_id))


@router.get("/{inspection_id}/matrix", response_model=dict[str, Any])
def inspection_matrix(
    inspection_id: int,
    db: Session = Depends(get_db),
    p: Principal = Depends(get_principal),
):
    row = must_get_inspection(db, inspection_id=inspection_id)
    out = build_matrix(Findings.from_blob(row.findings_json))
    out["inspection_id"] = row.id
    out["client_id"] = row.client_id
    out["compliance_score"] = row.compliance_score
    out["status"] = row.status
    return out
