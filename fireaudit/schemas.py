# fireaudit/schemas.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain.findings import Findings
from .domain.statuses import ClientType, InspectionStatus, SchedulingStatus
from .domain.structure import DEFAULT_ROOMS, OPTIONAL_SYSTEMS

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s-]{10,}$")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def is_valid_phone(phone: str) -> bool:
    # optional +, spaces and dashes; at least 10 digits
    phone = phone or ""
    return bool(PHONE_RE.match(phone)) and len(re.sub(r"\D", "", phone)) >= 10


# -------------------- Clients --------------------

class ClientStructureIn(BaseModel):
    basements: int = Field(default=0, ge=0)
    podiums: int = Field(default=0, ge=0)
    floors: int = Field(default=0, ge=0, description="Residential floors above the podiums")
    rooms: List[str] = Field(default_factory=lambda: list(DEFAULT_ROOMS))
    systems: List[str] = Field(default_factory=lambda: list(OPTIONAL_SYSTEMS))
    refuge_floors: List[str] = Field(default_factory=list)


class ClientBase(BaseModel):
    name: str
    address: str
    phone: str
    email: str
    type: ClientType = ClientType.RESIDENTIAL

    @field_validator("name", "address")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = (v or "").strip()
        if not is_valid_email(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        v = (v or "").strip()
        if not is_valid_phone(v):
            raise ValueError("Please enter a valid phone number (min 10 digits)")
        return v


class ClientCreate(ClientBase):
    structure: ClientStructureIn = Field(default_factory=ClientStructureIn)
    next_inspection_date: Optional[date] = None


class ClientUpdate(BaseModel):
    """Partial update; a structure change regenerates the floor map."""
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    type: Optional[ClientType] = None
    structure: Optional[ClientStructureIn] = None
    next_inspection_date: Optional[date] = None
    clear_next_inspection_date: bool = False

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_email(v.strip()):
            raise ValueError("Please enter a valid email address")
        return v.strip() if v is not None else v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_phone(v.strip()):
            raise ValueError("Please enter a valid phone number (min 10 digits)")
        return v.strip() if v is not None else v


class ClientOut(BaseModel):
    id: int
    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    type: ClientType
    structure: dict[str, Any] = Field(default_factory=dict)
    next_inspection_date: Optional[date] = None
    scheduling_status: SchedulingStatus = SchedulingStatus.NONE
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SchedulingOut(BaseModel):
    client_id: int
    next_inspection_date: Optional[date] = None
    status: SchedulingStatus
    days_until: Optional[int] = None


# -------------------- Inspections --------------------

class InspectionCreate(BaseModel):
    client_id: int
    findings: Findings


class CompliancePreviewIn(BaseModel):
    findings: Findings


class CompliancePreviewOut(BaseModel):
    score: int
    critical_count: int
    status: InspectionStatus
    total_weight: float
    obtained_weight: float
    narrative: str
    ready_to_submit: bool
    problems: List[str] = Field(default_factory=list)


class InspectionOut(BaseModel):
    id: int
    client_id: int
    inspector_id: Optional[int] = None
    status: InspectionStatus
    compliance_score: int
    critical_issues_count: int
    ai_summary: Optional[str] = None
    narrative: Optional[str] = None
    next_inspection_date: Optional[date] = None
    created_at: Optional[datetime] = None
    findings: Optional[Findings] = None

    model_config = ConfigDict(from_attributes=True)


class InspectionSummaryOut(BaseModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    status: InspectionStatus
    compliance_score: int
    critical_issues_count: int
    created_at: Optional[datetime] = None


class BulkDeleteOut(BaseModel):
    ok: bool = True
    deleted: list[int]
    missing: list[int]


# -------------------- Dashboard --------------------

class DashboardStatsOut(BaseModel):
    total_inspections: int
    compliance_rate: int
    action_required: int
    critical_open: int


class ActionItemOut(BaseModel):
    client_id: int
    name: Optional[str] = None
    address: Optional[str] = None
    next_inspection_date: date
    status: SchedulingStatus
    overdue_days: Optional[int] = None


class ActionListsOut(BaseModel):
    upcoming: List[ActionItemOut] = Field(default_factory=list)
    pending: List[ActionItemOut] = Field(default_factory=list)
    urgent: List[ActionItemOut] = Field(default_factory=list)


class TimelineEventOut(BaseModel):
    id: str
    client_name: str
    date: date
    status: str
    compliance_score: Optional[int] = None


# -------------------- Notifications --------------------

class ReminderIn(BaseModel):
    client_id: int
    message: Optional[str] = None
    recipient: Optional[str] = None
    inspection_id: Optional[int] = None


class NotificationOut(BaseModel):
    id: int
    client_id: int
    inspection_id: Optional[int] = None
    sent_by: Optional[int] = None
    type: str
    recipient: str
    message: str
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AutoNotificationsOut(BaseModel):
    checked: int
    sent: int
    skipped: int
    failed: int


# -------------------- Auth --------------------

class PrincipalOut(BaseModel):
    user_id: int
    email: str
    role: str


class TokenIn(BaseModel):
    email: str
    role: Optional[str] = None


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str


class AuditEventOut(BaseModel):
    id: int
    actor_user_id: Optional[int] = None
    action: str
    entity_type: str
    entity_id: str
    before_json: Optional[str] = None
    after_json: Optional[str] = None
    request_id: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
