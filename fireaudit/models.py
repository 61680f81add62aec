# fireaudit/models.py
from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import (
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


# -----------------------------
# Users / audit
# -----------------------------
class AppUser(Base):
    __tablename__ = "app_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="inspector")  # admin|inspector|viewer
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    inspections: Mapped[List["Inspection"]] = relationship(back_populates="inspector")


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    actor_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("app_users.id"), nullable=True)

    action: Mapped[str] = mapped_column(String(80), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(80), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(80), nullable=False)

    before_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    after_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    request_id: Mapped[Optional[str]] = mapped_column(String(80), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


# -----------------------------
# Clients (buildings)
# -----------------------------
class Client(Base):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    owner_user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("app_users.id"), nullable=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str] = mapped_column(String(400), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    type: Mapped[str] = mapped_column(String(40), nullable=False, default="Society/Residential")

    # BuildingStructure.to_dict() as JSON; structure_map inside is always derived from the counts
    structure_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")

    # nullable: no date means unscheduled
    next_inspection_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    inspections: Mapped[List["Inspection"]] = relationship(back_populates="client", cascade="all, delete-orphan")
    notifications: Mapped[List["NotificationLog"]] = relationship(
        back_populates="client", cascade="all, delete-orphan"
    )

    @property
    def structure(self) -> dict[str, Any]:
        try:
            return json.loads(self.structure_json or "{}")
        except (TypeError, ValueError):
            return {}


# -----------------------------
# Inspections
# -----------------------------
class Inspection(Base):
    __tablename__ = "inspections"
    __table_args__ = (Index("ix_inspections_client_created", "client_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    inspector_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("app_users.id", ondelete="SET NULL"), nullable=True
    )

    status: Mapped[str] = mapped_column(String(30), nullable=False, index=True)  # Completed|Action Required
    compliance_score: Mapped[int] = mapped_column(Integer, nullable=False)
    critical_issues_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    obtained_weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # opaque blob; re-parsed with Findings.from_blob by report views
    findings_json: Mapped[str] = mapped_column(Text, nullable=False)
    ai_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    narrative: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    next_inspection_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    client: Mapped["Client"] = relationship(back_populates="inspections")
    inspector: Mapped[Optional["AppUser"]] = relationship(back_populates="inspections")


# -----------------------------
# Notifications
# -----------------------------
class NotificationLog(Base):
    __tablename__ = "notification_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_id: Mapped[int] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    inspection_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("inspections.id", ondelete="SET NULL"), nullable=True
    )
    sent_by: Mapped[Optional[int]] = mapped_column(ForeignKey("app_users.id", ondelete="SET NULL"), nullable=True)

    type: Mapped[str] = mapped_column(String(40), nullable=False)  # Manual Reminder|Upcoming Inspection|...
    recipient: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Sent")
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    client: Mapped["Client"] = relationship(back_populates="notifications")
