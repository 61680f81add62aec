# fireaudit/domain/findings.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .statuses import (
    AccessibilityStatus,
    AlarmStatus,
    ExtinguisherStatus,
    ExtinguisherType,
    HoseReelStatus,
    HousekeepingStatus,
    HydrantValveStatus,
    PumpStatus,
    RefugeStatus,
    RoomExtinguisherStatus,
    SprinklerStatus,
    SystemStatus,
)


class _Part(BaseModel):
    # Findings blobs written by older clients carry extra UI keys; ignore them.
    model_config = ConfigDict(extra="ignore")


def _clean_counts(v: dict | None) -> dict:
    out: dict = {}
    for k, n in (v or {}).items():
        n = int(n or 0)
        if n < 0:
            raise ValueError(f"extinguisher count for {k} cannot be negative")
        out[k] = n
    return out


# -------------------- Floors --------------------

class FloorExtinguisher(_Part):
    status: ExtinguisherStatus = ExtinguisherStatus.OK
    types: dict[ExtinguisherType, int] = Field(default_factory=lambda: {ExtinguisherType.ABC: 1})
    photo_url: Optional[str] = None

    check_counts = field_validator("types", mode="before")(_clean_counts)


class HydrantCheck(_Part):
    # Either half may be absent on a floor; an absent half is not scored.
    valve: Optional[HydrantValveStatus] = None
    valve_photo_url: Optional[str] = None
    hose: Optional[HoseReelStatus] = None
    hose_photo_url: Optional[str] = None


class SprinklerCheck(_Part):
    status: SprinklerStatus = SprinklerStatus.OK
    photo_url: Optional[str] = None


class AlarmCheck(_Part):
    status: AlarmStatus = AlarmStatus.OK
    photo_url: Optional[str] = None


class RefugeCheck(_Part):
    status: RefugeStatus = RefugeStatus.OPEN
    photo_url: Optional[str] = None


class FloorFinding(_Part):
    """
    One entry per structure floor label.

    hydrant / sprinkler / alarm exist only when the client has the matching
    system installed; refuge_area only on designated refuge floors.
    """
    name: str
    extinguisher: FloorExtinguisher = Field(default_factory=FloorExtinguisher)
    hydrant: Optional[HydrantCheck] = None
    sprinkler: Optional[SprinklerCheck] = None
    alarm: Optional[AlarmCheck] = None
    refuge_area: Optional[RefugeCheck] = None


# -------------------- Rooms --------------------

class RoomExtinguisher(_Part):
    status: RoomExtinguisherStatus = RoomExtinguisherStatus.AVAILABLE
    types: dict[ExtinguisherType, int] = Field(default_factory=lambda: {ExtinguisherType.ABC: 1})
    photo_url: Optional[str] = None

    check_counts = field_validator("types", mode="before")(_clean_counts)


class RoomFinding(_Part):
    name: str
    housekeeping: HousekeepingStatus = HousekeepingStatus.GOOD
    housekeeping_photo_url: Optional[str] = None
    accessibility: AccessibilityStatus = AccessibilityStatus.CLEAR
    accessibility_photo_url: Optional[str] = None
    extinguisher: RoomExtinguisher = Field(default_factory=RoomExtinguisher)
    remarks: str = ""


# -------------------- Systems / pumps --------------------

class SystemFinding(_Part):
    name: str
    status: SystemStatus = SystemStatus.SATISFACTORY
    notes: str = ""
    photo_url: Optional[str] = None


class PumpFinding(_Part):
    name: str
    status: PumpStatus = PumpStatus.NA
    pressure: str = ""
    remarks: str = ""
    photo_url: Optional[str] = None


class Findings(_Part):
    floors: list[FloorFinding] = Field(default_factory=list)
    rooms: list[RoomFinding] = Field(default_factory=list)
    systems: list[SystemFinding] = Field(default_factory=list)
    pumps: list[PumpFinding] = Field(default_factory=list)
    remarks: str = ""

    def to_blob(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_blob(cls, raw: str | bytes | None) -> "Findings":
        if not raw:
            return cls()
        return cls.model_validate_json(raw)
