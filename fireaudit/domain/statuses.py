# fireaudit/domain/statuses.py
from __future__ import annotations

import re
from enum import Enum
from typing import Any

_SLASH = re.compile(r"\s*/\s*")


def _canon(raw: str) -> str:
    return _SLASH.sub(" / ", raw.strip()).lower()


class StatusEnum(str, Enum):
    """
    Closed status vocabulary. Values are the literal strings stored in findings
    blobs and consumed by report views, so they never change.

    Lookup tolerates letter case and spacing around "/" ("Lugs/Wheel Missing").
    Anything else is rejected.
    """

    @classmethod
    def _missing_(cls, value: Any):
        if not isinstance(value, str):
            return None
        key = _canon(value)
        for member in cls:
            if _canon(member.value) == key:
                return member
        return None

    def __str__(self) -> str:
        return str(self.value)


# -------------------- Floor checks --------------------

class ExtinguisherStatus(StatusEnum):
    OK = "OK"
    PRESSURE_LOW = "Pressure Low"
    EXPIRED = "Expired"
    NOT_AVAILABLE = "Not Available"


class HydrantValveStatus(StatusEnum):
    OK = "OK"
    LEAKING = "Leaking"
    JAM = "Jam"
    LUGS_WHEEL_MISSING = "Lugs / Wheel Missing"
    NA = "N/A"


class HoseReelStatus(StatusEnum):
    OK = "OK"
    LEAKING = "Leaking"
    JAMMED_STUCK = "Jammed / Stuck"
    DAMAGED = "Damaged"
    MISSING = "Missing"
    NOT_AVAILABLE = "Not Available"
    NA = "N/A"


class SprinklerStatus(StatusEnum):
    OK = "OK"
    LEAKING = "Leaking"
    PAINTED = "Painted"
    NA = "N/A"


class AlarmStatus(StatusEnum):
    OK = "OK"
    FAULT = "Fault"
    NA = "N/A"


class RefugeStatus(StatusEnum):
    OPEN = "Open"
    LOCKED = "Locked"
    OBSTRUCTED_OCCUPIED = "Obstructed / Occupied"


# -------------------- Room checks --------------------

class RoomExtinguisherStatus(StatusEnum):
    AVAILABLE = "Available"
    MISSING = "Missing"


class HousekeepingStatus(StatusEnum):
    GOOD = "Good"
    POOR = "Poor"


class AccessibilityStatus(StatusEnum):
    CLEAR = "Clear"
    OBSTRUCTED = "Obstructed"


# -------------------- Systems / pumps --------------------

class SystemStatus(StatusEnum):
    SATISFACTORY = "Satisfactory"
    NEEDS_ATTENTION = "Needs Attention"
    NOT_OPERATIONAL = "Not Operational"
    DOES_NOT_EXIST = "Does Not Exist"


class PumpStatus(StatusEnum):
    AUTO_WORKING = "Auto (Working)"
    MANUAL_WORKING = "Manual (Working)"
    NOT_WORKING = "Not Working"
    NA = "N/A"  # not yet inspected
    DOES_NOT_EXIST = "Does Not Exist"


# -------------------- Record-level vocabularies --------------------

class SchedulingStatus(StatusEnum):
    NONE = "None"
    UPCOMING = "Upcoming"
    DUE_TODAY = "Due Today"
    PENDING = "Pending"
    URGENT = "Urgent"


class InspectionStatus(StatusEnum):
    COMPLETED = "Completed"
    ACTION_REQUIRED = "Action Required"


class ClientType(StatusEnum):
    RESIDENTIAL = "Society/Residential"
    OFFICE = "Office/Store"


class ExtinguisherType(StatusEnum):
    ABC = "ABC"
    CO2 = "CO2"
    ABC_MODULAR = "ABC Modular"
    CLEAN_AGENT = "Clean Agent"
    CLEAN_AGENT_MODULAR = "Clean Agent Modular"
    FM_200 = "FM-200"
    WATER = "Water Type"
