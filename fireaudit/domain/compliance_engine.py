# fireaudit/domain/compliance_engine.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .findings import Findings
from .statuses import (
    AlarmStatus,
    ExtinguisherStatus,
    HoseReelStatus,
    HousekeepingStatus,
    HydrantValveStatus,
    InspectionStatus,
    PumpStatus,
    RefugeStatus,
    RoomExtinguisherStatus,
    SprinklerStatus,
    SystemStatus,
)

WEIGHTS: dict[str, float] = {
    "Fire Alarm System": 5,
    "Pumps": 5,
    "Sprinkler System": 4,
    "Hydrant System": 3,
    "Fire Extinguisher": 3,
    "Housekeeping": 1,
}

REFUGE_WEIGHT: float = 5
DEFAULT_SYSTEM_WEIGHT: float = 3

# Each rule table maps status -> (counted, passes, critical).
# counted=False means the item contributes to neither total.
Rule = tuple[bool, bool, bool]

EXTINGUISHER_RULES: dict[ExtinguisherStatus, Rule] = {
    ExtinguisherStatus.OK: (True, True, False),
    ExtinguisherStatus.PRESSURE_LOW: (True, False, False),
    ExtinguisherStatus.EXPIRED: (True, False, True),
    ExtinguisherStatus.NOT_AVAILABLE: (True, False, True),
}

# A present hydrant sub-check is always counted; N/A simply never passes.
VALVE_RULES: dict[HydrantValveStatus, Rule] = {
    HydrantValveStatus.OK: (True, True, False),
    HydrantValveStatus.LEAKING: (True, False, True),
    HydrantValveStatus.JAM: (True, False, True),
    HydrantValveStatus.LUGS_WHEEL_MISSING: (True, False, True),
    HydrantValveStatus.NA: (True, False, False),
}

# Missing / Not Available lose weight but are not critical.
HOSE_RULES: dict[HoseReelStatus, Rule] = {
    HoseReelStatus.OK: (True, True, False),
    HoseReelStatus.LEAKING: (True, False, True),
    HoseReelStatus.JAMMED_STUCK: (True, False, True),
    HoseReelStatus.DAMAGED: (True, False, True),
    HoseReelStatus.MISSING: (True, False, False),
    HoseReelStatus.NOT_AVAILABLE: (True, False, False),
    HoseReelStatus.NA: (True, False, False),
}

SPRINKLER_RULES: dict[SprinklerStatus, Rule] = {
    SprinklerStatus.OK: (True, True, False),
    SprinklerStatus.LEAKING: (True, False, True),
    SprinklerStatus.PAINTED: (True, False, False),
    SprinklerStatus.NA: (False, False, False),
}

ALARM_RULES: dict[AlarmStatus, Rule] = {
    AlarmStatus.OK: (True, True, False),
    AlarmStatus.FAULT: (True, False, True),
    AlarmStatus.NA: (False, False, False),
}

REFUGE_RULES: dict[RefugeStatus, Rule] = {
    RefugeStatus.OPEN: (True, True, False),
    RefugeStatus.LOCKED: (True, False, True),
    RefugeStatus.OBSTRUCTED_OCCUPIED: (True, False, True),
}

SYSTEM_RULES: dict[SystemStatus, Rule] = {
    SystemStatus.SATISFACTORY: (True, True, False),
    SystemStatus.NEEDS_ATTENTION: (True, False, False),
    SystemStatus.NOT_OPERATIONAL: (True, False, True),
    SystemStatus.DOES_NOT_EXIST: (False, False, False),
}

# N/A is the unresolved sentinel; submission checks reject it before scoring.
# Not Working never passes, though a substring match on "Working" would pass it.
PUMP_RULES: dict[PumpStatus, Rule] = {
    PumpStatus.AUTO_WORKING: (True, True, False),
    PumpStatus.MANUAL_WORKING: (True, True, False),
    PumpStatus.NOT_WORKING: (True, False, True),
    PumpStatus.NA: (False, False, False),
    PumpStatus.DOES_NOT_EXIST: (False, False, False),
}

HOUSEKEEPING_RULES: dict[HousekeepingStatus, Rule] = {
    HousekeepingStatus.GOOD: (True, True, False),
    HousekeepingStatus.POOR: (True, False, False),
}

ROOM_EXTINGUISHER_RULES: dict[RoomExtinguisherStatus, Rule] = {
    RoomExtinguisherStatus.AVAILABLE: (True, True, False),
    RoomExtinguisherStatus.MISSING: (True, False, True),
}

RULE_TABLES = {
    ExtinguisherStatus: EXTINGUISHER_RULES,
    HydrantValveStatus: VALVE_RULES,
    HoseReelStatus: HOSE_RULES,
    SprinklerStatus: SPRINKLER_RULES,
    AlarmStatus: ALARM_RULES,
    RefugeStatus: REFUGE_RULES,
    SystemStatus: SYSTEM_RULES,
    PumpStatus: PUMP_RULES,
    HousekeepingStatus: HOUSEKEEPING_RULES,
    RoomExtinguisherStatus: ROOM_EXTINGUISHER_RULES,
}


@dataclass(frozen=True)
class ComplianceResult:
    score: int
    critical_count: int
    total_weight: float
    obtained_weight: float

    @property
    def status(self) -> InspectionStatus:
        return derive_inspection_status(self.critical_count)


class _Tally:
    def __init__(self) -> None:
        self.total = 0.0
        self.obtained = 0.0
        self.critical = 0

    def add(self, rule: Rule, weight: float) -> None:
        counted, passes, critical = rule
        if not counted:
            return
        self.total += weight
        if passes:
            self.obtained += weight
        if critical:
            self.critical += 1


def system_weight(name: str) -> float:
    return float(WEIGHTS.get(name, DEFAULT_SYSTEM_WEIGHT))


def round_score(obtained: float, total: float) -> int:
    """Half-up rounding of obtained/total as a percentage; no applicable checks -> 100."""
    if total <= 0:
        return 100
    return int(math.floor(obtained / total * 100 + 0.5))


def compute_compliance(findings: Findings) -> ComplianceResult:
    """
    Weighted pass/fail aggregation over every applicable checked item.

    Linear in item count and side-effect free; safe to call on every edit.
    """
    t = _Tally()
    ext_w = WEIGHTS["Fire Extinguisher"]
    half_hydrant = WEIGHTS["Hydrant System"] / 2

    for f in findings.floors:
        t.add(EXTINGUISHER_RULES[f.extinguisher.status], ext_w)

        if f.hydrant is not None:
            if f.hydrant.valve is not None:
                t.add(VALVE_RULES[f.hydrant.valve], half_hydrant)
            if f.hydrant.hose is not None:
                t.add(HOSE_RULES[f.hydrant.hose], half_hydrant)

        if f.sprinkler is not None:
            t.add(SPRINKLER_RULES[f.sprinkler.status], WEIGHTS["Sprinkler System"])

        if f.alarm is not None:
            t.add(ALARM_RULES[f.alarm.status], WEIGHTS["Fire Alarm System"])

        if f.refuge_area is not None:
            t.add(REFUGE_RULES[f.refuge_area.status], REFUGE_WEIGHT)

    for s in findings.systems:
        t.add(SYSTEM_RULES[s.status], system_weight(s.name))

    for p in findings.pumps:
        t.add(PUMP_RULES[p.status], WEIGHTS["Pumps"])

    for r in findings.rooms:
        t.add(HOUSEKEEPING_RULES[r.housekeeping], WEIGHTS["Housekeeping"])
        t.add(ROOM_EXTINGUISHER_RULES[r.extinguisher.status], ext_w)

    return ComplianceResult(
        score=round_score(t.obtained, t.total),
        critical_count=t.critical,
        total_weight=t.total,
        obtained_weight=t.obtained,
    )


def derive_inspection_status(critical_count: Optional[int]) -> InspectionStatus:
    # score plays no part: 60% with zero critical items is still Completed
    if int(critical_count or 0) > 0:
        return InspectionStatus.ACTION_REQUIRED
    return InspectionStatus.COMPLETED
