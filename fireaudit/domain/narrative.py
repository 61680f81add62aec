# fireaudit/domain/narrative.py
from __future__ import annotations

from .findings import Findings
from .statuses import (
    AccessibilityStatus,
    AlarmStatus,
    ExtinguisherStatus,
    HoseReelStatus,
    HousekeepingStatus,
    HydrantValveStatus,
    PumpStatus,
    RefugeStatus,
    RoomExtinguisherStatus,
    SystemStatus,
)

# Narrative triggers. These intentionally differ from the scoring engine
# (e.g. Pressure Low is critical here but only a deduction when scoring).
CRITICAL_EXTINGUISHER = {ExtinguisherStatus.EXPIRED, ExtinguisherStatus.PRESSURE_LOW}
CRITICAL_VALVE = {HydrantValveStatus.LEAKING, HydrantValveStatus.JAM}
CRITICAL_HOSE = {HoseReelStatus.DAMAGED, HoseReelStatus.MISSING}
CRITICAL_REFUGE = {RefugeStatus.LOCKED, RefugeStatus.OBSTRUCTED_OCCUPIED}

POSITIVE_STATEMENT_MAX_CRITICAL = 5

CRITICAL_HEADER = "During the inspection, the following critical fire safety deficiencies were observed:"
CRITICAL_FOOTER = "These issues pose a life safety risk and require immediate corrective action."
OBSERVATIONS_HEADER = "The following observations were also noted which require attention:"
POSITIVE_STATEMENT = (
    "Other fire safety systems including available extinguishers, hydrants, and pumps "
    "were found to be in satisfactory working condition at the time of inspection."
)
COMPLIANT = (
    "FINAL CONCLUSION: COMPLIANT",
    "Based on the above observations, the premises are considered compliant with fire safety "
    "requirements at the time of inspection.",
)
NON_COMPLIANT = (
    "FINAL CONCLUSION: NON-COMPLIANT",
    "Based on the above observations, the premises are currently non-compliant with fire safety "
    "requirements and require corrective measures.",
)


def classify(findings: Findings) -> tuple[list[str], list[str]]:
    """Return (critical_issues, observations) as sentences."""
    critical: list[str] = []
    observations: list[str] = []

    for f in findings.floors:
        ext = f.extinguisher.status
        if ext in CRITICAL_EXTINGUISHER:
            critical.append(f"Fire extinguishers on {f.name} were found to be {ext.value.lower()}.")
        if f.hydrant is not None:
            if f.hydrant.valve is not None and f.hydrant.valve in CRITICAL_VALVE:
                critical.append(f"Hydrant valves on {f.name} are {f.hydrant.valve.value.lower()}.")
            if f.hydrant.hose is not None and f.hydrant.hose in CRITICAL_HOSE:
                critical.append(f"Hose reels on {f.name} are {f.hydrant.hose.value.lower()}.")
        if f.alarm is not None and f.alarm.status == AlarmStatus.FAULT:
            critical.append(f"Fire alarm system on {f.name} shows a fault condition.")
        if f.refuge_area is not None and f.refuge_area.status in CRITICAL_REFUGE:
            critical.append(
                f"Refuge area on {f.name} is {f.refuge_area.status.value.lower()}, posing a serious safety risk."
            )

    for p in findings.pumps:
        if p.status == PumpStatus.NOT_WORKING:
            critical.append(f"The {p.name} is currently not working and requires immediate repair.")

    for s in findings.systems:
        if s.status == SystemStatus.NOT_OPERATIONAL:
            critical.append(f"The {s.name} is reported as Not Operational.")
        elif s.status == SystemStatus.NEEDS_ATTENTION:
            observations.append(f"The {s.name} requires maintenance attention.")

    for r in findings.rooms:
        if r.extinguisher.status == RoomExtinguisherStatus.MISSING:
            critical.append(f"Fire extinguisher missing in {r.name}.")
        if r.housekeeping == HousekeepingStatus.POOR:
            observations.append(f"Housekeeping in {r.name} needs improvement to reduce fire load.")
        if r.accessibility == AccessibilityStatus.OBSTRUCTED:
            observations.append(f"Access to electrical panels/servers in {r.name} is obstructed.")

    return critical, observations


def generate_summary(findings: Findings) -> str:
    """
    Rule-based compliance narrative used to pre-fill inspection remarks.

    Paragraphs: critical issues (if any), observations (if any), a positive
    statement when fewer than five critical issues were found, and the
    compliant / non-compliant conclusion.
    """
    critical, observations = classify(findings)
    parts: list[str] = []

    if critical:
        parts.append(CRITICAL_HEADER)
        parts.extend(f"• {c}" for c in critical)
        parts.append(CRITICAL_FOOTER)
        parts.append("\n")

    if observations:
        parts.append(OBSERVATIONS_HEADER)
        parts.extend(f"• {o}" for o in observations)
        parts.append("\n")

    if len(critical) < POSITIVE_STATEMENT_MAX_CRITICAL:
        parts.append(POSITIVE_STATEMENT)
        parts.append("\n")

    parts.extend(NON_COMPLIANT if critical else COMPLIANT)
    return "\n".join(parts)
