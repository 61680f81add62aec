# fireaudit/domain/submission.py
from __future__ import annotations

from dataclasses import dataclass, field

from .findings import Findings
from .statuses import (
    AlarmStatus,
    ExtinguisherStatus,
    HoseReelStatus,
    HydrantValveStatus,
    PumpStatus,
    RefugeStatus,
    RoomExtinguisherStatus,
    SprinklerStatus,
    SystemStatus,
)

MAX_LISTED_PHOTOS = 5


class SubmissionError(ValueError):
    """Findings are not ready to be submitted. `problems` lists every failed check."""

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = list(problems or [])


@dataclass
class SubmissionCheck:
    unresolved_pumps: list[str] = field(default_factory=list)
    missing_remarks: bool = False
    missing_photos: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.unresolved_pumps or self.missing_remarks or self.missing_photos)

    def message(self) -> str:
        if self.unresolved_pumps:
            return "Please select a status for the following pumps:\n\n" + "\n".join(self.unresolved_pumps)
        if self.missing_remarks:
            return "Please provide overall remarks for the inspection."
        if self.missing_photos:
            listed = "\n".join(self.missing_photos[:MAX_LISTED_PHOTOS])
            more = "\n...and more" if len(self.missing_photos) > MAX_LISTED_PHOTOS else ""
            return f"Mandatory Photos Missing for Failed Items:\n\n{listed}{more}"
        return ""


def missing_photos(findings: Findings) -> list[str]:
    """Failed items that still need photo evidence, labelled for the inspector."""
    out: list[str] = []

    for f in findings.floors:
        ext = f.extinguisher
        if ext.status not in (ExtinguisherStatus.OK, ExtinguisherStatus.NOT_AVAILABLE) and not ext.photo_url:
            out.append(f"{f.name}: Extinguisher ({ext.status.value})")

        if f.hydrant is not None:
            h = f.hydrant
            if h.valve is not None and h.valve not in (HydrantValveStatus.OK, HydrantValveStatus.NA):
                if not h.valve_photo_url:
                    out.append(f"{f.name}: Hydrant Valve ({h.valve.value})")
            if h.hose is not None and h.hose not in (HoseReelStatus.OK, HoseReelStatus.NA, HoseReelStatus.NOT_AVAILABLE):
                if not h.hose_photo_url:
                    out.append(f"{f.name}: Hose Reel ({h.hose.value})")

        if f.sprinkler is not None and f.sprinkler.status not in (SprinklerStatus.OK, SprinklerStatus.NA):
            if not f.sprinkler.photo_url:
                out.append(f"{f.name}: Sprinkler ({f.sprinkler.status.value})")

        if f.alarm is not None and f.alarm.status not in (AlarmStatus.OK, AlarmStatus.NA):
            if not f.alarm.photo_url:
                out.append(f"{f.name}: Alarm ({f.alarm.status.value})")

        if f.refuge_area is not None and f.refuge_area.status != RefugeStatus.OPEN:
            if not f.refuge_area.photo_url:
                out.append(f"{f.name}: Refuge Area ({f.refuge_area.status.value})")

    for p in findings.pumps:
        if p.status == PumpStatus.NOT_WORKING and not p.photo_url:
            out.append(f"Pump: {p.name} (Not Working)")

    for s in findings.systems:
        if s.status in (SystemStatus.NEEDS_ATTENTION, SystemStatus.NOT_OPERATIONAL) and not s.photo_url:
            out.append(f"System: {s.name} ({s.status.value})")

    for r in findings.rooms:
        if r.extinguisher.status == RoomExtinguisherStatus.MISSING and not r.extinguisher.photo_url:
            out.append(f"Room {r.name}: Extinguisher Missing")

    return out


def check_submission(findings: Findings, *, require_photos: bool = True) -> SubmissionCheck:
    return SubmissionCheck(
        unresolved_pumps=[p.name for p in findings.pumps if p.status == PumpStatus.NA],
        missing_remarks=not (findings.remarks or "").strip(),
        missing_photos=missing_photos(findings) if require_photos else [],
    )


def validate_submission(findings: Findings, *, require_photos: bool = True) -> None:
    """
    Preconditions the scoring engine assumes: pumps resolved, remarks given,
    photo evidence for failed items. Checks run in that order and the first
    failing group is reported.
    """
    chk = check_submission(findings, require_photos=require_photos)
    if chk.ok:
        return
    problems = chk.unresolved_pumps + (["remarks"] if chk.missing_remarks else []) + chk.missing_photos
    raise SubmissionError(chk.message(), problems)
