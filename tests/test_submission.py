# tests/test_submission.py
from __future__ import annotations

import pytest

from fireaudit.domain.findings import (
    Findings,
    FloorExtinguisher,
    FloorFinding,
    HydrantCheck,
    PumpFinding,
    RefugeCheck,
    RoomExtinguisher,
    RoomFinding,
    SystemFinding,
)
from fireaudit.domain.submission import (
    SubmissionError,
    check_submission,
    missing_photos,
    validate_submission,
)


def _ready(**kw) -> Findings:
    base = dict(
        floors=[FloorFinding(name="Ground")],
        pumps=[PumpFinding(name="Booster Pump", status="Auto (Working)")],
        remarks="All good.",
    )
    base.update(kw)
    return Findings(**base)


def test_clean_findings_pass():
    validate_submission(_ready())
    assert check_submission(_ready()).ok


def test_unresolved_pumps_are_reported_first():
    f = _ready(pumps=[PumpFinding(name="Booster Pump"), PumpFinding(name="Diesel Pump")], remarks="")
    with pytest.raises(SubmissionError) as ei:
        validate_submission(f)
    assert str(ei.value) == "Please select a status for the following pumps:\n\nBooster Pump\nDiesel Pump"
    assert ei.value.problems[:2] == ["Booster Pump", "Diesel Pump"]


def test_blank_remarks_rejected():
    with pytest.raises(SubmissionError) as ei:
        validate_submission(_ready(remarks="   "))
    assert str(ei.value) == "Please provide overall remarks for the inspection."


def test_failed_items_need_photos():
    f = _ready(
        floors=[
            FloorFinding(
                name="Floor 1",
                extinguisher=FloorExtinguisher(status="Expired"),
                hydrant=HydrantCheck(valve="Leaking", hose="Not Available"),
                refuge_area=RefugeCheck(status="Locked", photo_url="https://img/1.jpg"),
            )
        ],
        pumps=[PumpFinding(name="Diesel Pump", status="Not Working")],
        systems=[SystemFinding(name="Sprinkler System", status="Needs Attention")],
        rooms=[RoomFinding(name="Lift Room", extinguisher=RoomExtinguisher(status="Missing"))],
    )
    assert missing_photos(f) == [
        "Floor 1: Extinguisher (Expired)",
        "Floor 1: Hydrant Valve (Leaking)",
        "Pump: Diesel Pump (Not Working)",
        "System: Sprinkler System (Needs Attention)",
        "Room Lift Room: Extinguisher Missing",
    ]
    with pytest.raises(SubmissionError) as ei:
        validate_submission(f)
    assert str(ei.value).startswith("Mandatory Photos Missing for Failed Items:\n\n")
    assert "...and more" not in str(ei.value)


def test_not_available_extinguisher_needs_no_photo():
    f = _ready(floors=[FloorFinding(name="Ground", extinguisher=FloorExtinguisher(status="Not Available"))])
    assert missing_photos(f) == []


def test_photo_message_lists_at_most_five():
    floors = [FloorFinding(name=f"Floor {i}", extinguisher=FloorExtinguisher(status="Expired")) for i in range(1, 8)]
    chk = check_submission(_ready(floors=floors))
    assert len(chk.missing_photos) == 7
    msg = chk.message()
    assert msg.count("Extinguisher (Expired)") == 5
    assert msg.endswith("\n...and more")


def test_photo_policy_can_be_disabled():
    f = _ready(floors=[FloorFinding(name="Ground", extinguisher=FloorExtinguisher(status="Expired"))])
    validate_submission(f, require_photos=False)


def test_hose_only_hydrant_needs_only_a_hose_photo():
    f = _ready(floors=[FloorFinding(name="Ground", hydrant=HydrantCheck(hose="Damaged"))])
    assert missing_photos(f) == ["Ground: Hose Reel (Damaged)"]
