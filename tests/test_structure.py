# tests/test_structure.py
from __future__ import annotations

import pytest

from fireaudit.domain.findings import Findings, FloorFinding
from fireaudit.domain.statuses import ClientType, PumpStatus
from fireaudit.domain.structure import (
    DEFAULT_ROOMS,
    OPTIONAL_SYSTEMS,
    BuildingStructure,
    derive_pumps,
    generate_floor_labels,
    reconcile_floors,
    refuge_candidate_floors,
    seed_findings,
    structure_map_for,
)


def test_floor_labels_example():
    assert generate_floor_labels(2, 1, 3) == [
        "B1", "B2", "Ground", "P1", "Floor 2", "Floor 3", "Floor 4", "Terrace",
    ]


def test_floor_labels_minimal_building():
    assert generate_floor_labels(0, 0, 0) == ["Ground", "Terrace"]


def test_floor_labels_length_and_uniqueness():
    labels = generate_floor_labels(3, 2, 10)
    assert len(labels) == 3 + 2 + 10 + 2
    assert len(set(labels)) == len(labels)
    assert labels.index("Ground") == 3
    assert labels[-1] == "Terrace"


def test_floor_labels_reject_negative_counts():
    with pytest.raises(ValueError):
        generate_floor_labels(-1, 0, 0)


def test_office_clients_only_get_ground():
    assert structure_map_for(ClientType.OFFICE, 2, 2, 10) == ["Ground"]
    assert structure_map_for("Society/Residential", 1, 0, 1) == ["B1", "Ground", "Floor 1", "Terrace"]


def test_refuge_candidates_exclude_basements_ground_and_podiums():
    labels = generate_floor_labels(1, 2, 2)
    assert refuge_candidate_floors(labels) == ["Floor 3", "Floor 4", "Terrace"]


def test_regenerated_map_drops_ineligible_refuge_floors():
    s = BuildingStructure(basements=1, podiums=1, floors=3, refuge_floors=["Floor 3", "P1", "Floor 9", "Floor 3"])
    out = s.with_regenerated_map(ClientType.RESIDENTIAL)
    assert out.structure_map == ["B1", "Ground", "P1", "Floor 2", "Floor 3", "Floor 4", "Terrace"]
    assert out.refuge_floors == ["Floor 3"]
    assert out.has_refuge_area is True
    assert out.to_dict()["has_refuge_area"] is True


def test_structure_dict_round_trip():
    s = BuildingStructure(floors=2, rooms=list(DEFAULT_ROOMS), systems=list(OPTIONAL_SYSTEMS)).with_regenerated_map(
        ClientType.RESIDENTIAL
    )
    assert BuildingStructure.from_dict(s.to_dict()) == s


def test_pumps_follow_water_based_systems():
    assert derive_pumps([]) == []
    assert derive_pumps(["Fire Alarm System"]) == []
    assert derive_pumps(["Hose Reel Drum"]) == [
        "Main Pump - Hydrant", "Jockey Pump - Hydrant", "Booster Pump", "Diesel Pump",
    ]
    assert derive_pumps(["Sprinkler System", "Hydrant Valve"]) == [
        "Main Pump - Hydrant",
        "Jockey Pump - Hydrant",
        "Main Pump - Sprinkler",
        "Jockey Pump - Sprinkler",
        "Booster Pump",
        "Diesel Pump",
    ]


def test_seed_findings_shape():
    s = BuildingStructure(
        basements=0,
        podiums=0,
        floors=2,
        rooms=["Pump Room"],
        systems=["Fire Alarm System", "Hydrant Valve"],
        refuge_floors=["Floor 2"],
    ).with_regenerated_map(ClientType.RESIDENTIAL)

    f = seed_findings(s)
    assert [x.name for x in f.floors] == ["Ground", "Floor 1", "Floor 2", "Terrace"]
    assert all(x.hydrant is not None and x.alarm is not None for x in f.floors)
    assert all(x.sprinkler is None for x in f.floors)
    assert [x.name for x in f.floors if x.refuge_area is not None] == ["Floor 2"]
    assert [r.name for r in f.rooms] == ["Pump Room"]
    assert [x.name for x in f.systems] == ["Fire Alarm System", "Hydrant Valve"]
    assert all(p.status == PumpStatus.NA for p in f.pumps)
    assert f.remarks == ""


def test_reconcile_floors_keeps_existing_and_adds_new():
    s = BuildingStructure(floors=1).with_regenerated_map(ClientType.RESIDENTIAL)
    existing = Findings(floors=[FloorFinding(name="Floor 1", extinguisher={"status": "Expired"}), FloorFinding(name="Old")])

    grown = BuildingStructure(floors=2).with_regenerated_map(ClientType.RESIDENTIAL)
    out = reconcile_floors(existing, grown)

    assert [x.name for x in out.floors] == ["Ground", "Floor 1", "Floor 2", "Terrace"]
    assert out.floors[1].extinguisher.status.value == "Expired"
    assert s.structure_map == ["Ground", "Floor 1", "Terrace"]
