# fireaudit/domain/structure.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from .findings import (
    AlarmCheck,
    FloorFinding,
    Findings,
    HydrantCheck,
    PumpFinding,
    RefugeCheck,
    RoomFinding,
    SprinklerCheck,
    SystemFinding,
)
from .statuses import ClientType, HoseReelStatus, HydrantValveStatus

DEFAULT_ROOMS: tuple[str, ...] = (
    "Lift Room",
    "Meter Room",
    "Pump Room",
    "Electrical Panel / Electrical Room",
    "Server Room",
)

FIRE_ALARM_SYSTEM = "Fire Alarm System"
HYDRANT_VALVE = "Hydrant Valve"
HOSE_REEL_DRUM = "Hose Reel Drum"
SPRINKLER_SYSTEM = "Sprinkler System"

OPTIONAL_SYSTEMS: tuple[str, ...] = (
    FIRE_ALARM_SYSTEM,
    HYDRANT_VALVE,
    HOSE_REEL_DRUM,
    SPRINKLER_SYSTEM,
)

GROUND = "Ground"
TERRACE = "Terrace"


@dataclass
class BuildingStructure:
    """
    Client.structure. `structure_map` is derived from the counts and must be
    rebuilt through `with_regenerated_map()`, never edited on its own.
    """
    basements: int = 0
    podiums: int = 0
    floors: int = 0
    structure_map: list[str] = field(default_factory=list)
    rooms: list[str] = field(default_factory=list)
    systems: list[str] = field(default_factory=list)
    refuge_floors: list[str] = field(default_factory=list)

    @property
    def has_refuge_area(self) -> bool:
        return bool(self.refuge_floors)

    def with_regenerated_map(self, client_type: ClientType | str) -> "BuildingStructure":
        labels = structure_map_for(client_type, self.basements, self.podiums, self.floors)
        allowed = set(refuge_candidate_floors(labels))
        return BuildingStructure(
            basements=self.basements,
            podiums=self.podiums,
            floors=self.floors,
            structure_map=labels,
            rooms=_dedupe(self.rooms),
            systems=_dedupe(self.systems),
            refuge_floors=[f for f in _dedupe(self.refuge_floors) if f in allowed],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "basements": self.basements,
            "podiums": self.podiums,
            "floors": self.floors,
            "structure_map": list(self.structure_map),
            "rooms": list(self.rooms),
            "systems": list(self.systems),
            "has_refuge_area": self.has_refuge_area,
            "refuge_floors": list(self.refuge_floors),
        }

    @classmethod
    def from_dict(cls, d: Optional[dict[str, Any]]) -> "BuildingStructure":
        d = d or {}
        return cls(
            basements=int(d.get("basements") or 0),
            podiums=int(d.get("podiums") or 0),
            floors=int(d.get("floors") or 0),
            structure_map=[str(x) for x in (d.get("structure_map") or [])],
            rooms=[str(x) for x in (d.get("rooms") or [])],
            systems=[str(x) for x in (d.get("systems") or [])],
            refuge_floors=[str(x) for x in (d.get("refuge_floors") or [])],
        )


def _dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for it in items or []:
        s = str(it).strip()
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out


def generate_floor_labels(basements: int, podiums: int, residential_floors: int) -> list[str]:
    """
    B1..Bn, Ground, P1..Pm, Floor m+1..Floor m+k, Terrace.

    Residential numbering continues after the last podium, so the building
    reads as one contiguous stack (2 podiums -> first residential is Floor 3).
    """
    for name, n in (("basements", basements), ("podiums", podiums), ("residential_floors", residential_floors)):
        if int(n) < 0:
            raise ValueError(f"{name} must be >= 0")

    labels: list[str] = [f"B{i}" for i in range(1, int(basements) + 1)]
    labels.append(GROUND)
    labels.extend(f"P{i}" for i in range(1, int(podiums) + 1))
    labels.extend(f"Floor {i + int(podiums)}" for i in range(1, int(residential_floors) + 1))
    labels.append(TERRACE)
    return labels


def structure_map_for(client_type: ClientType | str, basements: int, podiums: int, floors: int) -> list[str]:
    if ClientType(client_type) == ClientType.RESIDENTIAL:
        return generate_floor_labels(basements, podiums, floors)
    return [GROUND]


def refuge_candidate_floors(labels: Iterable[str]) -> list[str]:
    # only residential floors (and the terrace) can be refuge areas
    return [x for x in labels if not x.startswith("B") and x != GROUND and not x.startswith("P")]


def has_hydrant_systems(systems: Iterable[str]) -> bool:
    s = set(systems or [])
    return HYDRANT_VALVE in s or HOSE_REEL_DRUM in s


def derive_pumps(systems: Iterable[str]) -> list[str]:
    systems = list(systems or [])
    hydrant = has_hydrant_systems(systems)
    sprinkler = SPRINKLER_SYSTEM in systems

    pumps: list[str] = []
    if hydrant:
        pumps += ["Main Pump - Hydrant", "Jockey Pump - Hydrant"]
    if sprinkler:
        pumps += ["Main Pump - Sprinkler", "Jockey Pump - Sprinkler"]
    if hydrant or sprinkler:
        # shared by every water-based system
        pumps += ["Booster Pump", "Diesel Pump"]
    return pumps


def default_floor(label: str, structure: BuildingStructure) -> FloorFinding:
    systems = structure.systems
    return FloorFinding(
        name=label,
        hydrant=HydrantCheck(valve=HydrantValveStatus.OK, hose=HoseReelStatus.OK) if has_hydrant_systems(systems) else None,
        sprinkler=SprinklerCheck() if SPRINKLER_SYSTEM in systems else None,
        alarm=AlarmCheck() if FIRE_ALARM_SYSTEM in systems else None,
        refuge_area=RefugeCheck() if label in structure.refuge_floors else None,
    )


def seed_findings(structure: BuildingStructure) -> Findings:
    """Blank all-OK findings for a new inspection; pumps start unresolved (N/A)."""
    return Findings(
        floors=[default_floor(label, structure) for label in structure.structure_map],
        rooms=[RoomFinding(name=r) for r in structure.rooms],
        systems=[SystemFinding(name=s) for s in structure.systems],
        pumps=[PumpFinding(name=p) for p in derive_pumps(structure.systems)],
        remarks="",
    )


def reconcile_floors(findings: Findings, structure: BuildingStructure) -> Findings:
    """
    Align findings.floors with structure.structure_map: keep entries for labels
    still present (in label order), drop the rest, add defaults for new labels.
    """
    by_name = {f.name: f for f in findings.floors}
    floors = [by_name[label] if label in by_name else default_floor(label, structure) for label in structure.structure_map]
    return findings.model_copy(update={"floors": floors})
