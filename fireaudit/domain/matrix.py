# fireaudit/domain/matrix.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional

from .findings import Findings

SKIP = {"", "N/A", "-"}

FAIL_WORDS = ("fail", "miss", "not", "attention", "action")
CRITICAL_WORDS = ("urgent", "critical", "locked", "blocked")


@dataclass(frozen=True)
class MatrixStats:
    total: int
    failed: int
    critical: int
    action_required: int


def _v(x: Any) -> Optional[str]:
    if x is None:
        return None
    return str(getattr(x, "value", x))


def floor_rows(findings: Findings) -> list[dict[str, Any]]:
    rows = []
    for f in findings.floors:
        rows.append(
            {
                "floor": f.name,
                "extinguisher": _v(f.extinguisher.status),
                "extinguisher_types": {_v(k): n for k, n in f.extinguisher.types.items()},
                "hydrant_valve": (_v(f.hydrant.valve) if f.hydrant else None) or "N/A",
                "hose_reel": (_v(f.hydrant.hose) if f.hydrant else None) or "N/A",
                "sprinkler": _v(f.sprinkler.status) if f.sprinkler else "N/A",
                "alarm": _v(f.alarm.status) if f.alarm else "N/A",
                "refuge_area": _v(f.refuge_area.status) if f.refuge_area else "N/A",
            }
        )
    return rows


def room_rows(findings: Findings) -> list[dict[str, Any]]:
    return [
        {
            "room": r.name,
            "extinguisher": _v(r.extinguisher.status),
            "accessibility": _v(r.accessibility),
            "housekeeping": _v(r.housekeeping),
            "remarks": r.remarks,
        }
        for r in findings.rooms
    ]


def _statuses(findings: Findings) -> Iterable[Optional[str]]:
    for f in findings.floors:
        yield _v(f.extinguisher.status)
        yield _v(f.hydrant.valve) if f.hydrant else None
        yield _v(f.hydrant.hose) if f.hydrant else None
        yield _v(f.sprinkler.status) if f.sprinkler else None
        yield _v(f.alarm.status) if f.alarm else None
        yield _v(f.refuge_area.status) if f.refuge_area else None
    for p in findings.pumps:
        yield _v(p.status)
    for r in findings.rooms:
        yield _v(r.extinguisher.status)
        yield _v(r.accessibility)
        yield _v(r.housekeeping)
    for s in findings.systems:
        yield _v(s.status)


def matrix_stats(findings: Findings) -> MatrixStats:
    """
    Header badges of the report matrix. Keyword based and independent of the
    compliance engine; the two are not expected to agree.
    """
    total = failed = critical = action = 0
    for status in _statuses(findings):
        if status is None or status in SKIP:
            continue
        total += 1
        s = status.lower()
        if any(w in s for w in FAIL_WORDS):
            failed += 1
            if "action" in s:
                action += 1
        if any(w in s for w in CRITICAL_WORDS):
            critical += 1
    return MatrixStats(total=total, failed=failed, critical=critical, action_required=action)


def build_matrix(findings: Findings) -> dict[str, Any]:
    return {
        "stats": asdict(matrix_stats(findings)),
        "floors": floor_rows(findings),
        "rooms": room_rows(findings),
        "systems": [{"system": s.name, "status": _v(s.status), "notes": s.notes} for s in findings.systems],
        "pumps": [
            {"pump": p.name, "status": _v(p.status), "pressure": p.pressure, "remarks": p.remarks}
            for p in findings.pumps
        ],
    }
