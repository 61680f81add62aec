# fireaudit/domain/__init__.py
from .compliance_engine import ComplianceResult, compute_compliance, derive_inspection_status
from .findings import Findings
from .narrative import generate_summary
from .scheduling import calculate_next_inspection_date, get_scheduling_status
from .structure import BuildingStructure, derive_pumps, generate_floor_labels, seed_findings

__all__ = [
    "BuildingStructure",
    "ComplianceResult",
    "Findings",
    "calculate_next_inspection_date",
    "compute_compliance",
    "derive_inspection_status",
    "derive_pumps",
    "generate_floor_labels",
    "generate_summary",
    "get_scheduling_status",
    "seed_findings",
]
