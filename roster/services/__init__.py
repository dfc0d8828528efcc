"""Services for roster generation: window, constraints, ranking, coverage, fatigue, validation."""

from .constraints import can_assign, consecutive_run_with, is_role_eligible, shifts_overlap
from .coverage import CoverageSlot, audit_coverage, expand_requirements
from .fatigue import classify_fatigue, high_risk_staff
from .ranking import candidate_sort_key, preference_rank
from .validator import validate_roster
from .window import expand_window, parse_window_start

__all__ = [
    "can_assign",
    "consecutive_run_with",
    "is_role_eligible",
    "shifts_overlap",
    "CoverageSlot",
    "audit_coverage",
    "expand_requirements",
    "classify_fatigue",
    "high_risk_staff",
    "candidate_sort_key",
    "preference_rank",
    "validate_roster",
    "expand_window",
    "parse_window_start",
]
