"""Domain records and errors."""

from .errors import InvalidWindow, NoEligibleStaff, RosterError
from .types import (
    DEFAULT_SHIFT_DEFINITIONS,
    DOCTOR_ROLE,
    CoverageAlert,
    CoverageRequirement,
    FatigueRecord,
    LeaveRequest,
    LeaveStatus,
    Preference,
    RosterRequest,
    RosterResult,
    ShiftAssignment,
    ShiftDefinition,
    ShiftType,
    StaffMember,
    StaffStatus,
)

__all__ = [
    "DEFAULT_SHIFT_DEFINITIONS",
    "DOCTOR_ROLE",
    "CoverageAlert",
    "CoverageRequirement",
    "FatigueRecord",
    "InvalidWindow",
    "LeaveRequest",
    "LeaveStatus",
    "NoEligibleStaff",
    "Preference",
    "RosterError",
    "RosterRequest",
    "RosterResult",
    "ShiftAssignment",
    "ShiftDefinition",
    "ShiftType",
    "StaffMember",
    "StaffStatus",
]
