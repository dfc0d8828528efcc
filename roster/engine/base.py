"""Base roster engine interface shared by the greedy and CP-SAT engines."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from roster.domain.errors import NoEligibleStaff
from roster.domain.types import (
    DEFAULT_SHIFT_DEFINITIONS,
    DOCTOR_ROLE,
    CoverageRequirement,
    LeaveRequest,
    Preference,
    RosterRequest,
    RosterResult,
    ShiftAssignment,
    ShiftDefinition,
    ShiftType,
    StaffMember,
)
from roster.services.constraints import is_role_eligible, leave_days_by_staff
from roster.services.coverage import CoverageSlot, expand_requirements
from roster.services.ranking import normalize_preferences
from roster.services.window import expand_window


@dataclass(frozen=True)
class PreparedInputs:
    """Normalised inputs every engine works from."""

    dates: Tuple[date, ...]
    staff: Tuple[StaffMember, ...]
    preferences: Dict[str, Preference]
    leave_days: Dict[str, Set[date]]
    slots: Tuple[CoverageSlot, ...]
    prior_days: Dict[str, Set[date]]
    prior_slots: Dict[str, Set[Tuple[date, ShiftType]]]
    definitions: Mapping[ShiftType, ShiftDefinition]
    role: str

    def max_consecutive(self, staff_id: str) -> Optional[int]:
        pref = self.preferences.get(staff_id)
        return pref.max_consecutive if pref is not None else None


class BaseRosterEngine(ABC):
    """
    Abstract base class for roster engines.

    Engines are stateless between calls: everything a call needs comes in as
    arguments and everything it produces goes out in the ``RosterResult``.
    """

    name: str = "base"

    def __init__(
        self,
        shift_definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
        eligible_role: str = DOCTOR_ROLE,
    ):
        self.shift_definitions = dict(shift_definitions or DEFAULT_SHIFT_DEFINITIONS)
        self.eligible_role = eligible_role

    def generate(
        self,
        staff_pool: Iterable[StaffMember],
        preferences: Iterable[Preference],
        approved_leave: Iterable[LeaveRequest],
        coverage_requirements: Iterable[CoverageRequirement],
        window_start: date | str,
        window_length: int = 7,
        prior_assignments: Iterable[ShiftAssignment] = (),
    ) -> RosterResult:
        """
        Build a roster for ``window_length`` days from ``window_start``.

        Args:
            staff_pool: Candidate staff; only eligible doctors are rostered
            preferences: Shift preferences, at most one effective record per staff id
            approved_leave: Leave requests; only Approved ones block dates
            coverage_requirements: Department coverage rules, may be empty
            window_start: First date of the window
            window_length: Number of days, must be positive
            prior_assignments: Shifts before the window that extend consecutive runs

        Returns:
            RosterResult with ordered assignments and coverage alerts

        Raises:
            InvalidWindow: If the window is malformed
            NoEligibleStaff: If no eligible doctor is in the pool
        """
        prepared = self.prepare(
            staff_pool,
            preferences,
            approved_leave,
            coverage_requirements,
            window_start,
            window_length,
            prior_assignments,
        )
        return self.solve(prepared)

    def run(self, request: RosterRequest) -> RosterResult:
        """Generate from a ``RosterRequest``, honouring its shift definitions and role."""
        engine = copy.copy(self)
        engine.shift_definitions = dict(request.shift_definitions or self.shift_definitions)
        engine.eligible_role = request.eligible_role or self.eligible_role
        return engine.generate(
            request.staff,
            request.preferences,
            request.leave,
            request.coverage,
            request.window_start,
            request.window_length,
            request.prior_assignments,
        )

    def prepare(
        self,
        staff_pool: Iterable[StaffMember],
        preferences: Iterable[Preference],
        approved_leave: Iterable[LeaveRequest],
        coverage_requirements: Iterable[CoverageRequirement],
        window_start: date | str,
        window_length: int,
        prior_assignments: Iterable[ShiftAssignment],
    ) -> PreparedInputs:
        # Window first: a malformed window is rejected before anything else.
        dates = tuple(expand_window(window_start, window_length))

        eligible: Dict[str, StaffMember] = {}
        for member in staff_pool or ():
            if is_role_eligible(member, self.eligible_role) and member.staff_id not in eligible:
                eligible[member.staff_id] = member
        if not eligible:
            raise NoEligibleStaff()
        staff = tuple(eligible[sid] for sid in sorted(eligible))

        prefs = {
            sid: pref
            for sid, pref in normalize_preferences(preferences or ()).items()
            if sid in eligible
        }

        leave_days = leave_days_by_staff(
            req for req in (approved_leave or ()) if req.staff_id in eligible
        )

        slots = tuple(expand_requirements(coverage_requirements or (), dates))

        prior_days: Dict[str, Set[date]] = {}
        prior_slots: Dict[str, Set[Tuple[date, ShiftType]]] = {}
        for a in prior_assignments or ():
            if a.date >= dates[0]:
                continue
            prior_days.setdefault(a.staff_id, set()).add(a.date)
            prior_slots.setdefault(a.staff_id, set()).add((a.date, a.shift))

        return PreparedInputs(
            dates=dates,
            staff=staff,
            preferences=prefs,
            leave_days=leave_days,
            slots=slots,
            prior_days=prior_days,
            prior_slots=prior_slots,
            definitions=self.shift_definitions,
            role=self.eligible_role,
        )

    @abstractmethod
    def solve(self, prepared: PreparedInputs) -> RosterResult:
        """Assign staff to ``prepared.slots`` and audit coverage."""

    @staticmethod
    def ordered(assignments: Iterable[ShiftAssignment]) -> List[ShiftAssignment]:
        return sorted(assignments, key=ShiftAssignment.sort_key)
