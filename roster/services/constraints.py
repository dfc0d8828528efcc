"""Hard constraint predicates for roster assignment."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from roster.domain.types import (
    DEFAULT_SHIFT_DEFINITIONS,
    DOCTOR_ROLE,
    LeaveRequest,
    ShiftDefinition,
    ShiftType,
    StaffMember,
    StaffStatus,
)


Slot = Tuple[date, ShiftType]


def is_role_eligible(staff: StaffMember, role: str = DOCTOR_ROLE) -> bool:
    """Role must match (case-insensitive) and the staff member must not be inactive."""
    if staff.status is StaffStatus.INACTIVE:
        return False
    return staff.role.strip().lower() == role.strip().lower()


def matches_department(staff: StaffMember, department: str) -> bool:
    if not staff.department:
        return True
    return staff.department.strip().lower() == department.strip().lower()


def leave_days_by_staff(leave: Iterable[LeaveRequest]) -> Dict[str, Set[date]]:
    """Expand approved leave into the set of blocked dates per staff id."""
    blocked: Dict[str, Set[date]] = {}
    for req in leave:
        if not req.is_approved:
            continue
        days = blocked.setdefault(req.staff_id, set())
        current = req.start
        while current <= req.end:
            days.add(current)
            current += timedelta(days=1)
    return blocked


def consecutive_run_with(worked_days: Set[date], day: date) -> int:
    """
    Length of the run of consecutive worked days that would contain ``day``.

    Counts backwards and forwards from ``day`` so that days worked on either
    side are joined into a single run.
    """
    run = 1
    cursor = day - timedelta(days=1)
    while cursor in worked_days:
        run += 1
        cursor -= timedelta(days=1)
    cursor = day + timedelta(days=1)
    while cursor in worked_days:
        run += 1
        cursor += timedelta(days=1)
    return run


def day_runs(worked_days: Iterable[date]) -> List[List[date]]:
    """Split worked days into maximal runs of consecutive dates, in date order."""
    runs: List[List[date]] = []
    for day in sorted(set(worked_days)):
        if runs and day - runs[-1][-1] == timedelta(days=1):
            runs[-1].append(day)
        else:
            runs.append([day])
    return runs


def longest_run(worked_days: Iterable[date]) -> int:
    return max((len(run) for run in day_runs(worked_days)), default=0)


def shift_interval(
    day: date,
    shift: ShiftType,
    definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
) -> Tuple[datetime, datetime]:
    definition = (definitions or DEFAULT_SHIFT_DEFINITIONS)[shift]
    start = datetime.combine(day, time()) + timedelta(minutes=definition.start_minutes)
    end = datetime.combine(day, time()) + timedelta(minutes=definition.end_minutes)
    return start, end


def shifts_overlap(
    first: Slot,
    second: Slot,
    definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
) -> bool:
    """True when the two dated shifts share any clock time. Touching ends do not overlap."""
    if first == second:
        return True
    a_start, a_end = shift_interval(first[0], first[1], definitions)
    b_start, b_end = shift_interval(second[0], second[1], definitions)
    return a_start < b_end and b_start < a_end


def overlaps_booked(
    slot: Slot,
    booked: Iterable[Slot],
    definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
) -> bool:
    day = slot[0]
    for other in booked:
        # Shifts are at most 24h long, so only neighbouring days can clash.
        if abs((other[0] - day).days) > 1:
            continue
        if shifts_overlap(slot, other, definitions):
            return True
    return False


def can_assign(
    staff: StaffMember,
    department: str,
    day: date,
    shift: ShiftType,
    booked: Set[Slot],
    worked_days: Set[date],
    leave_days: Set[date],
    max_consecutive: Optional[int] = None,
    definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
    role: str = DOCTOR_ROLE,
) -> bool:
    """
    Check whether ``staff`` may take ``shift`` on ``day`` for ``department``.

    Args:
        staff: Candidate
        department: Department the slot belongs to
        day: Date of the slot
        shift: Shift type of the slot
        booked: (date, shift) slots the candidate already holds
        worked_days: Dates the candidate already works (window plus prior history)
        leave_days: Dates blocked by approved leave
        max_consecutive: Cap on consecutive worked days, None for no cap
        definitions: Shift clock times used for the overlap check
        role: Role required for the roster

    Returns:
        True if every hard constraint holds
    """
    # 1. Role and status
    if not is_role_eligible(staff, role):
        return False

    # 2. Department affinity
    if not matches_department(staff, department):
        return False

    # 3. Approved leave
    if day in leave_days:
        return False

    # 4. One department per slot, no clashing shift times
    if (day, shift) in booked:
        return False
    if overlaps_booked((day, shift), booked, definitions):
        return False

    # 5. Consecutive-day cap; another shift on an already worked day adds nothing
    if max_consecutive is not None and day not in worked_days:
        if consecutive_run_with(worked_days, day) > max_consecutive:
            return False

    return True
