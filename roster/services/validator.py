"""Post-generation validation of a roster against its request."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from typing import Dict, List, Mapping, Set, Tuple

from roster.domain.types import RosterRequest, RosterResult, ShiftDefinition, ShiftType
from roster.services.constraints import (
    day_runs,
    leave_days_by_staff,
    matches_department,
    shifts_overlap,
)
from roster.services.coverage import count_assigned, expand_requirements
from roster.services.ranking import normalize_preferences
from roster.services.window import expand_window


def validate_roster(
    result: RosterResult,
    request: RosterRequest,
    definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
) -> None:
    """
    Validate a generated roster against every hard rule.

    Args:
        result: Output of an engine
        request: The request the roster was generated from
        definitions: Shift clock times; falls back to the request's, then the defaults

    Raises:
        ValueError: On the first violated rule
    """
    dates = expand_window(request.window_start, request.window_length)
    window = set(dates)
    staff = {m.staff_id: m for m in request.staff}
    definitions = definitions or request.shift_definitions

    # 1. Referential integrity and window bounds
    for a in result.assignments:
        if a.staff_id not in staff:
            raise ValueError(f"Assignment references unknown staff id {a.staff_id}")
        if a.date not in window:
            raise ValueError(f"Assignment for {a.staff_id} on {a.date} is outside the roster window")
        if not matches_department(staff[a.staff_id], a.department):
            raise ValueError(
                f"Staff {a.staff_id} assigned to {a.department} outside their department"
            )

    # 2. No double booking in a (date, shift) slot
    per_slot = Counter((a.staff_id, a.date, a.shift) for a in result.assignments)
    for (staff_id, day, shift), n in per_slot.items():
        if n > 1:
            raise ValueError(f"Staff {staff_id} is double-booked on {day} ({shift.value})")

    # 3. No overlapping shift times
    by_staff: Dict[str, List[Tuple[date, ShiftType]]] = defaultdict(list)
    for a in result.assignments:
        by_staff[a.staff_id].append((a.date, a.shift))
    for staff_id, slots in by_staff.items():
        slots.sort(key=lambda s: (s[0], s[1].order))
        for i, first in enumerate(slots):
            for second in slots[i + 1:]:
                if (second[0] - first[0]).days > 1:
                    break
                if shifts_overlap(first, second, definitions):
                    raise ValueError(
                        f"Staff {staff_id} has overlapping shifts: "
                        f"{first[0]} {first[1].value} and {second[0]} {second[1].value}"
                    )

    # 4. Approved leave respected
    blocked = leave_days_by_staff(request.leave)
    for a in result.assignments:
        if a.date in blocked.get(a.staff_id, set()):
            raise ValueError(f"Staff {a.staff_id} is rostered on {a.date} during approved leave")

    # 5. Consecutive-day cap
    prefs = normalize_preferences(request.preferences)
    prior: Dict[str, Set[date]] = defaultdict(set)
    for a in request.prior_assignments:
        if a.date < dates[0]:
            prior[a.staff_id].add(a.date)
    for staff_id, slots in by_staff.items():
        pref = prefs.get(staff_id)
        if pref is None or pref.max_consecutive is None:
            continue
        days = {d for d, _ in slots} | prior[staff_id]
        for run in day_runs(days):
            if len(run) > pref.max_consecutive and window.intersection(run):
                raise ValueError(
                    f"Staff {staff_id} works {len(run)} consecutive days from {run[0]}, "
                    f"cap is {pref.max_consecutive}"
                )

    # 6. Every slot is either covered or alerted exactly once
    slots = expand_requirements(request.coverage, dates)
    counts = count_assigned(result.assignments)
    alert_counts = Counter((al.date, al.shift, al.department) for al in result.alerts)
    for slot in slots:
        got = counts.get(slot.key, 0)
        alerted = alert_counts.get(slot.key, 0)
        if got >= slot.minimum and alerted:
            raise ValueError(f"Slot {slot.key} is covered but still alerted")
        if got < slot.minimum and alerted != 1:
            raise ValueError(
                f"Slot {slot.department} {slot.date} ({slot.shift.value}) is short "
                f"{got}/{slot.minimum} with {alerted} alerts"
            )
