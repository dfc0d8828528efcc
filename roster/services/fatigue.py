"""Workload and fatigue classification over a finished roster."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from roster.domain.types import FatigueRecord, ShiftAssignment, ShiftType, StaffMember


def classify_fatigue(
    assignments: Iterable[ShiftAssignment],
    staff: Optional[Iterable[StaffMember]] = None,
    night_limit: int = 2,
    total_limit: int = 4,
) -> List[FatigueRecord]:
    """
    Classify each staff member's load in the window.

    High risk means more than ``night_limit`` night shifts or more than
    ``total_limit`` shifts in total. Every member of ``staff`` gets a record,
    as does any staff id found only in ``assignments``. Records are sorted by
    staff id.
    """
    assignments = list(assignments)
    totals: Counter = Counter(a.staff_id for a in assignments)
    nights: Counter = Counter(a.staff_id for a in assignments if a.shift is ShiftType.NIGHT)

    names = {}
    for a in assignments:
        names.setdefault(a.staff_id, a.staff_name or a.staff_id)
    for member in staff or ():
        names[member.staff_id] = member.name

    records = []
    for staff_id in sorted(names):
        total = totals.get(staff_id, 0)
        night = nights.get(staff_id, 0)
        records.append(
            FatigueRecord(
                staff_id=staff_id,
                name=names[staff_id],
                total_shifts=total,
                night_shifts=night,
                high_risk=night > night_limit or total > total_limit,
            )
        )
    return records


def high_risk_staff(
    assignments: Iterable[ShiftAssignment],
    night_limit: int = 2,
    total_limit: int = 4,
) -> List[str]:
    return [
        r.staff_id
        for r in classify_fatigue(assignments, night_limit=night_limit, total_limit=total_limit)
        if r.high_risk
    ]
