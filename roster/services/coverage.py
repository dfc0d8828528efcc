"""Coverage slot expansion and post-assignment audit."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

from roster.domain.types import CoverageAlert, CoverageRequirement, ShiftAssignment, ShiftType


@dataclass(frozen=True)
class CoverageSlot:
    """One (date, shift, department) obligation."""

    date: date
    shift: ShiftType
    department: str
    minimum: int

    @property
    def key(self) -> Tuple[date, ShiftType, str]:
        return (self.date, self.shift, self.department)

    def sort_key(self) -> Tuple[date, int, str]:
        return (self.date, self.shift.order, self.department)


def expand_requirements(
    requirements: Iterable[CoverageRequirement],
    dates: Sequence[date],
) -> List[CoverageSlot]:
    """
    Expand requirements over the window into slots.

    Slots are ordered by date, then shift order, then department name. When
    several requirements name the same (date, shift, department) the largest
    minimum is kept.
    """
    minimums: Dict[Tuple[date, ShiftType, str], int] = {}
    for req in requirements:
        for day in dates:
            for shift in req.applicable_shifts():
                key = (day, shift, req.department)
                minimums[key] = max(minimums.get(key, 0), req.minimum_staff)

    slots = [
        CoverageSlot(date=day, shift=shift, department=dept, minimum=minimum)
        for (day, shift, dept), minimum in minimums.items()
    ]
    slots.sort(key=CoverageSlot.sort_key)
    return slots


def format_alert_message(slot: CoverageSlot, assigned: int) -> str:
    return (
        f"Coverage gap: {slot.department} on {slot.date.isoformat()} ({slot.shift.value}) "
        f"has {assigned}/{slot.minimum} staff (short by {slot.minimum - assigned})."
    )


def make_alert(slot: CoverageSlot, assigned: int) -> CoverageAlert:
    return CoverageAlert(
        department=slot.department,
        date=slot.date,
        shift=slot.shift,
        required=slot.minimum,
        assigned=assigned,
        message=format_alert_message(slot, assigned),
    )


def count_assigned(assignments: Iterable[ShiftAssignment]) -> Counter:
    return Counter((a.date, a.shift, a.department) for a in assignments)


def audit_coverage(
    slots: Sequence[CoverageSlot],
    assignments: Iterable[ShiftAssignment],
) -> List[CoverageAlert]:
    """Return exactly one alert, in slot order, for each slot below its minimum."""
    counts = count_assigned(assignments)
    alerts = []
    for slot in slots:
        got = counts.get(slot.key, 0)
        if got < slot.minimum:
            alerts.append(make_alert(slot, got))
    return alerts
