"""Greedy roster engine: fills coverage slots in a fixed order with ranked candidates."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, List, Set, Tuple

from roster.domain.types import RosterResult, ShiftAssignment, ShiftType
from roster.services.constraints import can_assign
from roster.services.coverage import audit_coverage
from roster.services.ranking import candidate_sort_key

from .base import BaseRosterEngine, PreparedInputs


class RosterEngine(BaseRosterEngine):
    """
    Deterministic greedy roster engine.

    Slots are processed by date, then shift order, then department name. Each
    slot takes the best ranked eligible candidates until its minimum is met or
    nobody eligible is left: preferred before neutral before disliked, then
    fewest shifts so far in this run, then lowest staff id. Unmet slots become
    coverage alerts; generation never stops early.
    """

    name = "greedy"

    def solve(self, prepared: PreparedInputs) -> RosterResult:
        booked: Dict[str, Set[Tuple[date, ShiftType]]] = defaultdict(set)
        worked_days: Dict[str, Set[date]] = defaultdict(set)
        load: Dict[str, int] = defaultdict(int)

        for staff_id, days in prepared.prior_days.items():
            worked_days[staff_id].update(days)
        for staff_id, slots in prepared.prior_slots.items():
            booked[staff_id].update(slots)

        assignments: List[ShiftAssignment] = []

        for slot in prepared.slots:
            candidates = [
                member
                for member in prepared.staff
                if can_assign(
                    member,
                    slot.department,
                    slot.date,
                    slot.shift,
                    booked[member.staff_id],
                    worked_days[member.staff_id],
                    prepared.leave_days.get(member.staff_id, set()),
                    prepared.max_consecutive(member.staff_id),
                    prepared.definitions,
                    prepared.role,
                )
            ]
            candidates.sort(
                key=lambda m: candidate_sort_key(m.staff_id, slot.shift, prepared.preferences, load)
            )

            for member in candidates[: slot.minimum]:
                assignments.append(
                    ShiftAssignment(
                        staff_id=member.staff_id,
                        date=slot.date,
                        shift=slot.shift,
                        department=slot.department,
                        staff_name=member.name,
                    )
                )
                booked[member.staff_id].add((slot.date, slot.shift))
                worked_days[member.staff_id].add(slot.date)
                load[member.staff_id] += 1

        alerts = audit_coverage(prepared.slots, assignments)
        return RosterResult(assignments=tuple(self.ordered(assignments)), alerts=tuple(alerts))


def generate(
    staff_pool,
    preferences,
    approved_leave,
    coverage_requirements,
    window_start,
    window_length: int = 7,
    prior_assignments=(),
) -> RosterResult:
    """Run the greedy engine with default shift definitions."""
    return RosterEngine().generate(
        staff_pool,
        preferences,
        approved_leave,
        coverage_requirements,
        window_start,
        window_length,
        prior_assignments,
    )
