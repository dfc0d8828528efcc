"""CP-SAT roster engine that optimises preferences and load balance under the same hard rules."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Mapping, Tuple

from ortools.sat.python import cp_model

from roster.domain.errors import RosterError
from roster.domain.types import (
    DOCTOR_ROLE,
    RosterResult,
    ShiftAssignment,
    ShiftDefinition,
    ShiftType,
)
from roster.services.constraints import (
    is_role_eligible,
    matches_department,
    overlaps_booked,
    shifts_overlap,
)
from roster.services.coverage import audit_coverage
from roster.services.ranking import preference_rank

from .base import BaseRosterEngine, PreparedInputs


VarKey = Tuple[str, int]  # (staff_id, slot index)


class CPSatRosterEngine(BaseRosterEngine):
    """
    CP-SAT based roster engine.

    Hard rules match the greedy engine (role, department, approved leave, one
    department per slot, no clashing shift times, consecutive-day cap).
    Coverage may fall short through penalised slack so a best-effort roster is
    always returned; shortfalls are reported with the same coverage alerts.
    The search is bounded by deterministic time on a single worker, so the
    same inputs and seed give the same roster on any machine.

    Objective (minimised):
    - shortfall_weight * total missing staff
    - preference_weight * (disliked assignments - preferred assignments)
    - balance_weight * (max load - min load)
    """

    name = "cpsat"

    def __init__(
        self,
        shift_definitions: Mapping[ShiftType, ShiftDefinition] | None = None,
        eligible_role: str = DOCTOR_ROLE,
        deterministic_time_limit: float = 10.0,
        random_seed: int = 0,
        shortfall_weight: int = 1000,
        preference_weight: int = 10,
        balance_weight: int = 5,
    ):
        super().__init__(shift_definitions, eligible_role)
        self.deterministic_time_limit = deterministic_time_limit
        self.random_seed = random_seed
        self.shortfall_weight = shortfall_weight
        self.preference_weight = preference_weight
        self.balance_weight = balance_weight

    @classmethod
    def from_config(cls, cfg) -> "CPSatRosterEngine":
        return cls(
            shift_definitions=cfg.shift_definition_map(),
            eligible_role=cfg.eligible_role,
            deterministic_time_limit=cfg.cp_sat.deterministic_time_limit,
            random_seed=cfg.cp_sat.random_seed,
            shortfall_weight=cfg.cp_sat.shortfall_weight,
            preference_weight=cfg.cp_sat.preference_weight,
            balance_weight=cfg.cp_sat.balance_weight,
        )

    def solve(self, prepared: PreparedInputs) -> RosterResult:
        model = cp_model.CpModel()

        x = self._create_variables(model, prepared)
        shortfalls = self._add_coverage_constraints(model, x, prepared)
        self._add_one_department_per_slot_constraints(model, x, prepared)
        self._add_overlap_constraints(model, x, prepared)
        self._add_consecutive_constraints(model, x, prepared)
        self._build_objective(model, x, shortfalls, prepared)
        self._add_empty_roster_hint(model, x, shortfalls, prepared)

        solver = cp_model.CpSolver()
        solver.parameters.max_deterministic_time = float(self.deterministic_time_limit)
        solver.parameters.num_workers = 1
        solver.parameters.random_seed = int(self.random_seed)

        status = solver.Solve(model)
        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            assignments = self._extract_solution(solver, x, prepared)
        elif status == cp_model.UNKNOWN:
            # Limit reached before any solution: every slot is reported short.
            assignments = []
        else:
            raise RosterError(
                f"CP-SAT solver failed to find a roster (status: {self._status_name(status)})"
            )

        alerts = audit_coverage(prepared.slots, assignments)
        return RosterResult(assignments=tuple(self.ordered(assignments)), alerts=tuple(alerts))

    def _add_empty_roster_hint(
        self,
        model: cp_model.CpModel,
        x: Dict[VarKey, cp_model.IntVar],
        shortfalls: List[cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> None:
        """Hint the roster with no assignments, which the shortfall slack always admits."""
        for var in x.values():
            model.AddHint(var, 0)
        for slot, short in zip(prepared.slots, shortfalls):
            model.AddHint(short, slot.minimum)

    def _create_variables(
        self,
        model: cp_model.CpModel,
        prepared: PreparedInputs,
    ) -> Dict[VarKey, cp_model.IntVar]:
        """One boolean per (staff, slot) pair that passes the static checks."""
        x: Dict[VarKey, cp_model.IntVar] = {}
        for idx, slot in enumerate(prepared.slots):
            for member in prepared.staff:
                sid = member.staff_id
                if not is_role_eligible(member, prepared.role):
                    continue
                if not matches_department(member, slot.department):
                    continue
                if slot.date in prepared.leave_days.get(sid, set()):
                    continue
                prior = prepared.prior_slots.get(sid, set())
                if prior and overlaps_booked((slot.date, slot.shift), prior, prepared.definitions):
                    continue
                x[(sid, idx)] = model.NewBoolVar(f"x_{sid}_{idx}")
        return x

    def _add_coverage_constraints(
        self,
        model: cp_model.CpModel,
        x: Dict[VarKey, cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> List[cp_model.IntVar]:
        by_slot: Dict[int, List[cp_model.IntVar]] = defaultdict(list)
        for (sid, idx), var in x.items():
            by_slot[idx].append(var)

        shortfalls = []
        for idx, slot in enumerate(prepared.slots):
            short = model.NewIntVar(0, slot.minimum, f"short_{idx}")
            model.Add(sum(by_slot[idx]) + short == slot.minimum)
            shortfalls.append(short)
        return shortfalls

    def _add_one_department_per_slot_constraints(
        self,
        model: cp_model.CpModel,
        x: Dict[VarKey, cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> None:
        groups: Dict[Tuple[str, date, ShiftType], List[cp_model.IntVar]] = defaultdict(list)
        for (sid, idx), var in x.items():
            slot = prepared.slots[idx]
            groups[(sid, slot.date, slot.shift)].append(var)
        for vars_ in groups.values():
            if len(vars_) > 1:
                model.Add(sum(vars_) <= 1)

    def _add_overlap_constraints(
        self,
        model: cp_model.CpModel,
        x: Dict[VarKey, cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> None:
        per_staff: Dict[str, Dict[Tuple[date, ShiftType], List[cp_model.IntVar]]] = defaultdict(
            lambda: defaultdict(list)
        )
        for (sid, idx), var in x.items():
            slot = prepared.slots[idx]
            per_staff[sid][(slot.date, slot.shift)].append(var)

        for sid, by_time in per_staff.items():
            keys = sorted(by_time, key=lambda k: (k[0], k[1].order))
            for i, first in enumerate(keys):
                for second in keys[i + 1:]:
                    if (second[0] - first[0]).days > 1:
                        break
                    if shifts_overlap(first, second, prepared.definitions):
                        model.Add(sum(by_time[first]) + sum(by_time[second]) <= 1)

    def _add_consecutive_constraints(
        self,
        model: cp_model.CpModel,
        x: Dict[VarKey, cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> None:
        by_day: Dict[Tuple[str, date], List[cp_model.IntVar]] = defaultdict(list)
        for (sid, idx), var in x.items():
            by_day[(sid, prepared.slots[idx].date)].append(var)

        for member in prepared.staff:
            sid = member.staff_id
            cap = prepared.max_consecutive(sid)
            if cap is None:
                continue

            worked: Dict[date, object] = {}
            for day in prepared.dates:
                day_vars = by_day.get((sid, day), [])
                if not day_vars:
                    continue
                w = model.NewBoolVar(f"worked_{sid}_{day.isoformat()}")
                model.AddMaxEquality(w, day_vars)
                worked[day] = w

            prior_days = prepared.prior_days.get(sid, set())
            first = prepared.dates[0] - timedelta(days=cap)
            last = prepared.dates[-1]
            start = first
            while start + timedelta(days=cap) <= last:
                span = [start + timedelta(days=k) for k in range(cap + 1)]
                terms = [worked[d] for d in span if d in worked]
                fixed = sum(1 for d in span if d in prior_days)
                if terms:
                    model.Add(sum(terms) + fixed <= cap)
                start += timedelta(days=1)

    def _build_objective(
        self,
        model: cp_model.CpModel,
        x: Dict[VarKey, cp_model.IntVar],
        shortfalls: List[cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> None:
        terms = [self.shortfall_weight * s for s in shortfalls]

        # Preferred shifts score -1, neutral 0, disliked +1.
        for (sid, idx), var in x.items():
            rank = preference_rank(prepared.preferences.get(sid), prepared.slots[idx].shift)
            if rank != 1:
                terms.append(self.preference_weight * (rank - 1) * var)

        loads = defaultdict(list)
        for (sid, idx), var in x.items():
            loads[sid].append(var)
        if self.balance_weight and len(prepared.staff) > 1 and x:
            upper = len(prepared.slots) * max(1, len(prepared.definitions))
            load_vars = []
            for member in prepared.staff:
                load = model.NewIntVar(0, upper, f"load_{member.staff_id}")
                model.Add(load == sum(loads.get(member.staff_id, [])))
                load_vars.append(load)
            max_load = model.NewIntVar(0, upper, "max_load")
            min_load = model.NewIntVar(0, upper, "min_load")
            model.AddMaxEquality(max_load, load_vars)
            model.AddMinEquality(min_load, load_vars)
            terms.append(self.balance_weight * (max_load - min_load))

        if terms:
            model.Minimize(sum(terms))

    def _extract_solution(
        self,
        solver: cp_model.CpSolver,
        x: Dict[VarKey, cp_model.IntVar],
        prepared: PreparedInputs,
    ) -> List[ShiftAssignment]:
        names = {m.staff_id: m.name for m in prepared.staff}
        assignments = []
        for (sid, idx), var in x.items():
            if solver.Value(var) != 1:
                continue
            slot = prepared.slots[idx]
            assignments.append(
                ShiftAssignment(
                    staff_id=sid,
                    date=slot.date,
                    shift=slot.shift,
                    department=slot.department,
                    staff_name=names.get(sid, sid),
                )
            )
        return assignments

    @staticmethod
    def _status_name(status: int) -> str:
        status_map = {
            cp_model.OPTIMAL: "OPTIMAL",
            cp_model.FEASIBLE: "FEASIBLE",
            cp_model.INFEASIBLE: "INFEASIBLE",
            cp_model.MODEL_INVALID: "MODEL_INVALID",
            cp_model.UNKNOWN: "UNKNOWN",
        }
        return status_map.get(status, f"UNKNOWN({status})")
