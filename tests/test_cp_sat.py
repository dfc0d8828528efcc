"""Tests for the CP-SAT roster engine."""

from collections import Counter
from datetime import timedelta

import pytest
from ortools.sat.python import cp_model

from roster.config import RosterConfig
from roster.domain.errors import NoEligibleStaff
from roster.domain.types import (
    CoverageRequirement,
    LeaveRequest,
    LeaveStatus,
    Preference,
    RosterRequest,
    ShiftType,
    StaffMember,
)
from roster.engine.cp_sat import CPSatRosterEngine
from roster.services.constraints import longest_run
from roster.services.validator import validate_roster


def _engine():
    return CPSatRosterEngine(deterministic_time_limit=5.0)


def test_full_coverage_respects_preferences(monday, two_doctors, cardiology_all_shifts, night_preferences):
    request = RosterRequest(
        staff=two_doctors,
        coverage=cardiology_all_shifts,
        preferences=night_preferences,
        window_start=monday,
        window_length=2,
    )

    result = _engine().run(request)

    assert result.alerts == ()
    nights = [a.staff_id for a in result.assignments if a.shift is ShiftType.NIGHT]
    assert nights == ["A", "A"]
    validate_roster(result, request)


def test_shortfall_is_alerted(monday):
    request = RosterRequest(
        staff=[StaffMember("A", "Dr A")],
        coverage=[CoverageRequirement("Cardiology", frozenset(), 2)],
        window_start=monday,
        window_length=1,
    )

    result = _engine().run(request)

    assert len(result.assignments) == 3
    assert [al.assigned for al in result.alerts] == [1, 1, 1]
    validate_roster(result, request)


@pytest.mark.slow
def test_hard_rules_hold_over_a_week(monday):
    staff = [StaffMember(str(i), f"Dr {i}") for i in range(1, 5)]
    prefs = [Preference(str(i), max_consecutive=3) for i in range(1, 5)]
    leave = [LeaveRequest("2", monday, monday + timedelta(days=2), LeaveStatus.APPROVED)]
    coverage = [
        CoverageRequirement("Cardiology", frozenset(), 1),
        CoverageRequirement("Orthopedics", {ShiftType.MORNING, ShiftType.EVENING}, 1),
    ]
    request = RosterRequest(
        staff=staff,
        coverage=coverage,
        preferences=prefs,
        leave=leave,
        window_start=monday,
        window_length=7,
    )

    result = _engine().run(request)

    validate_roster(result, request)
    per_slot = Counter((a.staff_id, a.date, a.shift) for a in result.assignments)
    assert max(per_slot.values()) == 1
    for member in staff:
        assert longest_run({a.date for a in result.assignments_for(member.staff_id)}) <= 3


def test_from_config_and_no_staff(monday, cardiology_all_shifts):
    cfg = RosterConfig()
    cfg.cp_sat.random_seed = 7
    engine = CPSatRosterEngine.from_config(cfg)
    assert engine.random_seed == 7
    assert engine.name == "cpsat"

    with pytest.raises(NoEligibleStaff):
        engine.generate([], [], [], cardiology_all_shifts, monday)


def _week_request(monday):
    staff = [StaffMember(str(i), f"Dr {i}") for i in range(1, 4)]
    prefs = [
        Preference("1", preferred={ShiftType.NIGHT}, max_consecutive=4),
        Preference("2", disliked={ShiftType.MORNING}),
    ]
    coverage = [
        CoverageRequirement("Cardiology", frozenset(), 1),
        CoverageRequirement("Orthopedics", {ShiftType.MORNING}, 1),
    ]
    return RosterRequest(
        staff=staff,
        coverage=coverage,
        preferences=prefs,
        window_start=monday,
        window_length=7,
    )


def test_repeat_runs_give_identical_rosters(monday):
    request = _week_request(monday)
    first = _engine().run(request)
    second = _engine().run(request)
    assert first == second


def test_tiny_limit_still_returns_valid_roster(monday):
    request = _week_request(monday)

    result = CPSatRosterEngine(deterministic_time_limit=1e-6).run(request)

    validate_roster(result, request)


def test_no_solution_within_limit_alerts_every_slot(monday, cardiology_all_shifts, monkeypatch):
    monkeypatch.setattr(cp_model.CpSolver, "Solve", lambda self, model, *args, **kwargs: cp_model.UNKNOWN)
    request = RosterRequest(
        staff=[StaffMember("A", "Dr A")],
        coverage=cardiology_all_shifts,
        window_start=monday,
        window_length=2,
    )

    result = _engine().run(request)

    assert result.assignments == ()
    assert len(result.alerts) == 6
    assert all(al.assigned == 0 for al in result.alerts)
    validate_roster(result, request)
