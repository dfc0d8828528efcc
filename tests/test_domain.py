"""Tests for roster record types."""

from datetime import date

import pytest

from roster.domain.errors import InvalidWindow, NoEligibleStaff, RosterError
from roster.domain.types import (
    CoverageRequirement,
    LeaveRequest,
    LeaveStatus,
    Preference,
    ShiftAssignment,
    ShiftDefinition,
    ShiftType,
    StaffMember,
    StaffStatus,
)


def test_shift_type_parse_is_case_insensitive():
    assert ShiftType.parse("night") is ShiftType.NIGHT
    assert ShiftType.parse("MORNING") is ShiftType.MORNING
    assert ShiftType.parse(ShiftType.EVENING) is ShiftType.EVENING
    with pytest.raises(ValueError):
        ShiftType.parse("Afternoon")


def test_shift_order_follows_declaration():
    assert [s.order for s in ShiftType.ordered()] == [0, 1, 2]
    assert ShiftType.ordered()[0] is ShiftType.MORNING


def test_night_shift_crosses_midnight():
    night = ShiftDefinition(ShiftType.NIGHT, "22:00", "06:00")
    assert night.start_minutes == 22 * 60
    assert night.end_minutes == 30 * 60


def test_invalid_clock_time_rejected():
    with pytest.raises(ValueError):
        ShiftDefinition(ShiftType.MORNING, "25:00", "06:00").start_minutes


def test_staff_status_defaults_to_active():
    member = StaffMember("7", "Dr Seven", status=None)
    assert member.status is StaffStatus.ACTIVE
    assert StaffStatus.parse("on_leave") is StaffStatus.ON_LEAVE


def test_coverage_requirement_validation():
    req = CoverageRequirement("Orthopedics", {"Morning", "Evening"}, 2)
    assert req.applicable_shifts() == (ShiftType.MORNING, ShiftType.EVENING)
    assert CoverageRequirement("Cardiology").applicable_shifts() == ShiftType.ordered()
    with pytest.raises(ValueError):
        CoverageRequirement("Cardiology", frozenset(), 0)


def test_leave_request_dates_and_transitions():
    leave = LeaveRequest("A", date(2025, 3, 4), date(2025, 3, 5), leave_id="L1")
    assert leave.status is LeaveStatus.PENDING
    assert not leave.covers(date(2025, 3, 4))

    approved = leave.approve()
    assert approved.is_approved
    assert approved.covers(date(2025, 3, 5))
    assert not approved.covers(date(2025, 3, 6))
    assert leave.status is LeaveStatus.PENDING

    with pytest.raises(ValueError):
        approved.deny()
    assert leave.deny().status is LeaveStatus.DENIED

    with pytest.raises(ValueError):
        LeaveRequest("A", date(2025, 3, 5), date(2025, 3, 4))


def test_preference_conflicts_and_cap():
    pref = Preference("A", preferred={"Night", "Morning"}, disliked={"Night"})
    assert pref.conflicts == frozenset({ShiftType.NIGHT})
    with pytest.raises(ValueError):
        Preference("A", max_consecutive=0)


def test_assignment_sort_key_and_dict():
    a = ShiftAssignment("B", date(2025, 3, 3), ShiftType.NIGHT, "Cardiology", "Dr B")
    b = ShiftAssignment("A", date(2025, 3, 3), ShiftType.MORNING, "Orthopedics", "Dr A")
    assert sorted([a, b], key=ShiftAssignment.sort_key) == [b, a]
    assert a.to_dict() == {
        "date": "2025-03-03",
        "shift": "Night",
        "department": "Cardiology",
        "staff_id": "B",
        "staff_name": "Dr B",
    }


def test_error_hierarchy():
    assert isinstance(NoEligibleStaff(), RosterError)
    assert "no doctors available" in str(NoEligibleStaff())
    assert issubclass(InvalidWindow, ValueError)
