"""Tests for CSV import/export and report views."""

from datetime import date

import pytest

from roster.domain.types import (
    CoverageAlert,
    LeaveStatus,
    RosterResult,
    ShiftAssignment,
    ShiftType,
    StaffMember,
    StaffStatus,
)
from roster.io.export_csv import write_alerts, write_assignments
from roster.io.import_csv import (
    read_assignments,
    read_coverage,
    read_leave,
    read_preferences,
    read_staff,
)
from roster.io.report import fatigue_frame, roster_grid, summarize_roster
from roster.services.fatigue import classify_fatigue


D0 = date(2025, 3, 3)


def test_read_staff(tmp_path):
    csv_file = tmp_path / "staff.csv"
    csv_file.write_text(
        """ID, Name ,Role,Department,Status
1,Dr Ada,Doctor,Cardiology,Active
2,Dr Ben,Doctor,,Inactive
3,Nina,Nurse,Cardiology,
"""
    )

    staff = read_staff(csv_file)

    assert [m.staff_id for m in staff] == ["1", "2", "3"]
    assert staff[0].department == "Cardiology"
    assert staff[1].department is None
    assert staff[1].status is StaffStatus.INACTIVE
    assert staff[2].status is StaffStatus.ACTIVE


def test_read_staff_missing_columns(tmp_path):
    csv_file = tmp_path / "staff.csv"
    csv_file.write_text("id,name\n1,Dr Ada\n")
    with pytest.raises(ValueError, match="role"):
        read_staff(csv_file)


def test_read_leave(tmp_path):
    csv_file = tmp_path / "leave.csv"
    csv_file.write_text(
        """id,staff_id,start_date,end_date,status,reason
L1,1,2025-03-04,2025-03-05,Approved,Conference
L2,2,2025-03-03,2025-03-03,Pending,
"""
    )

    leave = read_leave(csv_file)

    assert leave[0].leave_id == "L1"
    assert leave[0].start == date(2025, 3, 4)
    assert leave[0].is_approved
    assert leave[0].reason == "Conference"
    assert leave[1].status is LeaveStatus.PENDING


def test_read_preferences_and_coverage(tmp_path):
    prefs_file = tmp_path / "prefs.csv"
    prefs_file.write_text(
        """staff_id,preferred,disliked,max_consecutive
1,Night,Morning;Evening,3
2,,,
"""
    )
    coverage_file = tmp_path / "coverage.csv"
    coverage_file.write_text(
        """department,shifts,min_staff
Cardiology,ALL,1
Orthopedics,Morning;Evening,2
"""
    )

    prefs = read_preferences(prefs_file)
    coverage = read_coverage(coverage_file)

    assert prefs[0].preferred == frozenset({ShiftType.NIGHT})
    assert prefs[0].disliked == frozenset({ShiftType.MORNING, ShiftType.EVENING})
    assert prefs[0].max_consecutive == 3
    assert prefs[1].max_consecutive is None
    assert coverage[0].shifts == frozenset()
    assert coverage[1].minimum_staff == 2


def test_write_then_read_assignments(tmp_path):
    assignments = [
        ShiftAssignment("1", D0, ShiftType.MORNING, "Cardiology", "Dr Ada"),
        ShiftAssignment("2", D0, ShiftType.NIGHT, "Cardiology", "Dr Ben"),
    ]
    path = tmp_path / "roster.csv"

    assert write_assignments(path, assignments) == 2
    assert read_assignments(path) == assignments


def test_write_alerts(tmp_path):
    alert = CoverageAlert("Cardiology", D0, ShiftType.NIGHT, 2, 1, "Coverage gap")
    path = tmp_path / "alerts.csv"

    assert write_alerts(path, [alert]) == 1
    header = path.read_text().splitlines()[0]
    assert header == "date,shift,department,required,assigned,message"


def test_roster_grid_layout():
    assignments = [
        ShiftAssignment("1", D0, ShiftType.NIGHT, "Cardiology", "Dr Ada"),
        ShiftAssignment("2", D0, ShiftType.NIGHT, "Orthopedics", "Dr Ben"),
        ShiftAssignment("3", D0, ShiftType.MORNING, "Cardiology"),
    ]

    grid = roster_grid(assignments, [D0, date(2025, 3, 4)])

    assert list(grid.index) == ["Morning", "Evening", "Night"]
    assert list(grid.columns) == ["2025-03-03", "2025-03-04"]
    assert grid.loc["Night", "2025-03-03"] == "Dr Ada (Cardiology); Dr Ben (Orthopedics)"
    assert grid.loc["Morning", "2025-03-03"] == "3 (Cardiology)"
    assert grid.loc["Evening", "2025-03-04"] == ""


def test_empty_grid_and_summary():
    grid = roster_grid([], [D0])
    assert grid.shape == (3, 1)
    assert summarize_roster(RosterResult((), ())) == "No assignments."


def test_summary_sections():
    assignments = (ShiftAssignment("1", D0, ShiftType.MORNING, "Cardiology", "Dr Ada"),)
    alert = CoverageAlert("Cardiology", D0, ShiftType.NIGHT, 1, 0, "Coverage gap: night")
    text = summarize_roster(RosterResult(assignments, (alert,)), [StaffMember("1", "Dr Ada")], [D0])

    assert "Roster grid:" in text
    assert "Coverage alerts (1):" in text
    assert "Coverage gap: night" in text
    assert "Workload and fatigue:" in text

    frame = fatigue_frame(classify_fatigue(assignments))
    assert list(frame.columns) == ["staff_id", "name", "total_shifts", "night_shifts", "status"]
    assert frame.iloc[0]["status"] == "Normal"
