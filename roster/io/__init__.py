"""I/O utilities for CSV import/export and reports."""

from .export_csv import write_alerts, write_assignments
from .import_csv import read_assignments, read_coverage, read_leave, read_preferences, read_staff
from .report import assignments_frame, fatigue_frame, roster_grid, summarize_roster

__all__ = [
    "read_staff",
    "read_leave",
    "read_preferences",
    "read_coverage",
    "read_assignments",
    "write_assignments",
    "write_alerts",
    "assignments_frame",
    "fatigue_frame",
    "roster_grid",
    "summarize_roster",
]
