"""Tabular views of a roster for display: grid, workload and a text summary."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

import pandas as pd

from roster.domain.types import FatigueRecord, RosterResult, ShiftAssignment, ShiftType, StaffMember
from roster.services.fatigue import classify_fatigue

from .export_csv import ASSIGNMENT_COLUMNS


def assignments_frame(assignments: Iterable[ShiftAssignment]) -> pd.DataFrame:
    return pd.DataFrame([a.to_dict() for a in assignments], columns=ASSIGNMENT_COLUMNS)


def roster_grid(
    assignments: Iterable[ShiftAssignment],
    dates: Optional[Sequence[date]] = None,
) -> pd.DataFrame:
    """
    Shift x date grid. Each cell lists "name (department)" entries joined by "; ".

    Rows follow shift order; columns are ISO dates, every date of ``dates``
    when given, otherwise the dates that have assignments.
    """
    df = assignments_frame(assignments)
    shift_names = [s.value for s in ShiftType.ordered()]
    if dates is not None:
        columns = [d.isoformat() for d in dates]
    else:
        columns = sorted(df["date"].unique().tolist())

    if df.empty:
        return pd.DataFrame("", index=shift_names, columns=columns)

    names = df["staff_name"].where(df["staff_name"] != "", df["staff_id"])
    df["label"] = names + " (" + df["department"] + ")"
    cells = df.groupby(["shift", "date"], sort=False)["label"].agg("; ".join)
    grid = cells.unstack("date")
    grid = grid.reindex(index=shift_names, columns=columns).fillna("")
    grid.index.name = "shift"
    grid.columns.name = "date"
    return grid


def fatigue_frame(records: Iterable[FatigueRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "staff_id": r.staff_id,
                "name": r.name,
                "total_shifts": r.total_shifts,
                "night_shifts": r.night_shifts,
                "status": r.status,
            }
            for r in records
        ],
        columns=["staff_id", "name", "total_shifts", "night_shifts", "status"],
    )


def summarize_roster(
    result: RosterResult,
    staff: Optional[Iterable[StaffMember]] = None,
    dates: Optional[Sequence[date]] = None,
    night_limit: int = 2,
    total_limit: int = 4,
) -> str:
    if not result.assignments and not result.alerts:
        return "No assignments."

    lines = ["Roster grid:"]
    lines.append(roster_grid(result.assignments, dates).to_string())
    lines.append("")

    lines.append(f"Coverage alerts ({len(result.alerts)}):")
    if result.alerts:
        lines.extend(f"  {alert.message}" for alert in result.alerts)
    else:
        lines.append("  none")
    lines.append("")

    records = classify_fatigue(
        result.assignments, staff, night_limit=night_limit, total_limit=total_limit
    )
    lines.append("Workload and fatigue:")
    lines.append(fatigue_frame(records).to_string(index=False))
    return "\n".join(lines)
