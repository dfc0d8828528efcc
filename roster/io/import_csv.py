"""CSV import utilities that turn roster inputs into domain records."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from roster.config import parse_shift_list
from roster.domain.types import (
    CoverageRequirement,
    LeaveRequest,
    Preference,
    ShiftAssignment,
    ShiftType,
    StaffMember,
)


def _read(csv_path: str | Path, required: List[str]) -> pd.DataFrame:
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    for col in df.columns:
        df[col] = df[col].str.strip()

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {', '.join(missing)}")
    return df


def _to_date(series: pd.Series) -> pd.Series:
    return pd.to_datetime(series, format="%Y-%m-%d").dt.date


def read_staff(csv_path: str | Path) -> List[StaffMember]:
    """
    Read staff from CSV.

    Columns: id, name, role, department, optional status.
    """
    df = _read(csv_path, ["id", "name", "role"])
    staff = []
    for _, row in df.iterrows():
        staff.append(
            StaffMember(
                staff_id=row["id"],
                name=row["name"],
                role=row["role"],
                department=row.get("department") or None,
                status=row.get("status") or None,
            )
        )
    print(f"[INFO] Imported {len(staff)} staff from {csv_path}")
    return staff


def read_leave(csv_path: str | Path) -> List[LeaveRequest]:
    """
    Read leave requests from CSV.

    Columns: id, staff_id, start_date, end_date, status, optional reason.
    """
    df = _read(csv_path, ["staff_id", "start_date", "end_date", "status"])
    if df.empty:
        return []
    df["start_date"] = _to_date(df["start_date"])
    df["end_date"] = _to_date(df["end_date"])

    leave = []
    for _, row in df.iterrows():
        leave.append(
            LeaveRequest(
                staff_id=row["staff_id"],
                start=row["start_date"],
                end=row["end_date"],
                status=row["status"],
                leave_id=row.get("id") or None,
                reason=row.get("reason", ""),
            )
        )
    print(f"[INFO] Imported {len(leave)} leave requests from {csv_path}")
    return leave


def read_preferences(csv_path: str | Path) -> List[Preference]:
    """
    Read shift preferences from CSV.

    Columns: staff_id, preferred, disliked, max_consecutive. Shift lists are
    ';'-separated; a blank max_consecutive means no cap.
    """
    df = _read(csv_path, ["staff_id"])
    prefs = []
    for _, row in df.iterrows():
        cap = row.get("max_consecutive", "")
        prefs.append(
            Preference(
                staff_id=row["staff_id"],
                preferred=parse_shift_list(row.get("preferred") or None),
                disliked=parse_shift_list(row.get("disliked") or None),
                max_consecutive=int(cap) if cap else None,
            )
        )
    print(f"[INFO] Imported {len(prefs)} preferences from {csv_path}")
    return prefs


def read_coverage(csv_path: str | Path) -> List[CoverageRequirement]:
    """
    Read coverage requirements from CSV.

    Columns: department, shifts ('ALL' or ';'-separated), min_staff.
    """
    df = _read(csv_path, ["department", "min_staff"])
    requirements = []
    for _, row in df.iterrows():
        requirements.append(
            CoverageRequirement(
                department=row["department"],
                shifts=parse_shift_list(row.get("shifts")),
                minimum_staff=int(row["min_staff"]),
            )
        )
    print(f"[INFO] Imported {len(requirements)} coverage rules from {csv_path}")
    return requirements


def read_assignments(csv_path: str | Path) -> List[ShiftAssignment]:
    """Read assignments written by ``write_assignments``."""
    df = _read(csv_path, ["date", "shift", "department", "staff_id"])
    if df.empty:
        return []
    df["date"] = _to_date(df["date"])
    return [
        ShiftAssignment(
            staff_id=row["staff_id"],
            date=row["date"],
            shift=ShiftType.parse(row["shift"]),
            department=row["department"],
            staff_name=row.get("staff_name", ""),
        )
        for _, row in df.iterrows()
    ]
