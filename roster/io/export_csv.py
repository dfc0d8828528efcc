"""CSV export utilities for generated rosters."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from roster.domain.types import CoverageAlert, ShiftAssignment

ASSIGNMENT_COLUMNS = ["date", "shift", "department", "staff_id", "staff_name"]
ALERT_COLUMNS = ["date", "shift", "department", "required", "assigned", "message"]


def write_assignments(csv_path: str | Path, assignments: Iterable[ShiftAssignment]) -> int:
    """
    Write assignments to CSV in roster order.

    Returns:
        Number of rows written
    """
    rows = [a.to_dict() for a in assignments]
    df = pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} assignments to {csv_path}")
    return len(df)


def write_alerts(csv_path: str | Path, alerts: Iterable[CoverageAlert]) -> int:
    rows = [a.to_dict() for a in alerts]
    df = pd.DataFrame(rows, columns=ALERT_COLUMNS)
    df.to_csv(csv_path, index=False)
    print(f"[INFO] Exported {len(df)} coverage alerts to {csv_path}")
    return len(df)
