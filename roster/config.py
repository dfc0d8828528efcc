"""Configuration loading and validation (YAML or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .domain.types import (
    DEFAULT_SHIFT_DEFINITIONS,
    DOCTOR_ROLE,
    CoverageRequirement,
    ShiftDefinition,
    ShiftType,
)


SOLVERS = {"greedy", "cpsat"}


@dataclass
class FatigueThresholds:
    night_limit: int = 2
    total_limit: int = 4


@dataclass
class CpSatOptions:
    deterministic_time_limit: float = 10.0
    random_seed: int = 0
    shortfall_weight: int = 1000
    preference_weight: int = 10
    balance_weight: int = 5


def _default_coverage() -> List[Dict[str, Any]]:
    # Cardiology round the clock, Orthopedics on day shifts.
    return [
        {"department": "Cardiology", "shifts": "ALL", "min_staff": 1},
        {"department": "Orthopedics", "shifts": ["Morning", "Evening"], "min_staff": 1},
    ]


def _default_shift_definitions() -> Dict[str, Dict[str, str]]:
    return {
        d.shift.value: {"start": d.start, "end": d.end}
        for d in DEFAULT_SHIFT_DEFINITIONS.values()
    }


@dataclass
class RosterConfig:
    window_length: int = 7
    eligible_role: str = DOCTOR_ROLE
    solver: str = "greedy"
    validate: bool = True
    shift_definitions: Dict[str, Dict[str, str]] = field(default_factory=_default_shift_definitions)
    coverage: List[Dict[str, Any]] = field(default_factory=_default_coverage)
    fatigue: FatigueThresholds = field(default_factory=FatigueThresholds)
    cp_sat: CpSatOptions = field(default_factory=CpSatOptions)

    def coverage_requirements(self) -> List[CoverageRequirement]:
        """Build coverage records from the ``coverage`` section."""
        requirements = []
        for idx, entry in enumerate(self.coverage):
            if "department" not in entry:
                raise ValueError(f"coverage[{idx}] is missing 'department'")
            requirements.append(
                CoverageRequirement(
                    department=str(entry["department"]),
                    shifts=parse_shift_list(entry.get("shifts")),
                    minimum_staff=int(entry.get("min_staff", 1)),
                )
            )
        return requirements

    def shift_definition_map(self) -> Dict[ShiftType, ShiftDefinition]:
        definitions = dict(DEFAULT_SHIFT_DEFINITIONS)
        for name, window in self.shift_definitions.items():
            shift = ShiftType.parse(name)
            try:
                definitions[shift] = ShiftDefinition(shift, str(window["start"]), str(window["end"]))
            except KeyError as e:
                raise ValueError(f"shift_definitions.{name} is missing {e.args[0]!r}") from e
        return definitions


def parse_shift_list(value: Any) -> frozenset:
    """Parse "ALL", "Morning;Night" or a list of names. Empty means all shift types."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        text = value.strip()
        if not text or text.upper() == "ALL":
            return frozenset()
        parts = [p for p in text.replace(",", ";").split(";") if p.strip()]
        return ShiftType.parse_many(parts)
    return ShiftType.parse_many(list(value))


def _read_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must contain a mapping at the top level")
    return data


def config_from_dict(data: Dict[str, Any]) -> RosterConfig:
    cfg = RosterConfig()
    if "window_length" in data:
        cfg.window_length = int(data["window_length"])
    if "eligible_role" in data:
        cfg.eligible_role = str(data["eligible_role"])
    if "solver" in data:
        cfg.solver = str(data["solver"]).lower()
    if "validate" in data:
        cfg.validate = bool(data["validate"])
    if "shift_definitions" in data:
        cfg.shift_definitions = dict(data["shift_definitions"] or {})
    if "coverage" in data:
        cfg.coverage = list(data["coverage"] or [])

    fatigue = data.get("fatigue") or {}
    cfg.fatigue = FatigueThresholds(
        night_limit=int(fatigue.get("night_limit", cfg.fatigue.night_limit)),
        total_limit=int(fatigue.get("total_limit", cfg.fatigue.total_limit)),
    )

    cp = data.get("cp_sat") or {}
    defaults = CpSatOptions()
    cfg.cp_sat = CpSatOptions(
        deterministic_time_limit=float(
            cp.get("deterministic_time_limit", defaults.deterministic_time_limit)
        ),
        random_seed=int(cp.get("random_seed", defaults.random_seed)),
        shortfall_weight=int(cp.get("shortfall_weight", defaults.shortfall_weight)),
        preference_weight=int(cp.get("preference_weight", defaults.preference_weight)),
        balance_weight=int(cp.get("balance_weight", defaults.balance_weight)),
    )

    validate_config(cfg)
    return cfg


def validate_config(cfg: RosterConfig) -> None:
    if cfg.window_length <= 0:
        raise ValueError(f"window_length must be positive, got {cfg.window_length}")
    if cfg.solver not in SOLVERS:
        raise ValueError(f"solver must be one of {sorted(SOLVERS)}, got {cfg.solver!r}")
    if cfg.fatigue.night_limit < 0 or cfg.fatigue.total_limit < 0:
        raise ValueError("fatigue limits must be non-negative")
    if cfg.cp_sat.deterministic_time_limit <= 0:
        raise ValueError("cp_sat.deterministic_time_limit must be positive")
    # Parse eagerly so bad shift names surface at load time.
    cfg.shift_definition_map()
    cfg.coverage_requirements()


def load_config(path: str | Path | None = None) -> RosterConfig:
    """Load config from a YAML or JSON file; no path gives the defaults."""
    if path is None:
        cfg = RosterConfig()
        validate_config(cfg)
        return cfg
    return config_from_dict(_read_raw(Path(path)))
