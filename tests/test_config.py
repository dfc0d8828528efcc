"""Tests for configuration loading."""

import json

import pytest

from roster.config import RosterConfig, config_from_dict, load_config, parse_shift_list
from roster.domain.types import ShiftType


def test_defaults():
    cfg = load_config()
    assert cfg.window_length == 7
    assert cfg.solver == "greedy"
    assert cfg.fatigue.night_limit == 2
    assert cfg.fatigue.total_limit == 4

    coverage = {r.department: r for r in cfg.coverage_requirements()}
    assert coverage["Cardiology"].applicable_shifts() == ShiftType.ordered()
    assert coverage["Orthopedics"].applicable_shifts() == (ShiftType.MORNING, ShiftType.EVENING)


def test_load_yaml(tmp_path):
    path = tmp_path / "roster.yaml"
    path.write_text(
        """
window_length: 14
solver: CPSAT
shift_definitions:
  Night: {start: "21:00", end: "07:00"}
coverage:
  - department: Neurology
    shifts: "Morning;Night"
    min_staff: 2
fatigue:
  night_limit: 3
cp_sat:
  deterministic_time_limit: 5
"""
    )

    cfg = load_config(path)

    assert cfg.window_length == 14
    assert cfg.solver == "cpsat"
    assert cfg.fatigue.night_limit == 3
    assert cfg.fatigue.total_limit == 4
    assert cfg.cp_sat.deterministic_time_limit == 5.0
    definitions = cfg.shift_definition_map()
    assert definitions[ShiftType.NIGHT].start == "21:00"
    assert definitions[ShiftType.MORNING].start == "06:00"
    (req,) = cfg.coverage_requirements()
    assert req.minimum_staff == 2
    assert req.shifts == frozenset({ShiftType.MORNING, ShiftType.NIGHT})


def test_load_json(tmp_path):
    path = tmp_path / "roster.json"
    path.write_text(json.dumps({"eligible_role": "Surgeon", "validate": False}))
    cfg = load_config(path)
    assert cfg.eligible_role == "Surgeon"
    assert cfg.validate is False


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == RosterConfig()


@pytest.mark.parametrize(
    "data",
    [
        {"window_length": 0},
        {"solver": "annealing"},
        {"coverage": [{"shifts": "ALL"}]},
        {"coverage": [{"department": "Cardiology", "min_staff": 0}]},
        {"shift_definitions": {"Night": {"start": "22:00"}}},
        {"shift_definitions": {"Twilight": {"start": "18:00", "end": "20:00"}}},
        {"fatigue": {"night_limit": -1}},
    ],
)
def test_invalid_config_rejected(data):
    with pytest.raises(ValueError):
        config_from_dict(data)


def test_parse_shift_list():
    assert parse_shift_list("ALL") == frozenset()
    assert parse_shift_list(None) == frozenset()
    assert parse_shift_list("morning; evening") == frozenset({ShiftType.MORNING, ShiftType.EVENING})
    assert parse_shift_list(["Night"]) == frozenset({ShiftType.NIGHT})
