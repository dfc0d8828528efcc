"""Command-line interface for doctor roster generation."""

from __future__ import annotations

import argparse

from .config import load_config
from .domain.types import RosterRequest, RosterResult
from .engine.orchestrator import build_roster
from .io.export_csv import write_alerts, write_assignments
from .io.import_csv import (
    read_assignments,
    read_coverage,
    read_leave,
    read_preferences,
    read_staff,
)
from .io.report import fatigue_frame, roster_grid, summarize_roster
from .services.coverage import audit_coverage, expand_requirements
from .services.fatigue import classify_fatigue
from .services.validator import validate_roster
from .services.window import expand_window


def _build_request(args: argparse.Namespace, cfg) -> RosterRequest:
    staff = read_staff(args.staff)
    coverage = read_coverage(args.coverage) if args.coverage else cfg.coverage_requirements()
    preferences = read_preferences(args.preferences) if args.preferences else []
    leave = read_leave(args.leave) if args.leave else []
    prior = read_assignments(args.prior) if getattr(args, "prior", None) else []
    return RosterRequest(
        staff=tuple(staff),
        coverage=tuple(coverage),
        preferences=tuple(preferences),
        leave=tuple(leave),
        window_start=args.start,
        window_length=args.days if args.days is not None else cfg.window_length,
        prior_assignments=tuple(prior),
        shift_definitions=cfg.shift_definition_map(),
        eligible_role=cfg.eligible_role,
    )


def _cmd_generate(args: argparse.Namespace) -> None:
    """Generate a roster and write it out."""
    try:
        cfg = load_config(args.config)
        request = _build_request(args, cfg)
        result = build_roster(request, cfg, solver=args.solver)

        if args.out:
            write_assignments(args.out, result.assignments)
        if args.alerts_out:
            write_alerts(args.alerts_out, result.alerts)

        dates = expand_window(request.window_start, request.window_length)
        print(
            summarize_roster(
                result,
                request.staff,
                dates,
                night_limit=cfg.fatigue.night_limit,
                total_limit=cfg.fatigue.total_limit,
            )
        )
    except Exception as e:
        print(f"[ERROR] Generation failed: {e}")
        raise


def _cmd_validate(args: argparse.Namespace) -> None:
    """Validate an assignments CSV against the same inputs."""
    try:
        cfg = load_config(args.config)
        request = _build_request(args, cfg)
        assignments = read_assignments(args.assignments)

        dates = expand_window(request.window_start, request.window_length)
        slots = expand_requirements(request.coverage, dates)
        result = RosterResult(
            assignments=tuple(assignments),
            alerts=tuple(audit_coverage(slots, assignments)),
        )
        validate_roster(result, request)

        for alert in result.alerts:
            print(f"[WARN] {alert.message}")
        print(f"[OK] Validation passed ({len(result.alerts)} coverage gaps)")
    except Exception as e:
        print(f"[ERROR] Validation failed: {e}")
        raise


def _cmd_fatigue(args: argparse.Namespace) -> None:
    cfg = load_config(args.config)
    assignments = read_assignments(args.assignments)
    staff = read_staff(args.staff) if args.staff else None
    records = classify_fatigue(
        assignments,
        staff,
        night_limit=cfg.fatigue.night_limit,
        total_limit=cfg.fatigue.total_limit,
    )
    print(fatigue_frame(records).to_string(index=False))


def _cmd_grid(args: argparse.Namespace) -> None:
    assignments = read_assignments(args.assignments)
    dates = expand_window(args.start, args.days) if args.start else None
    print(roster_grid(assignments, dates).to_string())


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--staff", required=True, help="Path to staff CSV")
    parser.add_argument("--coverage", help="Path to coverage CSV (default: config coverage)")
    parser.add_argument("--preferences", help="Path to preferences CSV")
    parser.add_argument("--leave", help="Path to leave requests CSV")
    parser.add_argument("--start", required=True, help="Window start date (YYYY-MM-DD)")
    parser.add_argument("--days", type=int, help="Window length in days (default: config)")
    parser.add_argument("--config", help="Path to config YAML/JSON")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="roster",
        description="Doctor shift roster generation",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a roster for a window")
    _add_input_args(gen)
    gen.add_argument("--prior", help="Assignments CSV from before the window")
    gen.add_argument("--solver", choices=["greedy", "cpsat"], help="Override config solver")
    gen.add_argument("--out", help="Write assignments CSV")
    gen.add_argument("--alerts-out", help="Write coverage alerts CSV")
    gen.set_defaults(func=_cmd_generate)

    val = sub.add_parser("validate", help="Validate an assignments CSV")
    _add_input_args(val)
    val.add_argument("--prior", help="Assignments CSV from before the window")
    val.add_argument("--assignments", required=True, help="Assignments CSV to validate")
    val.set_defaults(func=_cmd_validate)

    fat = sub.add_parser("fatigue", help="Workload and fatigue table for an assignments CSV")
    fat.add_argument("--assignments", required=True)
    fat.add_argument("--staff", help="Staff CSV, lists staff with no shifts too")
    fat.add_argument("--config", help="Path to config YAML/JSON")
    fat.set_defaults(func=_cmd_fatigue)

    grid = sub.add_parser("grid", help="Print the shift x date grid for an assignments CSV")
    grid.add_argument("--assignments", required=True)
    grid.add_argument("--start", help="Window start date; shows empty days too")
    grid.add_argument("--days", type=int, default=7)
    grid.set_defaults(func=_cmd_grid)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
