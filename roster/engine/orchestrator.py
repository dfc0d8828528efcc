"""Orchestrator - picks an engine, runs it and validates the roster."""

from __future__ import annotations

from roster.config import RosterConfig
from roster.domain.types import RosterRequest, RosterResult
from roster.services.validator import validate_roster

from .base import BaseRosterEngine
from .cp_sat import CPSatRosterEngine
from .greedy import RosterEngine


class Orchestrator:
    """
    Orchestrator coordinates one roster generation request.

    It builds the configured engine, runs it against the request, reports
    preference data-quality issues and coverage gaps, and validates the
    result before handing it back.
    """

    def __init__(self, cfg: RosterConfig | None = None, solver: str | None = None):
        """
        Initialize orchestrator.

        Args:
            cfg: RosterConfig (defaults when omitted)
            solver: Override for ``cfg.solver`` ("greedy" or "cpsat")
        """
        self.cfg = cfg or RosterConfig()
        self.solver = (solver or self.cfg.solver).lower()

    def make_engine(self) -> BaseRosterEngine:
        if self.solver == "greedy":
            return RosterEngine(
                shift_definitions=self.cfg.shift_definition_map(),
                eligible_role=self.cfg.eligible_role,
            )
        if self.solver == "cpsat":
            return CPSatRosterEngine.from_config(self.cfg)
        raise ValueError(f"Unknown solver {self.solver!r}")

    def build_roster(self, request: RosterRequest) -> RosterResult:
        """
        Generate a roster for ``request``.

        Raises:
            NoEligibleStaff / InvalidWindow: From the engine, before any assignment
            ValueError: If validation is enabled and the roster breaks a hard rule
        """
        print(
            f"[INFO] Orchestrator: Building roster from {request.window_start} "
            f"for {request.window_length} days ({self.solver})"
        )

        for pref in request.preferences:
            if pref.conflicts:
                names = ", ".join(s.value for s in sorted(pref.conflicts, key=lambda s: s.order))
                print(
                    f"[WARN] Staff {pref.staff_id} both prefers and dislikes {names}; "
                    "treating as disliked"
                )

        engine = self.make_engine()
        result = engine.run(request)

        if self.cfg.validate:
            validate_roster(result, request, engine.shift_definitions)

        for alert in result.alerts:
            print(f"[WARN] {alert.message}")

        print(
            f"[OK] Orchestrator: Generated {len(result.assignments)} assignments, "
            f"{len(result.alerts)} coverage alerts"
        )
        return result


def build_roster(
    request: RosterRequest,
    cfg: RosterConfig | None = None,
    solver: str | None = None,
) -> RosterResult:
    """Convenience function to build a roster using the orchestrator."""
    return Orchestrator(cfg, solver=solver).build_roster(request)
