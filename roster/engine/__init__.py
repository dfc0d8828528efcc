"""Roster engines and the orchestrator that runs them."""

from .base import BaseRosterEngine, PreparedInputs
from .cp_sat import CPSatRosterEngine
from .greedy import RosterEngine, generate
from .orchestrator import Orchestrator, build_roster

__all__ = [
    "BaseRosterEngine",
    "PreparedInputs",
    "RosterEngine",
    "CPSatRosterEngine",
    "generate",
    "Orchestrator",
    "build_roster",
]
