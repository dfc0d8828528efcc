"""Doctor shift-roster generation.

Modules:
- config: load and validate configuration (YAML or JSON)
- domain: record types (staff, leave, preferences, coverage, assignments, alerts) and errors
- services: window expansion, hard constraints, ranking, coverage audit, fatigue, validation
- engine: greedy roster engine, CP-SAT roster engine and the orchestrator
- io: CSV import/export and text reports
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "domain",
    "services",
    "engine",
    "io",
    "cli",
]
