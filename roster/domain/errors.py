"""Exceptions raised by roster generation."""

from __future__ import annotations


class RosterError(Exception):
    """Base class for fatal roster generation failures."""


class NoEligibleStaff(RosterError):
    """The staff pool contains no doctor who can be rostered."""

    def __init__(self, message: str = "cannot generate: no doctors available"):
        super().__init__(message)


class InvalidWindow(RosterError, ValueError):
    """Window length is not positive or the start date cannot be parsed."""
