"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from roster.domain.types import CoverageRequirement, Preference, ShiftType, StaffMember


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def monday():
    return date(2025, 3, 3)


@pytest.fixture
def two_doctors():
    return [
        StaffMember("A", "Dr A", "Doctor", "Cardiology"),
        StaffMember("B", "Dr B", "Doctor", "Cardiology"),
    ]


@pytest.fixture
def cardiology_all_shifts():
    return [CoverageRequirement("Cardiology", frozenset(), 1)]


@pytest.fixture
def night_preferences():
    return [
        Preference("A", preferred={ShiftType.NIGHT}, max_consecutive=3),
        Preference("B", max_consecutive=2),
    ]
