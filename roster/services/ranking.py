"""Candidate ranking for greedy slot filling."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Tuple

from roster.domain.types import Preference, ShiftType


PREFERRED = 0
NEUTRAL = 1
DISLIKED = 2


def normalize_preferences(preferences: Iterable[Preference]) -> Dict[str, Preference]:
    """Index preferences by staff id. A later record for the same id replaces an earlier one."""
    by_staff: Dict[str, Preference] = {}
    for pref in preferences:
        by_staff[pref.staff_id] = pref
    return by_staff


def preference_rank(preference: Optional[Preference], shift: ShiftType) -> int:
    """
    Rank how much a staff member wants ``shift``: 0 preferred, 1 neutral, 2 disliked.

    A shift listed as both preferred and disliked ranks as disliked.
    """
    if preference is None:
        return NEUTRAL
    if shift in preference.disliked:
        return DISLIKED
    if shift in preference.preferred:
        return PREFERRED
    return NEUTRAL


def candidate_sort_key(
    staff_id: str,
    shift: ShiftType,
    preferences: Mapping[str, Preference],
    load: Mapping[str, int],
) -> Tuple[int, int, str]:
    """Sort key: preference rank, then shifts already assigned this run, then staff id."""
    return (
        preference_rank(preferences.get(staff_id), shift),
        load.get(staff_id, 0),
        staff_id,
    )
