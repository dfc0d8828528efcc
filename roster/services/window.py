"""Roster window expansion."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List

from roster.domain.errors import InvalidWindow


def parse_window_start(value: date | datetime | str | None) -> date:
    """
    Normalise a window start to a ``date``.

    Accepts a date, a datetime (time part dropped) or an ISO-8601 string.

    Raises:
        InvalidWindow: If the value is missing or cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as e:
            raise InvalidWindow(f"Unparsable window start date: {value!r}") from e
    raise InvalidWindow(f"Unparsable window start date: {value!r}")


def validate_window_length(length: int) -> int:
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise InvalidWindow(f"Window length must be a positive integer, got {length!r}")
    return length


def expand_window(start: date | datetime | str, length: int = 7) -> List[date]:
    """Return ``length`` consecutive dates beginning at ``start``."""
    first = parse_window_start(start)
    length = validate_window_length(length)
    return [first + timedelta(days=offset) for offset in range(length)]
