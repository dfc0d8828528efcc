"""Plain record types for doctor rostering."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


DOCTOR_ROLE = "Doctor"


class ShiftType(Enum):
    """Fixed shift slots. Declaration order is the global display order."""

    MORNING = "Morning"
    EVENING = "Evening"
    NIGHT = "Night"

    @property
    def order(self) -> int:
        return _SHIFT_ORDER[self]

    @classmethod
    def ordered(cls) -> Tuple["ShiftType", ...]:
        return tuple(cls)

    @classmethod
    def parse(cls, value: "ShiftType | str") -> "ShiftType":
        """Parse a shift name such as "night", "Night" or "NIGHT"."""
        if isinstance(value, ShiftType):
            return value
        text = str(value).strip().lower()
        for shift in cls:
            if shift.value.lower() == text or shift.name.lower() == text:
                return shift
        raise ValueError(f"Unknown shift type: {value!r}")

    @classmethod
    def parse_many(cls, values: Iterable["ShiftType | str"] | None) -> FrozenSet["ShiftType"]:
        if not values:
            return frozenset()
        return frozenset(cls.parse(v) for v in values)


_SHIFT_ORDER: Dict[ShiftType, int] = {shift: idx for idx, shift in enumerate(ShiftType)}


class StaffStatus(Enum):
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    INACTIVE = "Inactive"

    @classmethod
    def parse(cls, value: "StaffStatus | str | None") -> "StaffStatus":
        if value is None or value == "":
            return cls.ACTIVE
        if isinstance(value, StaffStatus):
            return value
        text = str(value).strip().lower().replace("_", " ")
        for status in cls:
            if status.value.lower() == text:
                return status
        raise ValueError(f"Unknown staff status: {value!r}")


class LeaveStatus(Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DENIED = "Denied"

    @classmethod
    def parse(cls, value: "LeaveStatus | str") -> "LeaveStatus":
        if isinstance(value, LeaveStatus):
            return value
        text = str(value).strip().lower()
        for status in cls:
            if status.value.lower() == text:
                return status
        raise ValueError(f"Unknown leave status: {value!r}")


@dataclass(frozen=True)
class ShiftDefinition:
    """Clock times for a shift type. An end at or before the start crosses midnight."""

    shift: ShiftType
    start: str
    end: str

    @property
    def start_minutes(self) -> int:
        return _hm_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        end = _hm_to_minutes(self.end)
        if end <= self.start_minutes:
            end += 24 * 60
        return end


def _hm_to_minutes(hm: str) -> int:
    hours, minutes = [int(x) for x in hm.split(":")]
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid clock time: {hm!r}")
    return hours * 60 + minutes


DEFAULT_SHIFT_DEFINITIONS: Dict[ShiftType, ShiftDefinition] = {
    ShiftType.MORNING: ShiftDefinition(ShiftType.MORNING, "06:00", "14:00"),
    ShiftType.EVENING: ShiftDefinition(ShiftType.EVENING, "14:00", "22:00"),
    ShiftType.NIGHT: ShiftDefinition(ShiftType.NIGHT, "22:00", "06:00"),
}


@dataclass(frozen=True)
class StaffMember:
    """A member of staff. ``department`` of None or "" means no department affinity."""

    staff_id: str
    name: str
    role: str = DOCTOR_ROLE
    department: Optional[str] = None
    status: StaffStatus = StaffStatus.ACTIVE

    def __post_init__(self) -> None:
        if not str(self.staff_id):
            raise ValueError("Staff member requires a non-empty id")
        object.__setattr__(self, "staff_id", str(self.staff_id))
        object.__setattr__(self, "status", StaffStatus.parse(self.status))


@dataclass(frozen=True)
class CoverageRequirement:
    """A department needs at least ``minimum_staff`` people on each of ``shifts``.

    An empty ``shifts`` set applies to every shift type.
    """

    department: str
    shifts: FrozenSet[ShiftType] = frozenset()
    minimum_staff: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "shifts", ShiftType.parse_many(self.shifts))
        if isinstance(self.minimum_staff, bool) or int(self.minimum_staff) < 1:
            raise ValueError(
                f"Coverage for {self.department} needs minimum_staff >= 1, got {self.minimum_staff}"
            )
        object.__setattr__(self, "minimum_staff", int(self.minimum_staff))

    def applicable_shifts(self) -> Tuple[ShiftType, ...]:
        if not self.shifts:
            return ShiftType.ordered()
        return tuple(s for s in ShiftType.ordered() if s in self.shifts)


@dataclass(frozen=True)
class LeaveRequest:
    staff_id: str
    start: date
    end: date
    status: LeaveStatus = LeaveStatus.PENDING
    leave_id: Optional[str] = None
    reason: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "staff_id", str(self.staff_id))
        object.__setattr__(self, "status", LeaveStatus.parse(self.status))
        if self.start > self.end:
            raise ValueError(
                f"Leave for {self.staff_id} starts after it ends: {self.start} > {self.end}"
            )

    @property
    def is_approved(self) -> bool:
        return self.status is LeaveStatus.APPROVED

    def covers(self, day: date) -> bool:
        """True when this is approved leave and ``day`` falls inside it (inclusive)."""
        return self.is_approved and self.start <= day <= self.end

    def approve(self) -> "LeaveRequest":
        return self._transition(LeaveStatus.APPROVED)

    def deny(self) -> "LeaveRequest":
        return self._transition(LeaveStatus.DENIED)

    def _transition(self, status: LeaveStatus) -> "LeaveRequest":
        if self.status is not LeaveStatus.PENDING:
            raise ValueError(
                f"Leave {self.leave_id or self.staff_id} is already {self.status.value}"
            )
        return replace(self, status=status)


@dataclass(frozen=True)
class Preference:
    """Shift preferences for one staff member.

    ``max_consecutive`` counts consecutive calendar days worked; None means no cap.
    """

    staff_id: str
    preferred: FrozenSet[ShiftType] = frozenset()
    disliked: FrozenSet[ShiftType] = frozenset()
    max_consecutive: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "staff_id", str(self.staff_id))
        object.__setattr__(self, "preferred", ShiftType.parse_many(self.preferred))
        object.__setattr__(self, "disliked", ShiftType.parse_many(self.disliked))
        if self.max_consecutive is not None:
            if isinstance(self.max_consecutive, bool) or int(self.max_consecutive) < 1:
                raise ValueError(
                    f"max_consecutive for {self.staff_id} must be >= 1, got {self.max_consecutive}"
                )
            object.__setattr__(self, "max_consecutive", int(self.max_consecutive))

    @property
    def conflicts(self) -> FrozenSet[ShiftType]:
        """Shift types listed as both preferred and disliked."""
        return self.preferred & self.disliked


@dataclass(frozen=True)
class ShiftAssignment:
    staff_id: str
    date: date
    shift: ShiftType
    department: str
    staff_name: str = ""

    def sort_key(self) -> Tuple[date, int, str, str]:
        return (self.date, self.shift.order, self.department, self.staff_id)

    def to_dict(self) -> Dict[str, str]:
        return {
            "date": self.date.isoformat(),
            "shift": self.shift.value,
            "department": self.department,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
        }


@dataclass(frozen=True)
class CoverageAlert:
    department: str
    date: date
    shift: ShiftType
    required: int
    assigned: int
    message: str

    @property
    def shortfall(self) -> int:
        return self.required - self.assigned

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.date.isoformat(),
            "shift": self.shift.value,
            "department": self.department,
            "required": self.required,
            "assigned": self.assigned,
            "message": self.message,
        }


@dataclass(frozen=True)
class RosterRequest:
    """Everything one generation call needs."""

    staff: Tuple[StaffMember, ...]
    coverage: Tuple[CoverageRequirement, ...] = ()
    preferences: Tuple[Preference, ...] = ()
    leave: Tuple[LeaveRequest, ...] = ()
    window_start: date | str | None = None
    window_length: int = 7
    prior_assignments: Tuple[ShiftAssignment, ...] = ()
    shift_definitions: Optional[Dict[ShiftType, ShiftDefinition]] = None
    eligible_role: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("staff", "coverage", "preferences", "leave", "prior_assignments"):
            object.__setattr__(self, name, tuple(getattr(self, name) or ()))


@dataclass(frozen=True)
class RosterResult:
    assignments: Tuple[ShiftAssignment, ...]
    alerts: Tuple[CoverageAlert, ...]

    @property
    def is_fully_covered(self) -> bool:
        return not self.alerts

    def assignments_for(self, staff_id: str) -> Tuple[ShiftAssignment, ...]:
        return tuple(a for a in self.assignments if a.staff_id == staff_id)

    def to_dict(self) -> Dict[str, list]:
        return {
            "assignments": [a.to_dict() for a in self.assignments],
            "alerts": [a.to_dict() for a in self.alerts],
        }


@dataclass(frozen=True)
class FatigueRecord:
    staff_id: str
    name: str
    total_shifts: int
    night_shifts: int
    high_risk: bool

    @property
    def status(self) -> str:
        return "High Risk" if self.high_risk else "Normal"
