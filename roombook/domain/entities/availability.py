from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from roombook.domain.entities.errors import ValidationError


@dataclass(frozen=True)
class AvailabilityQuery:
    """Trigger-field values captured when a probe is issued."""

    room_id: int
    date: str
    start_time: str
    end_time: str
    participants: int

    def to_params(self) -> dict[str, Any]:
        return {
            "room_id": self.room_id,
            "date": self.date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "participants": self.participants,
        }


@dataclass(frozen=True)
class NotYetChecked:
    status: str = "not_checked"


@dataclass(frozen=True)
class Checking:
    seq: int
    query: AvailabilityQuery | None = None
    status: str = "checking"


@dataclass(frozen=True)
class Resolved:
    seq: int
    available: bool
    validations_passed: bool
    errors: tuple[ValidationError, ...] = ()
    conflicts: tuple[dict[str, Any], ...] = field(default=(), compare=False)
    status: str = "resolved"

    @property
    def bookable(self) -> bool:
        return self.available and self.validations_passed


AvailabilityResult = NotYetChecked | Checking | Resolved

NOT_YET_CHECKED = NotYetChecked()


def resolved_from_flags(
    available: bool,
    validations_passed: bool,
    errors: tuple[ValidationError, ...] = (),
    conflicts: tuple[dict[str, Any], ...] = (),
) -> Resolved:
    """Build a result, making sure an unbookable slot always carries at least one error."""
    if not errors and not available:
        errors = (ValidationError(code="TIME_CONFLICT", message="The room is already booked for this time"),)
    elif not errors and not validations_passed:
        errors = (ValidationError(code="VALIDATION_FAILED", message="The booking does not meet the room rules"),)
    return Resolved(
        seq=0,
        available=available,
        validations_passed=validations_passed,
        errors=errors,
        conflicts=conflicts,
    )
