from __future__ import annotations

from dataclasses import dataclass

from roombook.domain.entities.errors import BookingFailure


@dataclass(frozen=True)
class Idle:
    status: str = "idle"


@dataclass(frozen=True)
class Submitting:
    status: str = "submitting"


@dataclass(frozen=True)
class Succeeded:
    booking_id: int | str
    status: str = "succeeded"


@dataclass(frozen=True)
class Failed:
    failure: BookingFailure
    status: str = "failed"


SubmissionState = Idle | Submitting | Succeeded | Failed

IDLE = Idle()
