from __future__ import annotations

from dataclasses import dataclass, field

from roombook.domain.entities.availability import NOT_YET_CHECKED, AvailabilityResult, Resolved
from roombook.domain.entities.draft import BookingDraft
from roombook.domain.entities.errors import FieldError
from roombook.domain.entities.submission import IDLE, SubmissionState, Submitting, Succeeded


@dataclass(frozen=True)
class FormState:
    draft: BookingDraft = field(default_factory=BookingDraft)
    field_errors: tuple[FieldError, ...] = ()
    availability: AvailabilityResult = NOT_YET_CHECKED
    submission: SubmissionState = IDLE
    probe_seq: int = 0  # highest probe sequence number issued

    def errors_for(self, field_name: str) -> list[FieldError]:
        return [e for e in self.field_errors if e.field == field_name]

    @property
    def can_submit(self) -> bool:
        if isinstance(self.submission, (Submitting, Succeeded)):
            return False
        if isinstance(self.availability, Resolved):
            return self.availability.bookable
        return True
