from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from roombook.domain.entities.draft import TRIGGER_FIELDS, BookingDraft
from roombook.domain.entities.errors import FieldError
from roombook.domain.entities.master_data import Consumption

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")

MESSAGES = {
    "UNIT_REQUIRED": "Unit must be selected",
    "ROOM_REQUIRED": "Meeting room must be selected",
    "DATE_REQUIRED": "Meeting date is required",
    "INVALID_DATE": "Meeting date is not a valid date",
    "START_TIME_REQUIRED": "Start time is required",
    "END_TIME_REQUIRED": "End time is required",
    "INVALID_TIME_FORMAT": "Time must use the HH:MM format",
    "INVALID_TIME_ORDER": "End time must be after start time",
    "PARTICIPANTS_REQUIRED": "Number of participants is required",
    "INVALID_PARTICIPANTS_COUNT": "At least one participant is required",
    "INVALID_CONSUMPTION_AMOUNT": "Consumption amount cannot be negative",
    "UNKNOWN_CONSUMPTION": "Selected consumption option does not exist",
}


def _error(field_name: str, code: str) -> FieldError:
    return FieldError(field=field_name, code=code, message=MESSAGES[code])


class DraftValidator:
    """
    Structural checks on a booking draft.

    Every rule runs on every call so the caller sees all violations at once.
    Nothing here talks to the booking service.
    """

    def validate(
        self,
        draft: BookingDraft,
        consumptions: Iterable[Consumption] | None = None,
    ) -> list[FieldError]:
        errors: list[FieldError] = []

        if draft.unit_id is None:
            errors.append(_error("unit_id", "UNIT_REQUIRED"))
        if draft.meeting_room_id is None:
            errors.append(_error("meeting_room_id", "ROOM_REQUIRED"))

        if draft.meeting_date is None:
            errors.append(_error("meeting_date", "DATE_REQUIRED"))
        elif not _is_iso_date(draft.meeting_date):
            errors.append(_error("meeting_date", "INVALID_DATE"))

        for field_name, required_code in (
            ("start_time", "START_TIME_REQUIRED"),
            ("end_time", "END_TIME_REQUIRED"),
        ):
            value = getattr(draft, field_name)
            if value is None:
                errors.append(_error(field_name, required_code))
            elif not TIME_PATTERN.match(value):
                errors.append(_error(field_name, "INVALID_TIME_FORMAT"))

        # Same-day times compare correctly as HH:MM strings.
        if draft.start_time is not None and draft.end_time is not None:
            if draft.start_time[:5] >= draft.end_time[:5]:
                errors.append(_error("end_time", "INVALID_TIME_ORDER"))

        if draft.participant_count is None:
            errors.append(_error("participant_count", "PARTICIPANTS_REQUIRED"))
        elif draft.participant_count < 1:
            errors.append(_error("participant_count", "INVALID_PARTICIPANTS_COUNT"))

        if draft.total_consumption is not None and draft.total_consumption < 0:
            errors.append(_error("total_consumption", "INVALID_CONSUMPTION_AMOUNT"))

        if consumptions is not None:
            known_ids = {c.id for c in consumptions}
            if any(cid not in known_ids for cid in draft.consumption_ids):
                errors.append(_error("consumption_ids", "UNKNOWN_CONSUMPTION"))

        return errors

    def is_probe_armed(self, draft: BookingDraft, field_errors: Iterable[FieldError]) -> bool:
        """True when every trigger field is present and none of them carries an error."""
        if any(getattr(draft, name) is None for name in TRIGGER_FIELDS):
            return False
        return not any(e.field in TRIGGER_FIELDS for e in field_errors)


def _is_iso_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return len(value) == 10
