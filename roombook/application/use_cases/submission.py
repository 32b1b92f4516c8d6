from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable

from roombook.application.exceptions import BookingApiError, BookingTransportError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.application.use_cases.validate_draft import DraftValidator
from roombook.application.utils.state_reducers import (
    DraftValidated,
    FormEvent,
    SubmitFailed,
    SubmitStarted,
    SubmitSucceeded,
)
from roombook.domain.entities.availability import Resolved
from roombook.domain.entities.draft import BookingDraft
from roombook.domain.entities.errors import (
    BookingFailure,
    DomainFailure,
    StructuralFailure,
    ValidationError,
    network_error,
    validation_error_from_payload,
)
from roombook.domain.entities.form_state import FormState
from roombook.domain.entities.master_data import Consumption
from roombook.domain.entities.submission import Submitting, Succeeded


@dataclass(frozen=True)
class SubmitOutcome:
    booking_id: int | str | None = None
    failure: BookingFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None


class SubmissionController:
    def __init__(
        self,
        api: BookingApiPort,
        validator: DraftValidator,
        get_state: Callable[[], FormState],
        dispatch: Callable[[FormEvent], None],
    ) -> None:
        self._api = api
        self._validator = validator
        self._get_state = get_state
        self._dispatch = dispatch
        self._logger = logging.getLogger(__name__)

    async def submit(
        self,
        draft: BookingDraft,
        consumptions: Iterable[Consumption] | None = None,
    ) -> SubmitOutcome | None:
        """
        Submit the draft to the booking service.

        Returns None when a submission is already in flight or has already succeeded
        (the call is ignored). Local refusals (structural errors, a resolved "not bookable" availability) never reach
        the network.
        """
        state = self._get_state()
        if isinstance(state.submission, Submitting):
            self._logger.info("Submit ignored, already submitting")
            return None
        if isinstance(state.submission, Succeeded):
            self._logger.info("Submit ignored, already booked", extra={"booking_id": state.submission.booking_id})
            return None

        field_errors = tuple(self._validator.validate(draft, consumptions))
        self._dispatch(DraftValidated(field_errors=field_errors))
        if field_errors:
            return self._fail(StructuralFailure(field_errors=field_errors))

        availability = state.availability
        if isinstance(availability, Resolved) and not availability.bookable:
            self._logger.info(
                "Submit refused, slot not bookable",
                extra={"seq": availability.seq, "room_id": draft.meeting_room_id},
            )
            return self._fail(DomainFailure(errors=availability.errors))

        # No suspension point between the Submitting check above and this transition.
        self._dispatch(SubmitStarted())
        try:
            booking = await self._api.create_booking(draft.to_create_payload())
        except BookingApiError as e:
            self._logger.warning(
                "Booking rejected",
                extra={"code": e.code, "status": e.status_code, "error": e.message},
            )
            return self._fail(DomainFailure(errors=errors_from_api_error(e)))
        except BookingTransportError as e:
            self._logger.error("Booking request failed", extra={"error": str(e)})
            return self._fail(network_error())
        except Exception as e:
            self._logger.exception("Unexpected error creating booking", extra={"error": str(e)})
            return self._fail(network_error(str(e)))

        self._dispatch(SubmitSucceeded(booking_id=booking.id))
        self._logger.info("Booking created", extra={"booking_id": booking.id, "room_id": booking.meeting_room_id})
        return SubmitOutcome(booking_id=booking.id)

    def _fail(self, failure: BookingFailure) -> SubmitOutcome:
        self._dispatch(SubmitFailed(failure=failure))
        return SubmitOutcome(failure=failure)


def errors_from_api_error(error: BookingApiError) -> tuple[ValidationError, ...]:
    """Structured validation errors win; otherwise the top-level code and message become one error."""
    if error.validation_errors:
        return tuple(validation_error_from_payload(item, error.code) for item in error.validation_errors)
    return (ValidationError(code=error.code or "UNKNOWN_ERROR", message=error.message),)

