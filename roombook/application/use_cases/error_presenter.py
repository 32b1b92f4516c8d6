from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from roombook.domain.entities.errors import (
    NETWORK_ERROR,
    BookingFailure,
    DomainFailure,
    TransportFailure,
    ValidationError,
)

ICON_ERROR = "icon-alert-circle text-red-600"
ICON_WARNING = "icon-alert-triangle text-amber-500"
ICON_OFFLINE = "icon-wifi-off text-gray-500"


@dataclass(frozen=True)
class ErrorPresentation:
    title: str
    icon_class: str


@dataclass(frozen=True)
class PresentedError:
    code: str
    title: str
    message: str
    icon_class: str


GENERIC = ErrorPresentation("Error", ICON_ERROR)

# Keep in sync with the booking service's error codes; unknown codes fall back to GENERIC.
CATALOG: dict[str, ErrorPresentation] = {
    "TIME_CONFLICT": ErrorPresentation("Time Conflict", ICON_ERROR),
    "CAPACITY_EXCEEDED": ErrorPresentation("Capacity Exceeded", ICON_ERROR),
    "INVALID_DATE_PAST": ErrorPresentation("Invalid Date", ICON_WARNING),
    "INVALID_WORKING_DAY": ErrorPresentation("Invalid Day", ICON_WARNING),
    "OUTSIDE_WORKING_HOURS": ErrorPresentation("Outside Working Hours", ICON_WARNING),
    "INVALID_TIME_FORMAT": ErrorPresentation("Bad Time Format", ICON_WARNING),
    "INVALID_TIME_ORDER": ErrorPresentation("Bad Time Order", ICON_WARNING),
    "INVALID_DURATION_TOO_SHORT": ErrorPresentation("Invalid Duration", ICON_WARNING),
    "INVALID_DURATION_TOO_LONG": ErrorPresentation("Invalid Duration", ICON_WARNING),
    "ROOM_NOT_FOUND": ErrorPresentation("Room Not Found", ICON_ERROR),
    "ROOM_INACTIVE": ErrorPresentation("Room Inactive", ICON_ERROR),
    "INVALID_PARTICIPANTS_COUNT": ErrorPresentation("Invalid Participant Count", ICON_WARNING),
    NETWORK_ERROR: ErrorPresentation("Network Error", ICON_OFFLINE),
}


class ErrorPresenter:
    def present(self, code: str) -> ErrorPresentation:
        return CATALOG.get(code, GENERIC)

    def present_all(self, failure: BookingFailure | None) -> list[PresentedError]:
        """Structural failures render as an empty list; their errors stay on the fields."""
        if not isinstance(failure, (DomainFailure, TransportFailure)):
            return []
        return self.present_errors(failure.errors)

    def present_errors(self, errors: Iterable[ValidationError]) -> list[PresentedError]:
        presented = []
        for error in errors:
            presentation = self.present(error.code)
            presented.append(
                PresentedError(
                    code=error.code,
                    title=presentation.title,
                    message=error.message,
                    icon_class=presentation.icon_class,
                )
            )
        return presented
