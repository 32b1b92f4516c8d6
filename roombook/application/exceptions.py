from __future__ import annotations

from typing import Any


class BookingApiError(RuntimeError):
    """Raised when the booking service answers with an error envelope or an HTTP error status."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.validation_errors = list(validation_errors or [])


class BookingTransportError(RuntimeError):
    """Raised when no usable response was received (network failure, timeout, unparsable body)."""
