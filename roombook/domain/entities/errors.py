from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

NETWORK_ERROR = "NETWORK_ERROR"


@dataclass(frozen=True)
class ValidationError:
    """Domain or transport error. Two errors with the same code are the same error."""

    code: str
    message: str = dataclasses.field(compare=False)
    field: str | None = dataclasses.field(default=None, compare=False)


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str


@dataclass(frozen=True)
class StructuralFailure:
    field_errors: tuple[FieldError, ...]


@dataclass(frozen=True)
class DomainFailure:
    errors: tuple[ValidationError, ...]


@dataclass(frozen=True)
class TransportFailure:
    error: ValidationError

    @property
    def errors(self) -> tuple[ValidationError, ...]:
        return (self.error,)


BookingFailure = StructuralFailure | DomainFailure | TransportFailure


def network_error(detail: str | None = None) -> TransportFailure:
    message = "Could not reach the booking service. Check your connection and try again."
    if detail:
        message = f"{message} ({detail})"
    return TransportFailure(error=ValidationError(code=NETWORK_ERROR, message=message))


def validation_error_from_payload(item: Any, fallback_code: str | None = None) -> ValidationError:
    if not isinstance(item, dict):
        return ValidationError(code=fallback_code or "VALIDATION_ERROR", message=str(item))
    return ValidationError(
        code=str(item.get("code") or fallback_code or "VALIDATION_ERROR"),
        message=str(item.get("message") or ""),
        field=item.get("field"),
    )
