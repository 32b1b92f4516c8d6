from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable

from roombook.domain.entities.availability import NOT_YET_CHECKED, AvailabilityQuery, Checking, Resolved
from roombook.domain.entities.draft import BookingDraft
from roombook.domain.entities.errors import BookingFailure, FieldError
from roombook.domain.entities.form_state import FormState
from roombook.domain.entities.submission import Failed, Submitting, Succeeded


@dataclass(frozen=True)
class FieldChanged:
    draft: BookingDraft
    field_errors: tuple[FieldError, ...]
    trigger_changed: bool


@dataclass(frozen=True)
class DraftValidated:
    field_errors: tuple[FieldError, ...]


@dataclass(frozen=True)
class ProbeIssued:
    seq: int
    query: AvailabilityQuery


@dataclass(frozen=True)
class ProbeResolved:
    seq: int
    result: Resolved


@dataclass(frozen=True)
class ProbeFailed:
    seq: int


@dataclass(frozen=True)
class SubmitStarted:
    pass


@dataclass(frozen=True)
class SubmitSucceeded:
    booking_id: int | str


@dataclass(frozen=True)
class SubmitFailed:
    failure: BookingFailure


FormEvent = (
    FieldChanged
    | DraftValidated
    | ProbeIssued
    | ProbeResolved
    | ProbeFailed
    | SubmitStarted
    | SubmitSucceeded
    | SubmitFailed
)


def on_field_changed(state: FormState, event: FieldChanged) -> FormState:
    availability = NOT_YET_CHECKED if event.trigger_changed else state.availability
    return replace(state, draft=event.draft, field_errors=event.field_errors, availability=availability)


def on_draft_validated(state: FormState, event: DraftValidated) -> FormState:
    return replace(state, field_errors=event.field_errors)


def on_probe_issued(state: FormState, event: ProbeIssued) -> FormState:
    if event.seq <= state.probe_seq:
        return state
    return replace(state, availability=Checking(seq=event.seq, query=event.query), probe_seq=event.seq)


def _is_current_probe(state: FormState, seq: int) -> bool:
    # A trigger-field change after issue reverts to NotYetChecked, which also makes the request stale.
    return (
        seq == state.probe_seq
        and isinstance(state.availability, Checking)
        and state.availability.seq == seq
    )


def on_probe_resolved(state: FormState, event: ProbeResolved) -> FormState:
    if not _is_current_probe(state, event.seq):
        return state
    return replace(state, availability=event.result)


def on_probe_failed(state: FormState, event: ProbeFailed) -> FormState:
    if not _is_current_probe(state, event.seq):
        return state
    return replace(state, availability=NOT_YET_CHECKED)


def on_submit_started(state: FormState, event: SubmitStarted) -> FormState:
    if isinstance(state.submission, (Submitting, Succeeded)):
        return state
    return replace(state, submission=Submitting())


def on_submit_succeeded(state: FormState, event: SubmitSucceeded) -> FormState:
    if not isinstance(state.submission, Submitting):
        return state
    return replace(state, submission=Succeeded(booking_id=event.booking_id), field_errors=())


def on_submit_failed(state: FormState, event: SubmitFailed) -> FormState:
    if isinstance(state.submission, Succeeded):
        return state
    return replace(state, submission=Failed(failure=event.failure))


REDUCERS: dict[type, Callable[[FormState, object], FormState]] = {
    FieldChanged: on_field_changed,
    DraftValidated: on_draft_validated,
    ProbeIssued: on_probe_issued,
    ProbeResolved: on_probe_resolved,
    ProbeFailed: on_probe_failed,
    SubmitStarted: on_submit_started,
    SubmitSucceeded: on_submit_succeeded,
    SubmitFailed: on_submit_failed,
}


def reduce(state: FormState, event: FormEvent) -> FormState:
    """Apply one event. Unknown events leave the state unchanged."""
    reducer = REDUCERS.get(type(event))
    if reducer is None:
        return state
    return reducer(state, event)
