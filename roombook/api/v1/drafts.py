import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from roombook.api.v1.schemas import (
    AvailabilitySchema,
    DraftPatchSchema,
    DraftSchema,
    DraftStateSchema,
    FieldErrorSchema,
    PresentedErrorSchema,
    SubmissionSchema,
    SubmitResponseSchema,
)
from roombook.application.ports.booking_api import BookingApiPort
from roombook.application.ports.draft_store import DraftStorePort
from roombook.application.use_cases.booking_form import BookingFormSession
from roombook.application.use_cases.error_presenter import ErrorPresenter, PresentedError
from roombook.application.use_cases.master_data import MasterDataLoader, room_capacity_label
from roombook.core.config import settings
from roombook.domain.entities.availability import Checking, Resolved
from roombook.domain.entities.errors import TransportFailure
from roombook.domain.entities.submission import Failed, Succeeded
from roombook.wiring.dependencies import (
    get_booking_api,
    get_draft_store,
    get_error_presenter,
    get_master_data_loader,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _presented(errors: list[PresentedError]) -> list[PresentedErrorSchema]:
    return [
        PresentedErrorSchema(code=e.code, title=e.title, message=e.message, icon_class=e.icon_class)
        for e in errors
    ]


def build_state_schema(draft_id: str, session: BookingFormSession, presenter: ErrorPresenter) -> DraftStateSchema:
    state = session.state
    draft = state.draft

    field_errors: dict[str, list[FieldErrorSchema]] = {}
    for error in state.field_errors:
        field_errors.setdefault(error.field, []).append(FieldErrorSchema(code=error.code, message=error.message))

    availability = state.availability
    if isinstance(availability, Resolved):
        availability_schema = AvailabilitySchema(
            status=availability.status,
            seq=availability.seq,
            available=availability.available,
            validations_passed=availability.validations_passed,
            errors=_presented(presenter.present_errors(availability.errors)),
        )
    elif isinstance(availability, Checking):
        availability_schema = AvailabilitySchema(status=availability.status, seq=availability.seq)
    else:
        availability_schema = AvailabilitySchema(status=availability.status)

    submission = state.submission
    errors = _presented(presenter.present_all(submission.failure)) if isinstance(submission, Failed) else []

    master_data = session.master_data
    room = master_data.room(draft.meeting_room_id) if master_data else None

    return DraftStateSchema(
        draft_id=draft_id,
        draft=DraftSchema(
            unit_id=draft.unit_id,
            meeting_room_id=draft.meeting_room_id,
            meeting_date=draft.meeting_date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            participant_count=draft.participant_count,
            total_consumption=draft.total_consumption,
            consumption_ids=sorted(draft.consumption_ids),
            notes=draft.notes,
        ),
        field_errors=field_errors,
        availability=availability_schema,
        submission=SubmissionSchema(
            status=submission.status,
            booking_id=submission.booking_id if isinstance(submission, Succeeded) else None,
        ),
        errors=errors,
        can_submit=state.can_submit,
        room_capacity=room_capacity_label(room),
    )


def _get_session(draft_id: str, store: DraftStorePort) -> BookingFormSession:
    session = store.get(draft_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Draft not found")
    return session


@router.post("/drafts", response_model=DraftStateSchema, status_code=201)
async def create_draft(
    api: BookingApiPort = Depends(get_booking_api),
    loader: MasterDataLoader = Depends(get_master_data_loader),
    store: DraftStorePort = Depends(get_draft_store),
    presenter: ErrorPresenter = Depends(get_error_presenter),
):
    session = BookingFormSession(
        api=api,
        master_data=loader,
        debounce_seconds=settings.PROBE_DEBOUNCE_MS / 1000,
    )
    await session.load_master_data()
    draft_id = store.create(session)
    logger.info("Draft created", extra={"draft_id": draft_id})
    return build_state_schema(draft_id, session, presenter)


@router.get("/drafts/{draft_id}", response_model=DraftStateSchema)
async def get_draft(
    draft_id: str,
    store: DraftStorePort = Depends(get_draft_store),
    presenter: ErrorPresenter = Depends(get_error_presenter),
):
    session = _get_session(draft_id, store)
    return build_state_schema(draft_id, session, presenter)


@router.patch("/drafts/{draft_id}", response_model=DraftStateSchema)
async def update_draft(
    draft_id: str,
    req: DraftPatchSchema,
    store: DraftStorePort = Depends(get_draft_store),
    presenter: ErrorPresenter = Depends(get_error_presenter),
):
    session = _get_session(draft_id, store)
    session.update_fields(req.model_dump(exclude_unset=True))
    return build_state_schema(draft_id, session, presenter)


@router.post(
    "/drafts/{draft_id}/submit",
    response_model=SubmitResponseSchema,
    status_code=201,
    responses={422: {"model": DraftStateSchema}, 502: {"model": DraftStateSchema}},
)
async def submit_draft(
    draft_id: str,
    store: DraftStorePort = Depends(get_draft_store),
    presenter: ErrorPresenter = Depends(get_error_presenter),
):
    session = _get_session(draft_id, store)
    outcome = await session.submit()
    if outcome is None:
        raise HTTPException(status_code=409, detail="Submission already in progress or completed")

    if outcome.succeeded:
        store.discard(draft_id)
        logger.info("Draft submitted", extra={"draft_id": draft_id, "booking_id": outcome.booking_id})
        return SubmitResponseSchema(booking_id=outcome.booking_id)

    status_code = 502 if isinstance(outcome.failure, TransportFailure) else 422
    body = build_state_schema(draft_id, session, presenter)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.delete("/drafts/{draft_id}", status_code=204)
async def discard_draft(draft_id: str, store: DraftStorePort = Depends(get_draft_store)) -> Response:
    if not store.discard(draft_id):
        raise HTTPException(status_code=404, detail="Draft not found")
    return Response(status_code=204)
