from fastapi import APIRouter, Depends, HTTPException, Query

from roombook.api.v1.schemas import (
    BookingListSchema,
    BookingRowSchema,
    ConsumptionSchema,
    MasterDataSchema,
    PaginationSchema,
    RoomSchema,
    UnitSchema,
)
from roombook.application.exceptions import BookingApiError, BookingTransportError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.application.use_cases.master_data import MasterDataLoader, room_capacity_label
from roombook.application.utils.formatting import format_meeting_date, format_time_range, page_numbers
from roombook.core.config import settings
from roombook.wiring.dependencies import get_booking_api, get_master_data_loader

router = APIRouter()


@router.get("/master-data", response_model=MasterDataSchema)
async def master_data(
    active_only: bool = False,
    loader: MasterDataLoader = Depends(get_master_data_loader),
):
    try:
        data = await loader.load()
    except (BookingApiError, BookingTransportError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    units, rooms, consumptions = data.units, data.rooms, data.consumptions
    if active_only:
        units, rooms, consumptions = data.active_units(), data.active_rooms(), data.active_consumptions()

    return MasterDataSchema(
        units=[UnitSchema(id=u.id, name=u.name, is_active=u.is_active) for u in units],
        rooms=[
            RoomSchema(
                id=r.id,
                name=r.name,
                capacity=r.capacity,
                capacity_label=room_capacity_label(r),
                is_active=r.is_active,
            )
            for r in rooms
        ],
        consumptions=[ConsumptionSchema(id=c.id, name=c.name, is_active=c.is_active) for c in consumptions],
    )


@router.get("/bookings", response_model=BookingListSchema)
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    unit_id: int | None = None,
    room_id: int | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    api: BookingApiPort = Depends(get_booking_api),
):
    try:
        result = await api.fetch_bookings(
            page=page,
            limit=limit or settings.BOOKINGS_PAGE_LIMIT,
            unit_id=unit_id,
            room_id=room_id,
            date_from=date_from,
            date_to=date_to,
        )
    except (BookingApiError, BookingTransportError) as e:
        raise HTTPException(status_code=502, detail=str(e))

    pagination = result.pagination
    return BookingListSchema(
        bookings=[
            BookingRowSchema(
                id=b.id,
                unit=b.unit.name if b.unit else None,
                meeting_room=b.meeting_room.name if b.meeting_room else None,
                meeting_date=format_meeting_date(b.meeting_date),
                time=format_time_range(b.start_time, b.end_time),
                total_participants=b.total_participants,
                total_consumption=b.total_consumption,
                notes=b.notes,
            )
            for b in result.bookings
        ],
        pagination=PaginationSchema(
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            total_pages=pagination.total_pages,
        ),
        pages=page_numbers(pagination.page, pagination.total_pages),
    )
