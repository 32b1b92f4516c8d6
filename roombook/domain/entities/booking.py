from __future__ import annotations

from dataclasses import dataclass, field

from roombook.domain.entities.master_data import Consumption, MeetingRoom, Unit


@dataclass(frozen=True)
class Booking:
    id: int
    unit_id: int
    meeting_room_id: int
    meeting_date: str
    start_time: str  # may carry seconds from the authority
    end_time: str
    total_participants: int
    total_consumption: int = 0
    notes: str | None = None
    unit: Unit | None = None
    meeting_room: MeetingRoom | None = None
    consumptions: tuple[Consumption, ...] = ()


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class BookingPage:
    bookings: list[Booking] = field(default_factory=list)
    pagination: Pagination = Pagination(page=1, limit=10, total=0, total_pages=0)
