from __future__ import annotations

import itertools
import logging
import math
from datetime import date, datetime
from typing import Any, Callable

from roombook.application.exceptions import BookingApiError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.domain.entities.availability import AvailabilityQuery, Resolved, resolved_from_flags
from roombook.domain.entities.booking import Booking, BookingPage, Pagination
from roombook.domain.entities.errors import ValidationError
from roombook.domain.entities.master_data import Consumption, MeetingRoom, Unit

WORKING_HOURS = ("08:00", "17:00")
MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 8 * 60

DEFAULT_UNITS = (
    Unit(id=1, name="Finance"),
    Unit(id=2, name="Human Resources"),
    Unit(id=3, name="Engineering"),
)
DEFAULT_ROOMS = (
    MeetingRoom(id=11, name="Small Meeting Room", capacity=6),
    MeetingRoom(id=12, name="Large Meeting Room", capacity=20),
    MeetingRoom(id=13, name="Auditorium", capacity=80),
    MeetingRoom(id=14, name="Old Annex", capacity=10, is_active=False),
)
DEFAULT_CONSUMPTIONS = (
    Consumption(id=1, name="Morning Snack"),
    Consumption(id=2, name="Lunch"),
    Consumption(id=3, name="Afternoon Snack"),
)


class MockBookingApi(BookingApiPort):
    """In-memory booking service for local development, applying the same rules the real one reports."""

    def __init__(
        self,
        units: tuple[Unit, ...] = DEFAULT_UNITS,
        rooms: tuple[MeetingRoom, ...] = DEFAULT_ROOMS,
        consumptions: tuple[Consumption, ...] = DEFAULT_CONSUMPTIONS,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._units = units
        self._rooms = {r.id: r for r in rooms}
        self._consumptions = consumptions
        self._today = today
        self._bookings: dict[int, Booking] = {}
        self._ids = itertools.count(1)
        self._logger = logging.getLogger(__name__)

    async def fetch_units(self) -> list[Unit]:
        return list(self._units)

    async def fetch_rooms(self) -> list[MeetingRoom]:
        return list(self._rooms.values())

    async def fetch_consumptions(self) -> list[Consumption]:
        return list(self._consumptions)

    async def fetch_bookings(
        self,
        page: int = 1,
        limit: int = 10,
        unit_id: int | None = None,
        room_id: int | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> BookingPage:
        rows = [
            b
            for b in self._bookings.values()
            if (unit_id is None or b.unit_id == unit_id)
            and (room_id is None or b.meeting_room_id == room_id)
            and (date_from is None or b.meeting_date >= date_from)
            and (date_to is None or b.meeting_date <= date_to)
        ]
        rows.sort(key=lambda b: (b.meeting_date, b.start_time), reverse=True)
        start = (page - 1) * limit
        return BookingPage(
            bookings=rows[start : start + limit],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=len(rows),
                total_pages=math.ceil(len(rows) / limit) if limit else 0,
            ),
        )

    async def check_availability(self, query: AvailabilityQuery) -> Resolved:
        rule_errors = self._rule_errors(query.room_id, query.date, query.start_time, query.end_time, query.participants)
        conflicts = self._conflicts(query.room_id, query.date, query.start_time, query.end_time)
        errors = list(rule_errors)
        if conflicts:
            errors.insert(0, ValidationError(code="TIME_CONFLICT", message="The room is already booked for this time"))
        return resolved_from_flags(
            available=not conflicts,
            validations_passed=not rule_errors,
            errors=tuple(errors),
            conflicts=tuple(self._booking_summary(b) for b in conflicts),
        )

    async def create_booking(self, payload: dict[str, Any]) -> Booking:
        room_id = payload.get("meeting_room_id")
        meeting_date = payload.get("meeting_date")
        start, end = payload.get("start_time"), payload.get("end_time")

        rule_errors = self._rule_errors(room_id, meeting_date, start, end, payload.get("total_participants"))
        if rule_errors:
            raise BookingApiError(
                message="Booking validation failed",
                code="VALIDATION_FAILED",
                status_code=422,
                validation_errors=[{"code": e.code, "message": e.message} for e in rule_errors],
            )
        if self._conflicts(room_id, meeting_date, start, end):
            raise BookingApiError(
                message="The room is already booked for this time",
                code="TIME_CONFLICT",
                status_code=409,
            )

        consumption_index = {c.id: c for c in self._consumptions}
        booking = Booking(
            id=next(self._ids),
            unit_id=int(payload["unit_id"]),
            meeting_room_id=room_id,
            meeting_date=meeting_date,
            start_time=f"{start[:5]}:00",
            end_time=f"{end[:5]}:00",
            total_participants=int(payload["total_participants"]),
            total_consumption=int(payload.get("total_consumption") or 0),
            notes=payload.get("notes"),
            unit=next((u for u in self._units if u.id == payload["unit_id"]), None),
            meeting_room=self._rooms.get(room_id),
            consumptions=tuple(
                consumption_index[cid] for cid in payload.get("consumption_ids") or [] if cid in consumption_index
            ),
        )
        self._bookings[booking.id] = booking
        self._logger.info("Mock booking created", extra={"booking_id": booking.id, "room_id": room_id})
        return booking

    def _rule_errors(
        self,
        room_id: int | None,
        meeting_date: str | None,
        start: str | None,
        end: str | None,
        participants: int | None,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []

        room = self._rooms.get(room_id) if room_id is not None else None
        if room is None:
            errors.append(ValidationError("ROOM_NOT_FOUND", f"Meeting room {room_id} does not exist"))
        elif not room.is_active:
            errors.append(ValidationError("ROOM_INACTIVE", f"{room.name} is not available for booking"))

        try:
            day = date.fromisoformat(meeting_date or "")
        except ValueError:
            day = None
            errors.append(ValidationError("INVALID_DATE_FORMAT", "Meeting date must be YYYY-MM-DD"))
        if day is not None:
            if day < self._today():
                errors.append(ValidationError("INVALID_DATE_PAST", "Meeting date cannot be in the past"))
            elif day.weekday() >= 5:
                errors.append(ValidationError("INVALID_WORKING_DAY", "Meetings can only be booked Monday to Friday"))

        start_minutes, end_minutes = _minutes(start), _minutes(end)
        if start_minutes is None or end_minutes is None:
            errors.append(ValidationError("INVALID_TIME_FORMAT", "Times must use the HH:MM format"))
        elif start_minutes >= end_minutes:
            errors.append(ValidationError("INVALID_TIME_ORDER", "End time must be after start time"))
        else:
            open_at, close_at = (_minutes(t) for t in WORKING_HOURS)
            if start_minutes < open_at or end_minutes > close_at:
                errors.append(
                    ValidationError(
                        "OUTSIDE_WORKING_HOURS",
                        f"Meetings must be within {WORKING_HOURS[0]}-{WORKING_HOURS[1]}",
                    )
                )
            duration = end_minutes - start_minutes
            if duration < MIN_DURATION_MINUTES:
                errors.append(
                    ValidationError("INVALID_DURATION_TOO_SHORT", f"Meetings last at least {MIN_DURATION_MINUTES} minutes")
                )
            elif duration > MAX_DURATION_MINUTES:
                errors.append(
                    ValidationError("INVALID_DURATION_TOO_LONG", f"Meetings last at most {MAX_DURATION_MINUTES // 60} hours")
                )

        if participants is None or participants < 1:
            errors.append(ValidationError("INVALID_PARTICIPANTS_COUNT", "At least one participant is required"))
        elif room is not None and participants > room.capacity:
            errors.append(
                ValidationError("CAPACITY_EXCEEDED", f"{room.name} holds at most {room.capacity} people")
            )

        return errors

    def _conflicts(self, room_id: int | None, meeting_date: str | None, start: str | None, end: str | None) -> list[Booking]:
        start_minutes, end_minutes = _minutes(start), _minutes(end)
        if start_minutes is None or end_minutes is None:
            return []
        return [
            b
            for b in self._bookings.values()
            if b.meeting_room_id == room_id
            and b.meeting_date == meeting_date
            and not (end_minutes <= _minutes(b.start_time) or start_minutes >= _minutes(b.end_time))
        ]

    def _booking_summary(self, booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "meeting_room_id": booking.meeting_room_id,
            "meeting_date": booking.meeting_date,
            "start_time": booking.start_time,
            "end_time": booking.end_time,
        }


def _minutes(value: str | None) -> int | None:
    if not value:
        return None
    try:
        parsed = datetime.strptime(value[:5], "%H:%M")
    except ValueError:
        return None
    return parsed.hour * 60 + parsed.minute
