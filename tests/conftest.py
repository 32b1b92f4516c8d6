from __future__ import annotations

import asyncio
from datetime import date, timedelta
from typing import Any, Callable

import pytest

from roombook.application.exceptions import BookingApiError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.domain.entities.availability import AvailabilityQuery, Resolved
from roombook.domain.entities.booking import Booking, BookingPage
from roombook.domain.entities.master_data import Consumption, MeetingRoom, Unit


class ScriptedBookingApi(BookingApiPort):
    """
    Booking service double driven by the test.

    Availability calls park on a future in `pending` unless `auto_result` is set.
    Create calls return booking `next_booking_id`, raise `create_error`, or wait on
    `create_gate` first when it is set.
    """

    def __init__(self) -> None:
        self.availability_calls: list[tuple[float, AvailabilityQuery]] = []
        self.pending: list[asyncio.Future[Resolved]] = []
        self.auto_result: Resolved | None = None
        self.create_calls: list[dict[str, Any]] = []
        self.create_gate: asyncio.Event | None = None
        self.create_error: Exception | None = None
        self.next_booking_id = 42
        self.master_data_error: Exception | None = None
        self.master_data_calls = 0

    async def fetch_units(self) -> list[Unit]:
        self.master_data_calls += 1
        await asyncio.sleep(0)
        return [Unit(id=1, name="Finance")]

    async def fetch_rooms(self) -> list[MeetingRoom]:
        await asyncio.sleep(0)
        if self.master_data_error is not None:
            raise self.master_data_error
        return [MeetingRoom(id=12, name="Large Meeting Room", capacity=20)]

    async def fetch_consumptions(self) -> list[Consumption]:
        await asyncio.sleep(0)
        return [Consumption(id=1, name="Lunch"), Consumption(id=2, name="Afternoon Snack")]

    async def fetch_bookings(self, page: int = 1, limit: int = 10, **filters: Any) -> BookingPage:
        return BookingPage()

    async def check_availability(self, query: AvailabilityQuery) -> Resolved:
        self.availability_calls.append((asyncio.get_running_loop().time(), query))
        if self.auto_result is not None:
            return self.auto_result
        reply: asyncio.Future[Resolved] = asyncio.get_running_loop().create_future()
        self.pending.append(reply)
        return await reply

    async def create_booking(self, payload: dict[str, Any]) -> Booking:
        self.create_calls.append(payload)
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.create_error is not None:
            raise self.create_error
        return Booking(
            id=self.next_booking_id,
            unit_id=payload["unit_id"],
            meeting_room_id=payload["meeting_room_id"],
            meeting_date=payload["meeting_date"],
            start_time=payload["start_time"],
            end_time=payload["end_time"],
            total_participants=payload["total_participants"],
        )


def future_weekday(days_ahead: int = 7) -> str:
    day = date.today() + timedelta(days=days_ahead)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day.isoformat()


def valid_fields(**overrides: Any) -> dict[str, Any]:
    fields = {
        "unit_id": 1,
        "meeting_room_id": 12,
        "meeting_date": "2025-03-10",
        "start_time": "09:00",
        "end_time": "10:00",
        "participant_count": 8,
        "total_consumption": 150000,
        "consumption_ids": [1],
    }
    fields.update(overrides)
    return fields


async def until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def api() -> ScriptedBookingApi:
    return ScriptedBookingApi()


@pytest.fixture
def rejected_with_message() -> BookingApiError:
    return BookingApiError(message="Room is under maintenance", code="ROOM_INACTIVE", status_code=422)
