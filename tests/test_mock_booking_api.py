"""
Tests for the in-memory booking service used in development.
"""

from __future__ import annotations

from datetime import date

import pytest

from roombook.application.exceptions import BookingApiError
from roombook.domain.entities.availability import AvailabilityQuery
from roombook.infrastructure.booking_api.mock_booking_api import MockBookingApi

MONDAY = "2025-03-10"


def _api() -> MockBookingApi:
    return MockBookingApi(today=lambda: date(2025, 3, 3))


def _query(**overrides) -> AvailabilityQuery:
    values = {"room_id": 12, "date": MONDAY, "start_time": "09:00", "end_time": "10:00", "participants": 8}
    values.update(overrides)
    return AvailabilityQuery(**values)


def _payload(**overrides) -> dict:
    values = {
        "unit_id": 1,
        "meeting_room_id": 12,
        "meeting_date": MONDAY,
        "start_time": "09:00",
        "end_time": "10:00",
        "total_participants": 8,
        "total_consumption": 0,
        "consumption_ids": [2],
    }
    values.update(overrides)
    return values


async def test_free_slot_is_bookable():
    result = await _api().check_availability(_query())

    assert result.bookable
    assert result.errors == ()


@pytest.mark.parametrize(
    "overrides,code",
    [
        ({"room_id": 99}, "ROOM_NOT_FOUND"),
        ({"room_id": 14}, "ROOM_INACTIVE"),
        ({"date": "2025-03-01"}, "INVALID_DATE_PAST"),
        ({"date": "2025-03-15"}, "INVALID_WORKING_DAY"),
        ({"start_time": "07:00"}, "OUTSIDE_WORKING_HOURS"),
        ({"end_time": "09:15"}, "INVALID_DURATION_TOO_SHORT"),
        ({"participants": 21}, "CAPACITY_EXCEEDED"),
        ({"participants": 0}, "INVALID_PARTICIPANTS_COUNT"),
    ],
)
async def test_business_rules(overrides, code):
    result = await _api().check_availability(_query(**overrides))

    assert result.available is True
    assert result.validations_passed is False
    assert code in [e.code for e in result.errors]


async def test_overlapping_booking_conflicts():
    api = _api()
    await api.create_booking(_payload())

    overlapping = await api.check_availability(_query(start_time="09:30", end_time="11:00"))
    adjacent = await api.check_availability(_query(start_time="10:00", end_time="11:00"))
    other_room = await api.check_availability(_query(room_id=11, participants=4))

    assert overlapping.available is False
    assert overlapping.errors[0].code == "TIME_CONFLICT"
    assert overlapping.conflicts[0]["id"] == 1
    assert adjacent.bookable
    assert other_room.bookable


async def test_create_rejects_conflict_and_rule_violations():
    api = _api()
    await api.create_booking(_payload())

    with pytest.raises(BookingApiError) as conflict:
        await api.create_booking(_payload(start_time="09:30", end_time="10:30"))
    assert conflict.value.code == "TIME_CONFLICT"
    assert conflict.value.validation_errors == []

    with pytest.raises(BookingApiError) as rules:
        await api.create_booking(_payload(start_time="16:00", end_time="18:00"))
    assert [e["code"] for e in rules.value.validation_errors] == ["OUTSIDE_WORKING_HOURS"]


async def test_created_bookings_are_listed_newest_first():
    api = _api()
    first = await api.create_booking(_payload())
    second = await api.create_booking(_payload(meeting_date="2025-03-11", consumption_ids=[1, 3]))

    page = await api.fetch_bookings(page=1, limit=1)

    assert [b.id for b in page.bookings] == [second.id]
    assert page.pagination.total == 2
    assert page.pagination.total_pages == 2
    assert [c.name for c in second.consumptions] == ["Morning Snack", "Afternoon Snack"]
    assert first.start_time == "09:00:00"
    assert first.meeting_room.name == "Large Meeting Room"
