"""
Tests for the httpx booking service adapter.
"""

from __future__ import annotations

import json

import httpx
import pytest

from roombook.application.exceptions import BookingApiError, BookingTransportError
from roombook.domain.entities.availability import AvailabilityQuery
from roombook.infrastructure.booking_api.http_client import HttpBookingApi

BASE_URL = "http://booking.test/api"

QUERY = AvailabilityQuery(room_id=12, date="2025-03-10", start_time="09:00", end_time="10:00", participants=8)


def _api(handler) -> HttpBookingApi:
    return HttpBookingApi(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def _ok(data) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "data": data, "message": "OK"})


async def test_master_data_lists():
    def handler(request: httpx.Request) -> httpx.Response:
        return {
            "/api/units": _ok([{"id": 1, "name": "Finance", "is_active": True}]),
            "/api/rooms": _ok([{"id": 12, "name": "Large Meeting Room", "capacity": 20, "is_active": True}]),
            "/api/consumptions": _ok([{"id": 2, "name": "Lunch", "is_active": False}]),
        }[request.url.path]

    api = _api(handler)

    assert (await api.fetch_units())[0].name == "Finance"
    assert (await api.fetch_rooms())[0].capacity == 20
    assert (await api.fetch_consumptions())[0].is_active is False
    await api.aclose()


async def test_availability_query_and_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return _ok(
            {
                "available": False,
                "validationsPassed": True,
                "errors": [{"code": "TIME_CONFLICT", "message": "Booked 09:00-10:00"}],
                "conflicts": [{"id": 5, "start_time": "09:00:00", "end_time": "10:00:00"}],
            }
        )

    result = await _api(handler).check_availability(QUERY)

    assert seen["path"] == "/api/bookings/availability"
    assert seen["params"] == {
        "room_id": "12",
        "date": "2025-03-10",
        "start_time": "09:00",
        "end_time": "10:00",
        "participants": "8",
    }
    assert result.available is False
    assert result.validations_passed is True
    assert [e.code for e in result.errors] == ["TIME_CONFLICT"]
    assert result.conflicts[0]["id"] == 5


async def test_availability_without_validation_flag_defaults_to_passed():
    result = await _api(lambda request: _ok({"available": True, "conflicts": []})).check_availability(QUERY)

    assert result.bookable


async def test_create_booking_posts_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        body = dict(seen["body"], id=77, start_time="09:00:00", end_time="10:00:00")
        return httpx.Response(201, json={"success": True, "data": body, "message": "Created"})

    payload = {
        "unit_id": 1,
        "meeting_room_id": 12,
        "meeting_date": "2025-03-10",
        "start_time": "09:00",
        "end_time": "10:00",
        "total_participants": 8,
        "total_consumption": 0,
        "consumption_ids": [],
    }
    booking = await _api(handler).create_booking(payload)

    assert seen == {"method": "POST", "body": payload}
    assert booking.id == 77
    assert booking.start_time == "09:00:00"


async def test_error_envelope_with_validation_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={
                "success": False,
                "message": "Validation failed",
                "code": "VALIDATION_FAILED",
                "validationErrors": [{"code": "OUTSIDE_WORKING_HOURS", "message": "Too late"}],
            },
        )

    with pytest.raises(BookingApiError) as exc_info:
        await _api(handler).create_booking({})

    assert exc_info.value.status_code == 400
    assert exc_info.value.code == "VALIDATION_FAILED"
    assert exc_info.value.validation_errors == [{"code": "OUTSIDE_WORKING_HOURS", "message": "Too late"}]


async def test_success_false_with_200_is_an_error():
    handler = lambda request: httpx.Response(200, json={"success": False, "message": "Room closed", "code": "ROOM_INACTIVE"})

    with pytest.raises(BookingApiError) as exc_info:
        await _api(handler).fetch_rooms()

    assert exc_info.value.message == "Room closed"
    assert exc_info.value.validation_errors == []


async def test_connection_failure_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(BookingTransportError):
        await _api(handler).check_availability(QUERY)


async def test_unparsable_body_is_transport_error():
    handler = lambda request: httpx.Response(502, text="<html>Bad Gateway</html>")

    with pytest.raises(BookingTransportError):
        await _api(handler).create_booking({})


async def test_malformed_payload_is_transport_error():
    handler = lambda request: _ok({"unexpected": True})

    with pytest.raises(BookingTransportError):
        await _api(handler).check_availability(QUERY)


async def test_booking_page():
    def handler(request: httpx.Request) -> httpx.Response:
        assert dict(request.url.params) == {"page": "2", "limit": "5"}
        return _ok(
            {
                "bookings": [
                    {
                        "id": 9,
                        "unit_id": 1,
                        "meeting_room_id": 12,
                        "meeting_date": "2025-03-10",
                        "start_time": "13:00:00",
                        "end_time": "14:00:00",
                        "total_participants": 4,
                        "total_consumption": 0,
                        "unit": {"id": 1, "name": "Finance"},
                        "meeting_room": {"id": 12, "name": "Large Meeting Room", "capacity": 20},
                        "consumptions": [],
                    }
                ],
                "pagination": {"page": 2, "limit": 5, "total": 6, "totalPages": 2},
            }
        )

    page = await _api(handler).fetch_bookings(page=2, limit=5)

    assert page.bookings[0].meeting_room.name == "Large Meeting Room"
    assert page.pagination.total_pages == 2


def test_base_url_is_required():
    with pytest.raises(ValueError):
        HttpBookingApi(base_url="")


@pytest.mark.parametrize("data", [None, [], "created"])
async def test_success_without_object_data_is_transport_error(data):
    handler = lambda request: _ok(data)
    api = _api(handler)

    with pytest.raises(BookingTransportError):
        await api.create_booking({})
    with pytest.raises(BookingTransportError):
        await api.check_availability(QUERY)
    with pytest.raises(BookingTransportError):
        await api.fetch_bookings()
