from __future__ import annotations

from typing import Any

from roombook.domain.entities.availability import Resolved, resolved_from_flags
from roombook.domain.entities.booking import Booking, BookingPage, Pagination
from roombook.domain.entities.errors import validation_error_from_payload
from roombook.domain.entities.master_data import Consumption, MeetingRoom, Unit


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be an object, got {type(data).__name__}")
    return data


def parse_unit(item: dict[str, Any]) -> Unit:
    return Unit(id=int(item["id"]), name=str(item["name"]), is_active=bool(item.get("is_active", True)))


def parse_room(item: dict[str, Any]) -> MeetingRoom:
    return MeetingRoom(
        id=int(item["id"]),
        name=str(item["name"]),
        capacity=int(item.get("capacity") or 0),
        is_active=bool(item.get("is_active", True)),
    )


def parse_consumption(item: dict[str, Any]) -> Consumption:
    return Consumption(id=int(item["id"]), name=str(item["name"]), is_active=bool(item.get("is_active", True)))


def parse_booking(item: dict[str, Any]) -> Booking:
    item = _require_dict(item, "booking")
    unit = item.get("unit")
    room = item.get("meeting_room")
    return Booking(
        id=item["id"],
        unit_id=int(item["unit_id"]),
        meeting_room_id=int(item["meeting_room_id"]),
        meeting_date=str(item["meeting_date"]),
        start_time=str(item["start_time"]),
        end_time=str(item["end_time"]),
        total_participants=int(item.get("total_participants") or 0),
        total_consumption=int(item.get("total_consumption") or 0),
        notes=item.get("notes"),
        unit=parse_unit(unit) if isinstance(unit, dict) else None,
        meeting_room=parse_room(room) if isinstance(room, dict) else None,
        consumptions=tuple(parse_consumption(c) for c in item.get("consumptions") or []),
    )


def parse_booking_page(data: dict[str, Any]) -> BookingPage:
    data = _require_dict(data, "booking page")
    raw = data.get("pagination") or {}
    bookings = [parse_booking(b) for b in data.get("bookings") or []]
    pagination = Pagination(
        page=int(raw.get("page", 1)),
        limit=int(raw.get("limit", len(bookings) or 10)),
        total=int(raw.get("total", len(bookings))),
        total_pages=int(raw.get("totalPages", raw.get("total_pages", 0))),
    )
    return BookingPage(bookings=bookings, pagination=pagination)


def parse_availability(data: dict[str, Any]) -> Resolved:
    data = _require_dict(data, "availability")
    # Older services only report available + conflicts, so a missing flag means passed.
    passed = data.get("validationsPassed", data.get("validations_passed", True))
    errors = tuple(validation_error_from_payload(e) for e in data.get("errors") or [])
    conflicts = tuple(c for c in data.get("conflicts") or [] if isinstance(c, dict))
    return resolved_from_flags(
        available=bool(data["available"]),
        validations_passed=bool(passed),
        errors=errors,
        conflicts=conflicts,
    )


def validation_errors_of(body: dict[str, Any]) -> list[dict[str, Any]]:
    items = body.get("validationErrors") or body.get("errors") or []
    return [i for i in items if isinstance(i, dict)] if isinstance(items, list) else []
