from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import httpx

from roombook.application.exceptions import BookingApiError, BookingTransportError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.core.config import settings
from roombook.domain.entities.availability import AvailabilityQuery, Resolved
from roombook.domain.entities.booking import Booking, BookingPage
from roombook.domain.entities.master_data import Consumption, MeetingRoom, Unit
from roombook.infrastructure.booking_api.payloads import (
    parse_availability,
    parse_booking,
    parse_booking_page,
    parse_consumption,
    parse_room,
    parse_unit,
    validation_errors_of,
)

T = TypeVar("T")


class HttpBookingApi(BookingApiPort):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or settings.BOOKING_API_BASE_URL
        if not self._base_url:
            raise ValueError("BOOKING_API_BASE_URL is required for the HTTP booking API")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.BOOKING_API_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    async def fetch_units(self) -> list[Unit]:
        data = await self._request("GET", "/units")
        return self._parse(lambda d: [parse_unit(u) for u in d], data, "/units")

    async def fetch_rooms(self) -> list[MeetingRoom]:
        data = await self._request("GET", "/rooms")
        return self._parse(lambda d: [parse_room(r) for r in d], data, "/rooms")

    async def fetch_consumptions(self) -> list[Consumption]:
        data = await self._request("GET", "/consumptions")
        return self._parse(lambda d: [parse_consumption(c) for c in d], data, "/consumptions")

    async def fetch_bookings(
        self,
        page: int = 1,
        limit: int = 10,
        unit_id: int | None = None,
        room_id: int | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> BookingPage:
        params = {
            "page": page,
            "limit": limit,
            "unit_id": unit_id,
            "room_id": room_id,
            "date_from": date_from,
            "date_to": date_to,
        }
        data = await self._request("GET", "/bookings", params=params)
        return self._parse(parse_booking_page, data, "/bookings")

    async def check_availability(self, query: AvailabilityQuery) -> Resolved:
        data = await self._request("GET", "/bookings/availability", params=query.to_params())
        return self._parse(parse_availability, data, "/bookings/availability")

    async def create_booking(self, payload: dict[str, Any]) -> Booking:
        data = await self._request("POST", "/bookings", json=payload)
        booking = self._parse(parse_booking, data, "/bookings")
        self._logger.info("Booking stored", extra={"booking_id": booking.id})
        return booking

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        if params is not None:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            resp = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            self._logger.error(
                "Booking service unreachable",
                extra={"method": method, "path": path, "error": str(e)},
            )
            raise BookingTransportError(str(e) or type(e).__name__) from e

        try:
            body = resp.json()
        except ValueError as e:
            self._logger.error(
                "Booking service returned an unparsable body",
                extra={"method": method, "path": path, "status": resp.status_code},
            )
            raise BookingTransportError(f"Unparsable response from {path} (HTTP {resp.status_code})") from e

        if not isinstance(body, dict):
            raise BookingTransportError(f"Unexpected response shape from {path}")

        if resp.status_code >= 400 or body.get("success") is False:
            error = BookingApiError(
                message=str(body.get("message") or f"HTTP {resp.status_code}"),
                code=body.get("code"),
                status_code=resp.status_code,
                validation_errors=validation_errors_of(body),
            )
            self._logger.warning(
                "Booking service rejected request",
                extra={"method": method, "path": path, "status": resp.status_code, "code": error.code},
            )
            raise error

        return body.get("data")

    def _parse(self, parser: Callable[[Any], T], data: Any, path: str) -> T:
        try:
            return parser(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            self._logger.error("Malformed payload", extra={"path": path, "error": str(e)})
            raise BookingTransportError(f"Malformed payload from {path}: {e}") from e
