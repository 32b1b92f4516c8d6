from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from roombook.domain.entities.availability import AvailabilityQuery, Resolved
from roombook.domain.entities.booking import Booking, BookingPage
from roombook.domain.entities.master_data import Consumption, MeetingRoom, Unit


class BookingApiPort(ABC):
    """
    Remote booking service.

    Every method raises BookingApiError when the service rejects the request and
    BookingTransportError when no usable response was received.
    """

    @abstractmethod
    async def fetch_units(self) -> list[Unit]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_rooms(self) -> list[MeetingRoom]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_consumptions(self) -> list[Consumption]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_bookings(
        self,
        page: int = 1,
        limit: int = 10,
        unit_id: int | None = None,
        room_id: int | None = None,
        date_from: str | None = None,
        date_to: str | None = None,
    ) -> BookingPage:
        raise NotImplementedError

    @abstractmethod
    async def check_availability(self, query: AvailabilityQuery) -> Resolved:
        """Check a candidate slot. The returned result has seq=0; the caller stamps its own."""
        raise NotImplementedError

    @abstractmethod
    async def create_booking(self, payload: dict[str, Any]) -> Booking:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
