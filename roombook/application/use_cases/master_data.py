from __future__ import annotations

import asyncio
import logging

from roombook.application.ports.booking_api import BookingApiPort
from roombook.domain.entities.master_data import MasterData, MeetingRoom


class MasterDataLoader:
    """Loads units, rooms and consumption options once and keeps them for the session."""

    def __init__(self, api: BookingApiPort) -> None:
        self._api = api
        self._loading: asyncio.Task[MasterData] | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def loaded(self) -> MasterData | None:
        if self._loading is None or not self._loading.done() or self._loading.cancelled():
            return None
        if self._loading.exception() is not None:
            return None
        return self._loading.result()

    async def load(self) -> MasterData:
        if self._loading is None:
            self._loading = asyncio.ensure_future(self._fetch_all())
        try:
            return await asyncio.shield(self._loading)
        except Exception:
            # Failed loads are not cached; the next call retries.
            if self._loading is not None and self._loading.done():
                self._loading = None
            raise

    async def _fetch_all(self) -> MasterData:
        try:
            units, rooms, consumptions = await asyncio.gather(
                self._api.fetch_units(),
                self._api.fetch_rooms(),
                self._api.fetch_consumptions(),
            )
        except Exception as e:
            self._logger.error("Error fetching master data", extra={"error": str(e)})
            raise
        self._logger.info(
            "Master data loaded",
            extra={"units": len(units), "rooms": len(rooms), "consumptions": len(consumptions)},
        )
        return MasterData(units=tuple(units), rooms=tuple(rooms), consumptions=tuple(consumptions))


def room_capacity_label(room: MeetingRoom | None) -> str:
    if room is None:
        return "Room capacity"
    return f"{room.capacity} people"
