from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import replace
from typing import Callable

from roombook.application.exceptions import BookingApiError, BookingTransportError
from roombook.application.ports.booking_api import BookingApiPort
from roombook.application.utils.state_reducers import FormEvent, ProbeFailed, ProbeIssued, ProbeResolved
from roombook.domain.entities.availability import AvailabilityQuery
from roombook.domain.entities.draft import BookingDraft

DEFAULT_DEBOUNCE_SECONDS = 0.8


class AvailabilityProbe:
    """
    Debounced availability check for the draft being edited.

    Every schedule() restarts the quiet-period timer; only the check that survives a full
    quiet period is sent. Issued requests are numbered from a monotonic counter and are never
    cancelled. Their results go through the dispatcher, whose reducer drops anything that is
    not the latest issued request.
    """

    def __init__(
        self,
        api: BookingApiPort,
        dispatch: Callable[[FormEvent], None],
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._api = api
        self._dispatch = dispatch
        self._debounce_seconds = debounce_seconds
        self._counter = itertools.count(1)
        self._latest_seq = 0
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._logger = logging.getLogger(__name__)

    @property
    def latest_seq(self) -> int:
        return self._latest_seq

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def schedule(self, draft: BookingDraft) -> None:
        """Restart the quiet period for a draft whose trigger fields are all valid."""
        self.cancel()
        query = AvailabilityQuery(
            room_id=draft.meeting_room_id,
            date=draft.meeting_date,
            start_time=draft.start_time,
            end_time=draft.end_time,
            participants=draft.participant_count,
        )
        self._timer = asyncio.get_running_loop().create_task(self._debounce(query))

    def cancel(self) -> None:
        """Cancel the pending timer. Requests already issued keep running."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _debounce(self, query: AvailabilityQuery) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._timer = None

        seq = next(self._counter)
        self._latest_seq = seq
        self._dispatch(ProbeIssued(seq=seq, query=query))

        request = asyncio.get_running_loop().create_task(self._issue(seq, query))
        self._in_flight.add(request)
        request.add_done_callback(self._in_flight.discard)

    async def _issue(self, seq: int, query: AvailabilityQuery) -> None:
        self._logger.info("Availability check issued", extra={"seq": seq, "room_id": query.room_id})
        try:
            result = await self._api.check_availability(query)
        except (BookingApiError, BookingTransportError) as e:
            self._logger.warning("Availability check failed", extra={"seq": seq, "error": str(e)})
            self._dispatch(ProbeFailed(seq=seq))
            return
        except Exception as e:
            self._logger.exception("Unexpected availability check error", extra={"seq": seq, "error": str(e)})
            self._dispatch(ProbeFailed(seq=seq))
            return

        if seq != self._latest_seq:
            self._logger.debug("Stale availability result", extra={"seq": seq})
        self._dispatch(ProbeResolved(seq=seq, result=replace(result, seq=seq)))

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no request is in flight."""
        while self._timer is not None or self._in_flight:
            pending = [t for t in (self._timer, *self._in_flight) if t is not None]
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        self.cancel()
