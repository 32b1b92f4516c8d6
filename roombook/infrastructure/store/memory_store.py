from __future__ import annotations

import logging
import uuid

from roombook.application.ports.draft_store import DraftStorePort
from roombook.application.use_cases.booking_form import BookingFormSession


class MemoryDraftStore(DraftStorePort):
    def __init__(self, session_limit: int = 500) -> None:
        self._sessions: dict[str, BookingFormSession] = {}
        self._session_limit = session_limit
        self._logger = logging.getLogger(__name__)

    def create(self, session: BookingFormSession) -> str:
        draft_id = uuid.uuid4().hex
        self._sessions[draft_id] = session
        if len(self._sessions) > self._session_limit:
            oldest = next(iter(self._sessions))
            self.discard(oldest)
            self._logger.info("Draft evicted", extra={"draft_id": oldest})
        return draft_id

    def get(self, draft_id: str) -> BookingFormSession | None:
        return self._sessions.get(draft_id)

    def discard(self, draft_id: str) -> bool:
        session = self._sessions.pop(draft_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        for draft_id in list(self._sessions):
            self.discard(draft_id)

    def __len__(self) -> int:
        return len(self._sessions)
