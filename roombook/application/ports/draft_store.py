from abc import ABC, abstractmethod

from roombook.application.use_cases.booking_form import BookingFormSession


class DraftStorePort(ABC):
    @abstractmethod
    def create(self, session: BookingFormSession) -> str:
        """Store a new form session. Returns its draft_id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, draft_id: str) -> BookingFormSession | None:
        raise NotImplementedError

    @abstractmethod
    def discard(self, draft_id: str) -> bool:
        """Close and forget a session. Returns False if it was unknown."""
        raise NotImplementedError

    @abstractmethod
    def close_all(self) -> None:
        raise NotImplementedError
