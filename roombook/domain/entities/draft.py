from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any

# Changing any of these reverts the availability result and re-arms the probe.
TRIGGER_FIELDS = (
    "meeting_room_id",
    "meeting_date",
    "start_time",
    "end_time",
    "participant_count",
)


@dataclass(frozen=True)
class BookingDraft:
    unit_id: int | None = None
    meeting_room_id: int | None = None
    meeting_date: str | None = None  # YYYY-MM-DD
    start_time: str | None = None  # HH:MM
    end_time: str | None = None  # HH:MM
    participant_count: int | None = None
    total_consumption: int | None = 0
    consumption_ids: frozenset[int] = field(default_factory=frozenset)
    notes: str | None = None

    def with_field(self, name: str, value: Any) -> BookingDraft:
        if name not in _FIELD_NAMES:
            raise ValueError(f"Unknown draft field: {name}")
        if isinstance(value, str) and not value.strip() and name != "notes":
            value = None
        if name == "consumption_ids":
            value = frozenset(value or ())
        return replace(self, **{name: value})

    def trigger_values(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in TRIGGER_FIELDS)

    def to_create_payload(self) -> dict[str, Any]:
        """Body for POST /bookings. Only meaningful for a structurally valid draft."""
        payload: dict[str, Any] = {
            "unit_id": self.unit_id,
            "meeting_room_id": self.meeting_room_id,
            "meeting_date": self.meeting_date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "total_participants": self.participant_count,
            "total_consumption": self.total_consumption or 0,
            "consumption_ids": sorted(self.consumption_ids),
        }
        if self.notes:
            payload["notes"] = self.notes
        return payload


_FIELD_NAMES = frozenset(f.name for f in fields(BookingDraft))
