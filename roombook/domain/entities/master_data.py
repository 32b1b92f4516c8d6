from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Unit:
    id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class MeetingRoom:
    id: int
    name: str
    capacity: int
    is_active: bool = True


@dataclass(frozen=True)
class Consumption:
    id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class MasterData:
    units: tuple[Unit, ...] = ()
    rooms: tuple[MeetingRoom, ...] = ()
    consumptions: tuple[Consumption, ...] = ()

    @property
    def rooms_by_id(self) -> dict[int, MeetingRoom]:
        return {r.id: r for r in self.rooms}

    def room(self, room_id: int | None) -> MeetingRoom | None:
        if room_id is None:
            return None
        return self.rooms_by_id.get(room_id)

    def active_units(self) -> tuple[Unit, ...]:
        return tuple(u for u in self.units if u.is_active)

    def active_rooms(self) -> tuple[MeetingRoom, ...]:
        return tuple(r for r in self.rooms if r.is_active)

    def active_consumptions(self) -> tuple[Consumption, ...]:
        return tuple(c for c in self.consumptions if c.is_active)

    def consumption_ids(self) -> frozenset[int]:
        return frozenset(c.id for c in self.consumptions)
