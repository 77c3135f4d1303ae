from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Booking


class BookingRepository(Protocol):
    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Booking]:
        raise NotImplementedError

    def list_by_user(self, user_id: str) -> Sequence[Booking]:
        raise NotImplementedError

    def list_by_buses(self, bus_ids: set[str]) -> Sequence[Booking]:
        raise NotImplementedError

    def save(self, booking: Booking) -> Booking:
        raise NotImplementedError
