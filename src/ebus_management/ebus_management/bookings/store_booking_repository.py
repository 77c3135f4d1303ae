from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Collection
from ..storage.record_repository import StoreRecordRepository
from .model import Booking
from .repository import BookingRepository


class StoreBookingRepository(StoreRecordRepository[Booking], BookingRepository):
    collection = Collection.BOOKINGS
    from_record = Booking.from_record

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        return self._load(booking_id)

    def list_all(self) -> Sequence[Booking]:
        return self._load_all()

    def list_by_user(self, user_id: str) -> Sequence[Booking]:
        return [b for b in self._load_all() if b.user_id == user_id]

    def list_by_buses(self, bus_ids: set[str]) -> Sequence[Booking]:
        return [b for b in self._load_all() if b.bus_id in bus_ids]

    def save(self, booking: Booking) -> Booking:
        return self._save(booking)
