from __future__ import annotations

from typing import Iterable, Mapping, Union

from ..buses.model import Bus
from .model import Booking

Number = Union[int, float]


def booking_fare(booking: Booking, buses_by_id: Mapping[str, Bus]) -> Number:
    """Fare of the booked bus when it is on record, else the fare on the booking."""
    bus = buses_by_id.get(booking.bus_id)
    return bus.fare if bus else booking.fare


def total_revenue(bookings: Iterable[Booking], buses: Iterable[Bus]) -> Number:
    """Sum of fares over bookings that were not cancelled."""
    buses_by_id = {b.id: b for b in buses}
    return sum(booking_fare(bk, buses_by_id) for bk in bookings if not bk.is_cancelled)
