from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..activities.service import ActivityLog
from ..bookings.model import Booking
from ..bookings.repository import BookingRepository
from ..buses.model import Bus
from ..buses.repository import BusRepository
from ..common.datetime_utils import now_utc, to_iso
from ..common.ids import generate_id
from ..common.validators import require_non_empty, require_positive_number
from ..core.constants import DEMO_BUS_PREFIX
from ..core.enums import ActivityType, BookingStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..locations.model import Location
from ..locations.service import LocationService
from ..users.authorization import authorize
from ..users.model import SessionUser, User
from ..users.repository import UserRepository
from ..users.service import apply_profile_update

logger = logging.getLogger(__name__)

# Placeholder offers shown when a route search finds nothing.
DEMO_OFFERS = (
    {
        "busNumber": "KA-05-1234",
        "operatorName": "City Express",
        "busType": "AC",
        "capacity": 40,
        "fare": 150,
        "departureTime": "08:00",
        "arrivalTime": "11:30",
        "contactNumber": "+91 9876543210",
    },
    {
        "busNumber": "KA-03-5678",
        "operatorName": "Metro Travel",
        "busType": "Volvo",
        "capacity": 45,
        "fare": 200,
        "departureTime": "14:00",
        "arrivalTime": "17:30",
        "contactNumber": "+91 9876543211",
    },
)


class PassengerService:
    """Use cases of a passenger: search, track and book buses."""

    def __init__(
        self,
        users: UserRepository,
        buses: BusRepository,
        bookings: BookingRepository,
        locations: LocationService,
        activity: ActivityLog,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._users = users
        self._buses = buses
        self._bookings = bookings
        self._locations = locations
        self._activity = activity
        self._clock = clock

    def _now(self) -> str:
        return to_iso(self._clock())

    def _own_booking(self, session: Optional[SessionUser], booking_id: str) -> Booking:
        session = authorize(session, users=self._users, denied_message="User not authenticated")
        booking = self._bookings.get_by_id(booking_id)
        authorize(
            session,
            owns=lambda s: booking is not None and booking.user_id == s.user_id,
            denied_message="Booking not found",
            hide_as_not_found=True,
        )
        return booking

    def get_user_data(self, user_id: str) -> Optional[User]:
        return self._users.get_by_id(user_id)

    def update_profile(self, session: Optional[SessionUser], update_data: Mapping[str, Any]) -> User:
        session = authorize(session, users=self._users, denied_message="User not authenticated")
        user = self._users.get_by_id(session.user_id)
        if not user:
            raise NotFoundError("User profile not found")

        user = self._users.save(apply_profile_update(user, update_data, now=self._now()))
        self._activity.log(ActivityType.PROFILE_UPDATED, "User profile updated", user_id=session.user_id)
        return user

    def search_buses(
        self,
        *,
        from_: Optional[str] = None,
        to: Optional[str] = None,
        bus_type: Optional[str] = None,
    ) -> Sequence[Bus]:
        from_ = (from_ or "").strip()
        to = (to or "").strip()
        bus_type = (bus_type or "").strip()

        def matches(bus: Bus) -> bool:
            route = bus.route.lower()
            if from_ and from_.lower() not in route:
                return False
            if to and to.lower() not in route:
                return False
            return not bus_type or bus.bus_type == bus_type

        found = [b for b in self._buses.list_all(active_only=True) if matches(b)]
        if not found and (from_ or to):
            return self.generate_demo_buses(from_=from_, to=to)
        return found

    def generate_demo_buses(self, *, from_: str = "", to: str = "") -> Sequence[Bus]:
        origin = from_ or "Bangalore"
        destination = to or "Mysore"
        now = self._now()
        return [
            Bus(
                id=f"{DEMO_BUS_PREFIX}{index}",
                driver_id="",
                bus_number=offer["busNumber"],
                operator_name=offer["operatorName"],
                bus_type=offer["busType"],
                capacity=offer["capacity"],
                route=f"{origin} - {destination}",
                fare=offer["fare"],
                departure_time=offer["departureTime"],
                arrival_time=offer["arrivalTime"],
                contact_number=offer["contactNumber"],
                created_at=now,
            )
            for index, offer in enumerate(DEMO_OFFERS)
        ]

    def get_bus_location(self, bus_id: str) -> Location:
        return self._locations.locate(bus_id)

    def book_bus(
        self,
        session: Optional[SessionUser],
        *,
        bus_id: str,
        bus_number: str,
        fare: Any,
        from_: str,
        to: str,
    ) -> Booking:
        session = authorize(session, users=self._users, denied_message="User not authenticated")
        if not bus_number or fare in (None, ""):
            raise ValidationError("Invalid booking data")
        bus_id = require_non_empty(bus_id, "busId")
        fare = require_positive_number(fare, "fare")

        bus_number = bus_number.strip()

        # Stored buses set the booked number and fare.
        bus = self._buses.get_by_id(bus_id)
        if bus is None:
            if not bus_id.startswith(DEMO_BUS_PREFIX):
                raise NotFoundError("Bus not found")
        elif not bus.is_active:
            raise ValidationError("Bus is no longer available")
        else:
            bus_number, fare = bus.bus_number, bus.fare

        booking = self._bookings.save(
            Booking(
                id=generate_id(),
                user_id=session.user_id,
                bus_id=bus_id,
                bus_number=bus_number,
                fare=fare,
                from_stop=(from_ or "").strip(),
                to_stop=(to or "").strip(),
                booking_date=self._now(),
            )
        )
        logger.info("user %s booked %s on bus %s", session.user_id, booking.id, bus_id)
        self._activity.log(
            ActivityType.BUS_BOOKED,
            f"Bus booked: {booking.bus_number} for {booking.from_stop} to {booking.to_stop}",
            user_id=session.user_id,
        )
        return booking

    def get_user_bookings(self, session: Optional[SessionUser]) -> Sequence[Booking]:
        session = authorize(session, users=self._users, denied_message="User not authenticated")
        bookings = self._bookings.list_by_user(session.user_id)
        return sorted(bookings, key=lambda b: b.booking_date, reverse=True)

    def cancel_booking(self, session: Optional[SessionUser], booking_id: str) -> Booking:
        booking = self._own_booking(session, booking_id)
        if booking.is_cancelled:
            raise ValidationError("Booking is already cancelled")

        booking = self._bookings.save(
            dataclasses.replace(booking, status=BookingStatus.CANCELLED, cancelled_at=self._now())
        )
        logger.info("user %s cancelled booking %s", session.user_id, booking.id)
        self._activity.log(
            ActivityType.BOOKING_CANCELLED, f"Booking cancelled: {booking.bus_number}", user_id=session.user_id
        )
        return booking

    def get_booking_details(self, session: Optional[SessionUser], booking_id: str) -> Booking:
        return self._own_booking(session, booking_id)
