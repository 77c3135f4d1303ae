from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..activities.service import ActivityLog
from ..bookings.repository import BookingRepository
from ..bookings.revenue import total_revenue
from ..common.datetime_utils import now_utc, to_iso
from ..common.ids import generate_id
from ..common.validators import reject_unknown_fields, require_fields, require_positive_number
from ..core.constants import DEFAULT_LOCATION_HISTORY_LIMIT
from ..core.enums import ActivityType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..locations.model import Location
from ..locations.poller import LocationPoller
from ..locations.service import LocationService
from ..users.authorization import authorize
from ..users.model import SessionUser, User
from ..users.repository import UserRepository
from ..users.service import apply_profile_update
from .model import BUS_FIELDS, Bus
from .repository import BusRepository

logger = logging.getLogger(__name__)

_FIELD_ATTRS = {
    "busNumber": "bus_number",
    "operatorName": "operator_name",
    "busType": "bus_type",
    "capacity": "capacity",
    "route": "route",
    "fare": "fare",
    "departureTime": "departure_time",
    "arrivalTime": "arrival_time",
    "contactNumber": "contact_number",
}


def _clean_bus_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map record keys to Bus attributes, validating the numeric ones."""
    out: dict[str, Any] = {}
    for key, value in data.items():
        if key == "capacity":
            capacity = require_positive_number(value, "capacity")
            if not isinstance(capacity, int):
                raise ValidationError("capacity must be a whole number")
            out["capacity"] = capacity
        elif key == "fare":
            out["fare"] = require_positive_number(value, "fare")
        else:
            text = str(value or "").strip()
            if not text:
                raise ValidationError(f"{key} is required")
            out[_FIELD_ATTRS[key]] = text
    return out


class DriverService:
    """Use cases of a driver: profile, own buses, locations and stats."""

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

    def _owned_bus(self, session: Optional[SessionUser], bus_id: str) -> Bus:
        session = authorize(
            session, roles=(Role.DRIVER,), users=self._users, denied_message="Driver not authenticated"
        )
        bus = self._buses.get_by_id(bus_id)
        authorize(
            session,
            owns=lambda s: bus is not None and bus.is_active and bus.driver_id == s.user_id,
            denied_message="Bus not found or access denied",
            hide_as_not_found=True,
        )
        return bus

    def get_driver_profile(self, session: Optional[SessionUser], driver_id: str) -> User:
        authorize(session, users=self._users)
        driver = self._users.get_by_id(driver_id)
        if not driver or driver.role != Role.DRIVER:
            raise NotFoundError("Driver profile not found")
        return driver

    def update_profile(self, session: Optional[SessionUser], update_data: Mapping[str, Any]) -> User:
        session = authorize(
            session, roles=(Role.DRIVER,), users=self._users, denied_message="Driver not authenticated"
        )
        driver = self._users.get_by_id(session.user_id)
        if not driver or driver.role != Role.DRIVER:
            raise NotFoundError("Driver profile not found")

        driver = self._users.save(apply_profile_update(driver, update_data, now=self._now()))
        self._activity.log(ActivityType.DRIVER_PROFILE_UPDATED, "Driver profile updated", user_id=session.user_id)
        return driver

    def add_bus(self, session: Optional[SessionUser], bus_data: Mapping[str, Any]) -> Bus:
        session = authorize(
            session, roles=(Role.DRIVER,), users=self._users, denied_message="Driver not authenticated"
        )
        require_fields(bus_data, BUS_FIELDS)
        fields = _clean_bus_fields({k: bus_data[k] for k in BUS_FIELDS})

        now = self._now()
        bus = self._buses.save(
            Bus(id=generate_id(), driver_id=session.user_id, created_at=now, updated_at=now, **fields)
        )
        logger.info("driver %s added bus %s", session.user_id, bus.id)
        self._activity.log(ActivityType.BUS_ADDED, f"New bus added: {bus.bus_number}", user_id=session.user_id)
        return bus

    def get_driver_buses(self, session: Optional[SessionUser]) -> Sequence[Bus]:
        session = authorize(
            session, roles=(Role.DRIVER,), users=self._users, denied_message="Driver not authenticated"
        )
        buses = self._buses.list_by_driver(session.user_id, active_only=True)
        return sorted(buses, key=lambda b: b.created_at or "", reverse=True)

    def update_bus(self, session: Optional[SessionUser], bus_id: str, update_data: Mapping[str, Any]) -> Bus:
        bus = self._owned_bus(session, bus_id)
        reject_unknown_fields(update_data, BUS_FIELDS)

        bus = self._buses.save(
            dataclasses.replace(bus, updated_at=self._now(), **_clean_bus_fields(update_data))
        )
        self._activity.log(ActivityType.BUS_UPDATED, f"Bus updated: {bus.bus_number}", user_id=session.user_id)
        return bus

    def delete_bus(self, session: Optional[SessionUser], bus_id: str) -> bool:
        bus = self._owned_bus(session, bus_id)
        self._buses.save(dataclasses.replace(bus, is_active=False, deleted_at=self._now()))
        logger.info("driver %s deleted bus %s", session.user_id, bus.id)
        self._activity.log(ActivityType.BUS_DELETED, f"Bus deleted: {bus.bus_number}", user_id=session.user_id)
        return True

    def update_bus_location(
        self,
        session: Optional[SessionUser],
        bus_id: str,
        location_data: Mapping[str, Any],
    ) -> Location:
        bus = self._owned_bus(session, bus_id)
        location = self._locations.record(bus_id=bus.id, driver_id=session.user_id, location_data=location_data)

        update_type = "Manual" if location.manual else "Auto"
        self._activity.log(
            ActivityType.LOCATION_UPDATED,
            f"{update_type} location updated for bus: {bus.bus_number} at {location.address or 'coordinates provided'}",
            user_id=session.user_id,
        )
        return location

    def get_bus_location_updates(
        self,
        session: Optional[SessionUser],
        bus_id: str,
        callback: Callable[[Location], None],
        *,
        interval: Optional[float] = None,
    ) -> LocationPoller:
        """Start polling the bus location; the caller must cancel() the poller."""
        bus = self._owned_bus(session, bus_id)
        return self._locations.watch(bus.id, callback, interval=interval)

    def get_bus_location_history(
        self,
        session: Optional[SessionUser],
        bus_id: str,
        *,
        limit: int = DEFAULT_LOCATION_HISTORY_LIMIT,
    ) -> Sequence[Location]:
        bus = self._owned_bus(session, bus_id)
        return self._locations.history(bus.id, limit=limit)

    def get_driver_stats(self, session: Optional[SessionUser]) -> dict:
        buses = self.get_driver_buses(session)
        bookings = self._bookings.list_by_buses({b.id for b in buses})
        return {
            "totalBuses": len(buses),
            "totalBookings": len(bookings),
            "activeBookings": sum(1 for b in bookings if not b.is_cancelled),
            "activeRoutes": len({b.route for b in buses}),
            "totalRevenue": total_revenue(bookings, buses),
        }
