from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    USER = "user"
    DRIVER = "driver"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Collection(str, Enum):
    """Top-level keys of the key-value store."""

    USERS = "users"
    BUSES = "buses"
    BOOKINGS = "bookings"
    LOCATIONS = "busLocations"
    ACTIVITIES = "activities"
    CURRENT_USER = "currentUser"


class ActivityType(str, Enum):
    USER_REGISTERED = "user_registered"
    PROFILE_UPDATED = "profile_updated"
    DRIVER_PROFILE_UPDATED = "driver_profile_updated"
    DRIVER_CREATED = "driver_created"
    DRIVER_UPDATED = "driver_updated"
    DRIVER_DELETED = "driver_deleted"
    BUS_ADDED = "bus_added"
    BUS_UPDATED = "bus_updated"
    BUS_DELETED = "bus_deleted"
    LOCATION_UPDATED = "location_updated"
    BUS_BOOKED = "bus_booked"
    BOOKING_CANCELLED = "booking_cancelled"
    REPORT_GENERATED = "report_generated"
