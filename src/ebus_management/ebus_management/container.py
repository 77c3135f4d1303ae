from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional

from .activities.service import ActivityLog
from .activities.store_activity_repository import StoreActivityRepository
from .admin.service import AdminService
from .bookings.store_booking_repository import StoreBookingRepository
from .buses.service import DriverService
from .buses.store_bus_repository import StoreBusRepository
from .common.datetime_utils import now_utc
from .core.constants import ACTIVITY_LOG_LIMIT, DEFAULT_LOCATION_POLL_SECONDS
from .database.connection import DatabaseConnection, DBConfig
from .locations.service import LocationService
from .locations.store_location_repository import StoreLocationRepository
from .passengers.service import PassengerService
from .storage.memory_store import InMemoryStore
from .storage.mysql_store import MySQLStore
from .storage.store import KeyValueStore
from .users.service import AuthService
from .users.store_user_repository import StoreUserRepository


@dataclass(frozen=True)
class Container:
    store: KeyValueStore

    users_repo: StoreUserRepository
    buses_repo: StoreBusRepository
    bookings_repo: StoreBookingRepository
    locations_repo: StoreLocationRepository
    activities_repo: StoreActivityRepository

    activity_log: ActivityLog
    auth_service: AuthService
    location_service: LocationService
    driver_service: DriverService
    passenger_service: PassengerService
    admin_service: AdminService


def build_store(*, backend: str = "memory", db_config: Optional[Mapping] = None) -> KeyValueStore:
    backend = (backend or "memory").lower()
    if backend == "memory":
        return InMemoryStore()
    if backend == "mysql":
        if not db_config:
            raise ValueError("STORE_BACKEND=mysql requires DB_CONFIG")
        return MySQLStore(DatabaseConnection(DBConfig.from_mapping(db_config)))
    raise ValueError(f"Unknown store backend: {backend!r}")


def build_container(
    *,
    store: Optional[KeyValueStore] = None,
    backend: str = "memory",
    db_config: Optional[Mapping] = None,
    activity_limit: int = ACTIVITY_LOG_LIMIT,
    poll_interval: float = DEFAULT_LOCATION_POLL_SECONDS,
    clock: Callable[[], datetime] = now_utc,
    rng: Optional[random.Random] = None,
) -> Container:
    store = store or build_store(backend=backend, db_config=db_config)

    users_repo = StoreUserRepository(store)
    buses_repo = StoreBusRepository(store)
    bookings_repo = StoreBookingRepository(store)
    locations_repo = StoreLocationRepository(store)
    activities_repo = StoreActivityRepository(store)

    activity_log = ActivityLog(activities_repo, limit=activity_limit, clock=clock)
    auth_service = AuthService(users_repo, activity_log, store, clock=clock)
    location_service = LocationService(locations_repo, poll_interval=poll_interval, clock=clock, rng=rng)
    driver_service = DriverService(users_repo, buses_repo, bookings_repo, location_service, activity_log, clock=clock)
    passenger_service = PassengerService(
        users_repo, buses_repo, bookings_repo, location_service, activity_log, clock=clock
    )
    admin_service = AdminService(users_repo, buses_repo, bookings_repo, activity_log, clock=clock)

    return Container(
        store=store,
        users_repo=users_repo,
        buses_repo=buses_repo,
        bookings_repo=bookings_repo,
        locations_repo=locations_repo,
        activities_repo=activities_repo,
        activity_log=activity_log,
        auth_service=auth_service,
        location_service=location_service,
        driver_service=driver_service,
        passenger_service=passenger_service,
        admin_service=admin_service,
    )
