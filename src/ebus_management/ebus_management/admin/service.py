from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..activities.model import Activity
from ..activities.service import ActivityLog
from ..bookings.repository import BookingRepository
from ..bookings.revenue import total_revenue
from ..buses.model import Bus
from ..buses.repository import BusRepository
from ..common.datetime_utils import now_utc, to_iso
from ..common.ids import generate_id
from ..common.validators import (
    reject_unknown_fields,
    require_email,
    require_fields,
    require_min_length,
    require_non_empty,
)
from ..core.constants import DEFAULT_RECENT_ACTIVITIES, MIN_PASSWORD_LENGTH, REPORT_RECENT_ACTIVITIES
from ..core.enums import ActivityType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.authorization import authorize
from ..users.model import SessionUser, User
from ..users.repository import UserRepository
from ..users.service import clean_phone
from . import analytics

logger = logging.getLogger(__name__)

DRIVER_REQUIRED_FIELDS = ("fullName", "email", "password", "phone")
DRIVER_EDITABLE_FIELDS = ("fullName", "email", "phone")


def _newest_first(items):
    return sorted(items, key=lambda x: x.created_at or "", reverse=True)


class AdminService:
    """Use cases of an admin: dashboards, reports and driver accounts.

    Every operation requires an admin session.
    """

    def __init__(
        self,
        users: UserRepository,
        buses: BusRepository,
        bookings: BookingRepository,
        activity: ActivityLog,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._users = users
        self._buses = buses
        self._bookings = bookings
        self._activity = activity
        self._clock = clock

    def _now(self) -> str:
        return to_iso(self._clock())

    def _admin(self, session: Optional[SessionUser]) -> SessionUser:
        return authorize(
            session, roles=(Role.ADMIN,), users=self._users, denied_message="Admin access required"
        )

    def _driver(self, driver_id: str) -> User:
        driver = self._users.get_by_id(driver_id)
        if not driver or driver.role != Role.DRIVER:
            raise NotFoundError("Driver not found")
        return driver

    def get_overview_stats(self, session: Optional[SessionUser]) -> dict:
        self._admin(session)
        users = self._users.list_all()
        buses = self._buses.list_all()
        bookings = self._bookings.list_all()
        return {
            "totalUsers": sum(1 for u in users if u.role == Role.USER),
            "totalDrivers": sum(1 for u in users if u.role == Role.DRIVER),
            "totalBuses": sum(1 for b in buses if b.is_active),
            "totalBookings": len(bookings),
            "totalRevenue": total_revenue(bookings, buses),
        }

    def get_recent_activities(
        self,
        session: Optional[SessionUser],
        limit: int = DEFAULT_RECENT_ACTIVITIES,
    ) -> Sequence[Activity]:
        self._admin(session)
        return self._activity.recent(limit)

    def get_all_drivers(self, session: Optional[SessionUser]) -> Sequence[User]:
        self._admin(session)
        return _newest_first(self._users.list_all(role=Role.DRIVER))

    def get_all_users(self, session: Optional[SessionUser]) -> Sequence[User]:
        self._admin(session)
        return _newest_first(self._users.list_all(role=Role.USER))

    def get_all_buses(self, session: Optional[SessionUser]) -> Sequence[Bus]:
        self._admin(session)
        return _newest_first(self._buses.list_all(active_only=True))

    def create_driver(self, session: Optional[SessionUser], driver_data: Mapping[str, Any]) -> User:
        session = self._admin(session)
        require_fields(driver_data, DRIVER_REQUIRED_FIELDS)
        email = require_email(driver_data["email"])
        require_min_length(driver_data["password"], "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        now = self._now()
        driver = self._users.save(
            User(
                id=generate_id(),
                full_name=require_non_empty(driver_data["fullName"], "fullName"),
                email=email,
                phone=clean_phone(driver_data["phone"]),
                role=Role.DRIVER,
                password_hash=generate_password_hash(driver_data["password"]),
                created_at=now,
                updated_at=now,
                created_by=session.user_id,
            )
        )
        logger.info("admin %s created driver %s", session.user_id, driver.id)
        self._activity.log(ActivityType.DRIVER_CREATED, f"New driver created: {driver.full_name}", user_id=session.user_id)
        return driver

    def update_driver(self, session: Optional[SessionUser], driver_id: str, update_data: Mapping[str, Any]) -> User:
        session = self._admin(session)
        driver = self._driver(driver_id)
        reject_unknown_fields(update_data, DRIVER_EDITABLE_FIELDS)

        changes: dict[str, Any] = {"updated_at": self._now()}
        if "fullName" in update_data:
            changes["full_name"] = require_non_empty(update_data["fullName"], "fullName")
        if "phone" in update_data:
            changes["phone"] = clean_phone(update_data["phone"])
        if "email" in update_data:
            email = require_email(update_data["email"])
            other = self._users.get_by_email(email)
            if other and other.id != driver.id:
                raise ValidationError("Email already exists")
            changes["email"] = email

        updated = self._users.save(dataclasses.replace(driver, **changes))
        self._activity.log(ActivityType.DRIVER_UPDATED, f"Driver updated: {driver.full_name}", user_id=session.user_id)
        return updated

    def delete_driver(self, session: Optional[SessionUser], driver_id: str) -> bool:
        """Soft-delete the driver and every bus the driver owns.

        Buses go first and the driver record last, so a failed bus write
        leaves the driver active and the call can simply be repeated. On an
        already deleted driver only the bus cascade is re-run.
        """
        session = self._admin(session)
        driver = self._driver(driver_id)

        now = driver.deleted_at or self._now()
        cascaded = 0
        for bus in self._buses.list_by_driver(driver.id, active_only=True):
            self._buses.save(dataclasses.replace(bus, is_active=False, deleted_at=now))
            cascaded += 1

        if not driver.is_active:
            logger.info("driver %s already deleted (%d buses deactivated)", driver.id, cascaded)
            return True

        self._users.save(dataclasses.replace(driver, is_active=False, deleted_at=now, deleted_by=session.user_id))
        logger.info("admin %s deleted driver %s (%d buses deactivated)", session.user_id, driver.id, cascaded)
        self._activity.log(ActivityType.DRIVER_DELETED, f"Driver deleted: {driver.full_name}", user_id=session.user_id)
        return True

    def get_system_analytics(self, session: Optional[SessionUser]) -> dict:
        self._admin(session)
        users = self._users.list_all()
        buses = self._buses.list_all()
        bookings = self._bookings.list_all()

        revenue_data = analytics.revenue_by_month(bookings, buses)
        return {
            "userGrowth": analytics.user_growth(users),
            "busTypeDistribution": analytics.bus_type_distribution(buses),
            "revenueData": revenue_data,
            "topRoutes": analytics.top_routes(buses),
            "totalRevenue": sum(item["revenue"] for item in revenue_data),
            "activeUsers": sum(1 for u in users if u.role == Role.USER and u.is_active),
            "activeDrivers": sum(1 for u in users if u.role == Role.DRIVER and u.is_active),
            "activeBuses": sum(1 for b in buses if b.is_active),
        }

    def generate_system_report(self, session: Optional[SessionUser]) -> dict:
        session = self._admin(session)
        report = {
            "generatedAt": self._now(),
            "summary": self.get_overview_stats(session),
            "analytics": self.get_system_analytics(session),
            "recentActivities": [
                a.to_record() for a in self.get_recent_activities(session, REPORT_RECENT_ACTIVITIES)
            ],
        }
        self._activity.log(ActivityType.REPORT_GENERATED, "System report generated", user_id=session.user_id)
        return report
