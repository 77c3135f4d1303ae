from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..activities.service import ActivityLog
from ..common.datetime_utils import now_utc, to_iso
from ..common.ids import generate_id
from ..common.validators import (
    is_valid_phone,
    reject_unknown_fields,
    require_email,
    require_min_length,
    require_non_empty,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import ActivityType, Collection, Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..storage.store import KeyValueStore
from .model import SessionUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("fullName", "phone")


def clean_phone(phone: Optional[str]) -> Optional[str]:
    phone = (phone or "").strip() or None
    if phone is not None and not is_valid_phone(phone):
        raise ValidationError("Please enter a valid phone number")
    return phone


def apply_profile_update(user: User, update_data: Mapping[str, Any], *, now: str) -> User:
    """Merge the editable profile fields of ``update_data`` into ``user``."""
    reject_unknown_fields(update_data, PROFILE_FIELDS)
    changes: dict[str, Any] = {"updated_at": now}
    if "fullName" in update_data:
        changes["full_name"] = require_non_empty(update_data["fullName"], "fullName")
    if "phone" in update_data:
        changes["phone"] = clean_phone(update_data["phone"])
    return dataclasses.replace(user, **changes)


class AuthService:
    """Use cases: register, login/logout and the persisted client session."""

    def __init__(
        self,
        users: UserRepository,
        activity: ActivityLog,
        store: KeyValueStore,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._users = users
        self._activity = activity
        self._store = store
        self._clock = clock

    def _now(self) -> str:
        return to_iso(self._clock())

    def _remember(self, session: SessionUser) -> None:
        self._store.set(Collection.CURRENT_USER.value, session.to_dict())

    def register(
        self,
        *,
        full_name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        role: Optional[Role] = None,
        remember: bool = True,
    ) -> SessionUser:
        if not full_name or not email or not password:
            raise ValidationError("Please fill all required fields")
        full_name = require_non_empty(full_name, "fullName")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        role = Role(role) if role else Role.USER
        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be self-registered")

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        now = self._now()
        user = self._users.save(
            User(
                id=generate_id(),
                full_name=full_name,
                email=email,
                phone=clean_phone(phone),
                role=role,
                password_hash=generate_password_hash(password),
                created_at=now,
                updated_at=now,
                last_login=now,
            )
        )

        session = SessionUser.for_user(user)
        if remember:
            self._remember(session)
        logger.info("registered %s as %s", user.id, role.value)
        self._activity.log(ActivityType.USER_REGISTERED, f"New user registered: {full_name}", user_id=user.id)
        return session

    def login(self, email: str, password: str, *, remember: bool = True) -> SessionUser:
        if not email or not password:
            raise AuthenticationError("Please enter email and password")

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            logger.warning("login rejected for %s", email)
            raise AuthenticationError("Invalid email or password")

        try:
            ok = bool(user.password_hash) and check_password_hash(user.password_hash, password)
        except ValueError:
            # Unknown hash method on a corrupted record.
            ok = False
        if not ok:
            logger.warning("login rejected for %s", email)
            raise AuthenticationError("Invalid email or password")

        self._users.save(dataclasses.replace(user, last_login=self._now()))

        session = SessionUser.for_user(user)
        if remember:
            self._remember(session)
        return session

    def logout(self) -> None:
        self._store.remove(Collection.CURRENT_USER.value)

    def current_session(self) -> Optional[SessionUser]:
        data = self._store.get(Collection.CURRENT_USER.value)
        return SessionUser.from_dict(data) if data else None

    def get_user_role(self, user_id: str) -> Optional[User]:
        """Full profile of ``user_id`` (role included), or None."""
        return self._users.get_by_id(user_id)

    def create_user_profile(self, user_id: str, profile_data: Mapping[str, Any]) -> User:
        if self._users.get_by_id(user_id):
            raise ValidationError("User profile already exists")

        email = require_email(profile_data.get("email", ""))
        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")

        now = self._now()
        return self._users.save(
            User(
                id=user_id,
                full_name=require_non_empty(profile_data.get("fullName", ""), "fullName"),
                email=email,
                phone=clean_phone(profile_data.get("phone")),
                role=Role(profile_data.get("role") or Role.USER.value),
                created_at=profile_data.get("createdAt") or now,
                updated_at=now,
            )
        )

    def update_user_profile(self, user_id: str, update_data: Mapping[str, Any]) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return self._users.save(apply_profile_update(user, update_data, now=self._now()))

    def ensure_admin_account(self, *, full_name: str, email: str, password: str) -> User:
        """Create the admin account if missing (bootstrap/seed only)."""
        email = require_email(email)
        existing = self._users.get_by_email(email)
        if existing:
            return existing

        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        now = self._now()
        admin = self._users.save(
            User(
                id=generate_id(),
                full_name=require_non_empty(full_name, "fullName"),
                email=email,
                role=Role.ADMIN,
                password_hash=generate_password_hash(password),
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("seeded admin account %s", admin.id)
        return admin
