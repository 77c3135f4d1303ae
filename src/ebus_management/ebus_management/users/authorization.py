from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from .model import SessionUser
from .repository import UserRepository

logger = logging.getLogger(__name__)


def authorize(
    session: Optional[SessionUser],
    *,
    roles: Iterable[Role] = (),
    owns: Optional[Callable[[SessionUser], bool]] = None,
    users: Optional[UserRepository] = None,
    denied_message: str = "You do not have permission",
    hide_as_not_found: bool = False,
) -> SessionUser:
    """Single authorization gate for every service operation.

    ``roles`` restricts by role (empty = any authenticated user); ``owns`` is an
    ownership predicate evaluated against the session. With ``users`` the
    account is reloaded and a deleted or deactivated account is rejected even
    though its session is still around. With ``hide_as_not_found`` an
    ownership failure is reported as NotFoundError so callers cannot probe for
    other users' records.
    """
    if session is None:
        raise AuthenticationError("Not authenticated")

    if users is not None:
        account = users.get_by_id(session.user_id)
        if account is None or not account.is_active:
            logger.warning("session of inactive account %s rejected", session.user_id)
            raise AuthenticationError("Account is no longer active")

    roles = tuple(roles)
    if roles and session.role not in roles:
        logger.warning("denied %s (role=%s, needs %s)", session.user_id, session.role.value, [r.value for r in roles])
        raise AuthorizationError(denied_message)

    if owns is not None and not owns(session):
        logger.warning("ownership check failed for %s", session.user_id)
        if hide_as_not_found:
            raise NotFoundError(denied_message)
        raise AuthorizationError(denied_message)

    return session
