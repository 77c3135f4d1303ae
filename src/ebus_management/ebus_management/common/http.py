from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.exceptions import AuthenticationError, ValidationError
from ..users.model import SessionUser

SESSION_KEY = "current_user"


def session_user() -> Optional[SessionUser]:
    data = session.get(SESSION_KEY)
    return SessionUser.from_dict(data) if data else None


def remember(user: SessionUser) -> None:
    session.clear()
    session[SESSION_KEY] = user.to_dict()


def forget() -> None:
    session.clear()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if SESSION_KEY not in session:
            raise AuthenticationError("Please log in to continue")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def as_json(value: Any):
    """jsonify records, lists of records and plain data alike."""

    def encode(item: Any) -> Any:
        if hasattr(item, "to_public"):
            return item.to_public()
        if hasattr(item, "to_record"):
            return item.to_record()
        if isinstance(item, (list, tuple)):
            return [encode(i) for i in item]
        return item

    return jsonify(encode(value))
