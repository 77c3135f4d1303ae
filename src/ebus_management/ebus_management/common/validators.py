from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    """Reject the first missing or blank field, in declaration order."""
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field} is required")


def is_valid_email(email: str) -> bool:
    return bool(email) and bool(_EMAIL_RE.match(email))


def require_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    return email


def is_valid_phone(phone: str) -> bool:
    return bool(phone) and bool(_PHONE_RE.match(re.sub(r"\s", "", phone)))


def require_positive_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number != number or number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return int(number) if number.is_integer() else number


def reject_unknown_fields(data: Mapping[str, Any], allowed: Iterable[str]) -> None:
    allowed = set(allowed)
    unknown = sorted(k for k in data if k not in allowed)
    if unknown:
        raise ValidationError(f"Field cannot be updated: {', '.join(unknown)}")
