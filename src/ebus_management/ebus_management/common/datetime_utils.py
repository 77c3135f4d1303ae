from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (with or without trailing Z)."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def epoch_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def month_key(value: datetime) -> tuple[int, int]:
    return value.year, value.month


def month_label(year: int, month: int) -> str:
    """'Jan 2026' style label used by the analytics series."""
    return datetime(year, month, 1).strftime("%b %Y")
