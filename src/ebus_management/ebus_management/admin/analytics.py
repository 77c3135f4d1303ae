"""Aggregations behind the admin dashboard.

Month series are ordered chronologically and labelled like ``Jan 2026``.
Records without a parsable timestamp are left out of the month series.
"""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from ..bookings.model import Booking
from ..bookings.revenue import booking_fare
from ..buses.model import Bus
from ..common.datetime_utils import month_key, month_label, parse_iso
from ..core.constants import TOP_ROUTES_LIMIT
from ..users.model import User


def _month_of(value: Optional[str]) -> Optional[tuple[int, int]]:
    try:
        parsed = parse_iso(value)
    except ValueError:
        return None
    return month_key(parsed) if parsed else None


def user_growth(users: Iterable[User]) -> list[dict]:
    counts: Counter = Counter()
    for user in users:
        month = _month_of(user.created_at)
        if month:
            counts[month] += 1
    return [{"month": month_label(*m), "users": counts[m]} for m in sorted(counts)]


def revenue_by_month(bookings: Iterable[Booking], buses: Iterable[Bus]) -> list[dict]:
    buses_by_id = {b.id: b for b in buses}
    totals: dict[tuple[int, int], float] = {}
    for booking in bookings:
        if booking.is_cancelled:
            continue
        month = _month_of(booking.booking_date)
        if month:
            totals[month] = totals.get(month, 0) + booking_fare(booking, buses_by_id)
    return [{"month": month_label(*m), "revenue": totals[m]} for m in sorted(totals)]


def bus_type_distribution(buses: Iterable[Bus]) -> dict[str, int]:
    return dict(Counter(b.bus_type for b in buses if b.is_active))


def top_routes(buses: Iterable[Bus], *, limit: int = TOP_ROUTES_LIMIT) -> list[dict]:
    counts = Counter(b.route for b in buses if b.is_active and b.route)
    # Counter.most_common keeps first-seen order among equal counts.
    return [{"route": route, "count": count} for route, count in counts.most_common(limit)]
