from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, to_iso
from ..common.ids import generate_id
from ..core.constants import ACTIVITY_LOG_LIMIT, DEFAULT_RECENT_ACTIVITIES
from ..core.enums import ActivityType
from ..core.exceptions import ConcurrencyError
from .model import Activity
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityLog:
    """Append-only audit trail shared by every feature module."""

    def __init__(
        self,
        activities: ActivityRepository,
        *,
        limit: int = ACTIVITY_LOG_LIMIT,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._activities = activities
        self._limit = int(limit)
        self._clock = clock

    def log(self, activity_type: ActivityType | str, description: str, *, user_id: Optional[str] = None) -> Activity:
        type_value = activity_type.value if isinstance(activity_type, ActivityType) else str(activity_type)
        activity = Activity(
            id=generate_id(),
            type=type_value,
            description=description,
            timestamp=to_iso(self._clock()),
            user_id=user_id,
        )
        try:
            self._activities.prepend(activity, limit=self._limit)
        except ConcurrencyError:
            # The operation being audited has already been committed.
            logger.warning("activity %s dropped after a concurrent write: %s", type_value, description)
            return activity
        logger.info("activity %s by %s: %s", type_value, user_id or "-", description)
        return activity

    def recent(self, limit: int = DEFAULT_RECENT_ACTIVITIES) -> Sequence[Activity]:
        return self._activities.recent(limit)
