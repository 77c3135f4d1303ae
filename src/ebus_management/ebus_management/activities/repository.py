from __future__ import annotations

from typing import Protocol, Sequence

from .model import Activity


class ActivityRepository(Protocol):
    def prepend(self, activity: Activity, *, limit: int) -> None:
        """Insert as the newest entry and keep only the ``limit`` newest."""

        raise NotImplementedError

    def recent(self, limit: int) -> Sequence[Activity]:
        raise NotImplementedError
