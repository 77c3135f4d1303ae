from __future__ import annotations

from typing import Sequence

from ..core.enums import Collection
from ..storage.store import KeyValueStore
from .model import Activity
from .repository import ActivityRepository


class StoreActivityRepository(ActivityRepository):
    """Activities are one ordered list (newest first) under a single key."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def prepend(self, activity: Activity, *, limit: int) -> None:
        key = Collection.ACTIVITIES.value
        found = self._store.get_versioned(key)
        entries, version = found if found else ([], 0)
        entries = [activity.to_record()] + list(entries or [])
        self._store.set(key, entries[:limit], expected_version=version)

    def recent(self, limit: int) -> Sequence[Activity]:
        entries = self._store.get(Collection.ACTIVITIES.value) or []
        return [Activity.from_record(e) for e in entries[: max(int(limit), 0)]]
