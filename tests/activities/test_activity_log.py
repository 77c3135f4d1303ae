from __future__ import annotations

from src.ebus_management.ebus_management.activities.service import ActivityLog
from src.ebus_management.ebus_management.activities.store_activity_repository import StoreActivityRepository
from src.ebus_management.ebus_management.core.enums import ActivityType, Collection
from src.ebus_management.ebus_management.core.exceptions import ConcurrencyError
from src.ebus_management.ebus_management.storage.memory_store import InMemoryStore


def test_log_keeps_newest_fifty():
    store = InMemoryStore()
    log = ActivityLog(StoreActivityRepository(store))

    for i in range(55):
        log.log(ActivityType.BUS_ADDED, f"bus {i}", user_id="d1")

    stored = store.get(Collection.ACTIVITIES.value)
    assert len(stored) == 50
    assert stored[0]["description"] == "bus 54"
    assert stored[-1]["description"] == "bus 5"

    recent = log.recent()
    assert [a.description for a in recent] == [f"bus {i}" for i in range(54, 44, -1)]
    assert recent[0].type == "bus_added"
    assert recent[0].user_id == "d1"


class RacingActivities:
    def prepend(self, activity, *, limit):
        raise ConcurrencyError("activities was modified concurrently")

    def recent(self, limit):
        return []


def test_lost_race_does_not_fail_the_caller():
    log = ActivityLog(RacingActivities())

    activity = log.log(ActivityType.BUS_BOOKED, "Bus booked: KA-1 for A to B")

    assert activity.description == "Bus booked: KA-1 for A to B"
    assert log.recent() == []
