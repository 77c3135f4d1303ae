import threading

import pytest

from src.ebus_management.ebus_management.core.exceptions import ConcurrencyError
from src.ebus_management.ebus_management.storage.memory_store import InMemoryStore
from src.ebus_management.ebus_management.storage.store import record_key


def test_versions_increase_and_values_are_copies():
    store = InMemoryStore()
    assert store.get("missing") is None

    assert store.set("users:1", {"id": "1", "tags": []}) == 1
    value = store.get("users:1")
    value["tags"].append("mutated")

    assert store.get_versioned("users:1") == ({"id": "1", "tags": []}, 1)
    assert store.set("users:1", {"id": "1"}, expected_version=1) == 2


def test_stale_version_is_rejected():
    store = InMemoryStore()
    store.set("buses:1", {"fare": 1}, expected_version=0)

    with pytest.raises(ConcurrencyError):
        store.set("buses:1", {"fare": 2}, expected_version=0)
    with pytest.raises(ConcurrencyError):
        store.set("buses:2", {"fare": 2}, expected_version=3)
    assert store.get("buses:1") == {"fare": 1}


def test_keys_by_prefix_and_remove():
    store = InMemoryStore()
    for key in (record_key("users", "b"), record_key("users", "a"), record_key("buses", "a"), "currentUser"):
        store.set(key, {})

    assert store.keys("users:") == ["users:a", "users:b"]
    store.remove("users:a")
    store.remove("users:a")
    assert store.keys("users:") == ["users:b"]


def test_only_one_concurrent_writer_wins():
    store = InMemoryStore()
    store.set("bookings:1", {"status": "active"})
    barrier = threading.Barrier(8)
    outcomes = []

    def writer():
        barrier.wait()
        try:
            store.set("bookings:1", {"status": "cancelled"}, expected_version=1)
            outcomes.append("ok")
        except ConcurrencyError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=writer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["conflict"] * 7 + ["ok"]
