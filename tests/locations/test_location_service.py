from __future__ import annotations

import random
import threading

import pytest

from src.ebus_management.ebus_management.locations.model import Location
from src.ebus_management.ebus_management.locations.poller import LocationPoller
from src.ebus_management.ebus_management.locations.service import DEMO_LOCATIONS, LocationService, demo_slot
from src.ebus_management.ebus_management.locations.store_location_repository import StoreLocationRepository
from src.ebus_management.ebus_management.storage.memory_store import InMemoryStore


def _service():
    return LocationService(StoreLocationRepository(InMemoryStore()), poll_interval=0.01, rng=random.Random(7))


def test_demo_slot_uses_last_digit():
    assert demo_slot("demo-0") == 0
    assert demo_slot("demo-3") == 3
    assert demo_slot("demo-8") == 2
    assert demo_slot("bus12") == 2
    assert demo_slot("bus17") == 1
    assert demo_slot("abc") == demo_slot("abc")
    assert 0 <= demo_slot("") < len(DEMO_LOCATIONS)


def test_demo_location_stays_near_its_anchor():
    svc = _service()
    lat, lng, address = DEMO_LOCATIONS[3]

    location = svc.locate("demo-3")

    assert location.address == address
    assert abs(location.latitude - lat) <= 0.005
    assert abs(location.longitude - lng) <= 0.005


def test_demo_ids_ignore_stored_positions():
    svc = _service()
    svc.record(bus_id="demo-1", driver_id="d1", location_data={"latitude": 1, "longitude": 2})

    assert svc.locate("demo-1").address == DEMO_LOCATIONS[1][2]
    assert svc.current("demo-1").latitude == 1.0


def test_history_holds_at_most_the_current_location():
    svc = _service()
    assert svc.history("b1") == []

    svc.record(bus_id="b1", driver_id="d1", location_data={"latitude": 1, "longitude": 2})
    svc.record(bus_id="b1", driver_id="d1", location_data={"latitude": 3, "longitude": 4, "address": ""})

    (only,) = svc.history("b1", limit=10)
    assert (only.latitude, only.longitude, only.address) == (3.0, 4.0, None)
    assert svc.history("b1", limit=0) == []


def test_poller_requires_positive_interval():
    with pytest.raises(ValueError):
        LocationPoller(lambda: None, lambda loc: None, interval=0)
    with pytest.raises(ValueError):
        _service().watch("b1", lambda loc: None, interval=0)


def test_poller_survives_callback_errors():
    location = Location(bus_id="b1", latitude=1.0, longitude=2.0, last_updated="2026-01-01T00:00:00Z")
    calls = []
    done = threading.Event()

    def callback(loc):
        calls.append(loc)
        if len(calls) == 1:
            raise RuntimeError("boom")
        done.set()

    poller = LocationPoller(lambda: location, callback, interval=0.01).start()
    try:
        assert done.wait(2.0)
    finally:
        poller.cancel()
        poller.join(2.0)

    assert len(calls) >= 2
    assert not poller.running


def test_watch_skips_buses_without_a_position():
    svc = _service()
    seen = []
    poller = svc.watch("b1", seen.append)
    try:
        threading.Event().wait(0.05)
        assert seen == []

        arrived = threading.Event()
        svc.record(bus_id="b1", driver_id="d1", location_data={"latitude": 5, "longitude": 6})
        poller.cancel()
        poller.join(2.0)

        poller = svc.watch("b1", lambda loc: arrived.set())
        assert arrived.wait(2.0)
    finally:
        poller.cancel()
        poller.join(2.0)
