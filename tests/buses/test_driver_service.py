from __future__ import annotations

import threading

import pytest

from src.ebus_management.ebus_management.container import build_container
from src.ebus_management.ebus_management.core.enums import ActivityType, Role
from src.ebus_management.ebus_management.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.ebus_management.ebus_management.storage.memory_store import InMemoryStore

BUS = {
    "busNumber": "KA-05-1234",
    "operatorName": "City Express",
    "busType": "AC",
    "capacity": 40,
    "route": "Bangalore - Mysore",
    "fare": 150,
    "departureTime": "08:00",
    "arrivalTime": "11:30",
    "contactNumber": "+919876543210",
}


@pytest.fixture
def c():
    return build_container(store=InMemoryStore())


def _driver(c, email="ravi@example.com"):
    return c.auth_service.register(full_name="Ravi", email=email, password="secret1", role=Role.DRIVER)


def test_add_bus_is_driver_only(c):
    rider = c.auth_service.register(full_name="Asha", email="asha@example.com", password="secret1")
    with pytest.raises(AuthorizationError, match="Driver not authenticated"):
        c.driver_service.add_bus(rider, BUS)


def test_add_bus_validates_fields(c):
    driver = _driver(c)
    with pytest.raises(ValidationError, match="route is required"):
        c.driver_service.add_bus(driver, {**BUS, "route": "  "})
    with pytest.raises(ValidationError, match="whole number"):
        c.driver_service.add_bus(driver, {**BUS, "capacity": 40.5})
    with pytest.raises(ValidationError, match="fare"):
        c.driver_service.add_bus(driver, {**BUS, "fare": -1})

    bus = c.driver_service.add_bus(driver, {**BUS, "capacity": "40"})
    assert bus.capacity == 40
    assert bus.driver_id == driver.user_id
    assert bus.is_active


def test_buses_are_scoped_to_their_driver(c):
    ravi = _driver(c)
    other = _driver(c, email="other@example.com")
    bus = c.driver_service.add_bus(ravi, BUS)

    assert c.driver_service.get_driver_buses(other) == []
    with pytest.raises(NotFoundError, match="Bus not found or access denied"):
        c.driver_service.update_bus(other, bus.id, {"fare": 10})
    with pytest.raises(NotFoundError):
        c.driver_service.delete_bus(other, bus.id)
    with pytest.raises(NotFoundError):
        c.driver_service.update_bus_location(other, bus.id, {"latitude": 1, "longitude": 1})


def test_update_bus_rejects_ownership_fields(c):
    driver = _driver(c)
    bus = c.driver_service.add_bus(driver, BUS)

    with pytest.raises(ValidationError, match="Field cannot be updated: driverId"):
        c.driver_service.update_bus(driver, bus.id, {"driverId": "someone-else"})

    updated = c.driver_service.update_bus(driver, bus.id, {"fare": 175, "route": "Bangalore - Hassan"})
    assert (updated.fare, updated.route, updated.driver_id) == (175, "Bangalore - Hassan", driver.user_id)


def test_deleted_bus_disappears(c):
    driver = _driver(c)
    bus = c.driver_service.add_bus(driver, BUS)

    assert c.driver_service.delete_bus(driver, bus.id) is True
    assert c.driver_service.get_driver_buses(driver) == []
    assert c.buses_repo.get_by_id(bus.id).deleted_at
    with pytest.raises(NotFoundError):
        c.driver_service.update_bus(driver, bus.id, {"fare": 10})


@pytest.mark.parametrize(
    "data",
    [
        {"latitude": 91, "longitude": 0},
        {"latitude": 0, "longitude": -180.5},
        {"latitude": "north", "longitude": 0},
        {"longitude": 77.5},
    ],
)
def test_location_coordinates_are_validated(c, data):
    driver = _driver(c)
    bus = c.driver_service.add_bus(driver, BUS)

    with pytest.raises(ValidationError, match="Invalid location coordinates"):
        c.driver_service.update_bus_location(driver, bus.id, data)
    assert c.location_service.current(bus.id) is None


def test_location_update_overwrites_previous_position(c):
    driver = _driver(c)
    bus = c.driver_service.add_bus(driver, BUS)

    c.driver_service.update_bus_location(driver, bus.id, {"latitude": 12.9, "longitude": 77.5})
    c.driver_service.update_bus_location(
        driver, bus.id, {"latitude": 13.0, "longitude": 77.6, "address": "Hebbal", "manual": True}
    )

    (latest,) = c.driver_service.get_bus_location_history(driver, bus.id)
    assert (latest.latitude, latest.longitude, latest.address, latest.manual) == (13.0, 77.6, "Hebbal", True)
    assert latest.driver_id == driver.user_id
    assert latest.timestamp

    descriptions = [a.description for a in c.activity_log.recent(2)]
    assert descriptions == [
        "Manual location updated for bus: KA-05-1234 at Hebbal",
        "Auto location updated for bus: KA-05-1234 at coordinates provided",
    ]


def test_location_updates_are_pushed_until_cancelled(c):
    driver = _driver(c)
    bus = c.driver_service.add_bus(driver, BUS)
    c.driver_service.update_bus_location(driver, bus.id, {"latitude": 12.9, "longitude": 77.5})

    seen = []
    received = threading.Event()

    def on_location(location):
        seen.append(location)
        received.set()

    poller = c.driver_service.get_bus_location_updates(driver, bus.id, on_location, interval=0.01)
    try:
        assert received.wait(2.0)
    finally:
        poller.cancel()
        poller.join(2.0)

    assert not poller.running
    assert seen[0].bus_id == bus.id


def test_driver_stats_exclude_cancelled_bookings(c):
    driver = _driver(c)
    bus = c.driver_service.add_bus(driver, BUS)
    c.driver_service.add_bus(driver, {**BUS, "busNumber": "KA-05-9999"})
    rider = c.auth_service.register(full_name="Asha", email="asha@example.com", password="secret1")

    kept = c.passenger_service.book_bus(rider, bus_id=bus.id, bus_number=bus.bus_number, fare=150, from_="A", to="B")
    dropped = c.passenger_service.book_bus(rider, bus_id=bus.id, bus_number=bus.bus_number, fare=150, from_="A", to="B")
    c.passenger_service.cancel_booking(rider, dropped.id)

    stats = c.driver_service.get_driver_stats(driver)

    assert stats == {
        "totalBuses": 2,
        "totalBookings": 2,
        "activeBookings": 1,
        "activeRoutes": 1,
        "totalRevenue": 150,
    }
    assert kept.id != dropped.id


def test_driver_profile(c):
    driver = _driver(c)

    assert c.driver_service.get_driver_profile(driver, driver.user_id).email == "ravi@example.com"
    with pytest.raises(NotFoundError, match="Driver profile not found"):
        c.driver_service.get_driver_profile(driver, "missing")

    updated = c.driver_service.update_profile(driver, {"phone": "+919811111111"})
    assert updated.phone == "+919811111111"
    assert c.activity_log.recent(1)[0].type == ActivityType.DRIVER_PROFILE_UPDATED.value
