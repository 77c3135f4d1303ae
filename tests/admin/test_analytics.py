from src.ebus_management.ebus_management.admin.analytics import top_routes, user_growth
from src.ebus_management.ebus_management.buses.model import Bus
from src.ebus_management.ebus_management.core.enums import Role
from src.ebus_management.ebus_management.users.model import User


def _bus(bus_id, route, active=True):
    return Bus(
        id=bus_id,
        driver_id="d1",
        bus_number=bus_id,
        operator_name="Op",
        bus_type="AC",
        capacity=40,
        route=route,
        fare=100,
        departure_time="08:00",
        arrival_time="10:00",
        contact_number="+911",
        is_active=active,
    )


def test_top_routes_caps_at_five_and_skips_inactive():
    buses = [_bus(f"b{i}", f"Route {i}") for i in range(7)]
    buses += [_bus("x1", "Route 6"), _bus("x2", "Route 6"), _bus("gone", "Route 0", active=False)]

    routes = top_routes(buses)

    assert len(routes) == 5
    assert routes[0] == {"route": "Route 6", "count": 3}
    assert {"route": "Route 0", "count": 1} in routes


def test_user_growth_ignores_unparsable_dates():
    users = [
        User(id="1", full_name="A", email="a@x.io", role=Role.USER, created_at="2025-12-31T23:59:59Z"),
        User(id="2", full_name="B", email="b@x.io", role=Role.USER, created_at="2026-01-01T00:00:00Z"),
        User(id="3", full_name="C", email="c@x.io", role=Role.USER, created_at="yesterday"),
        User(id="4", full_name="D", email="d@x.io", role=Role.USER),
    ]

    assert user_growth(users) == [{"month": "Dec 2025", "users": 1}, {"month": "Jan 2026", "users": 1}]
