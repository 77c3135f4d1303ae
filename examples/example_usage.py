"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

from src.ebus_management.ebus_management.container import build_container
from src.ebus_management.ebus_management.core.enums import Role


def main():
    container = build_container()

    driver = container.auth_service.register(
        full_name="Demo Driver", email="driver@example.com", password="secret1", role=Role.DRIVER
    )
    bus = container.driver_service.add_bus(
        driver,
        {
            "busNumber": "KA-05-1234",
            "operatorName": "City Express",
            "busType": "AC",
            "capacity": 40,
            "route": "Bangalore - Mysore",
            "fare": 150,
            "departureTime": "08:00",
            "arrivalTime": "11:30",
            "contactNumber": "+919876543210",
        },
    )

    rider = container.auth_service.register(full_name="Demo Rider", email="rider@example.com", password="secret1")
    for found in container.passenger_service.search_buses(from_="bangalore", to="mysore"):
        print(found.bus_number, found.route, found.fare)

    booking = container.passenger_service.book_bus(
        rider, bus_id=bus.id, bus_number=bus.bus_number, fare=bus.fare, from_="Bangalore", to="Mysore"
    )
    print(booking.to_record())
    print(container.driver_service.get_driver_stats(driver))


if __name__ == "__main__":
    main()
