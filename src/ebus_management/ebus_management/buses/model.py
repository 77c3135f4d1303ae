from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

Number = Union[int, float]

# Record keys a driver supplies and may later edit.
BUS_FIELDS = (
    "busNumber",
    "operatorName",
    "busType",
    "capacity",
    "route",
    "fare",
    "departureTime",
    "arrivalTime",
    "contactNumber",
)


@dataclass(frozen=True)
class Bus:
    id: str
    driver_id: str
    bus_number: str
    operator_name: str
    bus_type: str
    capacity: int
    route: str
    fare: Number
    departure_time: str
    arrival_time: str
    contact_number: str
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted_at: Optional[str] = None
    version: int = 0

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "driverId": self.driver_id,
            "busNumber": self.bus_number,
            "operatorName": self.operator_name,
            "busType": self.bus_type,
            "capacity": self.capacity,
            "route": self.route,
            "fare": self.fare,
            "departureTime": self.departure_time,
            "arrivalTime": self.arrival_time,
            "contactNumber": self.contact_number,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "deletedAt": self.deleted_at,
        }

    @classmethod
    def from_record(cls, data: dict, *, version: int = 0) -> "Bus":
        return cls(
            id=str(data["id"]),
            driver_id=str(data.get("driverId") or ""),
            bus_number=data.get("busNumber") or "",
            operator_name=data.get("operatorName") or "",
            bus_type=data.get("busType") or "",
            capacity=int(data.get("capacity") or 0),
            route=data.get("route") or "",
            fare=data.get("fare") or 0,
            departure_time=data.get("departureTime") or "",
            arrival_time=data.get("arrivalTime") or "",
            contact_number=data.get("contactNumber") or "",
            is_active=data.get("isActive") is not False,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            deleted_at=data.get("deletedAt"),
            version=version,
        )
