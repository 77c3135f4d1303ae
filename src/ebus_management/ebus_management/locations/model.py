from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Location:
    """Current position of one bus; overwritten on every update."""

    bus_id: str
    latitude: float
    longitude: float
    last_updated: str
    address: Optional[str] = None
    driver_id: Optional[str] = None
    manual: bool = False
    timestamp: Optional[int] = None
    version: int = 0

    @property
    def id(self) -> str:
        return self.bus_id

    def to_record(self) -> dict:
        return {
            "busId": self.bus_id,
            "driverId": self.driver_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "manual": self.manual,
            "lastUpdated": self.last_updated,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(cls, data: dict, *, version: int = 0) -> "Location":
        return cls(
            bus_id=str(data["busId"]),
            driver_id=data.get("driverId"),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            address=data.get("address"),
            manual=bool(data.get("manual", False)),
            last_updated=data.get("lastUpdated") or "",
            timestamp=data.get("timestamp"),
            version=version,
        )
