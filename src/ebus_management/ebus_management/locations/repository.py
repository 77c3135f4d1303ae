from __future__ import annotations

from typing import Optional, Protocol

from .model import Location


class LocationRepository(Protocol):
    def get_for_bus(self, bus_id: str) -> Optional[Location]:
        raise NotImplementedError

    def save(self, location: Location) -> Location:
        raise NotImplementedError
