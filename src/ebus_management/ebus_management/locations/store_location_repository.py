from __future__ import annotations

from typing import Optional

from ..core.enums import Collection
from ..storage.record_repository import StoreRecordRepository
from .model import Location
from .repository import LocationRepository


class StoreLocationRepository(StoreRecordRepository[Location], LocationRepository):
    collection = Collection.LOCATIONS
    from_record = Location.from_record

    def get_for_bus(self, bus_id: str) -> Optional[Location]:
        return self._load(bus_id)

    def save(self, location: Location) -> Location:
        return self._save(location)
