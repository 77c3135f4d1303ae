from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Collection
from ..storage.record_repository import StoreRecordRepository
from .model import Bus
from .repository import BusRepository


class StoreBusRepository(StoreRecordRepository[Bus], BusRepository):
    collection = Collection.BUSES
    from_record = Bus.from_record

    def get_by_id(self, bus_id: str) -> Optional[Bus]:
        return self._load(bus_id)

    def list_all(self, *, active_only: bool = False) -> Sequence[Bus]:
        buses = self._load_all()
        if active_only:
            buses = [b for b in buses if b.is_active]
        return buses

    def list_by_driver(self, driver_id: str, *, active_only: bool = True) -> Sequence[Bus]:
        return [b for b in self.list_all(active_only=active_only) if b.driver_id == driver_id]

    def save(self, bus: Bus) -> Bus:
        return self._save(bus)
