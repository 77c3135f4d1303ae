from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Bus


class BusRepository(Protocol):
    def get_by_id(self, bus_id: str) -> Optional[Bus]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Bus]:
        raise NotImplementedError

    def list_by_driver(self, driver_id: str, *, active_only: bool = True) -> Sequence[Bus]:
        raise NotImplementedError

    def save(self, bus: Bus) -> Bus:
        raise NotImplementedError
