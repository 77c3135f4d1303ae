from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, List, Optional, TypeVar

from ..core.enums import Collection
from .store import KeyValueStore, record_key

T = TypeVar("T")


class StoreRecordRepository(Generic[T]):
    """Per-record keyed storage for one collection.

    Records live under ``<collection>:<id>``; every save is a compare-and-swap
    on the version the record was loaded with, so two writers racing on the
    same record surface a ConcurrencyError instead of clobbering each other.
    """

    collection: Collection
    from_record: Callable[..., T]

    def __init__(self, store: KeyValueStore):
        self._store = store

    def _key(self, record_id: str) -> str:
        return record_key(self.collection.value, record_id)

    def _load(self, record_id: str) -> Optional[T]:
        if not record_id:
            return None
        found = self._store.get_versioned(self._key(record_id))
        if not found:
            return None
        data, version = found
        return type(self).from_record(data, version=version)

    def _load_all(self) -> List[T]:
        out: List[T] = []
        for key in self._store.keys(f"{self.collection.value}:"):
            found = self._store.get_versioned(key)
            if found:
                data, version = found
                out.append(type(self).from_record(data, version=version))
        return out

    def _save(self, item: Any) -> T:
        version = self._store.set(self._key(item.id), item.to_record(), expected_version=item.version)
        return dataclasses.replace(item, version=version)
