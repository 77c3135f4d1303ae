from __future__ import annotations

import json
import threading
from typing import Any, Dict, Optional, Sequence, Tuple

from ..core.exceptions import ConcurrencyError
from .store import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Process-local store.

    Values are kept serialized so callers never share mutable state with the
    store, the same way a browser's local storage hands back fresh copies.
    """

    def __init__(self):
        self._data: Dict[str, Tuple[str, int]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        found = self.get_versioned(key)
        return found[0] if found else None

    def get_versioned(self, key: str) -> Optional[Tuple[Any, int]]:
        with self._lock:
            entry = self._data.get(key)
        if entry is None:
            return None
        text, version = entry
        return json.loads(text), version

    def set(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        text = json.dumps(value)
        with self._lock:
            current = self._data.get(key)
            current_version = current[1] if current else 0
            if expected_version is not None and expected_version != current_version:
                raise ConcurrencyError(f"{key} was modified concurrently")
            new_version = current_version + 1
            self._data[key] = (text, new_version)
            return new_version

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self, prefix: str = "") -> Sequence[str]:
        with self._lock:
            return sorted(k for k in self._data if k.startswith(prefix))
