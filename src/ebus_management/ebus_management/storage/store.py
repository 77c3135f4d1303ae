from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, Tuple


class KeyValueStore(Protocol):
    """Key-value persistence surface shared by every repository.

    Values are JSON-serializable structures. Each key carries a version that
    grows by one on every write; passing ``expected_version`` turns ``set``
    into a compare-and-swap (0 means "the key must not exist yet").
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def get_versioned(self, key: str) -> Optional[Tuple[Any, int]]:
        raise NotImplementedError

    def set(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        """Persist ``value`` and return the new version.

        Raises ConcurrencyError when ``expected_version`` does not match.
        """

        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> Sequence[str]:
        raise NotImplementedError


def record_key(collection: str, record_id: str) -> str:
    return f"{collection}:{record_id}"
