from __future__ import annotations

import json
from typing import Any, Optional, Sequence, Tuple

import mysql.connector

from ..core.exceptions import ConcurrencyError
from ..database.connection import DatabaseConnection, fetchone
from .store import KeyValueStore


class MySQLStore(KeyValueStore):
    """Store backed by the ``kv_store`` table (see database/schema.sql)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[Any]:
        found = self.get_versioned(key)
        return found[0] if found else None

    def get_versioned(self, key: str) -> Optional[Tuple[Any, int]]:
        with self._conn_factory.cursor() as (_, cur):
            cur.execute("SELECT `value`, version FROM kv_store WHERE `key`=%s", (key,))
            row = fetchone(cur)
            if not row:
                return None
            return json.loads(row["value"]), int(row["version"])

    def set(self, key: str, value: Any, *, expected_version: Optional[int] = None) -> int:
        text = json.dumps(value)
        with self._conn_factory.cursor() as (_, cur):
            if expected_version is None:
                cur.execute(
                    """
                    INSERT INTO kv_store(`key`, `value`, version)
                    VALUES(%s, %s, 1)
                    ON DUPLICATE KEY UPDATE `value`=VALUES(`value`), version=version+1
                    """,
                    (key, text),
                )
                cur.execute("SELECT version FROM kv_store WHERE `key`=%s", (key,))
                return int(fetchone(cur)["version"])

            if expected_version == 0:
                try:
                    cur.execute(
                        "INSERT INTO kv_store(`key`, `value`, version) VALUES(%s, %s, 1)",
                        (key, text),
                    )
                except mysql.connector.IntegrityError:
                    raise ConcurrencyError(f"{key} was modified concurrently")
                return 1

            cur.execute(
                "UPDATE kv_store SET `value`=%s, version=version+1 WHERE `key`=%s AND version=%s",
                (text, key, int(expected_version)),
            )
            if cur.rowcount == 0:
                raise ConcurrencyError(f"{key} was modified concurrently")
            return int(expected_version) + 1

    def remove(self, key: str) -> None:
        with self._conn_factory.cursor() as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE `key`=%s", (key,))

    def keys(self, prefix: str = "") -> Sequence[str]:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        with self._conn_factory.cursor() as (_, cur):
            cur.execute("SELECT `key` FROM kv_store WHERE `key` LIKE %s ORDER BY `key`", (escaped + "%",))
            return [r["key"] for r in cur.fetchall()]
