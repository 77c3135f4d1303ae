from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from ..container import Container
from ..users.model import SessionUser
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_DRIVER = {
    "fullName": "Ravi Kumar",
    "email": "driver@ebus.local",
    "password": "driver123",
    "phone": "+919876500000",
}

DEMO_BUSES = (
    {
        "busNumber": "KA-01-4455",
        "operatorName": "City Express",
        "busType": "AC",
        "capacity": 40,
        "route": "Bangalore - Mysore",
        "fare": 150,
        "departureTime": "08:00",
        "arrivalTime": "11:30",
        "contactNumber": "+919876500000",
    },
    {
        "busNumber": "KA-01-7788",
        "operatorName": "City Express",
        "busType": "Sleeper",
        "capacity": 30,
        "route": "Bangalore - Chennai",
        "fare": 650,
        "departureTime": "21:00",
        "arrivalTime": "05:30",
        "contactNumber": "+919876500000",
    },
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Splits on ';' outside quotes; '--' comment lines are dropped first.
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))
    buf: list[str] = []
    quote = None
    for ch in sql:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: Mapping) -> None:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    with conn.cursor(dictionary=False, with_database=False) as (_, cur):
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    with conn.cursor(dictionary=False) as (_, cur):
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("schema applied to %s", conn.config.describe())


def list_tables(db_config: Mapping) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    with conn.cursor(dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]


def seed_demo_data(container: Container, *, admin_name: str, admin_email: str, admin_password: str) -> None:
    """Idempotently create the admin account, a demo driver and the driver's buses."""
    admin = container.auth_service.ensure_admin_account(
        full_name=admin_name, email=admin_email, password=admin_password
    )
    if container.users_repo.get_by_email(DEMO_DRIVER["email"]):
        logger.info("demo data already present")
        return

    admin_session = SessionUser.for_user(admin)
    driver = container.admin_service.create_driver(admin_session, DEMO_DRIVER)
    driver_session = SessionUser.for_user(driver)
    for bus in DEMO_BUSES:
        container.driver_service.add_bus(driver_session, bus)
    logger.info("seeded demo driver %s with %d buses", driver.id, len(DEMO_BUSES))
