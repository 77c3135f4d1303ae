from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.ebus_management.ebus_management.container import build_container
from src.ebus_management.ebus_management.database.bootstrap import seed_demo_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    if settings.STORE_BACKEND != "mysql":
        print("Nothing to seed: STORE_BACKEND is not 'mysql' (memory stores are seeded on app startup)")
        return

    container = build_container(backend="mysql", db_config=dict(settings.DB_CONFIG))
    seed_demo_data(
        container,
        admin_name=settings.ADMIN_NAME,
        admin_email=settings.ADMIN_EMAIL,
        admin_password=settings.ADMIN_PASSWORD,
    )
    print(f"OK: Seeded demo accounts and buses -> {settings.DB_CONFIG.get('database')}")


if __name__ == "__main__":
    main()
