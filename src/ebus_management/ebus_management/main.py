from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .admin.controller import register as register_admin
from .buses.controller import register as register_buses
from .container import Container, build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConcurrencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .database.bootstrap import apply_schema, list_tables, seed_demo_data
from .passengers.controller import register as register_passengers
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConcurrencyError, 409),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(error, cls)), 400)
        return jsonify({"error": str(error)}), status


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    backend = getattr(settings, "STORE_BACKEND", "memory")
    db_config = getattr(settings, "DB_CONFIG", {})
    logger.info("settings=%s store=%s", settings_module, backend)

    if container is None:
        if backend == "mysql" and getattr(settings, "AUTO_INIT_DB", False):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            backend=backend,
            db_config=db_config,
            poll_interval=float(getattr(settings, "LOCATION_POLL_SECONDS", 5)),
        )

        if getattr(settings, "AUTO_SEED_DB", False):
            seed_demo_data(
                container,
                admin_name=getattr(settings, "ADMIN_NAME"),
                admin_email=getattr(settings, "ADMIN_EMAIL"),
                admin_password=getattr(settings, "ADMIN_PASSWORD"),
            )

    app.extensions["ebus_container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_passengers(app, container)
    register_buses(app, container)
    register_admin(app, container)

    return app
