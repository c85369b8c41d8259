from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import BACKEND_MYSQL, Container, build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .records.controller import register as register_records
from .requests.controller import register as register_requests
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    backend = str(getattr(settings, "STORAGE_BACKEND", BACKEND_MYSQL))
    db_config = getattr(settings, "DB_CONFIG", None)

    if container is None:
        if backend == BACKEND_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(backend=backend, db_config=db_config)

    logger.info("Starting with settings=%s backend=%s", settings_module, container.backend)

    admin_email = getattr(settings, "ADMIN_EMAIL", None)
    admin_password = getattr(settings, "ADMIN_PASSWORD", None)
    if admin_email and admin_password:
        ensure_admin_user(
            container.users_repo,
            email=admin_email,
            password=admin_password,
            name=getattr(settings, "ADMIN_NAME", "Administrator"),
        )

    app.extensions["attendance_ledger"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_records(app, container)
    register_requests(app, container)

    return app
