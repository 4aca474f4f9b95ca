from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.guard import init_auth
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .employees.controller import register as register_employees
from .health.controller import register as register_health
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def create_app(container: Optional[Container] = None, *, settings=None) -> Flask:
    settings = settings or load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            getattr(settings, "__name__", "?"),
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, settings=settings)

    register_error_handlers(app)
    init_auth(app, settings)
    register_auth(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_reports(app, container)
    register_health(app, container)

    return app
