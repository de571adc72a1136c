from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .compliance.controller import register as register_compliance
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .notifications.controller import register as register_notifications
from .telegram.controller import register as register_telegram

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"

logger = logging.getLogger(__name__)


def load_settings() -> Any:
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def configure_logging(settings: Any) -> None:
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(*, settings: Optional[Any] = None, container: Optional[Container] = None) -> Flask:
    settings = settings or load_settings()
    configure_logging(settings)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        container = build_container(settings=settings)

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(container.conn.config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(container.conn.config)))

    db = getattr(settings, "DB_CONFIG", {})
    logger.info(
        "srtrack starting: settings=%s db=%s@%s:%s/%s tz=%s cutoff=%02d:00",
        getattr(settings, "__name__", type(settings).__name__),
        db.get("user"),
        db.get("host"),
        db.get("port", 3306),
        db.get("database"),
        container.time.tz,
        container.time.cutoff_hour,
    )

    app.extensions["srtrack"] = container

    register_attendance(app, container)
    register_compliance(app, container)
    register_notifications(app, container)
    register_telegram(app, container)

    return app
