from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging import get_logger, setup_logging
from .container import Container, build_container
from .database.bootstrap import apply_schema
from .roster.controller import register as register_roster

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(
        json_output=bool(getattr(settings, "LOG_JSON", False)),
        log_level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        cache_loggers=not app.config["TESTING"],
    )
    log = get_logger(__name__)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(
            db_config=db_config,
            window_days=int(getattr(settings, "ROSTER_WINDOW_DAYS", 30)),
            template_edit_policy=str(getattr(settings, "TEMPLATE_EDIT_POLICY", "frozen")),
        )
        log.info("app_configured", settings=settings_module, db=container.conn.config.describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=SCHEMA_PATH)

    register_roster(app, container)
    return app
