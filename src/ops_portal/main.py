from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .backend.controller import register as register_diagnostics
from .container import Container, build_container
from .core.constants import DEFAULT_ERROR_BUFFER_SIZE, DEFAULT_OVERTIME_NOTE_HOURS, DEFAULT_WRITE_WORKERS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .permits.controller import register as register_permits
from .users.controller import register as register_users

REPO_ROOT = Path(__file__).resolve().parents[2]


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt ``container`` (e.g. in-memory repositories in tests) to
    skip the MySQL wiring and the startup schema/seed steps.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DOCUMENT_HEADER"] = tuple(getattr(settings, "DOCUMENT_HEADER", ()))
    app.config["DOCUMENT_APPROVER_TITLE"] = getattr(settings, "DOCUMENT_APPROVER_TITLE", "Manager")
    app.config["DOCUMENT_APPROVER_NAME"] = getattr(settings, "DOCUMENT_APPROVER_NAME", "")

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            ensure_demo_users(db_config)
            app.logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            write_workers=int(getattr(settings, "WRITE_WORKERS", DEFAULT_WRITE_WORKERS)),
            error_buffer_size=int(getattr(settings, "ERROR_BUFFER_SIZE", DEFAULT_ERROR_BUFFER_SIZE)),
            overtime_note_hours=int(getattr(settings, "OVERTIME_NOTE_HOURS", DEFAULT_OVERTIME_NOTE_HOURS)),
        )
        atexit.register(container.close)

    app.extensions["ops_portal"] = container

    register_users(app, container)
    register_attendance(app, container)
    register_permits(app, container)
    register_diagnostics(app, container)

    return app
