from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import PLACEHOLDER_SECRET_KEY, get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_TOKEN_TTL_DAYS, MAX_PICTURE_BYTES
from .courses.controller import register as register_courses
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_admin_user, list_tables
from .events.controller import register as register_events
from .settings.controller import register as register_settings
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        admin_password = getattr(settings, "ADMIN_PASSWORD", "")
        if admin_password:
            ensure_admin_user(db_config, email=settings.ADMIN_EMAIL, password=admin_password)
        logger.info("Seed data ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    Pass a prebuilt `container` (e.g. wired to in-memory repositories) to skip
    database setup entirely.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    secret_key = getattr(settings, "SECRET_KEY")
    if settings_module == "config.production" and secret_key == PLACEHOLDER_SECRET_KEY:
        raise RuntimeError("SECRET_KEY must be set in production")

    app.secret_key = secret_key
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_CONTENT_LENGTH", MAX_PICTURE_BYTES))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            secret_key=secret_key,
            token_ttl_days=int(getattr(settings, "TOKEN_TTL_DAYS", DEFAULT_TOKEN_TTL_DAYS)),
            reject_inactive=bool(getattr(settings, "REJECT_INACTIVE_EVENT_CHECKIN", False)),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_courses(app, container)
    register_events(app, container)
    register_attendance(app, container)
    register_settings(app, container)

    return app
