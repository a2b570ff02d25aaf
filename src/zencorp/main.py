from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .catalogs.controller import register as register_catalogs
from .common.web import ok
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables
from .employees.controller import register as register_employees
from .logging_setup import setup_logging
from .messaging.controller import register as register_messaging
from .stats.controller import register as register_stats
from .tasks.controller import register as register_tasks
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Pass ``container`` to run against prebuilt (e.g. in-memory) repositories;
    the database bootstrap is skipped in that case.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(level=getattr(settings, "LOG_LEVEL", "INFO"), log_dir=getattr(settings, "LOG_DIR", None) or None)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=DEFAULT_SESSION_DAYS)

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

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
            ensure_demo_accounts(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            face_verifier_enabled=bool(getattr(settings, "FACE_VERIFIER_ENABLED", False)),
            face_match_threshold=float(getattr(settings, "FACE_MATCH_THRESHOLD", 0.56)),
            late_after=getattr(settings, "LATE_AFTER", "09:00"),
            late_grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 0)),
            subtask_gate_roles=getattr(settings, "SUBTASK_GATE_ROLES", ("employee", "unit_lead")),
        )

    app.extensions["zencorp"] = container

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def api_health():
        return ok({"status": "ok"})

    register_users(app, container)
    register_catalogs(app, container)
    register_employees(app, container)
    register_tasks(app, container)
    register_attendance(app, container)
    register_messaging(app, container)
    register_stats(app, container)

    return app
