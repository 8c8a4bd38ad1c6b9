from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .absences.controller import register as register_absences
from .api.errors import register_error_handlers
from .api.responses import ok
from .auth.controller import register as register_auth
from .container import Container, build_container
from .core.constants import DEFAULT_JWT_EXPIRES_HOURS
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .groups.controller import register as register_groups
from .schedules.controller import register as register_schedules
from .teachers.controller import register as register_teachers
from .trainees.controller import register as register_trainees
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the JSON API.

    When `container` is given (tests), no database is touched at startup.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["MAX_CONTENT_LENGTH"] = getattr(settings, "MAX_CONTENT_LENGTH", None)
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
        logger.info(
            "Starting with settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(
                db_config,
                admin_email=getattr(settings, "DEMO_ADMIN_EMAIL"),
                admin_password=getattr(settings, "DEMO_ADMIN_PASSWORD"),
            )
            logger.info("Demo accounts ready")

        container = build_container(
            db_config=db_config,
            jwt_secret=getattr(settings, "JWT_SECRET"),
            jwt_expires_hours=int(getattr(settings, "JWT_EXPIRES_HOURS", DEFAULT_JWT_EXPIRES_HOURS)),
            upload_folder=getattr(settings, "UPLOAD_FOLDER"),
        )

    register_error_handlers(app)
    register_auth(app, container)
    register_users(app, container)
    register_teachers(app, container)
    register_groups(app, container)
    register_trainees(app, container)
    register_absences(app, container)
    register_schedules(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"})

    return app
