"""Habit tracker application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from flask import Flask

from habit_tracker.config import config_by_name
from habit_tracker.extensions import init_extensions

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping] = None) -> Flask:
    """Create and configure the habit tracker Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///"):
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        abs_path = db_path if db_path.is_absolute() else project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    _configure_logging(app)
    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from habit_tracker.scripts.habit_commands import register_commands

    register_commands(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    package_logger = logging.getLogger("habit_tracker")
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from habit_tracker.domains.habits.controllers.habit_api import habit_api_bp

    app.register_blueprint(habit_api_bp, url_prefix="/api/habits")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses for domain, HTTP and unexpected errors."""
    from werkzeug.exceptions import HTTPException

    from habit_tracker.core.errors import HabitTrackerError

    @app.errorhandler(HabitTrackerError)
    def _domain_error(exc: HabitTrackerError):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", exc.code, exc.message)
        return exc.to_dict(), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"error": "unexpected_error", "message": str(exc)}, 500
        return {"error": "unexpected_error"}, 500
