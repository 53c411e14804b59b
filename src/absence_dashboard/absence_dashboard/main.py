from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.exceptions import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    InconsistentDataError,
    ValidationError,
)
from .core.logging_setup import configure_logging
from .events.controller import register as register_events
from .groups.controller import register as register_groups
from .reference.controller import register as register_reference
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e):
        return jsonify(error=str(e)), 400

    @app.errorhandler(AuthenticationError)
    def _authentication(e):
        return jsonify(error=str(e)), 401

    @app.errorhandler(AuthorizationError)
    def _authorization(e):
        return jsonify(error=str(e)), 403

    @app.errorhandler(InconsistentDataError)
    def _inconsistent(e):
        logger.error("inconsistent data: %s", e)
        return jsonify(error=str(e)), 409

    @app.errorhandler(ApiError)
    def _api(e):
        if e.status_code == 401:
            return jsonify(error="Session expired, please log in again"), 401
        if e.status_code == 403:
            return jsonify(error=str(e)), 403
        message = str(e) if app.config.get("DEBUG") else "Absence API request failed"
        return jsonify(error=message), 502


def create_app(settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_DAYS"] = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    api_config = getattr(settings, "API_CONFIG")
    logger.info("settings=%s api=%s", settings_module, api_config.get("base_url"))

    if container is None:
        container = build_container(api_config=api_config)

    register_error_handlers(app)
    register_users(app, container)
    register_events(app, container)
    register_groups(app, container)
    register_reference(app, container)

    return app
