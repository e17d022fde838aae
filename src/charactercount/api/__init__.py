"""
HTTP API for the character count engine.

create_app() builds the Flask application: CORS, rate limiting, error
handlers and the count routes.
"""

import logging
from typing import Any, Dict, Optional

from flask import Flask
from flask_cors import CORS  # type: ignore[import-untyped]
from flask_limiter import Limiter  # type: ignore[import-untyped]
from flask_limiter.util import get_remote_address  # type: ignore[import-untyped]

from ..config import Settings, load_settings
from ..errors import register_error_handlers
from .routes import register_routes

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None,
               settings: Optional[Settings] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        config: Flask config overrides (e.g. TESTING, COUNT_RATE_LIMIT,
            RATELIMIT_STORAGE_URL)
        settings: Engine settings (default: load_settings())

    Returns:
        Configured Flask app
    """
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["CHARACTER_COUNT_SETTINGS"] = settings
    app.config["COUNT_RATE_LIMIT"] = settings.rate_limit
    app.config["RATELIMIT_STORAGE_URL"] = settings.ratelimit_storage_url
    if config:
        app.config.update(config)

    CORS(app)

    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        storage_uri=app.config["RATELIMIT_STORAGE_URL"],
        headers_enabled=True
    )

    register_error_handlers(app, debug=settings.debug)
    register_routes(app, limiter)

    logger.info(f"Character count API ready (rate limit: {app.config['COUNT_RATE_LIMIT']})")
    return app
