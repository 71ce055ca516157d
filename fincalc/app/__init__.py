"""Application factory and app-wide configuration."""

from http import HTTPStatus
from typing import Optional

from flask import Flask, request
from flask_cors import CORS

from fincalc.app.api.routes import api_bp
from fincalc.config import Settings, get_settings
from fincalc.core.context import CalculationContext
from fincalc.core.history import HistoryStore
from fincalc.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    app = Flask(__name__)
    app.extensions["fincalc.settings"] = settings
    app.extensions["fincalc.context"] = CalculationContext.from_settings(settings)
    app.extensions["fincalc.history"] = HistoryStore(max_items=settings.HISTORY_MAX_ITEMS)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.CORS_ORIGINS}},
        supports_credentials=True,
    )

    @app.after_request
    def log_request(response):
        level = logger.warning if response.status_code >= HTTPStatus.BAD_REQUEST else logger.info
        level("request", method=request.method, path=request.path, status=response.status_code)
        return response

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info("app_created", project=settings.PROJECT_NAME, version=settings.VERSION)
    return app
