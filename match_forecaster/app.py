import os
from types import SimpleNamespace
from typing import Any, Optional

from flask import Flask
from werkzeug.exceptions import HTTPException

from .api_football import APIFootballClient
from .app_utils import make_error
from .chats import ChatRegistry
from .config import setup_logger
from .settings import Settings
from .telegram import TelegramNotifier

PKG_DIR = os.path.dirname(__file__)
STATIC_DIR = os.path.join(PKG_DIR, "static")
EXTENSION_KEY = "match_forecaster"

logger = setup_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    provider: Optional[Any] = None,
    notifier: Optional[TelegramNotifier] = None,
    chats: Optional[ChatRegistry] = None,
) -> Flask:
    """
    Build the dashboard application.

    Collaborators default to the real API-Football and Telegram clients
    built from ``settings``; tests pass fakes instead.
    """
    settings = settings or Settings.from_env()

    app = Flask(__name__, static_folder=STATIC_DIR, static_url_path="/static")
    app.config["TEMPLATES_AUTO_RELOAD"] = settings.debug

    app.extensions[EXTENSION_KEY] = SimpleNamespace(
        settings=settings,
        provider=provider or APIFootballClient(settings),
        notifier=notifier or TelegramNotifier(settings),
        chats=chats if chats is not None else ChatRegistry(settings.telegram_chat_ids),
    )

    from .routes.dashboard import bp as dashboard_bp
    from .routes.predictions_api import bp as predictions_api_bp

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(predictions_api_bp)

    @app.errorhandler(Exception)
    def _unhandled(exc: Exception):
        if isinstance(exc, HTTPException):
            return make_error(exc.name, exc.description or exc.name, status_code=exc.code or 500)
        logger.exception("❌ Unhandled error")
        return make_error("Internal server error", "Internal server error", status_code=500)

    logger.info(
        "app_ready: api_key=%s telegram=%s chats=%d",
        "set" if settings.football_api_key else "missing",
        "set" if settings.telegram_bot_token else "missing",
        len(app.extensions[EXTENSION_KEY].chats.list()),
    )
    return app
