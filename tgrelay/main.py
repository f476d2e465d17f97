import logging
from typing import Optional

from flask import Flask

from tgrelay.api.common import Relay
from tgrelay.api.files import files_api
from tgrelay.api.upload import upload_api
from tgrelay.config import Settings
from tgrelay.services.moderation import RatingClient
from tgrelay.services.supabase import RatingStore
from tgrelay.services.telegram import TelegramClient
from tgrelay.tasks import DeferredTasks

LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"

# Lets callers pass store=None explicitly to run without a store
_UNSET = object()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_app(
    settings: Optional[Settings] = None,
    *,
    telegram: Optional[TelegramClient] = None,
    rating: Optional[RatingClient] = None,
    store=_UNSET,
    tasks: Optional[DeferredTasks] = None,
) -> Flask:
    """
    Build the relay app. Collaborators not passed in are built from settings.
    """
    if settings is None:
        settings = Settings.from_env()

    app = Flask(__name__)
    app.extensions["relay"] = Relay(
        settings=settings,
        telegram=telegram or TelegramClient(settings),
        rating=rating or RatingClient(settings),
        store=RatingStore.from_settings(settings) if store is _UNSET else store,
        tasks=tasks or DeferredTasks(settings.task_workers),
    )

    app.register_blueprint(upload_api)
    app.register_blueprint(files_api)

    @app.route("/", methods=["GET"])
    def healthcheck() -> str:
        return "tg-file-relay running"

    if app.extensions["relay"].store is None:
        logging.warning("⚠️ No Supabase credentials — access log and rating gate are off.")

    return app
