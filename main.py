from __future__ import annotations

from typing import Optional

from flask import Flask

from apps.bikeshare.boot import build_processor
from apps.bikeshare.processor import QueryProcessor
from apps.bikeshare.routes import create_bikeshare_blueprint
from core.logging_utils import get_logger, log_event, setup_logging
from core.settings import Settings


def create_app(
    settings: Optional[Settings] = None,
    processor: Optional[QueryProcessor] = None,
) -> Flask:
    settings = settings or Settings()
    setup_logging(settings)
    log = get_logger("main")

    app = Flask(__name__)
    app.logger.handlers.clear()
    app.logger.propagate = True

    log_event(log, "boot", "app_boot", {"message": "registering blueprints"})

    if processor is None:
        processor = build_processor(settings)

    app.config["SETTINGS"] = settings
    app.config["PROCESSOR"] = processor

    app.register_blueprint(create_bikeshare_blueprint(processor))

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


if __name__ == "__main__":
    _settings = Settings()
    create_app(_settings).run(
        host=_settings.get_string("HOST", "0.0.0.0"),
        port=_settings.get_int("PORT", 5000),
    )
