from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from core.logging_setup import setup_logging as _setup_structured_logging
from core.settings import Settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging from ``BIKESHARE_DEBUG`` and ``LOG_FILE``."""

    settings = settings or Settings()
    _setup_structured_logging(
        debug=bool(settings.get_bool("BIKESHARE_DEBUG", False)),
        preserve_handlers=True,
        log_file=settings.get_string("LOG_FILE"),
    )


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def log_event(
    logger: logging.Logger,
    channel: str,
    event: str,
    payload: Optional[Dict[str, Any]] = None,
    *,
    level: int = logging.INFO,
) -> None:
    """Log ``{"event": ..., **payload}`` as JSON, tagged with ``channel``."""

    data = payload or {}
    try:
        message = json.dumps({"event": event, **data}, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        message = f"{event}: {data!r}"
    logger.log(level, message, extra={"channel": channel})


__all__ = ["setup_logging", "get_logger", "log_event"]
