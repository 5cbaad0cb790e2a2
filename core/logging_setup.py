from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

_corr_id: ContextVar[Optional[str]] = ContextVar("_corr_id", default=None)

LOG_FILE_MAX_BYTES = 10_000_000
LOG_FILE_BACKUPS = 3

# logger name -> level when not in debug mode
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "werkzeug": logging.INFO,
}
APP_LOGGER = "apps.bikeshare"


def set_corr_id(value: Optional[str] = None) -> str:
    """Bind a correlation id to the current context (a fresh uuid4 by default)."""

    cid = value or str(uuid.uuid4())
    _corr_id.set(cid)
    return cid


def get_corr_id() -> Optional[str]:
    return _corr_id.get()


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, msg, corr_id, channel, exc."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": int(time.time() * 1000),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "corr_id": get_corr_id(),
        }
        channel = getattr(record, "channel", None)
        if channel:
            payload["channel"] = channel
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _json_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(JsonFormatter())
    return handler


def setup_logging(
    debug: bool = False,
    preserve_handlers: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Route the root logger through JSON handlers on stdout and, optionally, a rotating file."""

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    if preserve_handlers and any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        return

    handlers = [_json_handler(logging.StreamHandler(sys.stdout))]
    if log_file:
        handlers.append(
            _json_handler(
                RotatingFileHandler(
                    log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
                )
            )
        )
    root.handlers[:] = handlers

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if debug else logging.INFO)
