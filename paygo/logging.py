"""Root logger setup shared by the API and the operator CLI."""

import logging
import sys

from paygo.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
HANDLER_NAME = "paygo"

# Per-statement and per-request chatter; the services log what matters.
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "alembic.runtime.migration")


def _formatter() -> logging.Formatter:
    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
            static_fields={"service": "paygo"},
        )
    return logging.Formatter(TEXT_FORMAT)


def configure_logging() -> None:
    """Install the paygo handler on the root logger.

    Safe to call more than once: only the handler from an earlier call is
    replaced, handlers added by uvicorn or pytest stay attached.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
