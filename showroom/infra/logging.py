"""Logging setup for the catalog API.

Every record goes to stdout through structlog. Deployed instances emit one
JSON object per line; local runs get the colored console renderer.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from showroom import __version__
from showroom.config import settings

# Libraries that log at INFO on every request or query.
_CHATTY_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "aiosqlite",
    "httpx",
    "httpcore",
    "google",
    "urllib3",
    "multipart",
)


def _add_service_info(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", "showroom-api")
    event_dict.setdefault("version", __version__)
    event_dict.setdefault("env", settings.environment)
    return event_dict


def _renderer(as_json: bool) -> list[Processor]:
    if as_json:
        return [
            _add_service_info,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging() -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; the last call wins.
    """
    level = logging.getLevelName(settings.log_level.upper())
    as_json = settings.log_json and settings.environment != "dev"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(as_json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Return a structlog logger, optionally bound to some context.

    Args:
        name: Logger name, normally the calling module's ``__name__``.
        **initial_context: Key/value pairs attached to every event.
    """
    logger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger
