"""Structured logging for the referrers API.

Request-scoped fields (request_id, method, path) are bound into
``structlog.contextvars`` by ``RequestContextMiddleware`` and merged into
every event logged while the request is handled.
"""

import logging
import sys

import structlog
from structlog.typing import EventDict, WrappedLogger

from gac.settings import settings


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", settings.app_name)
    return event_dict


def configure_logging() -> None:
    """Configure structlog; JSON in deployed environments, console locally."""
    level = logging.getLevelName(settings.log_level.upper())

    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _add_service,
    ]
    if settings.log_format == "json":
        processors = shared + [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared + [
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # stdlib loggers (sqlalchemy, uvicorn); SQL echo only when debugging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level <= logging.DEBUG else logging.WARNING
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger bound to the module name."""
    return structlog.get_logger(name, logger_name=name)
