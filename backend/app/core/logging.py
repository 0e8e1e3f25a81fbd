"""
Structured logging configuration using structlog.

Every module logs through get_logger(__name__) with a snake_case event name
and key/value context. Output is JSON when LOG_JSON is set (default: only in
production) and a console renderer otherwise.
"""

import logging
import sys
from datetime import date, time
from decimal import Decimal

import structlog
from app.core.config import get_settings


def stringify_values(logger, method_name, event_dict):
    """Booking dates and times are logged as ISO strings."""
    for key, value in event_dict.items():
        if isinstance(value, (date, time)):
            event_dict[key] = value.isoformat()
        elif isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def _renderer(as_json: bool):
    if as_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _install_handler(formatter: logging.Formatter, level: int) -> None:
    root_logger = logging.getLogger()
    # Lifespan runs once per app start; tests and the admin CLI start it again
    for existing in list(root_logger.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def setup_logging() -> None:
    settings = get_settings()
    as_json = settings.LOG_JSON if settings.LOG_JSON is not None else settings.ENVIRONMENT == "production"

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        stringify_values,
    ]
    if as_json:
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        # Records from uvicorn, sqlalchemy and alembic go through the same chain
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(as_json),
        ],
    )
    _install_handler(formatter, getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
