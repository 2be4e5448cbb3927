"""Logging configuration."""

import logging
import sys

import structlog

from sydai.settings import Settings, settings as default_settings


def _shared_processors(config: Settings) -> list:
    def add_app_name(logger, method_name, event_dict):
        event_dict.setdefault("app", config.app_name)
        return event_dict

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_app_name,
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(config: Settings | None = None) -> None:
    """Configure structured logging.

    ``log_format`` selects JSON lines (production) or the colored console
    renderer (development). ``log_level`` applies to structlog and to the
    stdlib loggers used by third-party libraries.
    """
    config = config or default_settings
    level = logging.getLevelName(config.log_level.upper())

    if config.log_format == "json":
        processors = _shared_processors(config) + [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = _shared_processors(config) + [
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

    # Third-party libraries log through stdlib logging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # SQL statements only when explicitly requested
    if not config.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)
