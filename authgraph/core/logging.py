"""
Structured logging setup.

Call configure_logging() once at startup (the app lifespan does this).
Modules then log with:

    logger = structlog.get_logger()
    logger.info("auth_item.created", name="admin", type="role")
"""

import logging
import sys

import structlog

from .config import settings


def configure_logging(
    level: str | None = None,
    log_format: str | None = None,
) -> None:
    """Configure structlog with JSON (production) or console (dev) output."""
    level = (level or settings.log_level).upper()
    log_format = log_format or settings.log_format

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )
