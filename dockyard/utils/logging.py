"""structlog configuration.

Library code only calls ``structlog.get_logger(__name__)``; applications and
test suites call setup_logging() once to choose the level and renderer.
"""

import logging
import sys
from typing import Optional

import structlog

from ..config import settings


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Level name, defaults to LOG_LEVEL
        log_format: "json" or "console", defaults to LOG_FORMAT
    """
    config = settings.logging
    level_name = (log_level or config.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    fmt = (log_format or config.log_format).lower()

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    """Get a structlog logger, bound to a module name."""
    return structlog.get_logger(name)
