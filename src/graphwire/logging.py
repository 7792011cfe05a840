"""Structured logging for graphwire.

Every module obtains its logger with :func:`get_logger` and emits snake_case
events with key/value context. Nothing is rendered the way an application
wants until :func:`setup_logging` is called, usually once at start-up.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from graphwire.config import Settings, get_settings

__all__ = ["setup_logging", "get_logger"]


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Route graphwire's events through structlog.

    Arguments left out fall back to the ``observability`` section of
    ``settings`` (or of :func:`~graphwire.config.get_settings`), so
    ``GRAPHWIRE_OBSERVABILITY__LOG_LEVEL`` and
    ``GRAPHWIRE_OBSERVABILITY__LOG_FORMAT`` take effect without code changes.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
        settings: Settings to read defaults from

    Example:
        >>> setup_logging()                    # configured from the environment
        >>> setup_logging(log_format="json")   # JSON lines, level from settings
    """
    observability = (settings or get_settings()).observability
    level_number = getattr(logging, (level or observability.log_level).upper())
    log_format = log_format or observability.log_format

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level_number)

    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a structlog logger, optionally bound to some initial context."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
