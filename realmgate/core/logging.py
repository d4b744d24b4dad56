"""
Logging Configuration

Structured logging setup using structlog.

Development renders colored console lines; every other environment renders
one JSON object per line. Realm loading binds its lifecycle phase and
selector as context variables, so every line logged by a realm while it is
being bound or unbound carries them.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import Processor

from realmgate.config.settings import settings


def _renderers(json_output: bool) -> list[Processor]:
    if json_output:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL
        json_output: Force JSON rendering on or off, defaults to JSON
            outside development
    """
    if json_output is None:
        json_output = not settings.is_development
    level_name = (level or settings.LOG_LEVEL).upper()

    # No add_logger_name: it needs a stdlib logger, PrintLoggerFactory has none
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderers(json_output),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # SQLAlchemy engine logs go through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name),
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, defaults to module name

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> None:
    """Bind context variables onto every subsequent log line.

    Args:
        **kwargs: Key-value pairs to add to log context
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context(*keys: str) -> None:
    """Remove context variables.

    Args:
        *keys: Keys to remove; with none given, all context is cleared
    """
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


setup_logging()

logger = get_logger("realmgate")
