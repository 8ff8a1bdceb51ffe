"""
Structured logging setup for both gallery servers.

Development gets a readable console renderer, production gets one JSON
object per line.
"""

import logging
import os
import sys
from typing import Any

import structlog

from gallery.config import IS_PRODUCTION

_configured = False


def get_log_level() -> int:
    """Log level from LOG_LEVEL, INFO when unset or unknown."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()

    level_mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    return level_mapping.get(level_name, logging.INFO)


def configure_logging() -> None:
    """
    Configure structlog on top of the standard library logging module.

    Safe to call from both server modules; only the first call does work.
    """
    global _configured
    if _configured:
        return

    log_level = get_log_level()

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stderr,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if IS_PRODUCTION:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger().setLevel(log_level)
    _configured = True

    structlog.get_logger("gallery.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="production" if IS_PRODUCTION else "development",
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_security_event(event_type: str, admin_id: str | None = None, **context: Any) -> None:
    """
    Log security-related events (failed logins, denied access, rate limiting).

    Args:
        event_type: Type of security event
        admin_id: Admin identifier, if one is known
        **context: Additional context information
    """
    logger = get_logger("gallery.security")
    logger.warning("security_event", event_type=event_type, admin_id=admin_id, **context)
