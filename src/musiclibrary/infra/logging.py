"""
Logging configuration for the music library.

This module configures structlog for JSON logging across the application.
"""

import logging
import re
import sys
from typing import Any

import structlog

from .settings import settings

_URL_CREDENTIALS = re.compile(r"://[^:/@\s]+:[^@\s]+@")


def add_service_context(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", "musiclibrary")
    event_dict.setdefault("env", settings.env)
    return event_dict


def redact_secrets(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask credentials in database URLs (user:password@host) in string values."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _URL_CREDENTIALS.sub("://***@", value)
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """Configure structlog for JSON logging on stderr."""
    level_name = (level or settings.log_level).upper()
    # No-op when the host process (or pytest) already installed root handlers
    logging.basicConfig(level=level_name, stream=sys.stderr, format="%(message)s")
    logging.getLogger("musiclibrary").setLevel(level_name)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_service_context,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            redact_secrets,  # Redact secrets before rendering
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

