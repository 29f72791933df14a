"""
Structured logging for tramway-mysql.

Modules log through ``get_logger(__name__)`` with an event name and
key/value context; the host application decides the output format by calling
:func:`configure_logging` once.

Processor chain::

    timestamp -> log level -> logger name -> redact_secrets -> renderer
                                                                 │
                                     JSON (not a tty) ◄──────────┤
                                     console (tty)    ◄──────────┘

Credentials never reach a renderer: :func:`redact_secrets` masks any
``password`` / ``passwd`` key, including keys nested inside logged
parameter maps.

Examples:
    >>> configure_logging(level="DEBUG", json_format=True)
    >>> logger = get_logger(__name__)
    >>> logger.info("connect", host="db.local", params={"password": "s3cret"})
    {"host": "db.local", "params": {"password": "***"}, "event": "connect", ...}

Tags:
    logging, structlog, redaction, tramway-mysql
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SECRET_KEYS = frozenset({"password", "passwd"})
REDACTED = "***"


def _mask(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED if key in SECRET_KEYS else _mask(item)
            for key, item in value.items()
        }
    return value


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask connection secrets in the event and in nested mappings."""
    for key, value in list(event_dict.items()):
        if key in SECRET_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, Mapping):
            event_dict[key] = _mask(value)
    return event_dict


def configure_logging(level: str = "INFO", json_format: bool | None = None) -> None:
    """Route structlog events through stdlib logging.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: JSON lines when True, colored console when False,
            JSON only if stdout is not a tty when None.
    """
    numeric_level = getattr(logging, level.upper())
    if json_format is None:
        json_format = not sys.stdout.isatty()

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            redact_secrets,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def get_logger(name: str | None = None) -> Any:
    """Structured logger for *name* (usually ``__name__``)."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "redact_secrets",
]
