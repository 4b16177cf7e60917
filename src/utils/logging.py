# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Development runs render colored console lines; every other environment
emits one JSON object per line for the log pipeline. Standard library
loggers (``logging.getLogger(__name__)``, used by the services) are routed
to the same stream at the same level.

Example:
    >>> from src.utils.logging import setup_logging, get_logger
    >>> from src.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> logger = get_logger(__name__)
    >>> logger.info("Request finished", path="/health", status_code=200)
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from src.core.config.settings import Settings

# Libraries that log at INFO on every request or query
_NOISY_LOGGERS = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "sqlalchemy.engine",
    "asyncio",
    "aiosmtplib",
)


def _build_processors(json_output: bool) -> list[Processor]:
    """Assemble the structlog processor chain.

    Args:
        json_output: Render JSON instead of console output.

    Returns:
        Ordered processor list.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def setup_logging(settings: "Settings") -> None:
    """Configure structured logging for the application.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    json_output = not (settings.is_development or settings.debug)

    structlog.configure(
        processors=_build_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.getLogger("src").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Used by the HTTP layer to attach request_id and user_id.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables.

    Must run at the end of each request so fields do not leak into the next.
    """
    structlog.contextvars.clear_contextvars()


def get_context() -> dict[str, object]:
    """Return the variables currently bound to the logging context."""
    return structlog.contextvars.get_contextvars()
