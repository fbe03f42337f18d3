"""Structured logging for the Challenge Management API.

Everything logs through structlog with key/value events. ``service`` is
bound once at startup; each HTTP request binds its own keys on top and
removes only those keys when it finishes.
"""

import logging
import sys
from typing import Any

import structlog

REQUEST_ID_KEY = "request_id"


def _renderer_chain(json_format: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_format:
        chain += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return chain


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    service_name: str = "challenge-api",
) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ...)
        json_format: Emit one JSON object per line instead of console output
        service_name: Bound as ``service`` on every entry
    """
    numeric_level = logging.getLevelName(level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)

    structlog.configure(
        processors=_renderer_chain(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, usually named after the calling module."""
    return structlog.get_logger(name)


def bind_request_context(request_id: str, **kwargs: Any) -> tuple[str, ...]:
    """Bind ``request_id`` and any extra keys for the current request.

    Returns the bound key names, to be handed to :func:`clear_request_context`.
    """
    context = {REQUEST_ID_KEY: request_id, **kwargs}
    structlog.contextvars.bind_contextvars(**context)
    return tuple(context)


def clear_request_context(*keys: str) -> None:
    """Unbind request keys, leaving process-wide bindings such as ``service``."""
    structlog.contextvars.unbind_contextvars(*(keys or (REQUEST_ID_KEY,)))
