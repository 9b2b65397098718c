"""Structured logging configuration for the combat engine.

Logging goes through structlog so that every roll, precondition failure
and commit is emitted as a key-value event. Development output is a
colored console renderer, production output is JSON.

Example:
    >>> from cyberpunk_combat.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Attack resolved", weapon="Militech Ronin", hit=True)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from structlog.types import EventDict, WrappedLogger


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the package name.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: The event dictionary to modify.

    Returns:
        The modified event dictionary with app context.
    """
    event_dict["app"] = "cyberpunk_combat"
    return event_dict


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure package-wide logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output logs in JSON format for production.
        log_file: Optional path to a log file for persistent logging.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Standard library logging for anything outside structlog
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional name for the logger (typically __name__).

    Returns:
        A configured structlog BoundLogger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent log entries.

    The dispatcher binds the attacker and weapon for the duration of
    one attack so nested roll logs carry them.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.

    Example:
        >>> bind_context(actor_id="a1", item_id="w1")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def bound_context(**kwargs: Any) -> AbstractContextManager[None]:
    """Bind context variables for the duration of a with-block.

    Unlike bind_context, previously bound values are restored on exit.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.

    Returns:
        A context manager that unbinds the keys on exit.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "bound_context",
]
