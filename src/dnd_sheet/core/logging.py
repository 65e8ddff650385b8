"""Structured logging for the rules engine.

Engine commands log state transitions (damage taken, rests, level changes)
as structlog events with key/value fields. Callers that handle one edit event
at a time can bind the game and character ids once and have them attached to
every event the engine emits while that edit is processed.

Example:
    >>> from dnd_sheet.core.logging import bound_context, get_logger
    >>> logger = get_logger(__name__)
    >>> with bound_context(character_id="c1"):
    ...     logger.info("Damage applied", amount=8)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from contextlib import AbstractContextManager

    from dnd_sheet.core.config import Settings
    from structlog.types import EventDict, WrappedLogger


APP_NAME = "dnd_sheet"
STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every event with the package name."""
    event_dict["app"] = APP_NAME
    return event_dict


def _resolve_level(level: str) -> int:
    # Unknown names fall back to INFO
    return getattr(logging, level.upper(), logging.INFO)


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        )
    return processors


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render one JSON object per line instead of the
            console format.
        log_file: Also write standard library records to this file.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    numeric_level = _resolve_level(level)

    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    if log_file:
        handler = logging.FileHandler(log_file)
        handler.setLevel(numeric_level)
        handler.setFormatter(logging.Formatter(STDLIB_FORMAT))
        logging.getLogger().addHandler(handler)


def configure_logging_from_settings(settings: Settings | None = None) -> None:
    """Configure logging from ``log_level`` and ``log_json`` settings.

    Debug mode always logs at DEBUG level.

    Args:
        settings: Settings to read. Defaults to the cached settings.
    """
    if settings is None:
        from dnd_sheet.core.config import get_settings

        settings = get_settings()
    level = "DEBUG" if settings.debug else settings.log_level
    configure_logging(level=level, json_format=settings.log_json)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, usually with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key/value pairs to every later event in this context.

    Example:
        >>> bind_context(game_id="abc123", character_id="xyz")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def bound_context(**kwargs: Any) -> AbstractContextManager[None]:
    """Bind key/value pairs for the duration of a ``with`` block.

    Previously bound values are restored on exit.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)


def clear_context() -> None:
    """Remove every bound key."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "APP_NAME",
    "add_app_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "bound_context",
    "clear_context",
]
