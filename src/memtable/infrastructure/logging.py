"""Structured logging for memtable, routed through the standard library.

memtable's modules log through ``get_logger``. Until ``setup_logging`` runs,
records follow structlog's defaults; afterwards they are rendered by a
handler on the ``memtable`` logger in the format the configuration picks.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from memtable.infrastructure.config import Config, get_config

LIBRARY_LOGGER = "memtable"


def add_library_context(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every record with the library that produced it."""
    event_dict.setdefault("library", LIBRARY_LOGGER)
    return event_dict


def setup_logging(config: Config | None = None) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the ``memtable`` stdlib logger.

    Level and renderer come from ``config.observability`` (``log_level``,
    ``log_format``). Calling it again replaces the previous handler.

    Args:
        config: Configuration to apply (the global one if None)

    Returns:
        A logger bound to the library's root logger
    """
    config = config or get_config()
    observability = config.observability

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        add_library_context,
    ]

    if observability.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers.clear()
    library_logger.addHandler(handler)
    library_logger.setLevel(observability.log_level)
    library_logger.propagate = False

    return structlog.get_logger(LIBRARY_LOGGER)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a bound logger instance.

    Args:
        name: Logger name (module name typically)
        **initial_context: Initial context to bind to the logger

    Returns:
        A bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
