"""Structured logging configuration.

Library modules obtain loggers through get_logger and emit named events with
keyword fields. Events are rendered by structlog and handed to the stdlib
logger of the same name, so nothing is printed until the application either
calls configure_logging or attaches its own logging handlers.

Usage:
    from kvmapper.logging_config import configure_logging, get_logger

    configure_logging(level="DEBUG", json=False)
    logger = get_logger(__name__)
    logger.info("entity.persisted", key="H_APP_COUNTER")
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

ROOT_LOGGER = "kvmapper"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())

# Handler installed by configure_logging, replaced on reconfiguration
_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO", json: bool = True) -> None:
    """Install structlog processors and a stderr handler for kvmapper loggers.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json: Render events as JSON lines when True, human-readable otherwise.

    Raises:
        ValueError: If level is not a known logging level name.
    """
    global _handler

    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(_handler)
    root.setLevel(numeric)


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger writing through logging.getLogger(name).
    """
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )
