"""Logging setup for the ``teacherpay`` logger hierarchy.

Modules log through ``logging.getLogger(__name__)``; entry points (API
lifespan, CLI) call :func:`setup_logging` once.
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_LOGGER_NAME = "teacherpay"

_configured = False


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stdout handler to the ``teacherpay`` logger.

    Idempotent: later calls only adjust the level.
    """
    global _configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if _configured:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True
    return logger


def reset_logging() -> None:
    """Drop handlers installed by :func:`setup_logging`. Used by tests."""
    global _configured
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    _configured = False
