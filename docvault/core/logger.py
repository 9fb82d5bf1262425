"""
docvault/core/logger.py

Centralised logging configuration.
Every module should obtain its logger via:

    from docvault.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from docvault.core.config import settings

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "sqlalchemy.engine", "multipart")


def _level() -> int:
    """DEBUG when debug mode is on, otherwise the configured level (INFO if unknown)."""
    if settings.debug:
        return logging.DEBUG
    level = logging.getLevelName(settings.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handler() -> logging.StreamHandler:
    """Return a stdout handler with a structured, readable format."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_level())
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def _configure_root_logger() -> None:
    """Configure the root logger once at import time."""
    root = logging.getLogger()
    if root.handlers:
        # Already configured (e.g. by pytest or uvicorn) — leave it alone.
        return

    root.setLevel(_level())
    root.addHandler(_build_handler())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_root_logger()


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger.

    Usage
    -----
    >>> logger = get_logger(__name__)
    >>> logger.info("Document stored")
    """
    return logging.getLogger(name)
