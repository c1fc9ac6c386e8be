"""Logging setup for the hours ledger service."""

import logging
import sys

_initialized = False

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the ``hours`` logger namespace with a single stderr handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR). Unknown names fall back to INFO.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    resolved = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("hours")
    logger.setLevel(resolved)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def reset_logging() -> None:
    """Reset logging state for testing purposes."""
    global _initialized
    _initialized = False
    logging.getLogger("hours").handlers.clear()
