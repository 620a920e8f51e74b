"""Logging setup shared by the stacking pipeline and CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    numeric_level = getattr(logging, level.strip().upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure the root logger and return it.

    Existing handlers are kept and re-formatted so repeated calls (tests, CLI
    re-entry) never stack duplicate handlers.
    """
    numeric_level = _parse_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    formatter = logging.Formatter(LOG_FORMAT)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    else:
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return a named logger."""
    if not name.strip():
        raise ValueError("Logger name cannot be empty.")
    return logging.getLogger(name)
