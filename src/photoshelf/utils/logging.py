"""Logging helpers shared across the package."""

from __future__ import annotations

import logging
import sys

_ROOT_NAME = "photoshelf"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it when *name* is given."""

    if not name:
        return logging.getLogger(_ROOT_NAME)
    if name == _ROOT_NAME or name.startswith(_ROOT_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling this repeatedly only adjusts the level; it never stacks handlers.
    """

    logger = get_logger()
    logger.setLevel(level)
    if not any(getattr(h, "_photoshelf", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._photoshelf = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


__all__ = ["configure_logging", "get_logger"]
