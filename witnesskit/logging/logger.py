# witnesskit/logging/logger.py
"""
Unified logging setup for witnesskit.

All modules use:
    from witnesskit.logging.logger import get_logger
    logger = get_logger(__name__)

Configuration happens once, in configure_logging() (called by the CLI).
Library users keep full control of handlers when they never call it.
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream=sys.stderr,
) -> None:
    """
    Configure the witnesskit logging handler.

    Safe to call multiple times; a second call only updates the level.
    """
    root = logging.getLogger("witnesskit")
    if not root.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Modules call this to get a logger.

    Example:
        logger = get_logger(__name__)

    Do NOT configure logging here.
    """
    return logging.getLogger(name)
