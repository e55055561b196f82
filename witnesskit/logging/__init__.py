# witnesskit/logging/__init__.py
"""Logging helpers shared by every witnesskit module."""

from witnesskit.logging.logger import DEFAULT_FORMAT, configure_logging, get_logger

__all__ = ["DEFAULT_FORMAT", "configure_logging", "get_logger"]
