"""Logging micro API for pagecraft."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
