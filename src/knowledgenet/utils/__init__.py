"""Shared utilities."""

from .logging import StructuredLogger, setup_logging

__all__ = ["StructuredLogger", "setup_logging"]
