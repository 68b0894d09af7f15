"""Logging configuration and structured logging helpers."""

from base0.observability.logger import configure_logging

__all__ = ["configure_logging"]
