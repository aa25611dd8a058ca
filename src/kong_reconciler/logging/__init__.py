"""Logging configuration for kong_reconciler."""

from kong_reconciler.logging.config import configure_logging

__all__ = ["configure_logging"]
