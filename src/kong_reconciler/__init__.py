"""Declarative Kong Gateway configuration reconciler."""

__version__ = "0.1.0"
