"""Declared-state loading and validation."""

from kong_reconciler.core.config.loader import (
    ConfigLoadError,
    expand_env,
    load_declared_state,
    parse_declared_state,
)
from kong_reconciler.core.config.validator import validate_references

__all__ = [
    "ConfigLoadError",
    "expand_env",
    "load_declared_state",
    "parse_declared_state",
    "validate_references",
]
