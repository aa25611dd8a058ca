"""Declared-state loading.

A configuration file is read as text, environment variables are substituted
into it, and the result is parsed as YAML (JSON is valid YAML) and validated
into a DeclaredState. Any failure is a ConfigLoadError, raised before the
gateway is contacted.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError as PydanticValidationError

from kong_reconciler.integrations.kong.models.config import DeclaredState

logger = structlog.get_logger()

# ${NAME}, $NAME, or a one-character shell special ($1, $$, $@, ...).
# An unterminated "${" is dropped.
_ENV_PATTERN = re.compile(
    r"\$(?:\{([^}]*)\}|([*#$@!?\-0-9])|([A-Za-z_][A-Za-z0-9_]*)|(\{))"
)


class ConfigLoadError(Exception):
    """Raised when a declared-state file cannot be read, parsed or validated.

    Attributes:
        path: The file that failed to load.
        message: What went wrong.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.path}: {self.message}"
        return self.message


def expand_env(text: str, environ: Mapping[str, str] | None = None) -> str:
    """Substitute ``$NAME`` and ``${NAME}`` with environment values.

    Unset variables expand to the empty string, the way a POSIX shell does.
    One-character shell specials (``$1``, ``$$``, ``$@``, ``$*``, ``$#``,
    ``$!``, ``$?``, ``$-``) are variable names too, so ``pa$$word`` becomes
    ``paword`` unless ``$`` is set. A ``$`` followed by anything else is
    kept as is. A literal dollar sign therefore cannot be written before a
    letter, digit or special character.

    Args:
        text: Raw file contents.
        environ: Variables to use; defaults to ``os.environ``.

    Returns:
        The text with every reference replaced.
    """
    env = os.environ if environ is None else environ

    def _replace(match: re.Match[str]) -> str:
        if match.group(4):
            return ""
        name = match.group(1) or match.group(2) or match.group(3)
        return env.get(name, "") if name else ""

    return _ENV_PATTERN.sub(_replace, text)


def parse_declared_state(text: str, path: Path | str | None = None) -> DeclaredState:
    """Parse already-expanded YAML text into a DeclaredState.

    Raises:
        ConfigLoadError: On YAML syntax errors, non-mapping documents or
            schema violations.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML syntax: {e}", path) from e

    if data is None:
        raise ConfigLoadError("Empty configuration file", path)
    if not isinstance(data, dict):
        raise ConfigLoadError(
            f"Expected a mapping at the top level, got {type(data).__name__}", path
        )

    try:
        return DeclaredState.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigLoadError(f"Invalid configuration: {e}", path) from e


def load_declared_state(
    path: Path | str,
    environ: Mapping[str, str] | None = None,
) -> DeclaredState:
    """Load a declared-state document from disk.

    Args:
        path: YAML or JSON configuration file.
        environ: Variables for substitution; defaults to ``os.environ``.

    Returns:
        The validated, immutable document.

    Raises:
        ConfigLoadError: If the file is unreadable or invalid.
    """
    path = Path(path)
    log = logger.bind(path=str(path))

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        log.error("config_read_failed", error=str(e))
        raise ConfigLoadError(f"Cannot read file: {e.strerror or e}", path) from e

    document = parse_declared_state(expand_env(raw, environ), path)
    log.info(
        "config_loaded",
        host=document.host,
        services=len(document.services),
        routes=len(document.routes),
        plugins=len(document.plugins),
        consumers=len(document.consumers),
        credentials=len(document.credentials),
    )
    return document
