"""Shared pytest fixtures for kong_reconciler tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from kong_reconciler.cli.main import app

SCENARIO_A_YAML = """
host: kong.test:8001
services:
  - name: S1
    url: http://up:80
routes:
  - service: S1
    hosts:
      - a.example.com
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write YAML text to a temporary declared-state file."""

    def _write(text: str, name: str = "kong.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Clear reconciler environment variables and keep log files in tmp_path."""
    for key in list(os.environ.keys()):
        if key.startswith("KONG_RECONCILER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr("kong_reconciler.logging.config.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(
        "kong_reconciler.logging.config.LOG_FILE", tmp_path / "logs" / "kong-reconciler.log"
    )


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None]:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    root.handlers = original_handlers


@pytest.fixture
def scenario_file(write_config: Callable[[str], Path]) -> Path:
    """Declared state with one service S1 and one route on a.example.com."""
    return write_config(SCENARIO_A_YAML)
