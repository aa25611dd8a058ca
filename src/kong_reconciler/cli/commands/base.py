"""Shared console, options and error reporting for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, NoReturn

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape

from kong_reconciler.core.config.loader import ConfigLoadError, load_declared_state
from kong_reconciler.integrations.kong.config import GatewayConnectionConfig
from kong_reconciler.integrations.kong.exceptions import (
    KongAPIError,
    KongAuthError,
    KongConnectionError,
    KongDBLessWriteError,
    KongNotFoundError,
    KongResponseError,
    KongValidationError,
)

if TYPE_CHECKING:
    from kong_reconciler.integrations.kong.models.config import (
        ApplyOperation,
        ConfigValidationResult,
        DeclaredState,
    )
    from kong_reconciler.services.kong.reconciler import ReconcileError

# Progress goes to stdout, errors to stderr; lines are never wrapped
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


ConfigFileArgument = Annotated[
    Path,
    typer.Argument(help="Declared-state file (.yaml, .yml or .json)"),
]

HostOption = Annotated[
    str | None,
    typer.Option(
        "--host",
        help="Admin API host[:port], overriding the file's 'host'",
        envvar="KONG_RECONCILER_HOST",
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Per-request timeout in seconds (default: 5)",
        min=0.1,
    ),
]


def load_or_exit(file: Path) -> DeclaredState:
    """Load a declared-state file, exiting with status 1 on failure."""
    try:
        return load_declared_state(file)
    except ConfigLoadError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def connection_or_exit(
    document: DeclaredState,
    host: str | None,
    timeout: float | None,
) -> GatewayConnectionConfig:
    """Resolve the connection settings, exiting with status 1 if invalid."""
    try:
        return GatewayConnectionConfig.from_document(
            document, {"host": host, "timeout": timeout}
        )
    except PydanticValidationError as e:
        err_console.print(f"[red]Error:[/red] Invalid gateway connection settings: {escape(str(e))}")
        raise typer.Exit(1) from None


def print_operation(operation: ApplyOperation) -> None:
    """Print one successful operation as a progress line."""
    line = escape(operation.describe())
    if operation.operation == "list":
        console.print(f"[dim]{line}[/dim]")
    else:
        console.print(line)


def print_validation(result: ConfigValidationResult) -> None:
    """Print cross-reference errors and warnings."""
    for error in result.errors:
        err_console.print(f"[red]Error:[/red] {error.path}: {escape(error.message)}")
    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {warning.path}: {escape(warning.message)}")


def _print_kong_hint(error: KongAPIError) -> None:
    if isinstance(error, KongConnectionError):
        err_console.print("[dim]Hint: Check that Kong is running and the host is correct.[/dim]")
    elif isinstance(error, KongAuthError):
        err_console.print("[dim]Hint: The Admin API rejected the request as unauthorized.[/dim]")
    elif isinstance(error, KongNotFoundError):
        err_console.print(
            "[dim]Hint: A referenced entity does not exist on the gateway; "
            "run 'kong-reconcile validate' to check references.[/dim]"
        )
    elif isinstance(error, KongValidationError) and error.validation_errors:
        err_console.print("  Field errors:")
        for field, err in error.validation_errors.items():
            err_console.print(f"    - {escape(str(field))}: {escape(str(err))}")
    elif isinstance(error, KongDBLessWriteError):
        err_console.print(
            "[dim]Hint: Kong runs in DB-less mode; its Admin API is read-only.[/dim]"
        )
    elif isinstance(error, KongResponseError):
        err_console.print(
            "[dim]Hint: The response did not look like a Kong Admin API entity; "
            "check that the host points at the Admin API port.[/dim]"
        )


def handle_reconcile_error(error: ReconcileError) -> NoReturn:
    """Report a failed run on stderr and exit with status 1.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    done = len(error.report.operations)
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    _print_kong_hint(error.cause)
    err_console.print(
        f"[yellow]{done} operation(s) completed before the failure were not rolled back; "
        "re-run to converge.[/yellow]"
    )
    raise typer.Exit(1)


def handle_kong_error(error: KongAPIError) -> NoReturn:
    """Report a gateway error raised outside a reconcile run and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    _print_kong_hint(error)
    raise typer.Exit(1)
