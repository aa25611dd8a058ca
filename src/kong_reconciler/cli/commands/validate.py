"""Validate command: offline checks of a declared-state file."""

from __future__ import annotations

import typer
from rich.table import Table

from kong_reconciler.cli.commands.base import (
    ConfigFileArgument,
    console,
    load_or_exit,
    print_validation,
)
from kong_reconciler.core.config.validator import validate_references


def validate(file: ConfigFileArgument) -> None:
    """Load FILE and cross-check its references without contacting the gateway.

    Exits with status 1 if the file cannot be loaded or a route or plugin
    references an undeclared service.
    """
    document = load_or_exit(file)
    result = validate_references(document)

    table = Table(title=f"Declared state: {file}")
    table.add_column("Entity Type", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Services", str(len(document.services)))
    table.add_row("Routes", str(len(document.routes)))
    table.add_row("Plugins", str(len(document.plugins)))
    table.add_row("Consumers", str(len(document.consumers)))
    table.add_row("Credentials", str(len(document.credentials)))
    console.print(table)

    print_validation(result)

    if not result.valid:
        console.print(f"[red]Invalid:[/red] {len(result.errors)} error(s)")
        raise typer.Exit(1)
    console.print("[green]Configuration is valid.[/green]")
