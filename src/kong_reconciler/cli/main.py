"""Main CLI entry point using Typer."""

from __future__ import annotations

import typer
from rich.console import Console

from kong_reconciler import __version__
from kong_reconciler.cli.commands import apply, validate
from kong_reconciler.logging.config import configure_logging

app = typer.Typer(
    name="kong-reconcile",
    help="Rebuild a Kong gateway's configuration from a declarative file.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kong-reconcile version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write console logs as JSON lines.",
    ),
) -> None:
    """Kong reconciler - declarative teardown-and-rebuild for Kong Gateway."""
    configure_logging(verbose=verbose, debug=debug, json_output=json_logs)


app.command("apply")(apply.apply)
app.command("apply-plugins")(apply.apply_plugins)
app.command("validate")(validate.validate)


if __name__ == "__main__":
    app()
