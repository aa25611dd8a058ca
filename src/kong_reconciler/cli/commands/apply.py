"""Apply commands: full teardown-and-rebuild, and plugin creation."""

from __future__ import annotations

from typing import Annotated

import structlog
import typer
from rich.markup import escape

from kong_reconciler.cli.commands.base import (
    ConfigFileArgument,
    HostOption,
    TimeoutOption,
    connection_or_exit,
    console,
    handle_kong_error,
    handle_reconcile_error,
    load_or_exit,
    print_operation,
    print_validation,
)
from kong_reconciler.core.config.validator import validate_references
from kong_reconciler.integrations.kong.client import KongAdminClient
from kong_reconciler.integrations.kong.exceptions import KongAPIError
from kong_reconciler.services.kong.reconciler import ReconcileError, Reconciler
from kong_reconciler.services.kong.route_manager import RouteManager

logger = structlog.get_logger()


def apply(
    file: ConfigFileArgument,
    check_references: Annotated[
        bool,
        typer.Option(
            "--check-references",
            help="Refuse to run if routes or plugins reference undeclared services",
        ),
    ] = False,
    with_plugins: Annotated[
        bool,
        typer.Option(
            "--with-plugins",
            help="Create the declared plugins after routes are rebuilt",
        ),
    ] = False,
    host: HostOption = None,
    timeout: TimeoutOption = None,
) -> None:
    """Destroy the gateway's configuration and rebuild it from FILE.

    Every consumer, route, service and plugin on the gateway is deleted, then
    the declared services are upserted and the declared routes created. The
    first failing call stops the run; nothing is rolled back.

    Examples:
        kong-reconcile apply kong.yaml
        kong-reconcile apply kong.yaml --check-references --with-plugins
    """
    document = load_or_exit(file)

    if check_references:
        result = validate_references(document)
        print_validation(result)
        if not result.valid:
            raise typer.Exit(1)

    connection = connection_or_exit(document, host, timeout)
    logger.info("apply_requested", file=str(file), base_url=connection.base_url)

    with KongAdminClient(connection) as client:
        reconciler = Reconciler(client, on_progress=print_operation)
        try:
            report = reconciler.apply(document)
            if with_plugins:
                plugin_report = reconciler.apply_plugins(document, report.route_ids)
                report.operations += plugin_report.operations
        except ReconcileError as e:
            handle_reconcile_error(e)

    for entity_type in report.truncated:
        console.print(
            f"[yellow]Warning:[/yellow] the gateway holds more {entity_type} than one "
            "listing page; the rest were not deleted. Re-run to continue."
        )
    console.print(
        f"[green]Applied {escape(str(file))}:[/green] "
        f"{report.count('delete')} deleted, "
        f"{report.count('upsert')} services upserted, "
        f"{report.count('create', 'routes')} routes created"
        + (f", {report.count('create', 'plugins')} plugins created" if with_plugins else "")
    )


def apply_plugins(
    file: ConfigFileArgument,
    host: HostOption = None,
    timeout: TimeoutOption = None,
) -> None:
    """Create the plugins declared in FILE on the current gateway.

    Route targets given by name are resolved against the routes currently on
    the gateway; anything else is used as a route ID.

    Examples:
        kong-reconcile apply-plugins kong.yaml
    """
    document = load_or_exit(file)
    connection = connection_or_exit(document, host, timeout)

    with KongAdminClient(connection) as client:
        try:
            routes, _ = RouteManager(client).list()
        except KongAPIError as e:
            handle_kong_error(e)
        route_ids = {r.name: r.id for r in routes if r.name and r.id}

        try:
            report = Reconciler(client, on_progress=print_operation).apply_plugins(
                document, route_ids
            )
        except ReconcileError as e:
            handle_reconcile_error(e)

    console.print(f"[green]Created {len(report.operations)} plugin instance(s)[/green]")
