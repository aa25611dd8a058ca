"""Teardown-and-rebuild reconciliation of a Kong gateway.

The Reconciler makes the gateway match a declared-state document by first
deleting every consumer, route, service and plugin it can list, then
upserting the declared services and creating the declared routes. It does not
compute a diff. The run is sequential and fail-fast: the first call that does
not succeed aborts everything after it, and nothing already done is undone.
Re-running converges, because the next run tears down whatever partial state
was left behind.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from kong_reconciler.integrations.kong.client import (
    STATUS_CREATED,
    STATUS_NO_CONTENT,
    STATUS_OK,
)
from kong_reconciler.integrations.kong.exceptions import KongAPIError
from kong_reconciler.integrations.kong.models.config import (
    ApplyOperation,
    ApplyReport,
    EntityType,
    OperationKind,
    Stage,
)
from kong_reconciler.services.kong.consumer_manager import ConsumerManager
from kong_reconciler.services.kong.plugin_manager import KongPluginManager
from kong_reconciler.services.kong.route_manager import RouteManager
from kong_reconciler.services.kong.service_manager import ServiceManager

if TYPE_CHECKING:
    from kong_reconciler.integrations.kong.client import KongAdminClient
    from kong_reconciler.integrations.kong.models.config import DeclaredState
    from kong_reconciler.services.kong.base import BaseEntityManager

logger = structlog.get_logger()

R = TypeVar("R")

ProgressCallback = Callable[[ApplyOperation], None]

# Dependents go before what they depend on; plugins may hang off either
TEARDOWN_ORDER: tuple[EntityType, ...] = ("consumers", "routes", "services", "plugins")


class ReconcileError(Exception):
    """The first failed call of a reconcile run.

    Attributes:
        stage: Phase the failure happened in.
        operation: Kind of call that failed.
        entity_type: Entity kind acted upon.
        id_or_name: Entity concerned, if any.
        cause: The underlying gateway error.
        report: Calls that had already succeeded.
    """

    def __init__(
        self,
        *,
        stage: Stage,
        operation: OperationKind,
        entity_type: EntityType,
        id_or_name: str | None,
        cause: KongAPIError,
        report: ApplyReport,
    ) -> None:
        self.stage = stage
        self.operation = operation
        self.entity_type = entity_type
        self.id_or_name = id_or_name
        self.cause = cause
        self.report = report
        super().__init__(self._format())

    @property
    def status_code(self) -> int | None:
        """HTTP status of the failed call, None for transport failures."""
        return self.cause.status_code

    def _format(self) -> str:
        kind = self.entity_type.rstrip("s")
        target = f"{kind} '{self.id_or_name}'" if self.id_or_name else self.entity_type
        prefix = f"[HTTP {self.status_code}] " if self.status_code else ""
        return f"{prefix}Error during {self.stage}: {self.operation} {target} failed: {self.cause}"


class Reconciler:
    """Drives a full teardown-and-rebuild of the gateway.

    The reconciler holds no state between runs. Each call to ``apply`` or
    ``apply_plugins`` builds a fresh ApplyReport and passes it through every
    step of that run only.

    Example:
        >>> with KongAdminClient(config) as client:
        ...     report = Reconciler(client).apply(document)
        >>> report.route_ids
        {'orders-route': '6f1c...'}
    """

    def __init__(
        self,
        client: KongAdminClient,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            client: Kong Admin API client shared by all managers.
            on_progress: Called with each successful operation, in order.
        """
        self._services = ServiceManager(client)
        self._routes = RouteManager(client)
        self._plugins = KongPluginManager(client)
        self._consumers = ConsumerManager(client)
        self._managers: dict[EntityType, BaseEntityManager[Any]] = {
            "services": self._services,
            "routes": self._routes,
            "plugins": self._plugins,
            "consumers": self._consumers,
        }
        self._on_progress = on_progress
        self._log = logger.bind(component="reconciler")

    def _step(
        self,
        report: ApplyReport,
        call: Callable[[], R],
        *,
        stage: Stage,
        operation: OperationKind,
        entity_type: EntityType,
        id_or_name: str | None,
        status_code: int,
        count_of: Callable[[R], int] | None = None,
    ) -> R:
        """Run one gateway call, record it, or abort the run with its error."""
        try:
            result = call()
        except KongAPIError as e:
            self._log.error(
                "operation_failed",
                stage=stage,
                operation=operation,
                entity_type=entity_type,
                id_or_name=id_or_name,
                status=e.status_code,
                error=str(e),
            )
            raise ReconcileError(
                stage=stage,
                operation=operation,
                entity_type=entity_type,
                id_or_name=id_or_name,
                cause=e,
                report=report,
            ) from e

        record = ApplyOperation(
            stage=stage,
            operation=operation,
            entity_type=entity_type,
            id_or_name=id_or_name,
            status_code=status_code,
            count=count_of(result) if count_of else None,
        )
        report.operations.append(record)
        self._log.info("operation_succeeded", **record.model_dump(exclude_none=True))
        if self._on_progress:
            self._on_progress(record)
        return result

    def _teardown(self, entity_type: EntityType, report: ApplyReport) -> None:
        manager = self._managers[entity_type]
        entities, next_page = self._step(
            report,
            manager.list,
            stage="teardown",
            operation="list",
            entity_type=entity_type,
            id_or_name=None,
            status_code=STATUS_OK,
            count_of=lambda listed: len(listed[0]),
        )
        if next_page:
            report.truncated.append(entity_type)

        for entity in entities:
            try:
                identity = manager.identity(entity)
            except KongAPIError as e:
                raise ReconcileError(
                    stage="teardown",
                    operation="delete",
                    entity_type=entity_type,
                    id_or_name=entity.id,
                    cause=e,
                    report=report,
                ) from e
            self._step(
                report,
                lambda identity=identity: manager.delete(identity),
                stage="teardown",
                operation="delete",
                entity_type=entity_type,
                id_or_name=identity,
                status_code=STATUS_NO_CONTENT,
            )

    def apply(self, document: DeclaredState) -> ApplyReport:
        """Make the gateway match ``document`` by destroying and rebuilding it.

        Order of calls:
            1. list+delete consumers, routes, services, plugins (in that order)
            2. upsert every declared service
            3. create every declared route under its service

        Plugins and credentials are not applied here; see ``apply_plugins``.

        Args:
            document: Declared state to converge to.

        Returns:
            Report of every call made, in order.

        Raises:
            ReconcileError: On the first failed call. Calls already made stay
                applied.
        """
        report = ApplyReport()
        self._log.info(
            "apply_started",
            services=len(document.services),
            routes=len(document.routes),
        )

        for entity_type in TEARDOWN_ORDER:
            self._teardown(entity_type, report)

        for service in document.services:
            self._step(
                report,
                lambda service=service: self._services.upsert(service),
                stage="rebuild",
                operation="upsert",
                entity_type="services",
                id_or_name=service.name,
                status_code=STATUS_OK,
            )

        for route in document.routes:
            created = self._step(
                report,
                lambda route=route: self._routes.create_for_service(route),
                stage="rebuild",
                operation="create",
                entity_type="routes",
                id_or_name=route.label,
                status_code=STATUS_CREATED,
            )
            if route.name and created.id:
                report.route_ids[route.name] = created.id

        self._log.info("apply_complete", operations=len(report.operations))
        return report

    def apply_plugins(
        self,
        document: DeclaredState,
        route_ids: Mapping[str, str] | None = None,
    ) -> ApplyReport:
        """Create every declared plugin on the gateway.

        Never invoked by ``apply``. A plugin without targets is created
        globally; otherwise one instance is created per target service and per
        target route. Route targets are translated through ``route_ids``
        (declared name to gateway ID, e.g. ``ApplyReport.route_ids`` of the
        preceding apply) and used verbatim when not found there.

        Args:
            document: Declared state holding the plugins.
            route_ids: Optional route name to ID mapping.

        Returns:
            Report of every plugin creation, in order.

        Raises:
            ReconcileError: On the first failed creation.
        """
        report = ApplyReport(route_ids=dict(route_ids or {}))
        self._log.info("apply_plugins_started", plugins=len(document.plugins))

        for plugin in document.plugins:
            targets: list[tuple[str | None, str | None]] = [
                (service, None) for service in plugin.services
            ]
            targets += [(None, report.route_ids.get(route, route)) for route in plugin.routes]
            if plugin.is_global:
                targets.append((None, None))

            for service, route in targets:
                self._step(
                    report,
                    lambda plugin=plugin, service=service, route=route: self._plugins.create(
                        plugin, service=service, route=route
                    ),
                    stage="plugins",
                    operation="create",
                    entity_type="plugins",
                    id_or_name=plugin.name,
                    status_code=STATUS_CREATED,
                )

        self._log.info("apply_plugins_complete", operations=len(report.operations))
        return report
