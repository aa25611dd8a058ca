"""Pydantic models for the declared-state document and reconcile results.

The declared-state document is what a configuration file decodes into: the
gateway address plus the desired services, routes, plugins, consumers and
credentials. The remaining models describe what a reconcile run did.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kong_reconciler.integrations.kong.models.consumer import Consumer, Credential
from kong_reconciler.integrations.kong.models.plugin import KongPluginEntity
from kong_reconciler.integrations.kong.models.route import Route
from kong_reconciler.integrations.kong.models.service import Service

EntityType = Literal["services", "routes", "plugins", "consumers"]
OperationKind = Literal["list", "delete", "upsert", "create"]
Stage = Literal["teardown", "rebuild", "plugins"]


class DeclaredState(BaseModel):
    """Desired gateway state, read once per run and never modified.

    Attributes:
        host: Admin API host[:port] of the target gateway.
        https: Reach the Admin API over https.
        version: Free-form document version string.
        services: Services to upsert, by name.
        routes: Routes to create under their owning service.
        plugins: Plugins, applied only by the separate plugin step.
        consumers: Declared consumers (torn down, never recreated).
        credentials: Declared consumer credentials (never applied).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field(default="localhost:8001", description="Admin API host[:port]")
    https: bool = Field(default=False, description="Use https for the Admin API")
    version: str | None = Field(default=None, description="Document version")

    services: list[Service] = Field(default_factory=list)
    routes: list[Route] = Field(default_factory=list)
    plugins: list[KongPluginEntity] = Field(default_factory=list)
    consumers: list[Consumer] = Field(default_factory=list)
    credentials: list[Credential] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_identity_keys(self) -> DeclaredState:
        """Every declared entity must carry the key it is addressed by."""
        for index, service in enumerate(self.services):
            if not service.name:
                raise ValueError(f"services[{index}]: 'name' is required")
        for index, route in enumerate(self.routes):
            if not route.service:
                raise ValueError(f"routes[{index}]: 'service' is required")
        for index, consumer in enumerate(self.consumers):
            if not consumer.username:
                raise ValueError(f"consumers[{index}]: 'username' is required")
        return self


class ApplyOperation(BaseModel):
    """One successful gateway call made during a reconcile run.

    Attributes:
        stage: Phase of the run the call belongs to.
        operation: Kind of call.
        entity_type: Entity kind acted upon.
        id_or_name: Identity of the entity (or the scope, for lists).
        status_code: HTTP status the gateway answered with.
        count: Number of entities returned, for list calls.
    """

    model_config = ConfigDict(extra="forbid")

    stage: Stage = Field(description="Run phase")
    operation: OperationKind = Field(description="Operation performed")
    entity_type: EntityType = Field(description="Entity type")
    id_or_name: str | None = Field(default=None, description="Entity identifier")
    status_code: int = Field(description="HTTP status of the response")
    count: int | None = Field(default=None, description="Entities listed")

    def describe(self) -> str:
        """Progress line in the ``[HTTP nnn] ...`` form."""
        kind = self.entity_type.rstrip("s").capitalize()
        match self.operation:
            case "list":
                text = f"Listed {self.count} {self.entity_type}"
            case "delete":
                text = f"{kind} [{self.id_or_name}] deleted"
            case "upsert":
                text = f"Successfully created/updated {kind.lower()}: {self.id_or_name}"
            case _:
                text = f"{kind} [{self.id_or_name}] created"
        return f"[HTTP {self.status_code}] {text}"


class ApplyReport(BaseModel):
    """Everything one reconcile run did, in call order.

    Attributes:
        operations: Successful calls, in the order they were made.
        route_ids: Declared route name to gateway-assigned route ID, for
            routes created during this run.
        truncated: Entity kinds whose listing reported a further page that
            was not followed.
    """

    model_config = ConfigDict(extra="forbid")

    operations: list[ApplyOperation] = Field(default_factory=list)
    route_ids: dict[str, str] = Field(default_factory=dict)
    truncated: list[EntityType] = Field(default_factory=list)

    def count(self, operation: OperationKind, entity_type: EntityType | None = None) -> int:
        """Number of successful calls of one kind."""
        return sum(
            1
            for op in self.operations
            if op.operation == operation and entity_type in (None, op.entity_type)
        )


class ConfigValidationError(BaseModel):
    """A single problem found while cross-checking a document.

    Attributes:
        path: Location in the document, e.g. ``routes[0].service``.
        message: Problem description.
        entity_type: Entity kind concerned.
        entity_name: Entity concerned, if it has a name.
    """

    model_config = ConfigDict(extra="forbid")

    path: str = Field(description="Path to error location")
    message: str = Field(description="Error message")
    entity_type: str | None = Field(default=None, description="Entity type with error")
    entity_name: str | None = Field(default=None, description="Entity name with error")


class ConfigValidationResult(BaseModel):
    """Outcome of the cross-reference check.

    Attributes:
        valid: True when there are no errors (warnings are allowed).
        errors: References that cannot resolve.
        warnings: Suspicious but not necessarily broken declarations.
    """

    model_config = ConfigDict(extra="forbid")

    valid: bool = Field(description="Whether config is valid")
    errors: list[ConfigValidationError] = Field(default_factory=list)
    warnings: list[ConfigValidationError] = Field(default_factory=list)
