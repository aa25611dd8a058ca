"""Pydantic models for Kong Plugins.

A plugin is declared once and may target several services and routes; one
gateway plugin instance is created per target. With no targets it is a
global plugin.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, model_validator

from kong_reconciler.integrations.kong.models.base import KongEntityBase


class KongPluginEntity(KongEntityBase):
    """Kong Plugin entity model.

    Note: Named KongPluginEntity to avoid confusion with Python plugins.

    Attributes:
        name: Plugin name (e.g. 'cors', 'rate-limiting'); the remote identity key.
        enabled: Whether the plugin is active.
        services: Names of the services to attach to.
        routes: Names or IDs of the routes to attach to.
        target: Legacy spelling of additional service targets.
        config: Plugin-specific settings, passed through untouched.
    """

    _entity_name: ClassVar[str] = "plugin"

    _payload_exclude: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_at", "updated_at", "services", "routes", "target"}
    )

    name: str = Field(description="Plugin name (e.g., 'rate-limiting', 'key-auth')")
    enabled: bool | None = Field(default=None, description="Whether plugin is active")
    services: list[str] = Field(default_factory=list, description="Target service names")
    routes: list[str] = Field(default_factory=list, description="Target route names or IDs")
    target: list[str] | None = Field(default=None, description="Legacy service targets")
    config: dict[str, Any] = Field(default_factory=dict, description="Plugin configuration")

    @model_validator(mode="after")
    def merge_legacy_targets(self) -> KongPluginEntity:
        """Fold ``target`` into ``services`` without duplicating names."""
        if self.target:
            self.services = [*self.services, *(t for t in self.target if t not in self.services)]
        return self

    @property
    def is_global(self) -> bool:
        """True if the plugin targets neither services nor routes."""
        return not self.services and not self.routes

    def to_create_payload(self) -> dict[str, Any]:
        """Body for ``POST .../plugins``; an empty config is left to Kong's defaults."""
        payload = super().to_create_payload()
        if not payload.get("config"):
            payload.pop("config", None)
        return payload
