"""Pydantic models for Kong Routes.

A Route matches client requests and forwards them to its owning Service.
Routes have no stable name-based identity on the gateway: Kong assigns an
opaque ID at creation time, and that ID is what deletion uses.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from kong_reconciler.integrations.kong.models.base import KongEntityBase


class Route(KongEntityBase):
    """Kong Route entity model.

    In a declared-state file ``service`` is the owning service's name. In an
    Admin API response Kong returns ``{"id": ...}``; that reference is
    flattened to the ID string.

    Attributes:
        name: Optional route name.
        service: Owning service reference (name when declared).
        hosts: Host headers to match.
        paths: Path prefixes to match.
        methods: HTTP methods to match.
        strip_path: Whether to strip the matched path prefix.
        protocols: Accepted protocols.
        regex_priority: Priority for regex path matching.
        preserve_host: Whether to forward the original Host header.
    """

    _entity_name: ClassVar[str] = "route"

    # The owning service travels in the URL, not in the body
    _payload_exclude: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_at", "updated_at", "service"}
    )

    name: str | None = Field(default=None, description="Route name")
    service: str | None = Field(default=None, description="Owning service name")

    hosts: list[str] | None = Field(default=None, description="Host headers to match")
    paths: list[str] | None = Field(default=None, description="Path prefixes to match")
    methods: list[str] | None = Field(default=None, description="HTTP methods (GET, POST, etc.)")
    strip_path: bool | None = Field(default=None, description="Strip matched path prefix")
    protocols: list[str] | None = Field(default=None, description="Accepted protocols")
    regex_priority: int | None = Field(default=None, description="Regex route priority")
    preserve_host: bool | None = Field(default=None, description="Preserve host header")

    @field_validator("service", mode="before")
    @classmethod
    def flatten_service_reference(cls, v: Any) -> Any:
        """Accept Kong's ``{"id": ...}``/``{"name": ...}`` reference form."""
        if isinstance(v, dict):
            return v.get("name") or v.get("id")
        return v

    @field_validator("methods", mode="before")
    @classmethod
    def uppercase_methods(cls, v: list[str] | None) -> list[str] | None:
        """Ensure HTTP methods are uppercase."""
        if v is not None:
            return [m.upper() for m in v]
        return v

    @field_validator("paths", mode="before")
    @classmethod
    def validate_paths(cls, v: list[str] | None) -> list[str] | None:
        """Ensure paths start with / unless they are regex paths."""
        if v is not None:
            return [p if p.startswith(("/", "~")) else f"/{p}" for p in v]
        return v

    @property
    def label(self) -> str:
        """Short human-readable identification for progress output."""
        return self.name or self.id or ",".join(self.hosts or self.paths or []) or "<unnamed>"
