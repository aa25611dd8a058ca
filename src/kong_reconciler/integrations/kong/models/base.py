"""Base models for Kong entities.

All Kong entities share the server-assigned fields (id, created_at,
updated_at, tags) and the same payload conversion rules: fields left unset
are never sent to the Admin API.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class KongEntityBase(BaseModel):
    """Base class for all Kong entity models.

    Unknown keys are ignored so that the same model can be validated from a
    declared-state file and from an Admin API response, which carries many
    server-side fields the reconciler never looks at.

    Attributes:
        id: Unique identifier assigned by Kong.
        created_at: Unix timestamp of creation.
        updated_at: Unix timestamp of last update.
        tags: Entity tags.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str | None = Field(default=None, description="Unique identifier")
    created_at: int | None = Field(default=None, description="Unix timestamp of creation")
    updated_at: int | None = Field(default=None, description="Unix timestamp of last update")
    tags: list[str] | None = Field(default=None, description="Entity tags for filtering")

    _entity_name: ClassVar[str] = "entity"

    # Fields that are never part of a request body
    _payload_exclude: ClassVar[frozenset[str]] = frozenset({"id", "created_at", "updated_at"})

    def to_create_payload(self) -> dict[str, Any]:
        """Convert model to a request body.

        Server-assigned fields and None values are dropped.

        Returns:
            Dictionary suitable for a POST or PUT body.
        """
        return {
            k: v
            for k, v in self.model_dump(exclude=set(self._payload_exclude)).items()
            if v is not None
        }


class PaginatedResponse(BaseModel):
    """List envelope returned by the Kong Admin API.

    Only the first page is ever consumed; ``next``/``offset`` are kept so
    callers can tell that more entities exist remotely.

    Attributes:
        data: List of entity dictionaries.
        next: Path of the next page, if any.
        offset: Offset token of the next page, if any.
    """

    model_config = ConfigDict(extra="allow")

    data: list[dict[str, Any]] = Field(default_factory=list)
    next: str | None = None
    offset: str | None = None

    @property
    def has_more(self) -> bool:
        """True if the gateway reported a further page."""
        return self.offset is not None or self.next is not None
