"""Pydantic models for Kong Consumers and Credentials."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from kong_reconciler.integrations.kong.models.base import KongEntityBase


class Consumer(KongEntityBase):
    """Kong Consumer entity model.

    Attributes:
        username: Consumer username, the identity key.
        custom_id: Opaque custom identifier.
    """

    _entity_name: ClassVar[str] = "consumer"

    username: str | None = Field(default=None, description="Consumer username (unique)")
    custom_id: str | None = Field(default=None, description="Custom identifier (unique)")


class CredentialConfig(BaseModel):
    """Kind-specific credential settings.

    ``id``/``key``/``secret`` cover key-auth, jwt and oauth2 style
    credentials; other fields are kept as given.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    key: str | None = None
    secret: str | None = None


class Credential(BaseModel):
    """A credential declared for a consumer.

    Credentials are part of the declared state only; the reconciler does not
    push them to the gateway.

    Attributes:
        name: Credential kind (e.g. 'key-auth', 'jwt', 'oauth2').
        target: Username of the owning consumer.
        config: Kind-specific settings.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(description="Credential kind")
    target: str = Field(description="Owning consumer username")
    config: CredentialConfig = Field(default_factory=CredentialConfig)
