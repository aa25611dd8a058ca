"""Pydantic models for Kong Services.

A Service represents the upstream API Kong proxies to. It is declared either
with a full ``url`` or with individual ``host``/``port``/``path`` parts, and
is addressed remotely by its name.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field, field_validator

from kong_reconciler.integrations.kong.models.base import KongEntityBase


class Service(KongEntityBase):
    """Kong Service entity model.

    Attributes:
        name: Service name, the identity key used in ``/services/{name}``.
        url: Full upstream URL shorthand (protocol://host:port/path).
        host: Hostname or IP of the upstream server.
        path: Path prefix to prepend to upstream requests.
        port: Upstream port.
        connect_timeout: Connection timeout in milliseconds.
        write_timeout: Write timeout in milliseconds.
        read_timeout: Read timeout in milliseconds.
        retries: Number of retries on upstream failure.
    """

    _entity_name: ClassVar[str] = "service"

    name: str | None = Field(default=None, description="Service name (unique)")

    url: str | None = Field(default=None, description="Full URL shorthand")
    host: str | None = Field(default=None, description="Host of the upstream server")
    path: str | None = Field(default=None, description="Path prefix for requests")
    port: int | None = Field(default=None, ge=0, le=65535, description="Upstream server port")

    connect_timeout: int | None = Field(default=None, ge=0, description="Connection timeout (ms)")
    write_timeout: int | None = Field(default=None, ge=0, description="Write timeout (ms)")
    read_timeout: int | None = Field(default=None, ge=0, description="Read timeout (ms)")
    retries: int | None = Field(default=None, ge=0, description="Number of retries")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str | None) -> str | None:
        """Ensure path starts with /."""
        if v and not v.startswith("/"):
            return f"/{v}"
        return v
