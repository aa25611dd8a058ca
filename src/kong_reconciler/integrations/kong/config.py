"""Kong Admin API connection configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from kong_reconciler import __version__

if TYPE_CHECKING:
    from kong_reconciler.integrations.kong.models.config import DeclaredState

DEFAULT_TIMEOUT = 5.0
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class GatewayConnectionConfig(BaseModel):
    """How to reach the Kong Admin API.

    Attributes:
        host: Admin API host, optionally with port (``localhost:8001``).
        https: Use https instead of http.
        timeout: Per-request timeout in seconds.
        user_agent: Value sent in the User-Agent header of every request.
    """

    model_config = ConfigDict(extra="forbid")

    host: str
    https: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = f"kong-reconciler/{__version__}"

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Host must be a bare host[:port][/prefix], not a URL."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("host must not be empty")
        if v.startswith(("http://", "https://")):
            raise ValueError("host must not include a scheme; use the 'https' flag instead")
        try:
            url = httpx.URL(f"http://{v}")
        except httpx.InvalidURL as e:
            raise ValueError(f"host is not a valid host[:port]: {e}") from e
        if not url.host:
            raise ValueError("host must name a server")
        if url.port is not None and not 1 <= url.port <= 65535:
            raise ValueError(f"port {url.port} is out of range 1-65535")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @property
    def base_url(self) -> str:
        """Admin API base URL, e.g. ``http://localhost:8001``."""
        scheme = "https" if self.https else "http"
        return f"{scheme}://{self.host}"

    @classmethod
    def from_document(
        cls,
        document: DeclaredState,
        overrides: dict[str, Any] | None = None,
    ) -> GatewayConnectionConfig:
        """Build the connection settings for a declared-state document.

        Precedence, lowest first: the document's ``host``/``https`` keys,
        environment variables, then explicit ``overrides``.

        Supported environment variables:
            KONG_RECONCILER_HOST: Admin API host[:port]
            KONG_RECONCILER_TIMEOUT: Request timeout in seconds
        """
        config_dict: dict[str, Any] = {"host": document.host, "https": document.https}

        if host := os.environ.get("KONG_RECONCILER_HOST"):
            config_dict["host"] = host
        if timeout := os.environ.get("KONG_RECONCILER_TIMEOUT"):
            config_dict["timeout"] = timeout

        if overrides:
            config_dict.update({k: v for k, v in overrides.items() if v is not None})

        return cls.model_validate(config_dict)
