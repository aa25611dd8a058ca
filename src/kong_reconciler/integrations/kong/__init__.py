"""Kong Gateway integration - HTTP client and API models."""

from kong_reconciler.integrations.kong.client import KongAdminClient
from kong_reconciler.integrations.kong.config import GatewayConnectionConfig
from kong_reconciler.integrations.kong.exceptions import (
    KongAPIError,
    KongAuthError,
    KongConnectionError,
    KongDBLessWriteError,
    KongNotFoundError,
    KongResponseError,
    KongUnexpectedStatusError,
    KongValidationError,
)

__all__ = [
    "GatewayConnectionConfig",
    "KongAPIError",
    "KongAdminClient",
    "KongAuthError",
    "KongConnectionError",
    "KongDBLessWriteError",
    "KongNotFoundError",
    "KongResponseError",
    "KongUnexpectedStatusError",
    "KongValidationError",
]
