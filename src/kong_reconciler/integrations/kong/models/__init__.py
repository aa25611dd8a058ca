"""Kong API entity models.

This package contains Pydantic models for the Kong Admin API entities the
reconciler works with, and for the declared-state document.
"""

from kong_reconciler.integrations.kong.models.base import KongEntityBase, PaginatedResponse
from kong_reconciler.integrations.kong.models.config import (
    ApplyOperation,
    ApplyReport,
    ConfigValidationError,
    ConfigValidationResult,
    DeclaredState,
)
from kong_reconciler.integrations.kong.models.consumer import (
    Consumer,
    Credential,
    CredentialConfig,
)
from kong_reconciler.integrations.kong.models.plugin import KongPluginEntity
from kong_reconciler.integrations.kong.models.route import Route
from kong_reconciler.integrations.kong.models.service import Service

__all__ = [
    "ApplyOperation",
    "ApplyReport",
    "ConfigValidationError",
    "ConfigValidationResult",
    "Consumer",
    "Credential",
    "CredentialConfig",
    "DeclaredState",
    "KongEntityBase",
    "KongPluginEntity",
    "PaginatedResponse",
    "Route",
    "Service",
]
