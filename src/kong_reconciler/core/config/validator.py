"""Opt-in cross-reference checks for a declared-state document.

The reconciler itself never checks references; a route naming a missing
service only fails when the gateway rejects its creation. These checks let a
caller catch such mistakes before any call is made.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from kong_reconciler.integrations.kong.models.config import (
    ConfigValidationError,
    ConfigValidationResult,
    DeclaredState,
)


def _duplicates(
    values: Iterable[str | None],
    collection: str,
    key: str,
) -> list[ConfigValidationError]:
    counts = Counter(v for v in values if v)
    return [
        ConfigValidationError(
            path=collection,
            message=f"Duplicate {key} '{value}' ({count} entries); the last one wins",
            entity_type=collection,
            entity_name=value,
        )
        for value, count in counts.items()
        if count > 1
    ]


def validate_references(document: DeclaredState) -> ConfigValidationResult:
    """Cross-check references between the entities of a document.

    Errors:
        - a route whose ``service`` is not a declared service
        - a plugin targeting a service that is not declared

    Warnings:
        - duplicate service names, plugin names or consumer usernames
        - a plugin route target that is not a declared route name (it may
          still be a gateway route ID)
        - a credential whose target consumer is not declared

    Args:
        document: The loaded document.

    Returns:
        Validation result; ``valid`` is False when any error was found.
    """
    errors: list[ConfigValidationError] = []
    warnings: list[ConfigValidationError] = []

    service_names = {s.name for s in document.services}
    route_names = {r.name for r in document.routes if r.name}
    usernames = {c.username for c in document.consumers}

    for index, route in enumerate(document.routes):
        if route.service not in service_names:
            errors.append(
                ConfigValidationError(
                    path=f"routes[{index}].service",
                    message=f"Route references unknown service '{route.service}'",
                    entity_type="routes",
                    entity_name=route.name,
                )
            )

    for index, plugin in enumerate(document.plugins):
        for service in plugin.services:
            if service not in service_names:
                errors.append(
                    ConfigValidationError(
                        path=f"plugins[{index}].services",
                        message=f"Plugin '{plugin.name}' targets unknown service '{service}'",
                        entity_type="plugins",
                        entity_name=plugin.name,
                    )
                )
        for route in plugin.routes:
            if route not in route_names:
                warnings.append(
                    ConfigValidationError(
                        path=f"plugins[{index}].routes",
                        message=f"Plugin '{plugin.name}' targets route '{route}', which is "
                        "not a declared route name; it will be used as a route ID",
                        entity_type="plugins",
                        entity_name=plugin.name,
                    )
                )

    for index, credential in enumerate(document.credentials):
        if credential.target not in usernames:
            warnings.append(
                ConfigValidationError(
                    path=f"credentials[{index}].target",
                    message=f"Credential '{credential.name}' targets undeclared consumer "
                    f"'{credential.target}'",
                    entity_type="credentials",
                    entity_name=credential.name,
                )
            )

    warnings += _duplicates((s.name for s in document.services), "services", "name")
    warnings += _duplicates((p.name for p in document.plugins), "plugins", "name")
    warnings += _duplicates((c.username for c in document.consumers), "consumers", "username")

    return ConfigValidationResult(valid=not errors, errors=errors, warnings=warnings)
