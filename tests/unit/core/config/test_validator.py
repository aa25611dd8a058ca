"""Unit tests for cross-reference validation."""

from __future__ import annotations

import pytest

from kong_reconciler.core.config import validate_references
from kong_reconciler.integrations.kong.models import DeclaredState


def document(**data: object) -> DeclaredState:
    """Build a document from keyword sections."""
    return DeclaredState.model_validate(data)


class TestValidateReferences:
    """Tests for validate_references."""

    @pytest.mark.unit
    def test_consistent_document(self) -> None:
        """Resolved references give a valid result with no findings."""
        result = validate_references(
            document(
                services=[{"name": "S1", "url": "http://up"}],
                routes=[{"name": "orders", "service": "S1", "paths": ["/o"]}],
                plugins=[{"name": "cors", "services": ["S1"], "routes": ["orders"]}],
                consumers=[{"username": "alice"}],
                credentials=[{"name": "key-auth", "target": "alice"}],
            )
        )

        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.unit
    def test_route_with_unknown_service(self) -> None:
        """A route under an undeclared service is an error."""
        result = validate_references(document(routes=[{"service": "ghost", "hosts": ["a"]}]))

        assert not result.valid
        assert result.errors[0].path == "routes[0].service"
        assert "ghost" in result.errors[0].message

    @pytest.mark.unit
    def test_plugin_with_unknown_service(self) -> None:
        """A plugin targeting an undeclared service is an error."""
        result = validate_references(document(plugins=[{"name": "cors", "target": ["ghost"]}]))

        assert not result.valid
        assert result.errors[0].entity_name == "cors"

    @pytest.mark.unit
    def test_plugin_route_id_is_a_warning(self) -> None:
        """An unknown route target may be a gateway ID, so it only warns."""
        result = validate_references(document(plugins=[{"name": "acl", "routes": ["r-1"]}]))

        assert result.valid
        assert result.warnings[0].path == "plugins[0].routes"

    @pytest.mark.unit
    def test_credential_for_undeclared_consumer(self) -> None:
        """Credentials are never applied, so a bad target only warns."""
        result = validate_references(
            document(credentials=[{"name": "jwt", "target": "bob"}])
        )

        assert result.valid
        assert "bob" in result.warnings[0].message

    @pytest.mark.unit
    def test_duplicates_warn(self) -> None:
        """Duplicate identity keys are reported once per value."""
        result = validate_references(
            document(
                services=[{"name": "S1"}, {"name": "S1"}],
                consumers=[{"username": "alice"}, {"username": "alice"}],
            )
        )

        assert result.valid
        assert sorted(w.entity_type for w in result.warnings) == ["consumers", "services"]
        assert "(2 entries)" in result.warnings[0].message
