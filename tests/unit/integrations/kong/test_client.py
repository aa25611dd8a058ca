"""Unit tests for Kong Admin API client."""

from __future__ import annotations

import json
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from kong_reconciler.integrations.kong.client import KongAdminClient
from kong_reconciler.integrations.kong.config import GatewayConnectionConfig
from kong_reconciler.integrations.kong.exceptions import (
    KongAuthError,
    KongConnectionError,
    KongDBLessWriteError,
    KongNotFoundError,
    KongUnexpectedStatusError,
    KongValidationError,
)

BASE_URL = "http://kong.test:8001"


@pytest.fixture
def connection_config() -> GatewayConnectionConfig:
    """Create a test connection config."""
    return GatewayConnectionConfig(host="kong.test:8001", timeout=5)


@pytest.fixture
def gateway() -> Generator[respx.MockRouter]:
    """Mock the Admin API; every request must match a route."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        yield router


@pytest.fixture
def client(
    connection_config: GatewayConnectionConfig,
    gateway: respx.MockRouter,
) -> Generator[KongAdminClient]:
    """Create a client whose requests hit the respx router."""
    with KongAdminClient(connection_config) as kong:
        yield kong


class TestKongAdminClientInit:
    """Tests for KongAdminClient initialization."""

    @pytest.mark.unit
    def test_client_uses_configured_base_url_and_timeout(
        self,
        connection_config: GatewayConnectionConfig,
        mocker: Any,
    ) -> None:
        """Client should build one httpx.Client from the config."""
        mock_client = MagicMock(spec=httpx.Client)
        factory = mocker.patch("httpx.Client", return_value=mock_client)

        KongAdminClient(connection_config)

        kwargs = factory.call_args.kwargs
        assert kwargs["base_url"] == BASE_URL
        assert kwargs["timeout"] == httpx.Timeout(5.0)
        assert kwargs["headers"]["Content-Type"] == "application/json; charset=utf-8"
        assert kwargs["headers"]["User-Agent"].startswith("kong-reconciler/")

    @pytest.mark.unit
    def test_https_scheme(self, mocker: Any) -> None:
        """The https flag should switch the base URL scheme."""
        factory = mocker.patch("httpx.Client", return_value=MagicMock(spec=httpx.Client))

        KongAdminClient(GatewayConnectionConfig(host="kong.test:8444", https=True))

        assert factory.call_args.kwargs["base_url"] == "https://kong.test:8444"

    @pytest.mark.unit
    def test_context_manager_closes_client(
        self,
        connection_config: GatewayConnectionConfig,
        mocker: Any,
    ) -> None:
        """Leaving the context should close the HTTP client."""
        mock_client = MagicMock(spec=httpx.Client)
        mocker.patch("httpx.Client", return_value=mock_client)

        with KongAdminClient(connection_config):
            pass

        mock_client.close.assert_called_once()


class TestKongAdminClientRequests:
    """Tests for requests that receive the expected status."""

    @pytest.mark.unit
    def test_get_returns_body(self, client: KongAdminClient, gateway: respx.MockRouter) -> None:
        """GET with 200 should return the decoded body."""
        gateway.get("/services").mock(return_value=httpx.Response(200, json={"data": []}))

        assert client.get("services") == {"data": []}

    @pytest.mark.unit
    def test_put_sends_json_with_fixed_headers(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """PUT should send the JSON body with the JSON content type and user agent."""
        route = gateway.put("/services/S1").mock(
            return_value=httpx.Response(200, json={"id": "svc-1", "name": "S1"})
        )

        result = client.put("services/S1", json={"name": "S1"})

        assert result["id"] == "svc-1"
        request = route.calls.last.request
        assert request.headers["Content-Type"] == "application/json; charset=utf-8"
        assert request.headers["User-Agent"].startswith("kong-reconciler/")
        assert json.loads(request.content) == {"name": "S1"}

    @pytest.mark.unit
    def test_post_expects_created(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """POST with 201 should return the created entity."""
        gateway.post("/services/S1/routes").mock(
            return_value=httpx.Response(201, json={"id": "route-1"})
        )

        assert client.post("services/S1/routes", json={"hosts": ["a"]}) == {"id": "route-1"}

    @pytest.mark.unit
    def test_delete_expects_no_content(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """DELETE with 204 should not raise."""
        route = gateway.delete("/consumers/alice").mock(return_value=httpx.Response(204))

        client.delete("consumers/alice")

        assert route.called

    @pytest.mark.unit
    def test_leading_slash_is_normalized(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """Endpoints with or without a leading slash hit the same path."""
        route = gateway.get("/plugins").mock(return_value=httpx.Response(200, json={"data": []}))

        client.get("/plugins")
        client.get("plugins")

        assert route.call_count == 2

    @pytest.mark.unit
    def test_non_json_body_is_kept_raw(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """A non-JSON body should not break decoding."""
        gateway.get("/status").mock(return_value=httpx.Response(200, text="pong"))

        assert client.get("status") == {"raw": "pong"}


class TestStrictStatusMatching:
    """Any status other than the single expected one is a failure."""

    @pytest.mark.unit
    def test_delete_with_200_is_a_failure(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """A 200 where 204 is expected should raise."""
        gateway.delete("/routes/r-1").mock(return_value=httpx.Response(200, json={}))

        with pytest.raises(KongUnexpectedStatusError) as exc_info:
            client.delete("routes/r-1")

        assert exc_info.value.status_code == 200
        assert exc_info.value.expected_status == 204
        assert exc_info.value.endpoint == "/routes/r-1"

    @pytest.mark.unit
    def test_post_with_200_is_a_failure(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """A 200 where 201 is expected should raise."""
        gateway.post("/plugins").mock(return_value=httpx.Response(200, json={"id": "p"}))

        with pytest.raises(KongUnexpectedStatusError):
            client.post("plugins", json={"name": "cors"})

    @pytest.mark.unit
    def test_put_with_201_is_a_failure(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """A 201 where 200 is expected should raise."""
        gateway.put("/services/S1").mock(return_value=httpx.Response(201, json={}))

        with pytest.raises(KongUnexpectedStatusError) as exc_info:
            client.put("services/S1", json={"name": "S1"})

        assert exc_info.value.status_code == 201

    @pytest.mark.unit
    def test_server_error_carries_kong_message(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """The Kong error message should be surfaced."""
        gateway.get("/services").mock(
            return_value=httpx.Response(500, json={"message": "An unexpected error occurred"})
        )

        with pytest.raises(KongUnexpectedStatusError) as exc_info:
            client.get("services")

        assert exc_info.value.message == "An unexpected error occurred"
        assert "(status: 500)" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("status", "error_type"),
        [
            (401, KongAuthError),
            (403, KongAuthError),
            (404, KongNotFoundError),
            (400, KongValidationError),
        ],
    )
    def test_status_classification(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
        status: int,
        error_type: type[KongUnexpectedStatusError],
    ) -> None:
        """Well-known statuses map to specific subclasses."""
        gateway.post("/services/missing/routes").mock(
            return_value=httpx.Response(status, json={"message": "nope"})
        )

        with pytest.raises(error_type) as exc_info:
            client.post("services/missing/routes", json={})

        assert exc_info.value.status_code == status

    @pytest.mark.unit
    def test_validation_error_fields(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """400 responses should expose Kong's field errors."""
        gateway.put("/services/S1").mock(
            return_value=httpx.Response(
                400,
                json={"message": "schema violation", "fields": {"port": "expected an integer"}},
            )
        )

        with pytest.raises(KongValidationError) as exc_info:
            client.put("services/S1", json={"port": "x"})

        assert exc_info.value.validation_errors == {"port": "expected an integer"}

    @pytest.mark.unit
    def test_dbless_write_error(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """405 in DB-less mode should be reported as such."""
        gateway.delete("/services/S1").mock(
            return_value=httpx.Response(
                405, json={"message": "cannot delete service in DB-less mode"}
            )
        )

        with pytest.raises(KongDBLessWriteError):
            client.delete("services/S1")


class TestTransportErrors:
    """Requests that never produced a response."""

    @pytest.mark.unit
    def test_connect_error(self, client: KongAdminClient, gateway: respx.MockRouter) -> None:
        """Connection failures become KongConnectionError."""
        gateway.get("/consumers").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(KongConnectionError) as exc_info:
            client.get("consumers")

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert exc_info.value.status_code is None

    @pytest.mark.unit
    def test_timeout_is_a_transport_error(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """Timeouts are not a distinct kind; they are transport errors."""
        gateway.get("/routes").mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(KongConnectionError, match="timed out"):
            client.get("routes")

    @pytest.mark.unit
    def test_other_transport_error(
        self,
        client: KongAdminClient,
        gateway: respx.MockRouter,
    ) -> None:
        """Any other transport failure is also a KongConnectionError."""
        gateway.get("/plugins").mock(side_effect=httpx.RemoteProtocolError("bad frame"))

        with pytest.raises(KongConnectionError):
            client.get("plugins")
