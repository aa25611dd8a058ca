"""Kong Admin API HTTP client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from kong_reconciler.integrations.kong.config import JSON_CONTENT_TYPE
from kong_reconciler.integrations.kong.exceptions import (
    KongAuthError,
    KongConnectionError,
    KongDBLessWriteError,
    KongNotFoundError,
    KongUnexpectedStatusError,
    KongValidationError,
)

if TYPE_CHECKING:
    from kong_reconciler.integrations.kong.config import GatewayConnectionConfig

logger = structlog.get_logger()

# The single status code accepted for each kind of call
STATUS_OK = 200
STATUS_CREATED = 201
STATUS_NO_CONTENT = 204


class KongAdminClient:
    """Thin, stateless transport over the Kong Admin API.

    Each call is a single HTTP request. A response is accepted only if its
    status equals the one code expected for that call; there is no retry.
    The client holds one reusable ``httpx.Client`` and should be closed when
    the run ends.

    Example:
        ```python
        from kong_reconciler.integrations.kong import (
            GatewayConnectionConfig,
            KongAdminClient,
        )

        config = GatewayConnectionConfig(host="localhost:8001")
        with KongAdminClient(config) as client:
            services = client.get("services")
        ```
    """

    def __init__(
        self,
        connection_config: GatewayConnectionConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            connection_config: Host, scheme, timeout and user agent.
            transport: Optional httpx transport, for tests or proxies.
        """
        self.connection_config = connection_config

        client_kwargs: dict[str, Any] = {
            "base_url": connection_config.base_url,
            "timeout": httpx.Timeout(connection_config.timeout),
            "headers": {
                "Content-Type": JSON_CONTENT_TYPE,
                "User-Agent": connection_config.user_agent,
            },
        }
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.Client(**client_kwargs)

        logger.info("admin_client_initialized", base_url=connection_config.base_url)

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError:
            return {"raw": response.text}
        return body if isinstance(body, dict) else {"data": body}

    def _handle_response(
        self,
        response: httpx.Response,
        endpoint: str,
        expected_status: int,
    ) -> dict[str, Any]:
        """Check the status against the single expected code.

        Args:
            response: The HTTP response from Kong API.
            endpoint: The endpoint that was called.
            expected_status: The only status code treated as success.

        Returns:
            Decoded JSON body, or an empty dict when there is none.

        Raises:
            KongAuthError: On 401/403.
            KongNotFoundError: On 404.
            KongDBLessWriteError: On 405 caused by DB-less mode.
            KongValidationError: On 400.
            KongUnexpectedStatusError: On any other unexpected code.
        """
        body = self._decode(response)
        status = response.status_code

        if status == expected_status:
            return body

        message = body.get("message") or KongUnexpectedStatusError.default_message
        lowered = message.lower()

        error_class: type[KongUnexpectedStatusError] = KongUnexpectedStatusError
        extra: dict[str, Any] = {}
        if status in (401, 403):
            error_class = KongAuthError
        elif status == 404:
            error_class = KongNotFoundError
        elif status == 405 and ("read-only" in lowered or "db-less" in lowered):
            error_class = KongDBLessWriteError
        elif status == 400:
            error_class = KongValidationError
            extra["validation_errors"] = body.get("fields", {})

        raise error_class(
            message=message,
            status_code=status,
            expected_status=expected_status,
            response_body=body,
            endpoint=endpoint,
            **extra,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        expected_status: int,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Make one HTTP request to the Kong Admin API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            endpoint: Path relative to the base URL.
            expected_status: The only status code treated as success.
            **kwargs: Passed through to httpx (``json``, ``params``).

        Returns:
            Decoded JSON response body.

        Raises:
            KongConnectionError: If no response was received.
            KongUnexpectedStatusError: If the status is not ``expected_status``.
        """
        url = f"/{endpoint.lstrip('/')}"
        log = logger.bind(method=method, endpoint=url)

        try:
            log.debug("kong_request")
            response = self._client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            if isinstance(e, httpx.ConnectError):
                message = f"Failed to connect to Kong: {e}"
            elif isinstance(e, httpx.TimeoutException):
                message = f"Kong request timed out: {e}"
            else:
                message = f"Kong request failed: {e}"
            log.error("kong_transport_error", error=str(e), error_type=type(e).__name__)
            raise KongConnectionError(message=message, endpoint=url, original_error=e) from e

        log.debug("kong_response", status=response.status_code)
        return self._handle_response(response, url, expected_status)

    def get(self, endpoint: str, **kwargs: Any) -> dict[str, Any]:
        """GET, expecting 200 OK."""
        return self.request("GET", endpoint, expected_status=STATUS_OK, **kwargs)

    def post(
        self,
        endpoint: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """POST, expecting 201 Created."""
        return self.request("POST", endpoint, expected_status=STATUS_CREATED, json=json, **kwargs)

    def put(
        self,
        endpoint: str,
        json: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """PUT (create-or-replace), expecting 200 OK."""
        return self.request("PUT", endpoint, expected_status=STATUS_OK, json=json, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> None:
        """DELETE, expecting 204 No Content."""
        self.request("DELETE", endpoint, expected_status=STATUS_NO_CONTENT, **kwargs)

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()
        logger.debug("admin_client_closed")

    def __enter__(self) -> KongAdminClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
