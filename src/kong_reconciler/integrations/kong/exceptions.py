"""Kong Admin API exceptions.

Every failure the gateway client can surface derives from KongAPIError.
Transport failures (connection refused, DNS, timeouts) become
KongConnectionError; any response whose status differs from the single code
expected for the operation becomes KongUnexpectedStatusError or one of its
more specific subclasses.
"""

from __future__ import annotations

from typing import Any, ClassVar


class KongAPIError(Exception):
    """Base exception for Kong Admin API errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status received, None if no response arrived.
        response_body: Decoded response body, if any.
        endpoint: The API endpoint that was called.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: dict[str, Any] | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.endpoint = endpoint

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.endpoint:
            parts.append(f"[endpoint: {self.endpoint}]")
        return " ".join(parts)


class KongConnectionError(KongAPIError):
    """No response was received: refused connection, DNS failure or timeout."""

    def __init__(
        self,
        message: str = "Failed to connect to Kong Admin API",
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message=message, endpoint=endpoint)
        self.original_error = original_error


class KongUnexpectedStatusError(KongAPIError):
    """Kong answered with anything but the expected status code.

    There is no tolerance band: a 200 where a 204 was expected is as much a
    failure as a 500. Subclasses only narrow the kind of failure for
    reporting; they set ``default_message`` and, where the status is implied
    by the subclass, ``default_status``.

    Attributes:
        expected_status: The single code that would have meant success.
    """

    default_message: ClassVar[str] = "Bad response from the API"
    default_status: ClassVar[int | None] = None

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        expected_status: int | None = None,
        response_body: dict[str, Any] | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(
            message=message or self.default_message,
            status_code=status_code if status_code is not None else self.default_status,
            response_body=response_body,
            endpoint=endpoint,
        )
        self.expected_status = expected_status


class KongAuthError(KongUnexpectedStatusError):
    """401/403: the Admin API refused the caller."""

    default_message = "Authentication to Kong Admin API failed"
    default_status = 401


class KongNotFoundError(KongUnexpectedStatusError):
    """404, e.g. a route created under a service that does not exist."""

    default_message = "Kong resource not found"
    default_status = 404


class KongDBLessWriteError(KongUnexpectedStatusError):
    """405 from a gateway in DB-less mode, whose Admin API is read-only."""

    default_message = "Write operations are not allowed in DB-less mode"
    default_status = 405


class KongValidationError(KongUnexpectedStatusError):
    """400 carrying Kong schema violations.

    Attributes:
        validation_errors: Field-level errors from the ``fields`` member of
            Kong's error body.
    """

    default_message = "Invalid request data"
    default_status = 400

    def __init__(
        self,
        message: str | None = None,
        validation_errors: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors or {}


class KongResponseError(KongAPIError):
    """A successful response whose body does not match the expected entity.

    Attributes:
        validation_errors: Pydantic error details for the offending body.
    """

    def __init__(
        self,
        message: str = "Unexpected response body from the API",
        response_body: dict[str, Any] | None = None,
        endpoint: str | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message=message, response_body=response_body, endpoint=endpoint)
        self.validation_errors = validation_errors or []
