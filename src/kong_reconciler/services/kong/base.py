"""Base entity manager for Kong entities.

Each entity kind the reconciler touches gets a manager derived from
BaseEntityManager, which knows the kind's endpoint, its model class and the
field that identifies an entity in URLs.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from urllib.parse import quote

import structlog
from pydantic import BaseModel, ValidationError

from kong_reconciler.integrations.kong.exceptions import KongAPIError, KongResponseError
from kong_reconciler.integrations.kong.models.base import KongEntityBase, PaginatedResponse

if TYPE_CHECKING:
    from kong_reconciler.integrations.kong.client import KongAdminClient

logger = structlog.get_logger()

T = TypeVar("T", bound=KongEntityBase)
M = TypeVar("M", bound=BaseModel)


class BaseEntityManager(ABC, Generic[T]):
    """Abstract base class for Kong entity managers.

    Type Parameters:
        T: The Pydantic model class for this entity type.

    Class Attributes:
        _endpoint: API endpoint path (e.g. "services", "routes").
        _entity_name: Human-readable entity name for logging.
        _model_class: Pydantic model class for deserializing responses.
        _identity_field: Model field used to address an entity in URLs.

    Example:
        >>> class ServiceManager(BaseEntityManager[Service]):
        ...     _endpoint = "services"
        ...     _entity_name = "service"
        ...     _model_class = Service
        ...     _identity_field = "name"
    """

    _endpoint: str = ""
    _entity_name: str = ""
    _model_class: type[T]
    _identity_field: str = "id"

    def __init__(self, client: KongAdminClient) -> None:
        """Initialize the entity manager.

        Args:
            client: Kong Admin API client instance.
        """
        self._client = client
        self._log = logger.bind(entity=self._entity_name)

    @property
    def endpoint(self) -> str:
        """Return the API endpoint for this entity type."""
        return self._endpoint

    def _path(self, id_or_name: str) -> str:
        """Entity URL relative to the Admin API root; the identity is percent-encoded."""
        return f"{self._endpoint}/{quote(id_or_name, safe='')}"

    def _parse(
        self,
        data: Any,
        endpoint: str,
        model: type[M] | None = None,
    ) -> M:
        """Validate a response body, turning a mismatch into a gateway error.

        Raises:
            KongResponseError: If the body does not fit ``model`` (the
                manager's entity model by default).
        """
        model_class = model or self._model_class
        try:
            return model_class.model_validate(data)  # type: ignore[return-value]
        except ValidationError as e:
            self._log.error("response_validation_failed", endpoint=endpoint, errors=e.error_count())
            raise KongResponseError(
                message=f"Unexpected {self._entity_name} in response: {e}",
                response_body=data if isinstance(data, dict) else {"data": data},
                endpoint=endpoint,
                validation_errors=[dict(err) for err in e.errors(include_url=False)],
            ) from e

    def _list_at(self, endpoint: str) -> tuple[list[T], str | None]:
        response = self._parse(self._client.get(endpoint), endpoint, PaginatedResponse)
        entities: list[T] = [self._parse(item, endpoint) for item in response.data]
        next_page = response.offset or response.next
        if next_page:
            # Only the first page is consumed
            self._log.warning(
                "listing_truncated",
                endpoint=endpoint,
                returned=len(entities),
                next=next_page,
            )
        return entities, next_page

    def list(self) -> tuple[list[T], str | None]:
        """List the first page of entities of this kind.

        Returns:
            Tuple of (entities, cursor of the next page or None).

        Raises:
            KongConnectionError: If the gateway could not be reached.
            KongUnexpectedStatusError: If the status is not 200.
        """
        self._log.debug("listing_entities")
        entities, next_page = self._list_at(self._endpoint)
        self._log.debug("listed_entities", count=len(entities), has_more=bool(next_page))
        return entities, next_page

    def identity(self, entity: T) -> str:
        """Return the value that addresses ``entity`` in ``{endpoint}/{identity}``.

        Falls back to the gateway ID when the identity field is empty, which
        happens for remote entities created without a name.

        Raises:
            KongAPIError: If the entity has neither.
        """
        value = getattr(entity, self._identity_field, None) or entity.id
        if not value:
            raise KongAPIError(
                message=f"Cannot address {self._entity_name} without "
                f"'{self._identity_field}' or 'id'",
                endpoint=self._endpoint,
            )
        return str(value)

    def delete(self, id_or_name: str) -> None:
        """Delete an entity.

        Args:
            id_or_name: Value of the identity field (or gateway ID).

        Raises:
            KongConnectionError: If the gateway could not be reached.
            KongUnexpectedStatusError: If the status is not 204.
        """
        self._log.info("deleting_entity", id_or_name=id_or_name)
        self._client.delete(self._path(id_or_name))
        self._log.info("deleted_entity", id_or_name=id_or_name)
