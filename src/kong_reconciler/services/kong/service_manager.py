"""Service manager for Kong Services."""

from __future__ import annotations

from kong_reconciler.integrations.kong.models.service import Service
from kong_reconciler.services.kong.base import BaseEntityManager


class ServiceManager(BaseEntityManager[Service]):
    """Manager for Kong Service entities.

    Services are addressed by name, which makes ``upsert`` idempotent:
    ``PUT /services/{name}`` creates the service or replaces it in place.

    Example:
        >>> manager = ServiceManager(client)
        >>> manager.upsert(Service(name="orders", url="http://orders:8080"))
    """

    _endpoint = "services"
    _entity_name = "service"
    _model_class = Service
    _identity_field = "name"

    def upsert(self, service: Service) -> Service:
        """Create or replace a service by name.

        Args:
            service: Declared service; ``name`` must be set.

        Returns:
            The service as stored by Kong.

        Raises:
            KongConnectionError: If the gateway could not be reached.
            KongUnexpectedStatusError: If the status is not 200.
        """
        name = self.identity(service)
        payload = service.to_create_payload()
        self._log.info("upserting_entity", id_or_name=name, **payload)
        path = self._path(name)
        response = self._client.put(path, json=payload)
        upserted = self._parse(response, path)
        self._log.info("upserted_entity", id=upserted.id, name=name)
        return upserted
