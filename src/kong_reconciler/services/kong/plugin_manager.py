"""Plugin manager for Kong Plugins."""

from __future__ import annotations

from urllib.parse import quote

from kong_reconciler.integrations.kong.models.plugin import KongPluginEntity
from kong_reconciler.services.kong.base import BaseEntityManager


class KongPluginManager(BaseEntityManager[KongPluginEntity]):
    """Manager for Kong Plugin entities.

    Plugins are deleted by name: at most one instance per plugin name is
    assumed to exist on the gateway.

    Example:
        >>> manager = KongPluginManager(client)
        >>> manager.create(KongPluginEntity(name="cors"), service="orders")
    """

    _endpoint = "plugins"
    _entity_name = "plugin"
    _model_class = KongPluginEntity
    _identity_field = "name"

    def create(
        self,
        plugin: KongPluginEntity,
        *,
        service: str | None = None,
        route: str | None = None,
    ) -> KongPluginEntity:
        """Create one plugin instance.

        Args:
            plugin: Declared plugin.
            service: Attach to this service (name or ID).
            route: Attach to this route (ID or name). Ignored if ``service``
                is given.

        Returns:
            The plugin as stored by Kong.

        Raises:
            KongConnectionError: If the gateway could not be reached.
            KongUnexpectedStatusError: If the status is not 201.
        """
        if service:
            endpoint = f"services/{quote(service, safe='')}/plugins"
        elif route:
            endpoint = f"routes/{quote(route, safe='')}/plugins"
        else:
            endpoint = self._endpoint

        payload = plugin.to_create_payload()
        self._log.info("creating_plugin", plugin=plugin.name, endpoint=endpoint)
        response = self._client.post(endpoint, json=payload)
        created = self._parse(response, endpoint)
        self._log.info("created_plugin", id=created.id, plugin=plugin.name)
        return created
