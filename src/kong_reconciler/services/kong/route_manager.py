"""Route manager for Kong Routes."""

from __future__ import annotations

from urllib.parse import quote

from kong_reconciler.integrations.kong.exceptions import KongAPIError
from kong_reconciler.integrations.kong.models.route import Route
from kong_reconciler.services.kong.base import BaseEntityManager


class RouteManager(BaseEntityManager[Route]):
    """Manager for Kong Route entities.

    Routes are created under their owning service and deleted by the ID Kong
    assigned them. Creation is not idempotent: creating the same route twice
    without deleting it in between yields two routes or a conflict.

    Example:
        >>> manager = RouteManager(client)
        >>> created = manager.create_for_service(Route(service="orders", paths=["/orders"]))
        >>> manager.delete(created.id)
    """

    _endpoint = "routes"
    _entity_name = "route"
    _model_class = Route
    _identity_field = "id"

    def list_by_service(self, service_id_or_name: str) -> tuple[list[Route], str | None]:
        """List the first page of routes owned by one service.

        Args:
            service_id_or_name: Service ID or name.

        Returns:
            Tuple of (routes, cursor of the next page or None).
        """
        self._log.debug("listing_service_routes", service=service_id_or_name)
        routes, next_page = self._list_at(f"services/{quote(service_id_or_name, safe='')}/routes")
        self._log.debug("listed_service_routes", service=service_id_or_name, count=len(routes))
        return routes, next_page

    def create_for_service(self, route: Route) -> Route:
        """Create a route under its declared owning service.

        Args:
            route: Declared route; ``service`` must be set.

        Returns:
            The created route, carrying its gateway-assigned ID.

        Raises:
            KongConnectionError: If the gateway could not be reached.
            KongUnexpectedStatusError: If the status is not 201.
        """
        if not route.service:
            raise KongAPIError(message="Route has no owning service", endpoint=self._endpoint)

        payload = route.to_create_payload()
        self._log.info("creating_service_route", service=route.service, route_name=route.name)
        endpoint = f"services/{quote(route.service, safe='')}/routes"
        response = self._client.post(endpoint, json=payload)
        created = self._parse(response, endpoint)
        self._log.info("created_service_route", id=created.id, service=route.service)
        return created
