"""Kong Gateway service layer.

Entity managers wrap the Admin API calls for one entity kind each; the
Reconciler sequences them into a full teardown-and-rebuild run.
"""

from kong_reconciler.services.kong.base import BaseEntityManager
from kong_reconciler.services.kong.consumer_manager import ConsumerManager
from kong_reconciler.services.kong.plugin_manager import KongPluginManager
from kong_reconciler.services.kong.reconciler import (
    TEARDOWN_ORDER,
    ReconcileError,
    Reconciler,
)
from kong_reconciler.services.kong.route_manager import RouteManager
from kong_reconciler.services.kong.service_manager import ServiceManager

__all__ = [
    "TEARDOWN_ORDER",
    "BaseEntityManager",
    "ConsumerManager",
    "KongPluginManager",
    "ReconcileError",
    "Reconciler",
    "RouteManager",
    "ServiceManager",
]
