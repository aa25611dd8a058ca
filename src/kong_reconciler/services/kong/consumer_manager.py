"""Consumer manager for Kong Consumers."""

from __future__ import annotations

from kong_reconciler.integrations.kong.models.consumer import Consumer
from kong_reconciler.services.kong.base import BaseEntityManager


class ConsumerManager(BaseEntityManager[Consumer]):
    """Manager for Kong Consumer entities, addressed by username."""

    _endpoint = "consumers"
    _entity_name = "consumer"
    _model_class = Consumer
    _identity_field = "username"
