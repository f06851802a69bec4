"""Per-device mutable state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .models import Credentials
from .registry import MODEL_REGISTRY, AdapterDescriptor, AdapterRegistry
from .settings import DeviceSettings

_LOGGER = logging.getLogger(__name__)


@dataclass
class DeviceSession:
    """Everything the engine keeps for one device between cycles.

    Only the owning reconciliation loop mutates ``adapter`` and
    ``previous_filter_on``; both changes go through the methods below.
    """

    did: str
    adapter: AdapterDescriptor
    credentials: Credentials = field(default_factory=Credentials)
    settings: DeviceSettings = field(default_factory=DeviceSettings)
    product_name: str | None = None
    registry: AdapterRegistry = field(default=MODEL_REGISTRY, repr=False)
    previous_filter_on: bool | None = None

    @classmethod
    def create(
        cls,
        did: str,
        *,
        product_name: str | None = None,
        credentials: Credentials | None = None,
        settings: DeviceSettings | None = None,
        registry: AdapterRegistry | None = None,
    ) -> DeviceSession:
        """Bind the product-name adapter, or the registry default until data arrives."""
        registry = registry or MODEL_REGISTRY
        adapter = registry.select_initial(product_name)
        _LOGGER.info("Initial adapter for %s (%s): %s", did, product_name, adapter.id)
        return cls(
            did=did,
            adapter=adapter,
            credentials=credentials or Credentials(),
            settings=settings or DeviceSettings(),
            product_name=product_name,
            registry=registry,
        )

    @property
    def active_adapter_id(self) -> str:
        return self.adapter.id

    def bind(self, adapter: AdapterDescriptor) -> bool:
        """Switch adapters; returns True if the binding changed."""
        if adapter.id == self.adapter.id:
            return False
        _LOGGER.info("Switching adapter for %s: %s -> %s", self.did, self.adapter.id, adapter.id)
        self.adapter = adapter
        return True

    def filter_transition(self, filter_on: bool) -> bool | None:
        """The new value on a transition, None otherwise.

        The first cycle never reports a transition: there is nothing to
        compare with yet.
        """
        previous = self.previous_filter_on
        if previous is None or previous == filter_on:
            return None
        return filter_on

    def remember_filter(self, filter_on: bool) -> None:
        self.previous_filter_on = filter_on
