"""Adapter registry: which model codec governs a device."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .codecs import AIRJET_CODEC, HYDROJET_CODEC, AttributeCodec
from .const import (
    CAP_JET_ONOFF,
    CAP_MASSAGE_MODE,
    CAP_MSG_ONOFF,
    DEFAULT_MODEL,
    MODEL_AIRJET,
    MODEL_HYDROJET_PRO,
)
from .models import RawTelemetry

_LOGGER = logging.getLogger(__name__)

Signature = Callable[[RawTelemetry], bool]


@dataclass(slots=True, frozen=True)
class AdapterDescriptor:
    id: str
    codec: AttributeCodec
    product_names: frozenset[str] = frozenset()
    signature: Signature | None = None
    priority: int = 0
    # model-specific capabilities this adapter exposes
    capabilities: frozenset[str] = field(default_factory=frozenset)

    def matches(self, raw: RawTelemetry) -> bool:
        if self.signature is None:
            return False
        try:
            return bool(self.signature(raw))
        except (TypeError, AttributeError):
            _LOGGER.debug("Signature check for %s failed on %r", self.id, raw, exc_info=True)
            return False


class AdapterRegistry:
    """Ordered adapter list; registration order is the tie-breaker."""

    def __init__(self, descriptors: Iterable[AdapterDescriptor] = (), default_id: str | None = None) -> None:
        self._descriptors: list[AdapterDescriptor] = []
        for descriptor in descriptors:
            self.register(descriptor)
        self._default_id = default_id

    def register(self, descriptor: AdapterDescriptor) -> None:
        if any(d.id == descriptor.id for d in self._descriptors):
            raise ValueError(f"Adapter {descriptor.id!r} is already registered")
        self._descriptors.append(descriptor)

    def __iter__(self):
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    @property
    def model_capabilities(self) -> frozenset[str]:
        """Every model-specific capability any registered adapter can expose."""
        caps: set[str] = set()
        for descriptor in self._descriptors:
            caps |= descriptor.capabilities
        return frozenset(caps)

    def get(self, adapter_id: str) -> AdapterDescriptor:
        for descriptor in self._descriptors:
            if descriptor.id == adapter_id:
                return descriptor
        available = ", ".join(d.id for d in self._descriptors) or "(none)"
        raise KeyError(f"Unknown adapter: {adapter_id!r}. Available: {available}")

    @property
    def default(self) -> AdapterDescriptor:
        if self._default_id is not None:
            return self.get(self._default_id)
        if not self._descriptors:
            raise LookupError("Adapter registry is empty")
        return self._descriptors[0]

    def select_by_name(self, product_name: str | None) -> AdapterDescriptor | None:
        """First adapter whose product names contain the exact (trimmed) name."""
        if not product_name:
            return None
        name = str(product_name).strip()
        for descriptor in self._descriptors:
            if name in descriptor.product_names:
                return descriptor
        return None

    def select_by_signature(self, raw: RawTelemetry) -> AdapterDescriptor | None:
        """Highest-priority matching adapter; earliest registered wins a tie."""
        best: AdapterDescriptor | None = None
        for descriptor in self._descriptors:
            if not descriptor.matches(raw):
                continue
            # strict comparison keeps the earlier one on equal priority
            if best is None or descriptor.priority > best.priority:
                best = descriptor
        return best

    def select_initial(self, product_name: str | None) -> AdapterDescriptor:
        """Bootstrap choice: product name first, then the configured default."""
        return self.select_by_name(product_name) or self.default


def _has_any(*keys: str) -> Signature:
    def _signature(raw: RawTelemetry) -> bool:
        return any(key in raw for key in keys)

    return _signature


AIRJET = AdapterDescriptor(
    id=MODEL_AIRJET,
    codec=AIRJET_CODEC,
    product_names=frozenset({"Airjet"}),
    signature=_has_any("temp_now", "temp_set"),
    priority=10,
    capabilities=frozenset({CAP_MSG_ONOFF}),
)

HYDROJET_PRO = AdapterDescriptor(
    id=MODEL_HYDROJET_PRO,
    codec=HYDROJET_CODEC,
    product_names=frozenset({"Hydrojet_Pro"}),
    signature=_has_any("Tnow", "Tset"),
    priority=10,
    capabilities=frozenset({CAP_MASSAGE_MODE, CAP_JET_ONOFF}),
)


def default_registry() -> AdapterRegistry:
    """Fresh registry holding every known model."""
    return AdapterRegistry([AIRJET, HYDROJET_PRO], default_id=DEFAULT_MODEL)


MODEL_REGISTRY = default_registry()
