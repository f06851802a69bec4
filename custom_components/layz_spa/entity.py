# custom_components/layz_spa/entity.py
from __future__ import annotations

from typing import Any

from homeassistant.helpers.entity import DeviceInfo  # type: ignore
from homeassistant.helpers.update_coordinator import CoordinatorEntity  # type: ignore

from .const import DOMAIN, MANUFACTURER
from .coordinator import LayzSpaCoordinator


class LayzSpaEntity(CoordinatorEntity):
    """One capability of one spa."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: LayzSpaCoordinator, capability: str, name: str) -> None:
        super().__init__(coordinator)
        self._capability = capability
        self._attr_unique_id = f"{coordinator.did}_{capability}"
        self._attr_name = name

    @property
    def device_info(self) -> DeviceInfo:
        return DeviceInfo(
            identifiers={(DOMAIN, self.coordinator.did)},
            manufacturer=MANUFACTURER,
            model=self.coordinator.session.active_adapter_id,
            name=self.coordinator.device_name,
        )

    @property
    def _state(self) -> dict:
        return self.coordinator.data or {}

    @property
    def available(self) -> bool:
        # capabilities the bound model (or settings) don't expose read as unavailable
        return (
            super().available
            and self._state.get("available", True)
            and self._capability in self._state.get("enabled", ())
        )

    def _value(self, capability: str | None = None) -> Any:
        return self._state.get("values", {}).get(capability or self._capability)
