# custom_components/layz_spa/coordinator.py
# One coordinator per spa: HA's timer drives the library's reconciliation loop.
from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from datetime import timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry  # type: ignore
from homeassistant.const import CONF_NAME  # type: ignore
from homeassistant.core import HomeAssistant, callback  # type: ignore
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator  # type: ignore

from layzspa.api import GizwitsClient
from layzspa.const import UPDATE_INTERVAL_SECONDS
from layzspa.models import Bounds, CommandKind, Credentials
from layzspa.reconcile import ReconciliationLoop
from layzspa.session import DeviceSession
from layzspa.settings import DeviceSettings

from .const import CONF_DID, CONF_PRODUCT_NAME, DOMAIN, EVENT_LAYZ_SPA

_LOGGER = logging.getLogger(__name__)


class EntitySink:
    """Capability state the entities render; written only by the loop."""

    def __init__(self, hass: HomeAssistant, did: str) -> None:
        self._hass = hass
        self._did = did
        self.values: dict[str, Any] = {}
        self.bounds: dict[str, Bounds] = {}
        self.enabled: set[str] = set()
        self.alarm_message: str | None = None
        self.available = True

    def set_value(self, capability: str, value: Any) -> None:
        self.values[capability] = value

    def set_bounds(self, capability: str, bounds: Bounds) -> None:
        self.bounds[capability] = bounds

    def enable_capability(self, capability: str, enabled: bool) -> None:
        if enabled and capability not in self.enabled:
            _LOGGER.info("Enabling %s for %s", capability, self._did)
            self.enabled.add(capability)
        elif not enabled and capability in self.enabled:
            _LOGGER.info("Disabling %s for %s", capability, self._did)
            self.enabled.discard(capability)

    @callback
    def raise_event(self, event: str) -> None:
        self._hass.bus.async_fire(EVENT_LAYZ_SPA, {"device_id": self._did, "type": event})

    def set_alarm_message(self, message: str | None) -> None:
        self.alarm_message = message

    def set_available(self, available: bool) -> None:
        self.available = available

    def as_dict(self) -> dict:
        return {
            "values": dict(self.values),
            "bounds": dict(self.bounds),
            "enabled": frozenset(self.enabled),
            "alarm_message": self.alarm_message,
            "available": self.available,
        }


class LayzSpaCoordinator(DataUpdateCoordinator[dict]):
    """Polls one spa every minute; control calls share the same serialization."""

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry, client: GizwitsClient) -> None:
        self.entry = entry
        self.did: str = entry.data[CONF_DID]
        product_name = entry.data.get(CONF_PRODUCT_NAME)
        self.device_name: str = entry.data.get(CONF_NAME) or f"{product_name or 'Lay-Z-Spa'} {self.did}"

        self.sink = EntitySink(hass, self.did)
        self.session = DeviceSession.create(
            self.did,
            product_name=product_name,
            credentials=Credentials.from_mapping(entry.data),
            settings=DeviceSettings.from_mapping(entry.options),
        )
        self.engine = ReconciliationLoop(self.session, client, self.sink)
        self.engine.bootstrap()

        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=f"{DOMAIN} {self.did}",
            update_interval=timedelta(seconds=UPDATE_INTERVAL_SECONDS),
        )

    async def _async_update_data(self) -> dict:
        # failures are logged by the loop; entities keep the last good state
        await self.engine.async_tick()
        return self.sink.as_dict()

    def needs_reload(self, entry: ConfigEntry) -> bool:
        """Credentials or model hint changed; settings alone are applied live."""
        return (
            Credentials.from_mapping(entry.data) != self.session.credentials
            or entry.data.get(CONF_PRODUCT_NAME) != self.session.product_name
        )

    async def _async_forward(self, action: Awaitable[Any]) -> Any:
        result = await action
        self.async_set_updated_data(self.sink.as_dict())
        return result

    async def async_control(self, command: CommandKind, value: Any) -> bool:
        return await self._async_forward(self.engine.async_control(command, value))

    async def async_set_thermostat_mode(self, mode: str) -> bool:
        return await self._async_forward(self.engine.async_set_thermostat_mode(mode))

    async def async_set_filter_pump(self, on: bool) -> bool:
        return await self._async_forward(self.engine.async_set_filter_pump(on))

    async def async_apply_settings(self, settings: Mapping[str, Any]) -> None:
        await self._async_forward(self.engine.async_apply_settings(settings))
