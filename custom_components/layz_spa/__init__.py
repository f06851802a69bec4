from __future__ import annotations

import voluptuous as vol
from homeassistant.config_entries import SOURCE_IMPORT, ConfigEntry  # type: ignore
from homeassistant.const import CONF_NAME, CONF_TOKEN, Platform  # type: ignore
from homeassistant.core import HomeAssistant, ServiceCall  # type: ignore
from homeassistant.exceptions import HomeAssistantError  # type: ignore
from homeassistant.helpers import config_validation as cv  # type: ignore
from homeassistant.helpers.aiohttp_client import async_get_clientsession  # type: ignore
from homeassistant.helpers.typing import ConfigType  # type: ignore

from layzspa.api import GizwitsClient
from layzspa.settings import SETTINGS_FIELDS

from .const import (
    ATTR_STATE,
    CONF_APP_ID,
    CONF_BASE_URL,
    CONF_DEVICES,
    CONF_DID,
    CONF_PRODUCT_NAME,
    DOMAIN,
    LOGGER,
    SERVICE_SET_FILTER_PUMP,
)
from .coordinator import LayzSpaCoordinator

PLATFORMS = [
    Platform.SWITCH,
    Platform.SELECT,
    Platform.CLIMATE,
    Platform.SENSOR,
    Platform.BINARY_SENSOR,
]

DEVICE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_DID): cv.string,
        vol.Optional(CONF_NAME): cv.string,
        vol.Optional(CONF_PRODUCT_NAME): cv.string,
        # per-device credentials; pairing writes these
        vol.Required(CONF_TOKEN): cv.string,
        vol.Required(CONF_BASE_URL): cv.url,
        vol.Required(CONF_APP_ID): cv.string,
        **SETTINGS_FIELDS,
    }
)

CONFIG_SCHEMA = vol.Schema(
    {DOMAIN: vol.Schema({vol.Required(CONF_DEVICES): vol.All(cv.ensure_list, [DEVICE_SCHEMA])})},
    extra=vol.ALLOW_EXTRA,
)

SET_FILTER_PUMP_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_DID): cv.string,
        vol.Required(ATTR_STATE): cv.boolean,
    }
)


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    hass.data.setdefault(DOMAIN, {})

    async def _handle_set_filter_pump(call: ServiceCall) -> None:
        await async_handle_set_filter_pump(hass, call)

    hass.services.async_register(
        DOMAIN, SERVICE_SET_FILTER_PUMP, _handle_set_filter_pump, schema=SET_FILTER_PUMP_SCHEMA
    )

    for device_config in config.get(DOMAIN, {}).get(CONF_DEVICES, []):
        hass.async_create_task(
            hass.config_entries.flow.async_init(
                DOMAIN, context={"source": SOURCE_IMPORT}, data=dict(device_config)
            )
        )
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    client = GizwitsClient(async_get_clientsession(hass))
    coordinator = LayzSpaCoordinator(hass, entry, client)

    await coordinator.async_config_entry_first_refresh()
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = coordinator
    LOGGER.info("Set up %s (adapter %s)", coordinator.device_name, coordinator.session.active_adapter_id)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    entry.async_on_unload(entry.add_update_listener(async_update_entry))
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        coordinator: LayzSpaCoordinator | None = hass.data[DOMAIN].pop(entry.entry_id, None)
        if coordinator is not None:
            # stops polling; a cycle already in flight runs to completion
            await coordinator.async_shutdown()
    return unload_ok


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    await hass.config_entries.async_reload(entry.entry_id)


async def async_update_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Options edits apply to the running session; new credentials need a reload."""
    coordinator: LayzSpaCoordinator | None = hass.data[DOMAIN].get(entry.entry_id)
    if coordinator is None or coordinator.needs_reload(entry):
        await async_reload_entry(hass, entry)
        return
    await coordinator.async_apply_settings(entry.options)


async def async_handle_set_filter_pump(hass: HomeAssistant, call: ServiceCall) -> None:
    did = call.data[CONF_DID]
    for coordinator in hass.data.get(DOMAIN, {}).values():
        if coordinator.did != did:
            continue
        if not await coordinator.async_set_filter_pump(call.data[ATTR_STATE]):
            raise HomeAssistantError(f"Lay-Z-Spa {did} did not accept the filter pump command")
        return
    raise HomeAssistantError(f"No Lay-Z-Spa configured with did {did}")
