# custom_components/layz_spa/config_flow.py
# YAML devices -> one config entry per spa; options hold the per-device settings
from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries  # type: ignore
from homeassistant.config_entries import ConfigFlowResult  # type: ignore
from homeassistant.const import CONF_NAME  # type: ignore
from homeassistant.core import callback  # type: ignore

from layzspa.const import (
    CONF_FILTER_PUMP_CONTROL_ENABLED,
    CONF_FILTER_PUMP_POWER,
    CONF_HEATER_POWER,
    CONF_POWER_CONTROL_ENABLED,
    CONF_WAVE_CONTROL_ENABLED,
)
from layzspa.settings import SETTINGS_FIELDS, SETTINGS_SCHEMA

from .const import CONF_DID, DOMAIN, LOGGER

SETTINGS_KEYS = frozenset(str(key) for key in SETTINGS_FIELDS)


def split_device_config(device_config: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """YAML device block -> (entry data, entry options)."""
    data = {key: value for key, value in device_config.items() if key not in SETTINGS_KEYS}
    return data, SETTINGS_SCHEMA(device_config)


class ConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    VERSION = 1

    async def async_step_import(self, import_data: dict[str, Any]) -> ConfigFlowResult:
        data, options = split_device_config(import_data)
        await self.async_set_unique_id(data[CONF_DID])
        # credentials follow configuration.yaml; settings are only seeded, then edited as options
        self._abort_if_unique_id_configured(updates=data, reload_on_update=False)

        LOGGER.info("Importing spa %s from configuration.yaml", data[CONF_DID])
        return self.async_create_entry(title=data.get(CONF_NAME) or data[CONF_DID], data=data, options=options)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: config_entries.ConfigEntry) -> LayzSpaOptionsFlow:
        return LayzSpaOptionsFlow()


class LayzSpaOptionsFlow(config_entries.OptionsFlow):
    """Heater/pump wattages and which controls are exposed."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None) -> ConfigFlowResult:
        if user_input is not None:
            return self.async_create_entry(data=SETTINGS_SCHEMA(user_input))

        current = SETTINGS_SCHEMA(dict(self.config_entry.options))
        watts = vol.All(vol.Coerce(float), vol.Range(min=0))
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema({
                vol.Required(CONF_HEATER_POWER, default=current[CONF_HEATER_POWER]): watts,
                vol.Required(CONF_FILTER_PUMP_POWER, default=current[CONF_FILTER_PUMP_POWER]): watts,
                vol.Required(CONF_POWER_CONTROL_ENABLED, default=current[CONF_POWER_CONTROL_ENABLED]): bool,
                vol.Required(
                    CONF_FILTER_PUMP_CONTROL_ENABLED, default=current[CONF_FILTER_PUMP_CONTROL_ENABLED]
                ): bool,
                vol.Required(CONF_WAVE_CONTROL_ENABLED, default=current[CONF_WAVE_CONTROL_ENABLED]): bool,
            }),
        )
