"""Per-device user settings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    CONF_FILTER_PUMP_CONTROL_ENABLED,
    CONF_FILTER_PUMP_POWER,
    CONF_HEATER_POWER,
    CONF_POWER_CONTROL_ENABLED,
    CONF_WAVE_CONTROL_ENABLED,
    CONTROL_SETTINGS,
    DEFAULT_FILTER_PUMP_POWER,
    DEFAULT_HEATER_POWER,
)

_WATTS = vol.All(vol.Coerce(float), vol.Range(min=0))

SETTINGS_FIELDS = {
    vol.Optional(CONF_HEATER_POWER, default=DEFAULT_HEATER_POWER): _WATTS,
    vol.Optional(CONF_FILTER_PUMP_POWER, default=DEFAULT_FILTER_PUMP_POWER): _WATTS,
    vol.Optional(CONF_POWER_CONTROL_ENABLED, default=True): vol.Boolean(),
    vol.Optional(CONF_FILTER_PUMP_CONTROL_ENABLED, default=True): vol.Boolean(),
    vol.Optional(CONF_WAVE_CONTROL_ENABLED, default=True): vol.Boolean(),
}

SETTINGS_SCHEMA = vol.Schema(SETTINGS_FIELDS, extra=vol.REMOVE_EXTRA)


@dataclass(slots=True, frozen=True)
class DeviceSettings:
    heater_power: float = DEFAULT_HEATER_POWER
    filter_pump_power: float = DEFAULT_FILTER_PUMP_POWER
    power_control_enabled: bool = True
    filter_pump_control_enabled: bool = True
    wave_control_enabled: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None = None) -> DeviceSettings:
        """Validate and coerce raw settings; raises vol.Invalid on bad values."""
        return cls(**SETTINGS_SCHEMA(dict(data or {})))

    def control_enabled(self, capability: str) -> bool:
        """Whether a user-switchable control capability is turned on."""
        key = CONTROL_SETTINGS.get(capability)
        if key is None:
            return True
        return bool(getattr(self, key))
