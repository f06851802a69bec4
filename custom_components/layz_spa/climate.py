from __future__ import annotations

from typing import Any

from homeassistant.components.climate import (  # type: ignore
    ClimateEntity,
    ClimateEntityFeature,
    HVACMode,
)
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature  # type: ignore

from layzspa.const import (
    CAP_MEASURE_TEMPERATURE,
    CAP_TARGET_TEMPERATURE,
    CAP_THERMOSTAT_MODE,
    MODE_HEAT,
    MODE_OFF,
)
from layzspa.models import Bounds
from layzspa.reconcile import temperature_bounds

from .const import DOMAIN
from .coordinator import LayzSpaCoordinator
from .entity import LayzSpaEntity


async def async_setup_entry(hass, entry, async_add_entities):
    async_add_entities([LayzSpaThermostat(hass.data[DOMAIN][entry.entry_id])])


class LayzSpaThermostat(LayzSpaEntity, ClimateEntity):
    """Heater control; bounds and unit follow what the spa reports."""

    _attr_hvac_modes = [HVACMode.HEAT, HVACMode.OFF]
    _attr_supported_features = ClimateEntityFeature.TARGET_TEMPERATURE
    _attr_target_temperature_step = 1
    _enable_turn_on_off_backwards_compatibility = False

    def __init__(self, coordinator: LayzSpaCoordinator) -> None:
        super().__init__(coordinator, CAP_THERMOSTAT_MODE, "Thermostat")

    @property
    def _bounds(self) -> Bounds:
        return self._state.get("bounds", {}).get(CAP_TARGET_TEMPERATURE) or temperature_bounds("C")

    @property
    def temperature_unit(self) -> str:
        return UnitOfTemperature.FAHRENHEIT if self._bounds.unit == "F" else UnitOfTemperature.CELSIUS

    @property
    def min_temp(self) -> float:
        return self._bounds.min

    @property
    def max_temp(self) -> float:
        return self._bounds.max

    @property
    def current_temperature(self) -> float | None:
        return self._value(CAP_MEASURE_TEMPERATURE)

    @property
    def target_temperature(self) -> float | None:
        return self._value(CAP_TARGET_TEMPERATURE)

    @property
    def hvac_mode(self) -> HVACMode | None:
        mode = self._value()
        if mode is None:
            return None
        return HVACMode.HEAT if mode == MODE_HEAT else HVACMode.OFF

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        await self.coordinator.async_set_thermostat_mode(MODE_HEAT if hvac_mode == HVACMode.HEAT else MODE_OFF)

    async def async_set_temperature(self, **kwargs: Any) -> None:
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return
        await self.coordinator.async_control("tempSet", temperature)
