from __future__ import annotations

from homeassistant.components.sensor import (  # type: ignore
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.const import UnitOfPower, UnitOfTemperature  # type: ignore

from layzspa.const import CAP_MEASURE_POWER, CAP_TARGET_TEMPERATURE, CAP_TEMP_NOW

from .const import DOMAIN
from .coordinator import LayzSpaCoordinator
from .entity import LayzSpaEntity


async def async_setup_entry(hass, entry, async_add_entities):
    coordinator: LayzSpaCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([LayzSpaPowerSensor(coordinator), LayzSpaWaterTemperature(coordinator)])


class LayzSpaPowerSensor(LayzSpaEntity, SensorEntity):
    """Estimated draw from the configured heater and filter pump wattages."""

    _attr_device_class = SensorDeviceClass.POWER
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = UnitOfPower.WATT

    def __init__(self, coordinator: LayzSpaCoordinator) -> None:
        super().__init__(coordinator, CAP_MEASURE_POWER, "Power")

    @property
    def native_value(self) -> float | None:
        return self._value()


class LayzSpaWaterTemperature(LayzSpaEntity, SensorEntity):
    _attr_device_class = SensorDeviceClass.TEMPERATURE
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: LayzSpaCoordinator) -> None:
        super().__init__(coordinator, CAP_TEMP_NOW, "Water temperature")

    @property
    def native_unit_of_measurement(self) -> str:
        bounds = self._state.get("bounds", {}).get(CAP_TARGET_TEMPERATURE)
        if bounds is not None and bounds.unit == "F":
            return UnitOfTemperature.FAHRENHEIT
        return UnitOfTemperature.CELSIUS

    @property
    def native_value(self) -> float | None:
        return self._value()
