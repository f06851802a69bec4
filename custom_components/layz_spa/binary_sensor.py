from __future__ import annotations

from homeassistant.components.binary_sensor import (  # type: ignore
    BinarySensorDeviceClass,
    BinarySensorEntity,
)

from layzspa.const import CAP_ALARM_GENERIC, CAP_HEAT_STATE, CAP_HEAT_TEMP_REACH, CAP_PUMP_STATE

from .const import DOMAIN
from .coordinator import LayzSpaCoordinator
from .entity import LayzSpaEntity

# capability, name, device class
BINARY_SENSORS = (
    (CAP_HEAT_TEMP_REACH, "Target temperature reached", None),
    (CAP_PUMP_STATE, "Filter pump running", BinarySensorDeviceClass.RUNNING),
    (CAP_HEAT_STATE, "Heater running", BinarySensorDeviceClass.HEAT),
)


async def async_setup_entry(hass, entry, async_add_entities):
    coordinator: LayzSpaCoordinator = hass.data[DOMAIN][entry.entry_id]
    entities: list[BinarySensorEntity] = [
        LayzSpaBinarySensor(coordinator, capability, name, device_class)
        for capability, name, device_class in BINARY_SENSORS
    ]
    entities.append(LayzSpaAlarm(coordinator))
    async_add_entities(entities)


class LayzSpaBinarySensor(LayzSpaEntity, BinarySensorEntity):
    def __init__(self, coordinator: LayzSpaCoordinator, capability: str, name: str, device_class) -> None:
        super().__init__(coordinator, capability, name)
        self._attr_device_class = device_class

    @property
    def is_on(self) -> bool | None:
        return self._value()


class LayzSpaAlarm(LayzSpaBinarySensor):
    """On while the spa reports error codes; the codes go in the attributes."""

    def __init__(self, coordinator: LayzSpaCoordinator) -> None:
        super().__init__(coordinator, CAP_ALARM_GENERIC, "Alarm", BinarySensorDeviceClass.PROBLEM)

    @property
    def extra_state_attributes(self) -> dict:
        return {"message": self._state.get("alarm_message")}
