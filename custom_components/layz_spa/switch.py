from __future__ import annotations

from homeassistant.components.switch import SwitchEntity  # type: ignore

from layzspa.const import CAP_JET_ONOFF, CAP_MSG_ONOFF, CAP_ONOFF, CAP_PUMP_ONOFF
from layzspa.models import CommandKind

from .const import DOMAIN
from .coordinator import LayzSpaCoordinator
from .entity import LayzSpaEntity

# capability, name, command, icon
SWITCHES: tuple[tuple[str, str, CommandKind, str], ...] = (
    (CAP_ONOFF, "Power", "power", "mdi:power"),
    (CAP_PUMP_ONOFF, "Filter pump", "filter", "mdi:pump"),
    (CAP_MSG_ONOFF, "Bubbles", "wave", "mdi:chart-bubble"),
    (CAP_JET_ONOFF, "Hydrojet", "jet", "mdi:waves"),
)


async def async_setup_entry(hass, entry, async_add_entities):
    coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        LayzSpaSwitch(coordinator, capability, name, command, icon)
        for capability, name, command, icon in SWITCHES
    )


class LayzSpaSwitch(LayzSpaEntity, SwitchEntity):
    def __init__(
        self, coordinator: LayzSpaCoordinator, capability: str, name: str, command: CommandKind, icon: str
    ) -> None:
        super().__init__(coordinator, capability, name)
        self._command = command
        self._attr_icon = icon

    @property
    def is_on(self) -> bool | None:
        return self._value()

    async def async_turn_on(self, **kwargs):
        await self.coordinator.async_control(self._command, True)

    async def async_turn_off(self, **kwargs):
        await self.coordinator.async_control(self._command, False)
