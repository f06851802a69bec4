from __future__ import annotations

from homeassistant.components.select import SelectEntity  # type: ignore

from layzspa.const import CAP_MASSAGE_MODE
from layzspa.models import WAVE_LEVELS

from .const import DOMAIN
from .coordinator import LayzSpaCoordinator
from .entity import LayzSpaEntity


async def async_setup_entry(hass, entry, async_add_entities):
    async_add_entities([LayzSpaMassageMode(hass.data[DOMAIN][entry.entry_id])])


class LayzSpaMassageMode(LayzSpaEntity, SelectEntity):
    _attr_icon = "mdi:waves"
    _attr_options = list(WAVE_LEVELS)

    def __init__(self, coordinator: LayzSpaCoordinator) -> None:
        super().__init__(coordinator, CAP_MASSAGE_MODE, "Massage mode")

    @property
    def current_option(self) -> str | None:
        return self._value()

    async def async_select_option(self, option: str) -> None:
        await self.coordinator.async_control("waveLevel", option)
