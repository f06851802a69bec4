"""Tests for the Home Assistant glue: entry updates, services, forwarding."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

pytest.importorskip("homeassistant")

from homeassistant.exceptions import HomeAssistantError  # noqa: E402

from custom_components.layz_spa import (  # noqa: E402
    async_handle_set_filter_pump,
    async_update_entry,
)
from custom_components.layz_spa.config_flow import split_device_config  # noqa: E402
from custom_components.layz_spa.const import DOMAIN  # noqa: E402
from custom_components.layz_spa.coordinator import EntitySink, LayzSpaCoordinator  # noqa: E402
from layzspa.models import Credentials  # noqa: E402

ENTRY_DATA = {
    "did": "d1",
    "product_name": "Airjet",
    "token": "tok",
    "base_url": "https://euapi.gizwits.com",
    "app_id": "app",
}


def _fake_coordinator(did: str = "d1") -> MagicMock:
    coordinator = MagicMock()
    coordinator.did = did
    coordinator.needs_reload.return_value = False
    coordinator.async_apply_settings = AsyncMock()
    coordinator.async_set_filter_pump = AsyncMock(return_value=True)
    return coordinator


def _hass(**coordinators) -> MagicMock:
    hass = MagicMock()
    hass.data = {DOMAIN: coordinators}
    hass.config_entries.async_reload = AsyncMock()
    return hass


def _bare_coordinator() -> LayzSpaCoordinator:
    coordinator = object.__new__(LayzSpaCoordinator)
    coordinator.engine = MagicMock()
    coordinator.sink = EntitySink(MagicMock(), "d1")
    coordinator.async_set_updated_data = MagicMock()
    return coordinator


class TestEntryUpdates:
    async def test_options_change_applies_settings_in_place(self):
        coordinator = _fake_coordinator()
        hass = _hass(e1=coordinator)
        entry = MagicMock(entry_id="e1", options={"heater_power": 1500.0})

        await async_update_entry(hass, entry)

        coordinator.async_apply_settings.assert_awaited_once_with({"heater_power": 1500.0})
        hass.config_entries.async_reload.assert_not_awaited()

    async def test_new_credentials_reload_the_entry(self):
        coordinator = _fake_coordinator()
        coordinator.needs_reload.return_value = True
        hass = _hass(e1=coordinator)

        await async_update_entry(hass, MagicMock(entry_id="e1"))

        hass.config_entries.async_reload.assert_awaited_once_with("e1")
        coordinator.async_apply_settings.assert_not_awaited()

    def test_needs_reload_only_on_credentials_or_model(self):
        coordinator = object.__new__(LayzSpaCoordinator)
        coordinator.session = MagicMock(
            credentials=Credentials.from_mapping(ENTRY_DATA), product_name="Airjet"
        )

        assert coordinator.needs_reload(MagicMock(data=ENTRY_DATA)) is False
        assert coordinator.needs_reload(MagicMock(data={**ENTRY_DATA, "token": "new"})) is True
        assert coordinator.needs_reload(MagicMock(data={**ENTRY_DATA, "product_name": "Hydrojet_Pro"})) is True


class TestSetFilterPumpService:
    async def test_routes_to_matching_spa(self):
        other, target = _fake_coordinator("d0"), _fake_coordinator("d1")
        hass = _hass(e0=other, e1=target)

        await async_handle_set_filter_pump(hass, MagicMock(data={"did": "d1", "state": True}))

        target.async_set_filter_pump.assert_awaited_once_with(True)
        other.async_set_filter_pump.assert_not_awaited()

    async def test_unknown_did_raises(self):
        with pytest.raises(HomeAssistantError):
            await async_handle_set_filter_pump(_hass(), MagicMock(data={"did": "zz", "state": False}))

    async def test_rejected_command_raises(self):
        coordinator = _fake_coordinator()
        coordinator.async_set_filter_pump.return_value = False
        with pytest.raises(HomeAssistantError):
            await async_handle_set_filter_pump(_hass(e1=coordinator), MagicMock(data={"did": "d1", "state": True}))


class TestCoordinatorForwarding:
    async def test_filter_pump_pushes_fresh_state(self):
        coordinator = _bare_coordinator()
        coordinator.engine.async_set_filter_pump = AsyncMock(return_value=True)
        coordinator.sink.set_value("pump_onoff", True)

        assert await coordinator.async_set_filter_pump(True) is True

        coordinator.engine.async_set_filter_pump.assert_awaited_once_with(True)
        pushed = coordinator.async_set_updated_data.call_args.args[0]
        assert pushed["values"] == {"pump_onoff": True}

    async def test_settings_and_controls_share_the_forwarder(self):
        coordinator = _bare_coordinator()
        coordinator.engine.async_apply_settings = AsyncMock(return_value=None)
        coordinator.engine.async_set_thermostat_mode = AsyncMock(return_value=False)

        await coordinator.async_apply_settings({"heater_power": 1000})
        assert await coordinator.async_set_thermostat_mode("cool") is False

        coordinator.engine.async_apply_settings.assert_awaited_once_with({"heater_power": 1000})
        assert coordinator.async_set_updated_data.call_count == 2


class TestYamlImport:
    def test_splits_credentials_from_settings(self):
        data, options = split_device_config({**ENTRY_DATA, "heater_power": 1800, "wave_control_enabled": False})

        assert data == ENTRY_DATA
        assert options["heater_power"] == 1800.0
        assert options["wave_control_enabled"] is False
        assert options["filter_pump_power"] == 40
