# layzspa/reconcile.py
# Per-device fetch -> normalize -> derive -> publish loop, serialized per device.
from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from collections.abc import Mapping
from typing import Any, Protocol

from .api import (
    LayzConfigurationError,
    LayzError,
    LayzMalformedResponseError,
    LayzTransportError,
)
from .const import (
    CAP_ALARM_GENERIC,
    CAP_HEAT_STATE,
    CAP_HEAT_TEMP_REACH,
    CAP_JET_ONOFF,
    CAP_MASSAGE_MODE,
    CAP_MEASURE_POWER,
    CAP_MEASURE_TEMPERATURE,
    CAP_MSG_ONOFF,
    CAP_ONOFF,
    CAP_PUMP_ONOFF,
    CAP_PUMP_STATE,
    CAP_TARGET_TEMPERATURE,
    CAP_TEMP_NOW,
    CAP_THERMOSTAT_MODE,
    COMMON_CAPABILITIES,
    ERROR_MESSAGE_PREFIX,
    EVENT_FILTER_PUMP_CHANGED,
    EVENT_FILTER_PUMP_TURNED_OFF,
    EVENT_FILTER_PUMP_TURNED_ON,
    MODE_HEAT,
    MODE_OFF,
    UPDATE_INTERVAL_SECONDS,
)
from .models import Bounds, CommandKind, ControlPayload, Credentials, RawTelemetry, Snapshot, Unit
from .session import DeviceSession
from .settings import DeviceSettings

_LOGGER = logging.getLogger(__name__)

TEMPERATURE_BOUNDS: dict[Unit, Bounds] = {
    "C": Bounds(min=20, max=40, step=1, decimals=0, unit="C"),
    "F": Bounds(min=68, max=104, step=1, decimals=0, unit="F"),
}


class TelemetryClient(Protocol):
    async def async_fetch_latest(self, did: str, credentials: Credentials) -> RawTelemetry: ...

    async def async_send_control(self, did: str, payload: ControlPayload, credentials: Credentials) -> None: ...

    async def async_fetch_presence(self, did: str, credentials: Credentials) -> bool | None: ...


class CapabilitySink(Protocol):
    """Host-side state the loop publishes into. All calls are synchronous."""

    def set_value(self, capability: str, value: Any) -> None: ...

    def set_bounds(self, capability: str, bounds: Bounds) -> None: ...

    def enable_capability(self, capability: str, enabled: bool) -> None: ...

    def raise_event(self, event: str) -> None: ...

    def set_alarm_message(self, message: str | None) -> None: ...

    def set_available(self, available: bool) -> None: ...


# ----- derived values -----
def temperature_bounds(unit: Unit) -> Bounds:
    return TEMPERATURE_BOUNDS.get(unit, TEMPERATURE_BOUNDS["C"])


def estimate_power(snapshot: Snapshot, settings: DeviceSettings) -> float:
    """Heater draws while heating toward the target; the filter pump while running."""
    heater_active = snapshot.heat_on and not snapshot.heat_reached
    power = settings.heater_power if heater_active else 0
    if snapshot.filter_on:
        power += settings.filter_pump_power
    return power


def thermostat_mode(snapshot: Snapshot) -> str:
    return MODE_HEAT if snapshot.heat_on else MODE_OFF


def error_message(errors: tuple[str, ...]) -> str | None:
    if not errors:
        return None
    return ERROR_MESSAGE_PREFIX + ", ".join(errors)


def _writable(value: Any) -> bool:
    if value is None:
        return False
    return not (isinstance(value, float) and math.isnan(value))


class ReconciliationLoop:
    """Drives one device: at most one cycle or control call in flight."""

    def __init__(self, session: DeviceSession, client: TelemetryClient, sink: CapabilitySink) -> None:
        self.session = session
        self._client = client
        self._sink = sink
        self._lock = asyncio.Lock()
        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Future | None = None
        self._config_error_logged = False
        self.last_snapshot: Snapshot | None = None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    # ----- capabilities -----
    def bootstrap(self) -> None:
        """Expose the common capabilities and those of the bound adapter."""
        for capability in COMMON_CAPABILITIES:
            self._sink.enable_capability(capability, True)
        self._sync_capabilities()

    def _sync_capabilities(self) -> None:
        settings = self.session.settings
        for capability in (CAP_ONOFF, CAP_PUMP_ONOFF):
            self._sink.enable_capability(capability, settings.control_enabled(capability))

        adapter = self.session.adapter
        for capability in sorted(self.session.registry.model_capabilities):
            enabled = capability in adapter.capabilities and settings.control_enabled(capability)
            self._sink.enable_capability(capability, enabled)

    def _credentials_ready(self) -> bool:
        if self.session.credentials.is_complete:
            self._config_error_logged = False
            return True
        if not self._config_error_logged:
            _LOGGER.error("Missing per-device credentials for %s; re-provision this device", self.session.did)
            self._config_error_logged = True
        return False

    # ----- timer entry points -----
    async def async_tick(self) -> Snapshot | None:
        """Presence check plus one cycle; skipped if the device is busy."""
        if self._lock.locked():
            _LOGGER.debug("Previous cycle for %s still running; skipping tick", self.session.did)
            return None
        async with self._lock:
            await self._async_update_presence()
            return await self._async_run_cycle()

    async def async_refresh(self) -> Snapshot | None:
        """One cycle, waiting for any in-flight work on this device first."""
        async with self._lock:
            return await self._async_run_cycle()

    async def _async_update_presence(self) -> bool | None:
        if not self._credentials_ready():
            return None
        try:
            online = await self._client.async_fetch_presence(self.session.did, self.session.credentials)
        except LayzError as e:
            _LOGGER.warning("Failed to update online status for %s: %s", self.session.did, e)
            return None
        if online is not None:
            self._sink.set_available(online)
        return online

    async def _async_run_cycle(self) -> Snapshot | None:
        if not self._credentials_ready():
            return None
        try:
            raw = await self._client.async_fetch_latest(self.session.did, self.session.credentials)
        except LayzConfigurationError as e:
            _LOGGER.error("Refusing to fetch %s: %s", self.session.did, e)
            return None
        except (LayzTransportError, LayzMalformedResponseError) as e:
            _LOGGER.warning("Failed to update device status for %s: %s", self.session.did, e)
            return None

        if not isinstance(raw, Mapping):
            _LOGGER.warning("Failed to update device status for %s: attr field missing", self.session.did)
            return None

        return self._reconcile(raw)

    # ----- one cycle, after the fetch; nothing below suspends -----
    def _reconcile(self, raw: RawTelemetry) -> Snapshot:
        session = self.session

        candidate = session.registry.select_by_signature(raw)
        if candidate is not None:
            session.bind(candidate)
        self._sync_capabilities()

        snapshot = session.adapter.codec.normalize(raw)
        _LOGGER.debug("Normalized snapshot for %s (%s): %s", session.did, session.adapter.id, snapshot)

        transition = session.filter_transition(snapshot.filter_on)
        if transition is not None:
            self._raise_filter_events(transition)

        self._publish(snapshot)
        session.remember_filter(snapshot.filter_on)
        self.last_snapshot = snapshot
        return snapshot

    def _raise_filter_events(self, filter_on: bool) -> None:
        events = (
            EVENT_FILTER_PUMP_CHANGED,
            EVENT_FILTER_PUMP_TURNED_ON if filter_on else EVENT_FILTER_PUMP_TURNED_OFF,
        )
        for event in events:
            try:
                self._sink.raise_event(event)
            except Exception:
                _LOGGER.exception("Trigger %s failed for %s", event, self.session.did)

    def _set(self, capability: str, value: Any) -> None:
        if _writable(value):
            self._sink.set_value(capability, value)

    def _publish(self, snapshot: Snapshot) -> None:
        settings = self.session.settings

        self._sink.set_bounds(CAP_TARGET_TEMPERATURE, temperature_bounds(snapshot.unit))
        if snapshot.heat_on:
            self._set(CAP_TARGET_TEMPERATURE, snapshot.temp_set)
        else:
            self._sink.set_value(CAP_TARGET_TEMPERATURE, None)

        self._set(CAP_MEASURE_TEMPERATURE, snapshot.temp_now)
        self._set(CAP_TEMP_NOW, snapshot.temp_now)
        self._set(CAP_THERMOSTAT_MODE, thermostat_mode(snapshot))

        self._set(CAP_ONOFF, snapshot.power_on)
        self._set(CAP_PUMP_ONOFF, snapshot.filter_on)
        self._set(CAP_MSG_ONOFF, snapshot.wave_on)
        self._set(CAP_HEAT_TEMP_REACH, snapshot.heat_reached)
        self._set(CAP_PUMP_STATE, snapshot.filter_on)
        self._set(CAP_HEAT_STATE, snapshot.heat_on)
        self._set(CAP_MASSAGE_MODE, snapshot.wave_level)
        self._set(CAP_JET_ONOFF, snapshot.jet_on)

        self._set(CAP_MEASURE_POWER, estimate_power(snapshot, settings))

        self._set(CAP_ALARM_GENERIC, snapshot.has_errors)
        self._sink.set_alarm_message(error_message(snapshot.errors))

    # ----- control -----
    async def async_control(self, command: CommandKind, value: Any) -> bool:
        """Encode and send one command, then reconcile. Returns True if sent."""
        async with self._lock:
            if not self._credentials_ready():
                return False

            adapter = self.session.adapter
            payload = adapter.codec.encode(command, value)
            if not payload:
                _LOGGER.debug("Command %s is not supported by %s; nothing sent", command, adapter.id)
                return False

            _LOGGER.debug("Control payload (%s) for %s: %s", command, self.session.did, payload)
            try:
                await self._client.async_send_control(self.session.did, payload, self.session.credentials)
            except LayzError as e:
                _LOGGER.warning("Failed to send %s to %s: %s", command, self.session.did, e)
                return False

            await self._async_run_cycle()
            return True

    async def async_set_thermostat_mode(self, mode: str) -> bool:
        if mode == MODE_HEAT:
            return await self.async_control("heat", True)
        if mode == MODE_OFF:
            return await self.async_control("heat", False)
        _LOGGER.warning("Unsupported thermostat_mode value: %s", mode)
        return False

    async def async_set_filter_pump(self, on: bool) -> bool:
        return await self.async_control("filter", bool(on))

    async def async_apply_settings(self, settings: DeviceSettings | Mapping[str, Any]) -> Snapshot | None:
        """Swap settings, re-evaluate exposed controls and reconcile."""
        if not isinstance(settings, DeviceSettings):
            settings = DeviceSettings.from_mapping(settings)
        async with self._lock:
            self.session.settings = settings
            self._sync_capabilities()
            return await self._async_run_cycle()

    # ----- standalone timer -----
    def async_start(self, interval: float = UPDATE_INTERVAL_SECONDS) -> None:
        """Tick now and then every ``interval`` seconds until stopped."""
        if self._timer is not None and not self._timer.done():
            return
        self._timer = asyncio.get_running_loop().create_task(self._async_timer(interval))

    async def _async_timer(self, interval: float) -> None:
        while True:
            self._inflight = asyncio.ensure_future(self.async_tick())
            # a stop() during the cycle cancels the timer, not the cycle
            try:
                await asyncio.shield(self._inflight)
            except Exception:
                _LOGGER.exception("Unexpected error reconciling %s; retrying next tick", self.session.did)
            await asyncio.sleep(interval)

    async def async_stop(self) -> None:
        """Cancel the timer and let an in-flight cycle finish."""
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        inflight, self._inflight = self._inflight, None
        if inflight is not None and not inflight.done():
            try:
                await inflight
            except Exception:
                _LOGGER.exception("Unexpected error in final cycle for %s", self.session.did)
