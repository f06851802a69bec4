"""Shared test fixtures for layzspa tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from layzspa.models import Bounds, Credentials
from layzspa.reconcile import ReconciliationLoop
from layzspa.session import DeviceSession


class RecordingSink:
    """In-memory CapabilitySink that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.values: dict[str, Any] = {}
        self.bounds: dict[str, Bounds] = {}
        self.enabled: dict[str, bool] = {}
        self.events: list[str] = []
        self.alarm_message: str | None = "untouched"
        self.available: bool | None = None

    def set_value(self, capability: str, value: Any) -> None:
        self.calls.append(("set_value", capability, value))
        self.values[capability] = value

    def set_bounds(self, capability: str, bounds: Bounds) -> None:
        self.calls.append(("set_bounds", capability, bounds))
        self.bounds[capability] = bounds

    def enable_capability(self, capability: str, enabled: bool) -> None:
        self.calls.append(("enable_capability", capability, enabled))
        self.enabled[capability] = enabled

    def raise_event(self, event: str) -> None:
        self.calls.append(("raise_event", event))
        self.events.append(event)

    def set_alarm_message(self, message: str | None) -> None:
        self.calls.append(("set_alarm_message", message))
        self.alarm_message = message

    def set_available(self, available: bool) -> None:
        self.calls.append(("set_available", available))
        self.available = available

    def published(self) -> list[tuple]:
        """Calls that push state outward (everything but capability toggles)."""
        return [c for c in self.calls if c[0] != "enable_capability"]


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(token="tok", base_url="https://euapi.gizwits.com", app_id="app")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def client() -> MagicMock:
    """TelemetryClient double; tests set fetch_latest's return_value."""
    mock = MagicMock()
    mock.async_fetch_latest = AsyncMock(return_value={})
    mock.async_send_control = AsyncMock(return_value=None)
    mock.async_fetch_presence = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def session(credentials: Credentials) -> DeviceSession:
    return DeviceSession.create("did-1", product_name="Airjet", credentials=credentials)


@pytest.fixture
def engine(session: DeviceSession, client: MagicMock, sink: RecordingSink) -> ReconciliationLoop:
    return ReconciliationLoop(session, client, sink)


AIRJET_RAW = {
    "power": 1,
    "heat_power": 1,
    "filter_power": 1,
    "wave_power": 0,
    "temp_now": 36,
    "temp_set": 38,
    "temp_set_unit": "摄氏",
    "heat_temp_reach": 0,
}

HYDROJET_RAW = {
    "power": 1,
    "heat": 3,
    "filter": 2,
    "wave": 42,
    "jet": 1,
    "Tnow": 36,
    "Tset": 38,
    "Tunit": 1,
}
