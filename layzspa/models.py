# layzspa/models.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

Unit = Literal["C", "F"]
WaveLevel = Literal["off", "low", "high"]
CommandKind = Literal["power", "heat", "filter", "wave", "waveLevel", "jet", "tempSet"]

# Vendor attribute name -> integer flag, number or string
RawTelemetry = Mapping[str, Any]
# Vendor attributes for exactly one command, sent as {"attrs": payload}
ControlPayload = dict[str, Any]

WAVE_LEVELS: tuple[WaveLevel, ...] = ("off", "low", "high")


@dataclass(slots=True, frozen=True)
class Snapshot:
    """Canonical device state for one reconciliation cycle."""

    power_on: bool = False
    heat_on: bool = False
    filter_on: bool = False
    wave_on: bool = False
    temp_now: float | None = None
    temp_set: float | None = None
    unit: Unit = "C"
    heat_reached: bool = False
    wave_level: WaveLevel = "off"
    jet_on: bool = False
    errors: tuple[str, ...] = ()

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(slots=True, frozen=True)
class Credentials:
    token: str | None = None
    base_url: str | None = None
    app_id: str | None = None
    uid: str | None = None
    expire_at: int | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.token and self.base_url and self.app_id)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Credentials:
        """Build from a credential store record; accepts camelCase keys too."""
        data = data or {}
        base_url = data.get("base_url") or data.get("baseUrl")
        return cls(
            token=data.get("token"),
            base_url=str(base_url).rstrip("/") if base_url else None,
            app_id=data.get("app_id") or data.get("appId"),
            uid=data.get("uid"),
            expire_at=data.get("expire_at"),
        )


@dataclass(slots=True, frozen=True)
class Bounds:
    min: int
    max: int
    step: int
    decimals: int
    unit: Unit
