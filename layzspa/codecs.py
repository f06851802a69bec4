"""Per-model attribute codecs.

Each model gets a pure ``normalize`` (raw telemetry -> Snapshot) and a pure
``encode`` (command -> control payload). Nothing in here raises on missing
or unexpected vendor data; every field has one explicit fallback.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .models import CommandKind, ControlPayload, RawTelemetry, Snapshot, Unit, WaveLevel

Normalizer = Callable[[RawTelemetry], Snapshot]
Encoder = Callable[[CommandKind, Any], ControlPayload]


@dataclass(slots=True, frozen=True)
class AttributeCodec:
    normalize: Normalizer
    encode: Encoder


# ----- shared helpers -----
def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _number(attr: RawTelemetry, key: str) -> float | None:
    value = attr.get(key)
    return value if _is_number(value) else None


def _flag_equals(attr: RawTelemetry, key: str, on_value: int) -> bool:
    """True only when the field holds exactly the model's ON code."""
    value = attr.get(key)
    return _is_number(value) and value == on_value


def _flag_at_least(attr: RawTelemetry, key: str, threshold: int = 1) -> bool:
    """For fields that report intermediate states (1, 3, 4...) while active."""
    value = attr.get(key)
    return _is_number(value) and value >= threshold


def _scan_errors(attr: RawTelemetry, keys: Iterable[tuple[str, str]]) -> tuple[str, ...]:
    """Return the normalized code of every flag that is set, in the given order."""
    return tuple(code for key, code in keys if _flag_equals(attr, key, 1))


def _encode_toggle(table: dict[str, tuple[str, int, int]], command: str, value: Any) -> ControlPayload:
    attribute, on_value, off_value = table[command]
    return {attribute: on_value if value else off_value}


def _encode_temperature(attribute: str, value: Any) -> ControlPayload:
    if not _is_number(value):
        return {}
    return {attribute: int(round(value))}


# ----- Airjet -----
# Airjet reports temp_now / temp_set and plain 0/1 switches.
AIRJET_ERROR_KEYS = tuple((f"system_err{i}", f"E{i:02d}") for i in range(1, 10))
AIRJET_FAHRENHEIT = "华氏"

AIRJET_TOGGLES: dict[str, tuple[str, int, int]] = {
    "power": ("power", 1, 0),
    "heat": ("heat_power", 1, 0),
    "filter": ("filter_power", 1, 0),
    "wave": ("wave_power", 1, 0),
}


def normalize_airjet(attr: RawTelemetry) -> Snapshot:
    attr = attr or {}
    unit: Unit = "F" if attr.get("temp_set_unit") == AIRJET_FAHRENHEIT else "C"
    return Snapshot(
        power_on=_flag_equals(attr, "power", 1),
        heat_on=_flag_equals(attr, "heat_power", 1),
        filter_on=_flag_equals(attr, "filter_power", 1),
        wave_on=_flag_equals(attr, "wave_power", 1),
        temp_now=_number(attr, "temp_now"),
        temp_set=_number(attr, "temp_set"),
        unit=unit,
        heat_reached=_flag_equals(attr, "heat_temp_reach", 1),
        errors=_scan_errors(attr, AIRJET_ERROR_KEYS),
    )


def encode_airjet(command: CommandKind, value: Any) -> ControlPayload:
    if command in AIRJET_TOGGLES:
        return _encode_toggle(AIRJET_TOGGLES, command, value)
    if command == "tempSet":
        return _encode_temperature("temp_set", value)
    # no massage levels or jets on this model
    return {}


# ----- Hydrojet Pro -----
# Hydrojet reports Tnow / Tset, filter as 0/2, heat as 1/3/4... while active,
# and massage intensity through the numeric "wave" field.
HYDROJET_ERROR_KEYS = tuple((f"E{i:02d}", f"E{i:02d}") for i in range(1, 33))
HYDROJET_FILTER_ON = 2
HYDROJET_WAVE_CODES: dict[WaveLevel, int] = {"off": 0, "low": 42, "high": 100}
HYDROJET_WAVE_LEVELS: dict[int, WaveLevel] = {42: "low", 100: "high"}

HYDROJET_TOGGLES: dict[str, tuple[str, int, int]] = {
    "power": ("power", 1, 0),
    # status later reads 3/4/... while heating; 1 is what turns it on
    "heat": ("heat", 1, 0),
    "filter": ("filter", HYDROJET_FILTER_ON, 0),
    # legacy bubble toggle
    "wave": ("wave", 1, 0),
    "jet": ("jet", 1, 0),
}


def _hydrojet_unit(attr: RawTelemetry) -> Unit:
    value = attr.get("Tunit")
    if not _is_number(value):
        return "C"
    return "C" if value == 1 else "F"


def _hydrojet_wave_level(attr: RawTelemetry) -> WaveLevel:
    value = attr.get("wave")
    if not _is_number(value):
        return "off"
    return HYDROJET_WAVE_LEVELS.get(value, "off")


def normalize_hydrojet(attr: RawTelemetry) -> Snapshot:
    attr = attr or {}
    temp_now = _number(attr, "Tnow")
    temp_set = _number(attr, "Tset")
    # no reach flag on this model
    heat_reached = temp_now is not None and temp_set is not None and temp_now >= temp_set
    return Snapshot(
        power_on=_flag_equals(attr, "power", 1),
        heat_on=_flag_at_least(attr, "heat", 1),
        filter_on=_flag_equals(attr, "filter", HYDROJET_FILTER_ON),
        wave_on=_flag_equals(attr, "wave", 1),
        temp_now=temp_now,
        temp_set=temp_set,
        unit=_hydrojet_unit(attr),
        heat_reached=heat_reached,
        wave_level=_hydrojet_wave_level(attr),
        jet_on=_flag_equals(attr, "jet", 1),
        errors=_scan_errors(attr, HYDROJET_ERROR_KEYS),
    )


def encode_hydrojet(command: CommandKind, value: Any) -> ControlPayload:
    if command in HYDROJET_TOGGLES:
        return _encode_toggle(HYDROJET_TOGGLES, command, value)
    if command == "waveLevel":
        return {"wave": HYDROJET_WAVE_CODES.get(str(value), HYDROJET_WAVE_CODES["off"])}
    if command == "tempSet":
        return _encode_temperature("Tset", value)
    return {}


AIRJET_CODEC = AttributeCodec(normalize=normalize_airjet, encode=encode_airjet)
HYDROJET_CODEC = AttributeCodec(normalize=normalize_hydrojet, encode=encode_hydrojet)
