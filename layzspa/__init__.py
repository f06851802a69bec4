"""Lay-Z-Spa (Gizwits cloud) device normalization and reconciliation."""

from __future__ import annotations

from .api import (
    GizwitsClient,
    LayzAuthError,
    LayzConfigurationError,
    LayzError,
    LayzMalformedResponseError,
    LayzServerError,
    LayzTransportError,
)
from .codecs import AttributeCodec
from .models import Bounds, Credentials, Snapshot
from .reconcile import CapabilitySink, ReconciliationLoop, TelemetryClient
from .registry import MODEL_REGISTRY, AdapterDescriptor, AdapterRegistry, default_registry
from .session import DeviceSession
from .settings import SETTINGS_SCHEMA, DeviceSettings

__all__ = [
    "AdapterDescriptor",
    "AdapterRegistry",
    "AttributeCodec",
    "Bounds",
    "CapabilitySink",
    "Credentials",
    "DeviceSession",
    "DeviceSettings",
    "GizwitsClient",
    "LayzAuthError",
    "LayzConfigurationError",
    "LayzError",
    "LayzMalformedResponseError",
    "LayzServerError",
    "LayzTransportError",
    "MODEL_REGISTRY",
    "ReconciliationLoop",
    "SETTINGS_SCHEMA",
    "Snapshot",
    "TelemetryClient",
    "default_registry",
]
