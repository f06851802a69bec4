# All network I/O + exception mapping for the Gizwits cloud.

from __future__ import annotations

import asyncio
import json
from typing import Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from .const import (
    AUTH_ERROR_CODES,
    HEADER_APP_ID,
    HEADER_USER_TOKEN,
    LOGGER,
    REQUEST_TIMEOUT_SECONDS,
)
from .models import ControlPayload, Credentials, RawTelemetry


# ----- Exceptions used by the reconciliation loop -----
class LayzError(Exception):
    pass


class LayzConfigurationError(LayzError):
    pass  # token / base url / app id missing


class LayzTransportError(LayzError):
    pass  # timeouts, connection issues, non-2xx


class LayzAuthError(LayzTransportError):
    pass  # 401/403 or token error codes


class LayzServerError(LayzTransportError):
    pass  # 5xx


class LayzMalformedResponseError(LayzError):
    pass  # invalid JSON or expected field absent


class GizwitsClient:
    """Telemetry, control and presence calls for one account's devices."""

    def __init__(self, session: ClientSession, timeout: float = REQUEST_TIMEOUT_SECONDS) -> None:
        self._session = session
        self._timeout = ClientTimeout(total=timeout)

    def _log_api_call(
        self,
        method: str,
        url: str,
        payload: Any = None,
        headers: dict | None = None,
        response_status: int | None = None,
        response_text: str | None = None,
    ) -> None:
        safe_headers = dict(headers or {})
        if HEADER_USER_TOKEN in safe_headers:
            safe_headers[HEADER_USER_TOKEN] = "[REDACTED]"

        if response_status is None:
            LOGGER.debug("Gizwits API call: %s %s headers=%s body=%s", method, url, safe_headers, payload)
            return

        # Truncate very long responses
        text = response_text or ""
        if len(text) > 1000:
            text = text[:1000] + "..."
        LOGGER.debug("Gizwits API response: %s %s status=%s body=%s", method, url, response_status, text)

    async def _request(
        self,
        method: str,
        path: str,
        credentials: Credentials,
        payload: Any = None,
    ) -> Any:
        if not credentials.is_complete:
            raise LayzConfigurationError("Missing token, base url or app id in credential store")

        url = f"{credentials.base_url}{path}"
        headers = _build_headers(credentials)
        self._log_api_call(method, url, payload, headers)

        try:
            async with self._session.request(
                method, url, json=payload, headers=headers, timeout=self._timeout
            ) as resp:
                try:
                    text = await resp.text()
                except UnicodeDecodeError as e:
                    if 200 <= resp.status < 300:
                        raise LayzMalformedResponseError(f"Undecodable body from {path}") from e
                    text = ""  # status mapping below still applies
                self._log_api_call(method, url, response_status=resp.status, response_text=text)

                if resp.status in (401, 403):
                    raise LayzAuthError(f"{method} {path} unauthorized ({resp.status})")
                if 500 <= resp.status < 600:
                    raise LayzServerError(f"Server error during {method} {path}: {resp.status}")
                if resp.status == 400 and _error_code(text) in AUTH_ERROR_CODES:
                    raise LayzAuthError(f"{method} {path} rejected token: {text[:200]}")
                if not 200 <= resp.status < 300:
                    raise LayzTransportError(
                        f"Unexpected status {resp.status} for {method} {path}: {text[:200]}"
                    )

                if not text:
                    return None
                try:
                    return json.loads(text)
                except ValueError as e:
                    # Server said 2xx but body isn't JSON
                    raise LayzMalformedResponseError(f"Invalid JSON from {path}: {text[:200]}") from e

        except asyncio.TimeoutError as e:
            raise LayzTransportError(f"{method} {path} timeout") from e
        except ClientError as e:
            raise LayzTransportError(f"{method} {path} connection error: {e}") from e

    # ---------- Telemetry ----------
    async def async_fetch_latest(self, did: str, credentials: Credentials) -> RawTelemetry:
        """Latest attribute snapshot reported by the appliance."""
        data = await self._request("GET", f"/app/devdata/{did}/latest", credentials)
        attr = data.get("attr") if isinstance(data, dict) else None
        if not isinstance(attr, dict):
            raise LayzMalformedResponseError("attr field missing in response data")
        return attr

    # ---------- Commands ----------
    async def async_send_control(self, did: str, payload: ControlPayload, credentials: Credentials) -> None:
        await self._request("POST", f"/app/control/{did}", credentials, {"attrs": dict(payload)})

    # ---------- Presence ----------
    async def async_get_bindings(self, credentials: Credentials) -> list[dict]:
        """Devices bound to the account behind these credentials."""
        data = await self._request("GET", "/app/bindings", credentials)
        devices = data.get("devices") if isinstance(data, dict) else None
        if not isinstance(devices, list):
            raise LayzMalformedResponseError("devices field missing in bindings response")
        return [d for d in devices if isinstance(d, dict)]

    async def async_fetch_presence(self, did: str, credentials: Credentials) -> bool | None:
        """True/False from the bindings list; None when the device isn't listed."""
        for device in await self.async_get_bindings(credentials):
            if device.get("did") == did:
                return bool(device.get("is_online"))
        LOGGER.debug("Device with did %s not found in bindings", did)
        return None


# --- Helper functions ---


def _build_headers(credentials: Credentials) -> dict[str, str]:
    return {
        HEADER_APP_ID: credentials.app_id or "",
        HEADER_USER_TOKEN: credentials.token or "",
        "Content-Type": "application/json; charset=UTF-8",
        "Accept": "application/json",
    }


def _error_code(text: str) -> int | None:
    """Pull Gizwits' numeric error_code out of an error body, if any."""
    try:
        body = json.loads(text)
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    try:
        return int(body.get("error_code"))
    except (TypeError, ValueError):
        return None
