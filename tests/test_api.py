"""Tests for layzspa.api: request shape and status mapping."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import MagicMock

import pytest
from aiohttp import ClientError

from layzspa.api import (
    GizwitsClient,
    LayzAuthError,
    LayzConfigurationError,
    LayzMalformedResponseError,
    LayzServerError,
    LayzTransportError,
)
from layzspa.models import Credentials


class FakeResponse:
    def __init__(self, status: int, body) -> None:
        self.status = status
        self._text = body if isinstance(body, str) else json.dumps(body)

    async def text(self) -> str:
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def _session(status: int = 200, body=None) -> MagicMock:
    session = MagicMock()
    session.request.return_value = FakeResponse(status, body if body is not None else {})
    return session


class TestFetchLatest:
    async def test_returns_attr_and_sends_headers(self, credentials):
        session = _session(body={"did": "d1", "attr": {"power": 1}})
        client = GizwitsClient(session)

        attr = await client.async_fetch_latest("d1", credentials)

        assert attr == {"power": 1}
        args, kwargs = session.request.call_args
        assert args == ("GET", "https://euapi.gizwits.com/app/devdata/d1/latest")
        assert kwargs["headers"]["X-Gizwits-Application-Id"] == "app"
        assert kwargs["headers"]["X-Gizwits-User-token"] == "tok"

    async def test_missing_attr_is_malformed(self, credentials):
        client = GizwitsClient(_session(body={"did": "d1"}))
        with pytest.raises(LayzMalformedResponseError, match="attr"):
            await client.async_fetch_latest("d1", credentials)

    async def test_invalid_json_is_malformed(self, credentials):
        client = GizwitsClient(_session(body="<html>oops</html>"))
        with pytest.raises(LayzMalformedResponseError):
            await client.async_fetch_latest("d1", credentials)

    @pytest.mark.parametrize("missing", ["token", "base_url", "app_id"])
    async def test_incomplete_credentials_refused_without_io(self, credentials, missing):
        session = _session()
        client = GizwitsClient(session)
        partial = Credentials(**{**{"token": "t", "base_url": "https://x", "app_id": "a"}, missing: None})

        with pytest.raises(LayzConfigurationError):
            await client.async_fetch_latest("d1", partial)
        session.request.assert_not_called()


class TestStatusMapping:
    @pytest.mark.parametrize(
        "status, body, error",
        [
            (401, {}, LayzAuthError),
            (403, {}, LayzAuthError),
            (400, {"error_code": 9004, "error_message": "token invalid!"}, LayzAuthError),
            (400, {"error_code": 9017}, LayzTransportError),
            (404, "not found", LayzTransportError),
            (502, "bad gateway", LayzServerError),
        ],
    )
    async def test_error_statuses(self, credentials, status, body, error):
        client = GizwitsClient(_session(status, body))
        with pytest.raises(error):
            await client.async_fetch_latest("d1", credentials)

    async def test_auth_and_server_errors_are_transport_errors(self):
        assert issubclass(LayzAuthError, LayzTransportError)
        assert issubclass(LayzServerError, LayzTransportError)

    @pytest.mark.parametrize("exc", [ClientError("reset"), asyncio.TimeoutError()])
    async def test_network_failures(self, credentials, exc):
        session = MagicMock()
        session.request.side_effect = exc
        client = GizwitsClient(session)
        with pytest.raises(LayzTransportError):
            await client.async_fetch_latest("d1", credentials)


class TestSendControl:
    async def test_wraps_payload_in_attrs(self, credentials):
        session = _session(body="")
        client = GizwitsClient(session)

        await client.async_send_control("d1", {"filter": 2}, credentials)

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://euapi.gizwits.com/app/control/d1")
        assert kwargs["json"] == {"attrs": {"filter": 2}}


class TestPresence:
    async def test_online_and_offline(self, credentials):
        body = {"devices": [{"did": "a", "is_online": True}, {"did": "b", "is_online": False}]}
        client = GizwitsClient(_session(body=body))
        assert await client.async_fetch_presence("a", credentials) is True

        client = GizwitsClient(_session(body=body))
        assert await client.async_fetch_presence("b", credentials) is False

    async def test_unlisted_device_is_unknown(self, credentials):
        client = GizwitsClient(_session(body={"devices": [{"did": "a", "is_online": True}]}))
        assert await client.async_fetch_presence("zzz", credentials) is None

    async def test_bindings_without_devices_is_malformed(self, credentials):
        client = GizwitsClient(_session(body={"error": "x"}))
        with pytest.raises(LayzMalformedResponseError):
            await client.async_get_bindings(credentials)

    async def test_bindings_request(self, credentials):
        session = _session(body={"devices": []})
        client = GizwitsClient(session)
        assert await client.async_get_bindings(credentials) == []
        args, _ = session.request.call_args
        assert args == ("GET", "https://euapi.gizwits.com/app/bindings")


class UndecodableResponse(FakeResponse):
    async def text(self) -> str:
        return b'{"attr": {"power": "\xff\xfe"}}'.decode("utf-8")


class TestUndecodableBody:
    async def test_success_status_is_malformed(self, credentials):
        session = MagicMock()
        session.request.return_value = UndecodableResponse(200, "")
        client = GizwitsClient(session)
        with pytest.raises(LayzMalformedResponseError):
            await client.async_fetch_latest("d1", credentials)

    async def test_error_status_still_mapped(self, credentials):
        session = MagicMock()
        session.request.return_value = UndecodableResponse(502, "")
        client = GizwitsClient(session)
        with pytest.raises(LayzServerError):
            await client.async_fetch_latest("d1", credentials)
