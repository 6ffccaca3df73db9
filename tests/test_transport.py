from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp
import pytest
from aiohttp import test_utils, web

from tempbridge._api._common import decode_envelope
from tempbridge._transport import HttpTransport
from tempbridge.config import TandemConfig
from tempbridge.delivery.coordinator import DeliveryCoordinator
from tempbridge.delivery.sink import TandemSink
from tempbridge.exceptions import BridgeTransportError, DeliveryError, SourceError
from tempbridge.state.policy import decide
from tempbridge.state.store import MemoryReadingStore


def _tandem_config(server: test_utils.TestServer) -> TandemConfig:
    return TandemConfig(url=str(server.make_url("/ingest")), basic_token="dG9rZW4=", signal_id="sig-1")


def _app(handler: Any) -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/ingest", handler)
    return app


@pytest.mark.asyncio
async def test_sink_posts_json_array_over_http() -> None:
    received: list[dict[str, Any]] = []

    async def handler(request: web.Request) -> web.Response:
        received.append({"headers": dict(request.headers), "body": await request.json()})
        return web.Response(status=201)

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as http:
        store = MemoryReadingStore(initial=22.0)
        sink = TandemSink(_tandem_config(server), HttpTransport(http))
        coordinator = DeliveryCoordinator(sink, store, signal_id="sig-1")

        result = await coordinator.deliver(25.0, decide(25.0, 22.0, 0.2))

    assert result.delivered is True
    assert store.value == 25.0
    (request,) = received
    assert request["headers"]["Authorization"] == "Basic dG9rZW4="
    assert request["body"][0]["id"] == "sig-1"
    assert request["body"][0]["temp"] == 25.0


@pytest.mark.asyncio
async def test_undecodable_error_body_still_raises_delivery_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(status=500, body=b"\xff\xfe bad", content_type="text/plain")

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as http:
        store = MemoryReadingStore(initial=22.0)
        sink = TandemSink(_tandem_config(server), HttpTransport(http))
        coordinator = DeliveryCoordinator(sink, store, signal_id="sig-1")

        with pytest.raises(DeliveryError) as exc_info:
            await coordinator.deliver(25.0, decide(25.0, 22.0, 0.2))

    assert exc_info.value.status_code == 500
    assert "bad" in exc_info.value.detail
    assert store.value == 22.0
    assert store.writes == 0


@pytest.mark.asyncio
async def test_session_timeout_raises_delivery_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        await asyncio.sleep(1)
        return web.Response(status=200)

    timeout = aiohttp.ClientTimeout(total=0.1)
    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession(timeout=timeout) as http:
        store = MemoryReadingStore(initial=22.0)
        sink = TandemSink(_tandem_config(server), HttpTransport(http))
        coordinator = DeliveryCoordinator(sink, store, signal_id="sig-1")

        with pytest.raises(DeliveryError) as exc_info:
            await coordinator.deliver(25.0, decide(25.0, 22.0, 0.2))

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, BridgeTransportError)
    assert store.value == 22.0


@pytest.mark.asyncio
async def test_undecodable_success_body_maps_to_source_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        body = b"\xff" + json.dumps({"error": 0}).encode()
        return web.Response(status=200, body=body, content_type="application/json")

    async with test_utils.TestServer(_app(handler)) as server, aiohttp.ClientSession() as http:
        response = await HttpTransport(http).request("GET", str(server.make_url("/ingest")), headers={})

    assert response.status == 200
    with pytest.raises(SourceError) as exc_info:
        decode_envelope(response, endpoint="/v2/device/thing/status")
    assert exc_info.value.code == "invalid_json"
