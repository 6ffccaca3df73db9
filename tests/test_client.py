from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from tempbridge._crypto.signing import hmac_sha256_base64
from tempbridge._transport import TransportResponse
from tempbridge.client import EwelinkClient
from tempbridge.config import EwelinkConfig
from tempbridge.exceptions import (
    BridgeError,
    BridgeTransportError,
    SourceAuthenticationError,
    SourceError,
)
from tempbridge.session import Session


@dataclass
class FakeEwelinkCloud:
    """Answers eWeLink v2 requests by URL."""

    home_region: str = "us"
    login_error: int = 0
    status_response: Any = None
    status_http: int = 200
    unreachable: bool = False
    requests: list[dict[str, Any]] = field(default_factory=list)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        self.requests.append(
            {"method": method, "url": url, "headers": dict(headers), "body": body, "params": dict(params or {})}
        )
        if self.unreachable:
            raise BridgeTransportError(f"Request to {url} failed: connection refused", endpoint=url)

        if url.endswith("/v2/user/login"):
            region = url.split("//", 1)[1].split("-apia", 1)[0]
            if region != self.home_region:
                return self._json({"error": 10004, "msg": "user is not in current region", "data": {"region": self.home_region}})
            if self.login_error:
                return self._json({"error": self.login_error, "msg": "wrong account or password", "data": {}})
            return self._json(
                {"error": 0, "msg": "", "data": {"at": "access-1", "rt": "refresh-1", "region": self.home_region, "user": {}}}
            )

        if url.endswith("/v2/device/thing/status"):
            if self.status_http != 200:
                return TransportResponse(status=self.status_http, text="<html>bad gateway</html>")
            if self.status_response is not None:
                return self._json(self.status_response)
            return self._json({"error": 0, "msg": "", "data": {"params": {"temperature": 21.5, "humidity": 40}}})

        raise AssertionError(f"Unexpected URL in fake cloud: {url}")

    @staticmethod
    def _json(body: Any) -> TransportResponse:
        return TransportResponse(status=200, text=json.dumps(body))


@pytest.fixture
def config() -> EwelinkConfig:
    return EwelinkConfig(
        app_id="app-id",
        app_secret="app-secret",
        account="user@example.com",
        password="secret",
        region="us",
        area_code="+1",
    )


@pytest.mark.asyncio
async def test_login_signs_exact_body(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud()

    async with EwelinkClient(config, transport=cloud) as client:
        session = await client.authenticate()

    assert session.model_dump() == {"access_token": "access-1", "region": "us"}

    (login,) = cloud.requests
    assert login["url"] == "https://us-apia.coolkit.cc/v2/user/login"
    assert login["headers"]["X-CK-Appid"] == "app-id"
    assert login["headers"]["Authorization"] == f"Sign {hmac_sha256_base64(login['body'], 'app-secret')}"
    assert json.loads(login["body"]) == {"countryCode": "+1", "password": "secret", "email": "user@example.com"}


@pytest.mark.asyncio
async def test_phone_account_uses_phone_number_field(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud()
    phone_config = EwelinkConfig(
        app_id=config.app_id,
        app_secret=config.app_secret,
        account="+15550100",
        password=config.password,
    )

    async with EwelinkClient(phone_config, transport=cloud) as client:
        await client.authenticate()

    assert json.loads(cloud.requests[0]["body"])["phoneNumber"] == "+15550100"


@pytest.mark.asyncio
async def test_login_follows_region_redirect_once(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud(home_region="eu")

    async with EwelinkClient(config, transport=cloud) as client:
        session = await client.authenticate()
        await client.fetch_status(session, "1000abcdef")

    assert session.region == "eu"
    assert [r["url"] for r in cloud.requests] == [
        "https://us-apia.coolkit.cc/v2/user/login",
        "https://eu-apia.coolkit.cc/v2/user/login",
        "https://eu-apia.coolkit.cc/v2/device/thing/status",
    ]


@pytest.mark.asyncio
async def test_login_rejection_raises_authentication_error(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud(login_error=10001)

    async with EwelinkClient(config, transport=cloud) as client:
        with pytest.raises(SourceAuthenticationError) as exc_info:
            await client.authenticate()

    assert exc_info.value.code == "10001"


@pytest.mark.asyncio
async def test_fetch_status_returns_data_mapping(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud()

    async with EwelinkClient(config, transport=cloud) as client:
        session = await client.authenticate()
        payload = await client.fetch_status(session, "1000abcdef")

    assert payload == {"params": {"temperature": 21.5, "humidity": 40}}
    status = cloud.requests[-1]
    assert status["method"] == "GET"
    assert status["params"] == {"type": "1", "id": "1000abcdef"}
    assert status["headers"]["Authorization"] == "Bearer access-1"


@pytest.mark.asyncio
async def test_expired_token_maps_to_authentication_error(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud(status_response={"error": 402, "msg": "access token expired"})
    session = Session(access_token="stale", region="us")

    async with EwelinkClient(config, transport=cloud) as client:
        with pytest.raises(SourceAuthenticationError, match="thing/status"):
            await client.fetch_status(session, "1000abcdef")


@pytest.mark.asyncio
async def test_device_error_code_raises_source_error(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud(status_response={"error": 405, "msg": "device does not exist"})
    session = Session(access_token="access-1", region="us")

    async with EwelinkClient(config, transport=cloud) as client:
        with pytest.raises(SourceError) as exc_info:
            await client.fetch_status(session, "missing")

    assert not isinstance(exc_info.value, SourceAuthenticationError)
    assert exc_info.value.code == "405"


@pytest.mark.asyncio
async def test_http_error_raises_source_error(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud(status_http=502)
    session = Session(access_token="access-1", region="us")

    async with EwelinkClient(config, transport=cloud) as client:
        with pytest.raises(SourceError, match="HTTP 502"):
            await client.fetch_status(session, "1000abcdef")


@pytest.mark.asyncio
async def test_unreachable_cloud_raises_source_error(config: EwelinkConfig) -> None:
    cloud = FakeEwelinkCloud(unreachable=True)

    async with EwelinkClient(config, transport=cloud) as client:
        with pytest.raises(SourceError) as exc_info:
            await client.authenticate()

    assert isinstance(exc_info.value.__cause__, BridgeTransportError)


@pytest.mark.asyncio
async def test_client_requires_context_manager(config: EwelinkConfig) -> None:
    client = EwelinkClient(config)

    with pytest.raises(BridgeError, match="not initialized"):
        await client.authenticate()
