"""Async client for the eWeLink cloud, used as the bridge's sensor source."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from tempbridge._api._common import decode_envelope
from tempbridge._api.device import build_thing_status_params, parse_thing_status
from tempbridge._api.login import build_login_request, parse_login_response, redirect_region
from tempbridge._constants import LOGIN_ENDPOINT, THING_STATUS_ENDPOINT, base_url_for_region
from tempbridge._redact import redact_for_log
from tempbridge._transport import HttpTransport, Transport, TransportResponse
from tempbridge.config import EwelinkConfig
from tempbridge.exceptions import BridgeConfigError, BridgeError, BridgeTransportError, SourceError
from tempbridge.session import Session

_logger = logging.getLogger(__name__)


class SensorSource(Protocol):
    """Anything that can authenticate and return a raw device status."""

    async def authenticate(self) -> Session:
        ...

    async def fetch_status(self, session: Session, device_id: str) -> Mapping[str, Any]:
        ...


class EwelinkClient:
    """Async client for the eWeLink v2 API.

    Usage::

        async with EwelinkClient(config) as client:
            session = await client.authenticate()
            payload = await client.fetch_status(session, "1000abcdef")
    """

    def __init__(
        self,
        config: EwelinkConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> EwelinkClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise BridgeError("Client not initialized. Use 'async with EwelinkClient(...) as client:'")
        return self._transport

    def _url(self, region: str, endpoint: str) -> str:
        try:
            return f"{base_url_for_region(region)}{endpoint}"
        except ValueError as exc:
            raise BridgeConfigError(str(exc)) from exc

    async def _send(
        self,
        method: str,
        url: str,
        *,
        endpoint: str,
        headers: Mapping[str, str],
        body: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        transport = self._require_transport()
        try:
            response: TransportResponse = await transport.request(
                method,
                url,
                headers=headers,
                body=body,
                params=params,
            )
        except BridgeTransportError as exc:
            raise SourceError(str(exc), code="transport", endpoint=endpoint) from exc
        decoded = decode_envelope(response, endpoint=endpoint)
        _logger.debug("%s response=%s", endpoint, redact_for_log(decoded))
        return decoded

    async def _login(self, region: str) -> dict[str, Any]:
        body, headers = build_login_request(self._config)
        return await self._send(
            "POST",
            self._url(region, LOGIN_ENDPOINT),
            endpoint=LOGIN_ENDPOINT,
            headers=headers,
            body=body,
        )

    # ------------------------------------------------------------------
    # Sensor source
    # ------------------------------------------------------------------

    async def authenticate(self) -> Session:
        """Log in and return a session bound to the account's region.

        When the server reports that the account lives in another region,
        the login is repeated once against that region.
        """
        region = self._config.region
        response = await self._login(region)

        redirect = redirect_region(response)
        if redirect is not None and redirect != region:
            _logger.info("Account lives in region %s, retrying login there", redirect)
            region = redirect
            response = await self._login(region)

        token = parse_login_response(response, region)
        _logger.debug("Logged in to eWeLink region=%s", token.region)
        return Session(
            access_token=token.access_token,
            region=token.region,
        )

    async def fetch_status(self, session: Session, device_id: str) -> dict[str, Any]:
        """Return the raw status payload of *device_id*."""
        headers = {
            "Content-Type": "application/json",
            "X-CK-Appid": self._config.app_id,
            "Authorization": session.bearer(),
        }
        response = await self._send(
            "GET",
            self._url(session.region, THING_STATUS_ENDPOINT),
            endpoint=THING_STATUS_ENDPOINT,
            headers=headers,
            params=build_thing_status_params(device_id),
        )
        return parse_thing_status(response)
