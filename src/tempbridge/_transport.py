"""HTTP transport shared by the sensor client and the delivery sink."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from tempbridge._constants import USER_AGENT
from tempbridge._redact import redact_for_log
from tempbridge.exceptions import BridgeTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status and body of a completed HTTP exchange."""

    status: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self, *, endpoint: str = "") -> Any:
        """Decode the body as JSON, raising :class:`BridgeTransportError` otherwise."""
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise BridgeTransportError(
                f"Invalid JSON from {endpoint}: {self.text[:200]}",
                status_code=self.status,
                endpoint=endpoint,
            ) from exc


class Transport(Protocol):
    """Structural transport interface used by the client and the sink.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport.

    The body is sent exactly as given so callers can sign the bytes on the
    wire. Only connection failures and timeouts raise; any HTTP status is returned
    to the caller for interpretation.
    """

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        body: str | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        all_headers: dict[str, str] = {"user-agent": USER_AGENT, **headers}

        _logger.debug(
            "%s %s params=%s headers=%s",
            method,
            url,
            redact_for_log(dict(params or {})),
            redact_for_log(all_headers),
        )

        try:
            async with self._http.request(
                method,
                url,
                data=body.encode("utf-8") if body is not None else None,
                headers=all_headers,
                params=dict(params) if params else None,
            ) as resp:
                # Undecodable bytes are replaced; the status still reaches the caller.
                text = await resp.text(errors="replace")
        except aiohttp.ClientError as exc:
            raise BridgeTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc
        except TimeoutError as exc:
            raise BridgeTransportError(
                f"Request to {url} timed out",
                endpoint=url,
            ) from exc

        _logger.debug("%s %s -> HTTP %d (%d bytes)", method, url, resp.status, len(text))
        return TransportResponse(status=resp.status, text=text)
