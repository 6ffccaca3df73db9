"""Shared helpers for eWeLink endpoint modules.

This module centralizes the repeated patterns:
- turning HTTP failures into :class:`SourceError`
- decoding the ``{"error", "msg", "data"}`` envelope
- mapping API error codes

It is internal to tempbridge and may change at any time.
"""

from __future__ import annotations

from typing import Any

from tempbridge._constants import AUTH_ERROR_CODES
from tempbridge._transport import TransportResponse
from tempbridge.exceptions import BridgeTransportError, SourceAuthenticationError, SourceError


def decode_envelope(response: TransportResponse, *, endpoint: str) -> dict[str, Any]:
    """Return the decoded JSON body, raising :class:`SourceError` on HTTP failures."""
    if response.status != 200:
        raise SourceError(
            f"HTTP {response.status} from {endpoint}: {response.text[:200]}",
            code=str(response.status),
            endpoint=endpoint,
        )
    try:
        body = response.json(endpoint=endpoint)
    except BridgeTransportError as exc:
        raise SourceError(str(exc), code="invalid_json", endpoint=endpoint) from exc
    if not isinstance(body, dict):
        raise SourceError(
            f"Unexpected response shape from {endpoint}: {type(body).__name__}",
            code="invalid_shape",
            endpoint=endpoint,
        )
    return body


def error_code(body: dict[str, Any]) -> str:
    return str(body.get("error", ""))


def raise_for_code(body: dict[str, Any], *, endpoint: str) -> None:
    """Raise the matching :class:`SourceError` unless ``error`` is ``0``."""
    code = error_code(body)
    if code == "0":
        return
    message = str(body.get("msg", ""))
    if code in AUTH_ERROR_CODES:
        raise SourceAuthenticationError(
            f"{endpoint} rejected credentials: error={code} msg={message}",
            code=code,
            endpoint=endpoint,
        )
    raise SourceError(
        f"{endpoint} failed: error={code} msg={message}",
        code=code,
        endpoint=endpoint,
    )


def response_data(body: dict[str, Any]) -> dict[str, Any]:
    data = body.get("data")
    return data if isinstance(data, dict) else {}
