"""Ingestion endpoint that receives delivered readings."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Protocol

from tempbridge._transport import Transport
from tempbridge.config import TandemConfig
from tempbridge.exceptions import BridgeTransportError, DeliveryError
from tempbridge.models.delivery import DeliveryRecord

_logger = logging.getLogger(__name__)

_DETAIL_LIMIT = 500


class DeliverySink(Protocol):
    """Receives readings. Returns only once delivery is confirmed."""

    async def send(self, records: Sequence[DeliveryRecord]) -> None:
        """Deliver *records*, raising :class:`DeliveryError` on any failure."""
        ...


def encode_records(records: Sequence[DeliveryRecord]) -> str:
    """JSON array body; the endpoint requires an array even for one reading."""
    return json.dumps([record.to_wire() for record in records], separators=(",", ":"))


class TandemSink:
    """Posts readings to a Tandem stream ingestion URL with Basic auth."""

    def __init__(self, config: TandemConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def send(self, records: Sequence[DeliveryRecord]) -> None:
        url = self._config.url
        body = encode_records(records)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._config.basic_token}",
        }

        try:
            response = await self._transport.request("POST", url, headers=headers, body=body)
        except BridgeTransportError as exc:
            raise DeliveryError(
                f"Delivery to {url} failed: {exc}",
                detail=str(exc),
                endpoint=url,
            ) from exc

        if not response.ok:
            detail = response.text[:_DETAIL_LIMIT]
            raise DeliveryError(
                f"Delivery endpoint returned HTTP {response.status}: {detail}",
                status_code=response.status,
                detail=detail,
                endpoint=url,
            )

        _logger.debug("Delivered %d record(s) to %s (HTTP %d)", len(records), url, response.status)
