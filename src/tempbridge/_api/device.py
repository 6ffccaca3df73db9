"""Device status endpoint.

Endpoint:
  - /v2/device/thing/status
"""

from __future__ import annotations

from typing import Any

from tempbridge._api._common import raise_for_code, response_data
from tempbridge._constants import THING_STATUS_ENDPOINT, THING_TYPE_DEVICE


def build_thing_status_params(device_id: str) -> dict[str, str]:
    device = device_id.strip()
    if not device:
        raise ValueError("device_id must be non-empty")
    return {"type": str(THING_TYPE_DEVICE), "id": device}


def parse_thing_status(body: dict[str, Any]) -> dict[str, Any]:
    """Return the ``data`` mapping of a thing-status response.

    The payload shape is device-specific; usually ``{"params": {...}}``.
    """
    raise_for_code(body, endpoint=THING_STATUS_ENDPOINT)
    return response_data(body)
