"""One bridge invocation: read, normalize, decide, deliver.

Errors are never caught here. Each one aborts the run before the stored
watermark is touched, except for a failed watermark write, which the
coordinator records on the result instead.
"""

from __future__ import annotations

import logging

import aiohttp

from tempbridge._transport import HttpTransport
from tempbridge.client import EwelinkClient, SensorSource
from tempbridge.config import BridgeConfig
from tempbridge.delivery.coordinator import DeliveryCoordinator
from tempbridge.delivery.sink import TandemSink
from tempbridge.ingestion.normalize import extract_reading
from tempbridge.models.delivery import DeliveryResult
from tempbridge.state.policy import decide
from tempbridge.state.store import FileReadingStore

_logger = logging.getLogger(__name__)


async def run_once(
    source: SensorSource,
    coordinator: DeliveryCoordinator,
    *,
    device_id: str,
    threshold: float,
    dry_run: bool = False,
) -> DeliveryResult:
    """Run the pipeline once against explicit collaborators.

    Raises
    ------
    SourceError
        Login or status fetch failed.
    ExtractionError
        The status payload held no usable temperature.
    DeliveryError
        The reading was post-worthy but the sink did not accept it.
    """
    session = await source.authenticate()
    payload = await source.fetch_status(session, device_id)

    reading = extract_reading(payload)
    _logger.info("Device %s reports %s", device_id, reading)

    last = await coordinator.last_reported()
    decision = decide(reading, last, threshold)
    _logger.debug("Decision: post=%s reason=%s", decision.post, decision.reason)

    return await coordinator.deliver(reading, decision, dry_run=dry_run)


async def run_from_config(config: BridgeConfig) -> DeliveryResult:
    """Build the production collaborators from *config* and run once."""
    async with aiohttp.ClientSession() as http_session:
        sink = TandemSink(config.tandem, HttpTransport(http_session))
        coordinator = DeliveryCoordinator(
            sink,
            FileReadingStore(config.state_file),
            signal_id=config.tandem.signal_id,
        )
        async with EwelinkClient(config.ewelink, session=http_session) as client:
            return await run_once(
                client,
                coordinator,
                device_id=config.device_id,
                threshold=config.threshold,
                dry_run=config.dry_run,
            )
