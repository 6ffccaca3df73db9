"""Conditional delivery and watermark update.

The coordinator is the only owner of the last-reported value. It reads it
once per run and writes it at most once, strictly after the sink confirmed
the delivery. A failed delivery leaves the watermark where it was so the
next scheduled run reports the same value again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from tempbridge.delivery.sink import DeliverySink
from tempbridge.exceptions import PersistenceError
from tempbridge.models.decision import Decision
from tempbridge.models.delivery import DeliveryOutcome, DeliveryRecord, DeliveryResult
from tempbridge.state.store import ReadingStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DeliveryCoordinator:
    """Sends post-worthy readings and advances the stored watermark."""

    def __init__(
        self,
        sink: DeliverySink,
        store: ReadingStore,
        *,
        signal_id: str,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sink = sink
        self._store = store
        self._signal_id = signal_id
        self._clock = clock

    async def last_reported(self) -> float | None:
        """Read the watermark. Called once at the start of a run."""
        return await self._store.read()

    def build_record(self, reading: float) -> DeliveryRecord:
        return DeliveryRecord(signal_id=self._signal_id, value=reading, timestamp=self._clock())

    async def deliver(self, reading: float, decision: Decision, *, dry_run: bool = False) -> DeliveryResult:
        """Act on *decision*.

        Raises
        ------
        DeliveryError
            If the sink rejected the reading or could not be reached. The
            store is not written in that case.
        """
        if not decision.post:
            _logger.info("Skipped %s: %s", reading, decision.reason)
            return DeliveryResult(outcome=DeliveryOutcome.SKIPPED, decision=decision)

        # Timestamp is taken at send time, not when the sensor was read.
        record = self.build_record(reading)

        if dry_run:
            _logger.info("Dry run, not delivering %s", record.to_wire())
            return DeliveryResult(outcome=DeliveryOutcome.DRY_RUN, decision=decision, record=record)

        await self._sink.send([record])
        _logger.info("Delivered %s (%s)", reading, decision.reason)

        try:
            await self._store.write(reading)
        except PersistenceError as exc:
            _logger.error(
                "Delivered %s but could not store it as last reported value; "
                "the next run may deliver it again: %s",
                reading,
                exc,
            )
            return DeliveryResult(
                outcome=DeliveryOutcome.DELIVERED,
                decision=decision,
                record=record,
                persistence_error=exc,
            )

        return DeliveryResult(outcome=DeliveryOutcome.DELIVERED, decision=decision, record=record)
