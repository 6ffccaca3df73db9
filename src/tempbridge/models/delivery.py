"""Outbound delivery models."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from tempbridge.models.decision import Decision

if TYPE_CHECKING:
    from tempbridge.exceptions import PersistenceError


def format_timestamp(value: datetime) -> str:
    """Render *value* as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    utc = value.astimezone(UTC) if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DeliveryRecord(BaseModel):
    """One reading as sent to the ingestion endpoint.

    Serializes to the wire shape ``{"id": ..., "temp": ..., "timestamp": ...}``
    via :meth:`to_wire`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signal_id: str = Field(serialization_alias="id")
    value: float = Field(serialization_alias="temp")
    timestamp: datetime

    @field_validator("signal_id")
    @classmethod
    def _require_signal_id(cls, value: str) -> str:
        signal_id = value.strip()
        if not signal_id:
            raise ValueError("signal_id must be non-empty")
        return signal_id

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class DeliveryOutcome(StrEnum):
    SKIPPED = "skipped"
    DELIVERED = "delivered"
    DRY_RUN = "dry_run"


@dataclasses.dataclass(frozen=True)
class DeliveryResult:
    """What a single invocation did.

    ``persistence_error`` is set when the reading was delivered but the
    new watermark could not be stored; the next run may then deliver the
    same value again.
    """

    outcome: DeliveryOutcome
    decision: Decision
    record: DeliveryRecord | None = None
    persistence_error: PersistenceError | None = None

    @property
    def delivered(self) -> bool:
        return self.outcome == DeliveryOutcome.DELIVERED
