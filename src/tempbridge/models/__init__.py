"""Data models for tempbridge."""

from tempbridge.models.decision import Decision
from tempbridge.models.delivery import (
    DeliveryOutcome,
    DeliveryRecord,
    DeliveryResult,
    format_timestamp,
)
from tempbridge.models.token import AuthToken

__all__ = [
    "AuthToken",
    "Decision",
    "DeliveryOutcome",
    "DeliveryRecord",
    "DeliveryResult",
    "format_timestamp",
]
