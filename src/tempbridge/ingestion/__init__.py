"""Payload normalization."""

from tempbridge.ingestion.normalize import (
    TEMPERATURE_RULES,
    ExtractionRule,
    extract_reading,
    safe_float,
)

__all__ = [
    "TEMPERATURE_RULES",
    "ExtractionRule",
    "extract_reading",
    "safe_float",
]
