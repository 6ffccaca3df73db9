"""Normalization of raw sensor status payloads.

Firmware versions disagree on where the temperature lives. Extraction is an
ordered list of rules evaluated first to last; the first rule that finds a
non-null value decides the reading, even if that value later fails to
coerce.

The nested ``params`` mapping is authoritative. Every rule is tried against
it before any rule is tried against the top level, so a top-level
``temperature`` only counts when no alias matches inside ``params``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from tempbridge.exceptions import ExtractionError


@dataclass(frozen=True, slots=True)
class ExtractionRule:
    """A named lookup into a parameter mapping."""

    name: str
    lookup: Callable[[Mapping[str, Any]], Any]


def _key(name: str) -> Callable[[Mapping[str, Any]], Any]:
    def lookup(params: Mapping[str, Any]) -> Any:
        return params.get(name)

    return lookup


def _nested(outer: str, inner: str) -> Callable[[Mapping[str, Any]], Any]:
    def lookup(params: Mapping[str, Any]) -> Any:
        container = params.get(outer)
        if not isinstance(container, Mapping):
            return None
        return container.get(inner)

    return lookup


TEMPERATURE_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule("temperature", _key("temperature")),
    ExtractionRule("currentTemperature", _key("currentTemperature")),
    ExtractionRule("temp", _key("temp")),
    ExtractionRule("tmp.curr", _nested("tmp", "curr")),
    ExtractionRule("tmp.current", _nested("tmp", "current")),
    ExtractionRule("tmp.value", _nested("tmp", "value")),
    ExtractionRule("value", _key("value")),
    ExtractionRule("temperatureC", _key("temperatureC")),
    ExtractionRule("tempC", _key("tempC")),
)


def safe_float(value: Any) -> float | None:
    """Coerce *value* to a finite float, or ``None``.

    Booleans are rejected even though ``float(True)`` works.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def candidate_shapes(payload: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    """Yield the mappings that may hold device parameters, most specific first."""
    params = payload.get("params")
    if isinstance(params, Mapping):
        yield params
    yield payload


def select_value(
    payload: Mapping[str, Any],
    rules: tuple[ExtractionRule, ...] = TEMPERATURE_RULES,
) -> tuple[str, Any] | None:
    """Return ``(rule_name, raw_value)`` for the first rule with a non-null value."""
    for shape in candidate_shapes(payload):
        for rule in rules:
            value = rule.lookup(shape)
            if value is not None:
                return rule.name, value
    return None


def extract_reading(
    payload: Mapping[str, Any],
    rules: tuple[ExtractionRule, ...] = TEMPERATURE_RULES,
) -> float:
    """Extract a single finite temperature from a raw status payload.

    Raises
    ------
    ExtractionError
        If no rule finds a value, or the selected value is not a finite number.
    """
    if not isinstance(payload, Mapping):
        raise ExtractionError(f"Status payload is not a mapping: {type(payload).__name__}")

    selected = select_value(payload, rules)
    if selected is None:
        known = ", ".join(rule.name for rule in rules)
        raise ExtractionError(f"No temperature field found (looked for: {known})")

    name, raw = selected
    reading = safe_float(raw)
    if reading is None:
        raise ExtractionError(f"Field {name!r} is not a finite number: {raw!r}")
    return reading
