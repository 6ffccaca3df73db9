"""Change decision policy.

This module contains *no* payload parsing and no I/O. It compares an
already-normalized reading against the last reported value.
"""

from __future__ import annotations

import math

from tempbridge.models.decision import Decision

#: Readings are decimal values carried in binary floats, so ``22.2 - 22.0``
#: lands just under ``0.2``. Deltas this close to the threshold count as equal.
_BOUNDARY_TOLERANCE = 1e-9

FIRST_OBSERVATION_REASON = "first observation, no prior state"


def meets_threshold(delta: float, threshold: float) -> bool:
    """Inclusive comparison: a delta equal to the threshold meets it."""
    return delta >= threshold or math.isclose(delta, threshold, rel_tol=0.0, abs_tol=_BOUNDARY_TOLERANCE)


def decide(current: float, last: float | None, threshold: float) -> Decision:
    """Decide whether *current* differs enough from *last* to be reported.

    Raises :class:`ValueError` if *threshold* is not a positive finite number.
    """
    if not math.isfinite(threshold) or threshold <= 0:
        raise ValueError(f"threshold must be a positive number, got {threshold}")

    if last is None:
        return Decision(post=True, reason=FIRST_OBSERVATION_REASON, current=current, threshold=threshold)

    delta = abs(current - last)
    post = meets_threshold(delta, threshold)
    op = ">=" if post else "<"
    return Decision(
        post=post,
        reason=f"delta {delta:.4g} {op} threshold {threshold:g} (last {last:g}, current {current:g})",
        current=current,
        last=last,
        delta=delta,
        threshold=threshold,
    )
