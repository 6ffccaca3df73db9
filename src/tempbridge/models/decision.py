"""Change decision model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Decision(BaseModel):
    """Outcome of comparing a reading against the last reported value.

    ``delta`` is ``None`` only when there was no prior value.
    """

    model_config = ConfigDict(frozen=True)

    post: bool
    reason: str
    current: float
    last: float | None = None
    delta: float | None = None
    threshold: float
