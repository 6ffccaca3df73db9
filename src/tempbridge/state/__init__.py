"""Change decision and last-reported state."""

from tempbridge.state.policy import FIRST_OBSERVATION_REASON, decide, meets_threshold
from tempbridge.state.store import FileReadingStore, MemoryReadingStore, ReadingStore

__all__ = [
    "FIRST_OBSERVATION_REASON",
    "FileReadingStore",
    "MemoryReadingStore",
    "ReadingStore",
    "decide",
    "meets_threshold",
]
