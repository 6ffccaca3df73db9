"""Persistence for the last reported reading.

The bridge only ever needs one scalar: the value most recently confirmed by
the ingestion endpoint. Backends implement :class:`ReadingStore`.
"""

from __future__ import annotations

import asyncio
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Protocol

from tempbridge.exceptions import PersistenceError

_logger = logging.getLogger(__name__)


class ReadingStore(Protocol):
    """Durable scalar store for the last reported value."""

    async def read(self) -> float | None:
        """Return the stored value, or ``None`` when there is none."""
        ...

    async def write(self, value: float) -> None:
        """Persist *value*, raising :class:`PersistenceError` on failure."""
        ...


def _parse_stored(text: str) -> float | None:
    stripped = text.strip()
    if not stripped:
        return None
    try:
        value = float(stripped)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class FileReadingStore:
    """Stores the reading as a decimal number in a small text file.

    A missing, empty or unparseable file reads as "never posted". Writes
    replace the file atomically so a crash never leaves a truncated value.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_sync(self) -> float | None:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            _logger.debug("No state file at %s", self._path)
            return None
        except OSError:
            _logger.warning("Could not read state file %s; treating as no prior state", self._path, exc_info=True)
            return None

        value = _parse_stored(text)
        if value is None and text.strip():
            _logger.warning("State file %s holds no usable number: %r", self._path, text[:64])
        return value

    def _write_sync(self, value: float) -> None:
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(f"{value!r}\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(
                f"Could not write state file {self._path}: {exc}",
                path=str(self._path),
            ) from exc

    async def read(self) -> float | None:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, value: float) -> None:
        await asyncio.to_thread(self._write_sync, value)
        _logger.debug("Stored last reported value %s in %s", value, self._path)


class MemoryReadingStore:
    """In-process store; useful for dry runs and tests."""

    def __init__(self, initial: float | None = None) -> None:
        self.value = initial
        self.writes = 0

    async def read(self) -> float | None:
        return self.value

    async def write(self, value: float) -> None:
        self.value = value
        self.writes += 1
