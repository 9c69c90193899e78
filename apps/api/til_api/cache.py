"""Build-time caches for the raw note scan.

Both caches only need to outlive a single static build. ``MemoryCache`` keeps
the last scan for the current process; ``FileNoteCache`` shares it between
build workers through a JSON file whose mtime decides freshness.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Generic, TypeVar

import anyio

from .domain.entities import RawNote
from .domain.ports import Clock
from .util import atomic_write_json

logger = logging.getLogger("til.cache")

T = TypeVar("T")


class MemoryCache(Generic[T]):
    def __init__(self, ttl: float, clock: Clock = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._value: T | None = None
        self._stored_at: float | None = None

    def get(self) -> T | None:
        if self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self.ttl:
            self.invalidate()
            return None
        return self._value

    def put(self, value: T) -> None:
        self._value = value
        self._stored_at = self._clock()

    def invalidate(self) -> None:
        self._value = None
        self._stored_at = None


class FileNoteCache:
    def __init__(self, path: Path | str, ttl: float, clock: Clock = time.time) -> None:
        self.path = anyio.Path(path)
        self.ttl = ttl
        self._clock = clock

    async def is_fresh(self) -> bool:
        try:
            st = await self.path.stat()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("cache_file_unreadable", extra={"path": str(self.path), "error": str(e)})
            return False
        return self._clock() - st.st_mtime < self.ttl

    async def load(self) -> list[RawNote] | None:
        if not await self.is_fresh():
            return None
        try:
            data = json.loads(await self.path.read_text(encoding="utf-8"))
            return [RawNote.from_dict(item) for item in data["data"]]
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as e:
            # A half-written or foreign file is just a miss.
            logger.warning("cache_file_unreadable", extra={"path": str(self.path), "error": str(e)})
            return None

    async def store(self, notes: list[RawNote]) -> None:
        await atomic_write_json(self.path, {"data": [n.to_dict() for n in notes]})
        logger.debug("cache_file_written", extra={"path": str(self.path), "count": len(notes)})

    async def invalidate(self) -> None:
        try:
            await self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("cache_file_invalidate_failed", extra={"path": str(self.path), "error": str(e)})
