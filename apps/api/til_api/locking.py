from __future__ import annotations

import logging
import os
import time
from pathlib import Path

import anyio
from anyio import to_thread

from .domain.exceptions import LockUnavailableError
from .domain.ports import Clock

logger = logging.getLogger("til.lock")

DEFAULT_STALE_AFTER = 5.0


class FileBuildLock:
    """Lock file holding the owner's pid; fresh while its mtime is recent.

    A lock file older than ``stale_after`` seconds is considered abandoned
    (its worker crashed or hung) and may be taken over.
    """

    def __init__(self, path: Path | str, stale_after: float = DEFAULT_STALE_AFTER, clock: Clock = time.time) -> None:
        self.path = Path(path)
        self.stale_after = stale_after
        self._clock = clock
        self._owned = False

    async def is_held(self) -> bool:
        try:
            st = await anyio.Path(self.path).stat()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise LockUnavailableError(f"cannot stat lock file {self.path}: {e}") from e
        return self._clock() - st.st_mtime < self.stale_after

    async def try_acquire(self) -> bool:
        if await self.is_held():
            return False
        return await to_thread.run_sync(self._create)

    def _create(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                seen = self.path.stat()
            except FileNotFoundError:
                seen = None
            if seen is not None:
                if self._clock() - seen.st_mtime < self.stale_after:
                    return False
                if not self._remove_stale(seen):
                    return False
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            return False
        except OSError as e:
            raise LockUnavailableError(f"cannot create lock file {self.path}: {e}") from e
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(str(os.getpid()))
        self._owned = True
        logger.debug("lock_acquired", extra={"path": str(self.path), "pid": os.getpid()})
        return True

    def _remove_stale(self, seen: os.stat_result) -> bool:
        """Unlink the abandoned lock file ``seen``, unless another worker replaced it.

        A takeover landing between the re-stat and the unlink can still remove
        a fresh lock; both workers then scan once and write the same cache.
        """
        try:
            current = self.path.stat()
        except FileNotFoundError:
            return True
        if (current.st_ino, current.st_mtime_ns) != (seen.st_ino, seen.st_mtime_ns):
            logger.debug("lock_taken_over", extra={"path": str(self.path)})
            return False
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        logger.info("lock_stale_removed", extra={"path": str(self.path)})
        return True

    async def release(self) -> None:
        if not self._owned:
            return
        self._owned = False
        try:
            await anyio.Path(self.path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("lock_release_failed", extra={"path": str(self.path), "error": str(e)})
            return
        logger.debug("lock_released", extra={"path": str(self.path)})


class InMemoryBuildLock:
    """Single-process stand-in for ``FileBuildLock``."""

    def __init__(self) -> None:
        self._held = False

    async def is_held(self) -> bool:
        return self._held

    async def try_acquire(self) -> bool:
        if self._held:
            return False
        self._held = True
        return True

    async def release(self) -> None:
        self._held = False
