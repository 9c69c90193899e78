from __future__ import annotations

import logging
import time
from pathlib import Path

import anyio

from .cache import FileNoteCache, MemoryCache
from .domain.entities import FetchIssue, FetchResult, RawNote
from .domain.exceptions import (
    DirectoryAccessError,
    LockUnavailableError,
    NoteReadError,
    NoteValidationError,
)
from .domain.ports import BuildLock, Clock
from .locking import InMemoryBuildLock
from .validation import NOTE_EXTENSION, validate_raw_note

logger = logging.getLogger("til.fetcher")

DEFAULT_NOTES_DIRECTORY = "source/notes"


class ContentFetcher:
    """Discovers, reads and validates note files in a single directory.

    ``fetch_all`` never fails because of one bad note: read and validation
    failures are reported per file. Only an unreadable directory is fatal.
    ``fetch_valid`` additionally goes through the optional build caches so that
    parallel build workers scan the directory once.
    """

    def __init__(
        self,
        notes_directory: Path | str = DEFAULT_NOTES_DIRECTORY,
        *,
        extension: str = NOTE_EXTENSION,
        max_concurrency: int = 32,
        memory_cache: MemoryCache[list[RawNote]] | None = None,
        file_cache: FileNoteCache | None = None,
        lock: BuildLock | None = None,
        lock_wait: float = 10.0,
        poll_interval: float = 0.1,
        clock: Clock = time.monotonic,
    ) -> None:
        self._notes_directory = Path(notes_directory)
        self.extension = extension
        self.max_concurrency = max_concurrency
        self.memory_cache = memory_cache
        self.file_cache = file_cache
        self.lock: BuildLock = lock if lock is not None else InMemoryBuildLock()
        self.lock_wait = lock_wait
        self.poll_interval = poll_interval
        self._clock = clock

    @property
    def notes_directory(self) -> Path:
        return self._notes_directory

    async def list_note_files(self) -> list[str]:
        try:
            names = [p.name async for p in anyio.Path(self._notes_directory).iterdir()]
        except OSError as e:
            raise DirectoryAccessError(self._notes_directory, str(e)) from e
        return sorted(n for n in names if n.endswith(self.extension))

    async def read_and_validate(self, filename: str) -> RawNote:
        path = anyio.Path(self._notes_directory / filename)
        try:
            content = await path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise NoteReadError(filename, str(e)) from e

        note_id = filename[: -len(self.extension)] if filename.endswith(self.extension) else filename
        result = validate_raw_note(filename, content, note_id)
        if result.note is None:
            raise NoteValidationError(filename, result.issues)
        return result.note

    async def fetch_all(self) -> FetchResult:
        filenames = await self.list_note_files()
        outcomes: list[RawNote | FetchIssue | None] = [None] * len(filenames)
        limiter = anyio.CapacityLimiter(self.max_concurrency)

        async def worker(index: int, filename: str) -> None:
            async with limiter:
                try:
                    outcomes[index] = await self.read_and_validate(filename)
                except NoteReadError as e:
                    outcomes[index] = FetchIssue(filename=filename, error=str(e), kind="read_error")
                except NoteValidationError as e:
                    outcomes[index] = FetchIssue(filename=filename, error=str(e), kind="validation_error")

        async with anyio.create_task_group() as tg:
            for index, filename in enumerate(filenames):
                tg.start_soon(worker, index, filename)

        success = [o for o in outcomes if isinstance(o, RawNote)]
        errors = [o for o in outcomes if isinstance(o, FetchIssue)]
        for issue in errors:
            logger.warning("note_skipped", extra={"note_file": issue.filename, "kind": issue.kind, "error": issue.error})
        logger.info(
            "notes_fetched",
            extra={"directory": str(self._notes_directory), "ok": len(success), "failed": len(errors)},
        )
        return FetchResult(success=success, errors=errors)

    async def fetch_valid(self) -> list[RawNote]:
        if self.memory_cache is not None:
            cached = self.memory_cache.get()
            if cached is not None:
                return list(cached)

        if self.file_cache is None:
            notes = (await self.fetch_all()).success
        else:
            notes = await self._fetch_through_file_cache()

        if self.memory_cache is not None:
            self.memory_cache.put(notes)
        return list(notes)

    async def _fetch_through_file_cache(self) -> list[RawNote]:
        assert self.file_cache is not None
        cached = await self.file_cache.load()
        if cached is not None:
            logger.debug("cache_file_hit", extra={"path": str(self.file_cache.path)})
            return cached

        deadline = self._clock() + self.lock_wait
        while True:
            try:
                acquired = await self.lock.try_acquire()
            except LockUnavailableError as e:
                logger.warning("lock_unconfirmed", extra={"error": str(e)})
                acquired = False

            if acquired:
                try:
                    # Another worker may have finished between our miss and the lock.
                    cached = await self.file_cache.load()
                    if cached is not None:
                        return cached
                    notes = (await self.fetch_all()).success
                    try:
                        await self.file_cache.store(notes)
                    except OSError as e:
                        logger.warning("cache_file_write_failed", extra={"path": str(self.file_cache.path), "error": str(e)})
                    return notes
                finally:
                    await self.lock.release()

            if self._clock() >= deadline:
                break
            await anyio.sleep(self.poll_interval)
            cached = await self.file_cache.load()
            if cached is not None:
                return cached

        logger.warning("lock_wait_timeout", extra={"waited_s": self.lock_wait})
        return (await self.fetch_all()).success

    async def invalidate_cache(self) -> None:
        if self.memory_cache is not None:
            self.memory_cache.invalidate()
        if self.file_cache is not None:
            await self.file_cache.invalidate()
        logger.info("cache_invalidated", extra={"directory": str(self._notes_directory)})
