from __future__ import annotations

from .cache import FileNoteCache, MemoryCache
from .catalog import NoteCatalog
from .config import Settings
from .fetcher import ContentFetcher
from .locking import FileBuildLock


def build_fetcher(settings: Settings) -> ContentFetcher:
    return ContentFetcher(
        settings.notes_dir,
        max_concurrency=settings.fetch_concurrency,
        memory_cache=MemoryCache(ttl=settings.cache_ttl_seconds),
        file_cache=FileNoteCache(settings.cache_file, ttl=settings.cache_ttl_seconds),
        lock=FileBuildLock(settings.lock_file, stale_after=settings.lock_stale_seconds),
        lock_wait=settings.lock_wait_seconds,
        poll_interval=settings.lock_poll_seconds,
    )


def build_catalog(settings: Settings) -> NoteCatalog:
    return NoteCatalog(build_fetcher(settings), page_size=settings.page_size)
