from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    notes_dir: Path
    cache_dir: Path
    cache_ttl_seconds: float
    lock_stale_seconds: float
    lock_wait_seconds: float
    lock_poll_seconds: float
    fetch_concurrency: int
    page_size: int
    api_debug_log: bool
    log_level: str

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / "notes-cache.json"

    @property
    def lock_file(self) -> Path:
        return self.cache_dir / "notes-cache.lock"


def load_settings() -> Settings:
    notes_dir = Path(os.environ.get("NOTES_DIR", "./source/notes")).resolve()
    cache_dir = Path(os.environ.get("CACHE_DIR", "./.cache/til")).resolve()
    cache_ttl_seconds = float(os.environ.get("CACHE_TTL_SECONDS", "300"))
    lock_stale_seconds = float(os.environ.get("LOCK_STALE_SECONDS", "5"))
    lock_wait_seconds = float(os.environ.get("LOCK_WAIT_SECONDS", "10"))
    lock_poll_seconds = float(os.environ.get("LOCK_POLL_SECONDS", "0.1"))
    fetch_concurrency = int(os.environ.get("FETCH_CONCURRENCY", "32"))
    page_size = int(os.environ.get("PAGE_SIZE", "10"))
    api_debug_log = os.environ.get("API_DEBUG_LOG", "false").lower() == "true"
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    return Settings(
        notes_dir=notes_dir,
        cache_dir=cache_dir,
        cache_ttl_seconds=cache_ttl_seconds,
        lock_stale_seconds=lock_stale_seconds,
        lock_wait_seconds=lock_wait_seconds,
        lock_poll_seconds=lock_poll_seconds,
        fetch_concurrency=fetch_concurrency,
        page_size=page_size,
        api_debug_log=api_debug_log,
        log_level=log_level,
    )
