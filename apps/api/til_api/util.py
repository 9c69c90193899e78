from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone

import anyio

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def rfc3339_from_millis(ms: int) -> str:
    dt = _EPOCH + timedelta(milliseconds=ms)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def atomic_write_text(path: anyio.Path, content: str) -> None:
    await path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp.{os.getpid()}")
    await tmp_path.write_text(content, encoding="utf-8")
    await tmp_path.replace(path)


async def atomic_write_json(path: anyio.Path, data: object) -> None:
    await atomic_write_text(path, json.dumps(data, ensure_ascii=False) + "\n")
