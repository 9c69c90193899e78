from __future__ import annotations

from pathlib import Path

import pytest

ULID_OLDEST = "01ARZ3NDEKTSV4RRFFQ69G5FAV"
ULID_MIDDLE = "01K5RR9NFREBCCRT4YHNN94W29"
ULID_NEWEST = "01K5X1514G144QQSM4K4S85WMC"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def write_note(directory: Path, note_id: str, title: str | None = "Note", tags: list[str] | None = None, body: str = "Body") -> Path:
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if tags is not None:
        lines.append(f"tags: [{', '.join(tags)}]")
    lines.append("---")
    lines.append(body)
    path = directory / f"{note_id}.md"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
