from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

FetchErrorKind = Literal["read_error", "validation_error"]


@dataclass(frozen=True)
class RawNote:
    filename: str
    content: str
    id: str

    def to_dict(self) -> dict[str, str]:
        return {"filename": self.filename, "content": self.content, "id": self.id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawNote":
        return cls(filename=str(data["filename"]), content=str(data["content"]), id=str(data["id"]))


@dataclass(frozen=True)
class NoteMetadata:
    title: str
    tags: list[str]
    date: str


@dataclass(frozen=True)
class ParsedNote:
    id: str
    title: str
    content: str
    tags: list[str]
    metadata: NoteMetadata

    @property
    def created_at(self) -> datetime:
        return datetime.fromisoformat(self.metadata.date.replace("Z", "+00:00"))


@dataclass(frozen=True)
class FetchIssue:
    filename: str
    error: str
    kind: FetchErrorKind


@dataclass(frozen=True)
class FetchResult:
    success: list[RawNote] = field(default_factory=list)
    errors: list[FetchIssue] = field(default_factory=list)


@dataclass(frozen=True)
class Page:
    items: list[ParsedNote]
    page_number: int
    page_size: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


@dataclass(frozen=True)
class TagCount:
    tag: str
    count: int


@dataclass(frozen=True)
class NoteNeighbours:
    previous: ParsedNote | None
    next: ParsedNote | None
