from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .entities import ParsedNote
from ..slug import tag_to_slug


class TagOut(BaseModel):
    tag: str
    slug: str


class NoteSummaryOut(BaseModel):
    id: str
    title: str
    date: str
    tags: list[TagOut] = Field(default_factory=list)

    @classmethod
    def from_note(cls, note: ParsedNote) -> "NoteSummaryOut":
        return cls(
            id=note.id,
            title=note.title,
            date=note.metadata.date,
            tags=[TagOut(tag=t, slug=tag_to_slug(t)) for t in note.tags],
        )


class NoteDetailOut(NoteSummaryOut):
    content_markdown: str

    @classmethod
    def from_note(cls, note: ParsedNote) -> "NoteDetailOut":
        summary = NoteSummaryOut.from_note(note)
        return cls(**summary.model_dump(), content_markdown=note.content)


class NoteGetOut(BaseModel):
    note: NoteDetailOut
    previous: Optional[NoteSummaryOut] = None
    next: Optional[NoteSummaryOut] = None


class NotePageOut(BaseModel):
    items: list[NoteDetailOut] = Field(default_factory=list)
    page: int
    page_size: int
    total_pages: int
    has_previous: bool
    has_next: bool


class ArchiveOut(BaseModel):
    items: list[NoteSummaryOut] = Field(default_factory=list)
    total: int


class TagCountOut(TagOut):
    count: int


class TagsOut(BaseModel):
    items: list[TagCountOut] = Field(default_factory=list)


class TagNotesOut(BaseModel):
    tag: str
    slug: str
    items: list[NoteDetailOut] = Field(default_factory=list)
