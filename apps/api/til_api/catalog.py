from __future__ import annotations

import logging

from . import ids
from .domain.entities import NoteNeighbours, Page, ParsedNote, TagCount
from .fetcher import ContentFetcher
from .pagination import ITEMS_PER_PAGE, paginate, total_pages
from .parsing import MarkdownParser

logger = logging.getLogger("til.catalog")


class NoteCatalog:
    """Read-side queries over the parsed notes, newest first.

    A note whose front matter fails to parse is logged and left out; it never
    hides the rest of the site.
    """

    def __init__(self, fetcher: ContentFetcher, parser: MarkdownParser | None = None, page_size: int = ITEMS_PER_PAGE) -> None:
        self.fetcher = fetcher
        self.parser = parser or MarkdownParser()
        self.page_size = page_size

    async def all_notes(self) -> list[ParsedNote]:
        raw_notes = await self.fetcher.fetch_valid()
        parsed, failures = self.parser.parse_each(raw_notes)
        if failures:
            logger.warning("notes_unparseable", extra={"count": len(failures)})
        # Upper-cased ULIDs sort in creation order.
        return sorted(parsed, key=lambda n: ids.normalize(n.id), reverse=True)

    async def get_note(self, note_id: str) -> ParsedNote | None:
        note, _ = await self.note_with_neighbours(note_id)
        return note

    async def neighbours(self, note_id: str) -> NoteNeighbours:
        _, around = await self.note_with_neighbours(note_id)
        return around

    async def note_with_neighbours(self, note_id: str) -> tuple[ParsedNote | None, NoteNeighbours]:
        """Look a note up and find its older and newer siblings in one pass."""
        if not ids.is_valid(note_id):
            return None, NoteNeighbours(previous=None, next=None)
        notes = await self.all_notes()
        wanted = ids.normalize(note_id)
        for i, note in enumerate(notes):
            if ids.normalize(note.id) == wanted:
                older = notes[i + 1] if i + 1 < len(notes) else None
                newer = notes[i - 1] if i > 0 else None
                return note, NoteNeighbours(previous=older, next=newer)
        return None, NoteNeighbours(previous=None, next=None)

    async def notes_by_tag(self, tag: str) -> list[ParsedNote]:
        return [n for n in await self.all_notes() if tag in n.tags]

    async def all_tags(self) -> list[TagCount]:
        counts: dict[str, int] = {}
        for note in await self.all_notes():
            for tag in note.tags:
                counts[tag] = counts.get(tag, 0) + 1
        # sorted() is stable, so equal counts keep first-seen order.
        return [TagCount(tag=t, count=c) for t, c in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)]

    async def page(self, page_number: int) -> Page:
        return paginate(await self.all_notes(), page_number, self.page_size)

    async def total_pages(self) -> int:
        return total_pages(len(await self.all_notes()), self.page_size)

    async def archive(self) -> list[ParsedNote]:
        return await self.all_notes()

    async def invalidate(self) -> None:
        await self.fetcher.invalidate_cache()
