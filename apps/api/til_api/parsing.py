from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from . import ids
from .domain.entities import NoteMetadata, ParsedNote, RawNote
from .domain.exceptions import (
    FrontMatterValidationError,
    InvalidIdentifierError,
    ValidationIssue,
)
from .validation import issues_from_pydantic

logger = logging.getLogger("til.parser")


@dataclass(frozen=True)
class FrontmatterParse:
    frontmatter: dict
    body: str
    error: str | None
    found: bool


def parse_frontmatter(markdown: str) -> FrontmatterParse:
    if not markdown.startswith("---"):
        return FrontmatterParse(frontmatter={}, body=markdown, error=None, found=False)

    first_newline = markdown.find("\n")
    if first_newline == -1:
        return FrontmatterParse(frontmatter={}, body=markdown, error=None, found=False)

    first_line = markdown[:first_newline].rstrip("\r")
    if first_line != "---":
        return FrontmatterParse(frontmatter={}, body=markdown, error=None, found=False)

    # Find a subsequent line that is exactly `---`; it may be the last line.
    search_from = first_newline + 1
    while search_from <= len(markdown):
        next_newline = markdown.find("\n", search_from)
        line_end = len(markdown) if next_newline == -1 else next_newline
        line = markdown[search_from:line_end].rstrip("\r")
        if line == "---":
            yaml_block = markdown[first_newline + 1 : search_from]
            body = "" if next_newline == -1 else markdown[next_newline + 1 :]
            try:
                parsed = yaml.safe_load(yaml_block) or {}
            except yaml.YAMLError:
                return FrontmatterParse(frontmatter={}, body=markdown, error="frontmatter_yaml_error", found=True)
            if not isinstance(parsed, dict):
                return FrontmatterParse(frontmatter={}, body=markdown, error="frontmatter_not_mapping", found=True)
            return FrontmatterParse(frontmatter=parsed, body=body, error=None, found=True)
        if next_newline == -1:
            break
        search_from = next_newline + 1
    return FrontmatterParse(frontmatter={}, body=markdown, error=None, found=False)


class FrontMatterSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: StrictStr = Field(min_length=1)
    tags: list[StrictStr] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _missing_tags_are_empty(cls, value: object) -> object:
        return [] if value is None else value


_FRONTMATTER_ERRORS = {
    "frontmatter_yaml_error": "front matter is not valid YAML",
    "frontmatter_not_mapping": "front matter must be a mapping",
}


class MarkdownParser:
    def parse(self, content: str, note_id: str) -> ParsedNote:
        if not ids.is_valid(note_id):
            raise InvalidIdentifierError(note_id)

        # The note date always comes from the ULID; a declared `date` is ignored.
        date = ids.timestamp_iso(note_id)
        frontmatter = self.extract_frontmatter(content, note_id=note_id)
        body = parse_frontmatter(content.lstrip()).body

        return ParsedNote(
            id=note_id,
            title=frontmatter.title,
            content=body.strip(),
            tags=list(frontmatter.tags),
            metadata=NoteMetadata(title=frontmatter.title, tags=list(frontmatter.tags), date=date),
        )

    def extract_frontmatter(self, content: str, *, note_id: str | None = None) -> FrontMatterSchema:
        fm = parse_frontmatter(content.lstrip())
        if fm.error is not None:
            issue = ValidationIssue(path="frontmatter", message=_FRONTMATTER_ERRORS[fm.error])
            raise FrontMatterValidationError([issue], note_id=note_id)
        try:
            return FrontMatterSchema.model_validate(fm.frontmatter)
        except ValidationError as e:
            raise FrontMatterValidationError(issues_from_pydantic(e), note_id=note_id) from e

    @staticmethod
    def parse_file(raw_note: RawNote) -> ParsedNote:
        return MarkdownParser().parse(raw_note.content, raw_note.id)

    @staticmethod
    def parse_files(raw_notes: Iterable[RawNote]) -> list[ParsedNote]:
        """Parse every note, aborting on the first one that fails."""
        parser = MarkdownParser()
        return [parser.parse(n.content, n.id) for n in raw_notes]

    @staticmethod
    def parse_each(
        raw_notes: Iterable[RawNote],
    ) -> tuple[list[ParsedNote], list[tuple[RawNote, Exception]]]:
        """Parse every note independently; failures are returned, not raised."""
        parser = MarkdownParser()
        parsed: list[ParsedNote] = []
        failures: list[tuple[RawNote, Exception]] = []
        for note in raw_notes:
            try:
                parsed.append(parser.parse(note.content, note.id))
            except (FrontMatterValidationError, InvalidIdentifierError) as e:
                logger.warning("note_parse_failed", extra={"note_file": note.filename, "error": str(e)})
                failures.append((note, e))
        return parsed, failures
