from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from . import ids
from .domain.entities import RawNote
from .domain.exceptions import ValidationIssue, join_issues

NOTE_EXTENSION = ".md"
FRONTMATTER_DELIMITER = "---"


class RawNoteSchema(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    filename: str
    content: str
    id: str

    @field_validator("filename")
    @classmethod
    def _filename_has_note_extension(cls, value: str) -> str:
        if not value.endswith(NOTE_EXTENSION):
            raise PydanticCustomError(
                "note_extension",
                "filename must end with {extension}",
                {"extension": NOTE_EXTENSION},
            )
        return value

    @field_validator("content")
    @classmethod
    def _content_starts_with_frontmatter(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("content_empty", "content must not be empty")
        if not value.strip().startswith(FRONTMATTER_DELIMITER):
            raise PydanticCustomError(
                "content_frontmatter",
                "content must start with a front matter block ({delimiter})",
                {"delimiter": FRONTMATTER_DELIMITER},
            )
        return value

    @field_validator("id")
    @classmethod
    def _id_is_ulid(cls, value: str) -> str:
        if not ids.is_valid(value):
            raise PydanticCustomError("ulid_format", "invalid ULID format")
        return value


@dataclass(frozen=True)
class NoteValidation:
    note: RawNote | None
    issues: list[ValidationIssue]

    @property
    def ok(self) -> bool:
        return self.note is not None

    @property
    def error(self) -> str | None:
        return join_issues(self.issues) if self.issues else None


def issues_from_pydantic(exc: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(path=".".join(str(part) for part in err["loc"]), message=err["msg"])
        for err in exc.errors()
    ]


def validate_raw_note(filename: str, content: str, note_id: str) -> NoteValidation:
    """Check a candidate note against every structural rule at once.

    The returned ``NoteValidation`` lists all violated rules rather than
    stopping at the first one.
    """
    try:
        RawNoteSchema(filename=filename, content=content, id=note_id)
    except ValidationError as e:
        return NoteValidation(note=None, issues=issues_from_pydantic(e))
    return NoteValidation(note=RawNote(filename=filename, content=content, id=note_id), issues=[])


def is_valid_content(content: str) -> bool:
    return bool(content) and content.strip().startswith(FRONTMATTER_DELIMITER)
