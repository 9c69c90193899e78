from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


def join_issues(issues: list[ValidationIssue]) -> str:
    return "; ".join(str(i) for i in issues)


class TilError(Exception):
    pass


class DirectoryAccessError(TilError):
    def __init__(self, directory: Path | str, reason: str) -> None:
        self.directory = str(directory)
        self.reason = reason
        super().__init__(f"cannot access notes directory {self.directory}: {reason}")


class NoteReadError(TilError):
    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__(f"failed to read {filename}: {reason}")


class NoteValidationError(TilError):
    def __init__(self, filename: str, issues: list[ValidationIssue]) -> None:
        self.filename = filename
        self.issues = list(issues)
        super().__init__(join_issues(self.issues))


class FrontMatterValidationError(TilError):
    def __init__(self, issues: list[ValidationIssue], note_id: str | None = None) -> None:
        self.issues = list(issues)
        self.note_id = note_id
        super().__init__(f"front matter validation failed: {join_issues(self.issues)}")


class InvalidIdentifierError(TilError, ValueError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"invalid ULID: {value!r}")


class LockUnavailableError(TilError):
    pass
