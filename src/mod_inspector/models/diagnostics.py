"""Data models for analyzer diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorRecord:
    """A located error attributed to one file.

    Line and column are 1-based, exactly as the analyzer reported them.
    """

    line: int
    column: int
    message: str

    def to_dict(self) -> dict[str, int | str]:
        """Plain JSON-compatible representation."""
        return {"line": self.line, "column": self.column, "message": self.message}


@dataclass(frozen=True)
class ErrorLocation:
    """An error marker found in the transcript, not yet attributed to a file."""

    line_index: int  # 0-based index of the transcript line
    line: int
    column: int
    message: str

    def to_record(self) -> ErrorRecord:
        """Drop the transcript position."""
        return ErrorRecord(line=self.line, column=self.column, message=self.message)


@dataclass(frozen=True)
class FileMention:
    """A source file named somewhere in the transcript."""

    line_index: int
    file: str


@dataclass(frozen=True)
class ErrorLocationRef:
    """File position parsed out of a free-form error message."""

    file: str
    line: int
    column: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class TranscriptEntry:
    """One meaningful transcript line, classified."""

    kind: str  # "error" or "warning"
    message: str
    location: ErrorLocationRef | None = None

    @property
    def is_warning(self) -> bool:
        return self.kind == "warning"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "location": self.location.to_dict() if self.location else None,
        }
