"""Parser for analyzer diagnostic transcripts.

This module implements the TranscriptParser class that reads the raw
stdout/stderr-like text produced by the external analyzer. It supports:
- ``[line:column] message`` error markers
- File mentions (quoted ``*.lua`` paths, ``evaluating <path>.lua``)
- ``WARN:`` / error classification of transcript lines
- ``Script missing: <path>`` reports of unresolvable files

Nothing here raises on malformed input; unrecognized text is ignored.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import structlog

from mod_inspector.models.diagnostics import (
    ErrorLocation,
    ErrorLocationRef,
    FileMention,
    TranscriptEntry,
)
from mod_inspector.utils.logging import LogEventNames

log = structlog.get_logger()


class TranscriptParser:
    """Parser for analyzer transcripts.

    Responsibilities:
    - Find located error markers and the files mentioned around them
    - Classify transcript lines as errors or warnings
    - Strip location prefixes from messages
    - Collect the files the analyzer reported as missing

    Example:
        parser = TranscriptParser()
        lines = transcript.split("\\n")
        locations = parser.find_error_locations(lines)
        mentions = parser.find_file_mentions(lines)
    """

    LOCATION_PATTERN = re.compile(r"^\[\s*(\d+)\s*:\s*(\d+)\s*\]")
    MENTION_PATTERNS = (
        re.compile(r'"([\w\-./\\]+\.lua)"'),
        re.compile(r"evaluating\s+([\w\-./\\]+\.lua)"),
        re.compile(r'in\s+"([\w\-./\\]+\.lua)"'),
    )
    CONTEXT_LINE_PATTERN = re.compile(r"^\s+\.\.\.")
    SUMMARY_PREFIX = "Errors while evaluating"
    WARNING_PREFIX = "WARN:"
    MISSING_SCRIPT_PATTERN = re.compile(r"Script missing:\s*\"?([^\"\s]+)\"?")
    ERROR_LOCATION_PATTERNS = (
        re.compile(r"([^:]+):(\d+):(\d+)"),
        re.compile(r"([^:]+):(\d+)"),
        re.compile(r"(\S+) line (\d+)"),
    )
    DEFAULT_MESSAGE = "Error"

    @staticmethod
    def split_lines(transcript: str | None) -> list[str]:
        """Split a transcript into lines, keeping line indices stable."""
        if not transcript:
            return []
        return transcript.split("\n")

    def find_error_locations(self, lines: Sequence[str]) -> list[ErrorLocation]:
        """Collect every line that starts with a ``[line:column]`` marker.

        Args:
            lines: Transcript lines

        Returns:
            Unplaced error locations in transcript order
        """
        locations: list[ErrorLocation] = []
        for index, line in enumerate(lines):
            match = self.LOCATION_PATTERN.match(line)
            if not match:
                continue
            message = line[match.end() :].strip() or self.DEFAULT_MESSAGE
            locations.append(
                ErrorLocation(
                    line_index=index,
                    line=int(match.group(1)),
                    column=int(match.group(2)),
                    message=message,
                )
            )
        return locations

    def find_file_mentions(self, lines: Sequence[str]) -> list[FileMention]:
        """Collect every source file named in the transcript.

        A line can yield several mentions, one per pattern hit. Backslashes
        are normalized to forward slashes.

        Args:
            lines: Transcript lines

        Returns:
            File mentions ordered by line, then by pattern
        """
        mentions: list[FileMention] = []
        for index, line in enumerate(lines):
            for pattern in self.MENTION_PATTERNS:
                for match in pattern.finditer(line):
                    mentions.append(
                        FileMention(line_index=index, file=match.group(1).replace("\\", "/"))
                    )
        return mentions

    def clean_error_message(self, message: str | None) -> str | None:
        """Remove a leading ``[line:column]`` marker from a message.

        Example:
            "[193:20] Found TokenType.kDot" -> "Found TokenType.kDot"
        """
        if not message:
            return message
        match = self.LOCATION_PATTERN.match(message)
        if not match:
            return message
        return message[match.end() :].lstrip()

    def extract_entries(self, transcript: str | None) -> list[TranscriptEntry]:
        """Classify every meaningful transcript line.

        Indented ``...`` context lines and ``Errors while evaluating``
        summary lines are skipped. Lines starting with ``WARN:`` are
        warnings, everything else is an error. Messages lose their
        ``[line:column]`` prefix and carry any ``file:line`` reference
        found in them.

        Args:
            transcript: Raw transcript text

        Returns:
            Classified entries in transcript order
        """
        entries: list[TranscriptEntry] = []
        for line in self.split_lines(transcript):
            trimmed = line.strip()
            if not trimmed:
                continue
            if self.CONTEXT_LINE_PATTERN.match(line):
                continue
            if trimmed.startswith(self.SUMMARY_PREFIX):
                continue

            kind = "warning" if line.startswith(self.WARNING_PREFIX) else "error"
            message = self.clean_error_message(trimmed) or self.DEFAULT_MESSAGE
            entries.append(
                TranscriptEntry(
                    kind=kind,
                    message=message,
                    location=self.parse_error_location(message),
                )
            )
        return entries

    def parse_error_location(self, message: str | None) -> ErrorLocationRef | None:
        """Find a ``file:line[:column]`` or ``file line N`` reference.

        Args:
            message: Free-form error message

        Returns:
            The first reference found, or None
        """
        if not message:
            return None

        for pattern in self.ERROR_LOCATION_PATTERNS:
            match = pattern.search(message)
            if match:
                column = match.group(3) if pattern.groups >= 3 else None
                return ErrorLocationRef(
                    file=match.group(1).strip(),
                    line=int(match.group(2)),
                    column=int(column) if column else None,
                )
        return None

    def extract_missing_scripts(self, transcript: str | None) -> set[str]:
        """Collect the paths the analyzer flagged with ``Script missing:``.

        Args:
            transcript: Raw transcript text

        Returns:
            Set of reported paths, separators normalized to ``/``
        """
        missing: set[str] = set()
        for line in self.split_lines(transcript):
            for match in self.MISSING_SCRIPT_PATTERN.finditer(line):
                missing.add(match.group(1).replace("\\", "/"))

        if missing:
            log.debug(LogEventNames.MISSING_SCRIPTS_REPORTED, count=len(missing))
        return missing
