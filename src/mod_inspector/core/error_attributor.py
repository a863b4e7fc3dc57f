"""Attribution of transcript errors to source files.

This module implements the ErrorAttributor class that turns a raw
analyzer transcript into an index of located errors per file.

The analyzer prints ``[line:column] message`` markers without saying
which file they belong to; the file is named on a later line. The
association rule is a plain function so that another analyzer's output
format can bring its own rule.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import structlog

from mod_inspector.core.path_matcher import find_best_path_match
from mod_inspector.core.transcript_parser import TranscriptParser
from mod_inspector.models.diagnostics import ErrorLocation, ErrorRecord, FileMention
from mod_inspector.utils.logging import LogEventNames

log = structlog.get_logger()

DEFAULT_ENTRY_FILE = "entry.lua"

AssociationStrategy = Callable[[Sequence[ErrorLocation], Sequence[FileMention]], dict[int, str]]


def associate_preceding_errors(
    locations: Sequence[ErrorLocation],
    mentions: Sequence[FileMention],
) -> dict[int, str]:
    """Assign each mention's file to every unassigned error printed before it.

    Mentions are visited in transcript order and the first mention to
    reach an error wins. Known limitation: when two files are mentioned
    close together, the first one also claims errors that belong to the
    second.

    Args:
        locations: Error locations in transcript order
        mentions: File mentions in transcript order

    Returns:
        Mapping of location index (into ``locations``) to file
    """
    assignment: dict[int, str] = {}
    for mention in mentions:
        for index, location in enumerate(locations):
            if index in assignment:
                continue
            if location.line_index < mention.line_index:
                assignment[index] = mention.file
    return assignment


class ErrorAttributor:
    """Index of transcript errors by file.

    Example:
        attributor = ErrorAttributor()
        attributor.parse_errors(stderr)
        for record in attributor.get_errors_for_file("mymod/entry.lua"):
            print(record.line, record.message)
    """

    def __init__(
        self,
        default_file: str = DEFAULT_ENTRY_FILE,
        strategy: AssociationStrategy = associate_preceding_errors,
        parser: TranscriptParser | None = None,
    ) -> None:
        """Initialize the ErrorAttributor.

        Args:
            default_file: File that receives errors no mention claims
            strategy: Rule associating error locations with file mentions
            parser: Transcript parser (a new one if omitted)
        """
        self._default_file = default_file
        self._strategy = strategy
        self._parser = parser or TranscriptParser()
        self._errors_by_file: dict[str, list[ErrorRecord]] = {}
        self._raw_transcript = ""

    @property
    def raw_transcript(self) -> str:
        """Transcript the current index was built from."""
        return self._raw_transcript

    def parse_errors(self, transcript: str | None) -> None:
        """Rebuild the index from a transcript.

        An empty or malformed transcript leaves an empty index.

        Args:
            transcript: Raw analyzer output
        """
        self._errors_by_file = {}
        self._raw_transcript = transcript or ""

        lines = self._parser.split_lines(transcript)
        locations = self._parser.find_error_locations(lines)
        if not locations:
            return

        mentions = self._parser.find_file_mentions(lines)
        assignment = self._strategy(locations, mentions)

        for index, location in enumerate(locations):
            file = assignment.get(index, self._default_file)
            self._errors_by_file.setdefault(file, []).append(location.to_record())

        log.debug(
            LogEventNames.TRANSCRIPT_ERRORS_INDEXED,
            errors=len(locations),
            mentions=len(mentions),
            files=len(self._errors_by_file),
            unattributed=len(locations) - len(assignment),
        )

    def get_errors_for_file(self, file_name: str | None) -> list[ErrorRecord]:
        """Return the errors of the indexed file that best matches ``file_name``.

        Args:
            file_name: Archive path or transcript path of a file

        Returns:
            Copy of the matching file's records (empty if none match)
        """
        if not file_name:
            return []

        # A root file never inherits the errors of a nested namesake.
        best_match = find_best_path_match(
            file_name, self._errors_by_file, allow_basename=False
        )
        if best_match is None:
            return []
        return list(self._errors_by_file[best_match])

    def has_errors(self, file_name: str | None) -> bool:
        return bool(self.get_errors_for_file(file_name))

    def get_files_with_errors(self) -> list[str]:
        return list(self._errors_by_file)

    def get_total_error_count(self) -> int:
        return sum(len(records) for records in self._errors_by_file.values())

    def to_dict(self) -> dict[str, list[dict[str, int | str]]]:
        """Plain JSON-compatible view of the index."""
        return {
            file: [record.to_dict() for record in records]
            for file, records in self._errors_by_file.items()
        }
