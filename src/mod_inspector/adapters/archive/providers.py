"""Content providers over zip archives and in-memory file maps.

Both providers resolve a requested path against the stored entry names
the same way: exact name first, then the best segment-suffix match, so
``entry.lua`` finds ``mymod/entry.lua``.
"""

from __future__ import annotations

import asyncio
import zipfile
from collections.abc import Mapping
from pathlib import Path

import structlog

from mod_inspector.core.path_matcher import find_best_path_match
from mod_inspector.utils.logging import LogEventNames

log = structlog.get_logger()


class ArchiveError(Exception):
    """Base exception for archive access errors."""


class ArchiveOpenError(ArchiveError):
    """File could not be opened as a zip archive."""


def resolve_entry(path: str, names: list[str]) -> str | None:
    """Find the stored entry name for a requested path."""
    if path in names:
        return path
    return find_best_path_match(path, names)


class ZipContentProvider:
    """Serves decoded text from zip files on disk, one per archive id.

    Example:
        provider = ZipContentProvider()
        provider.open("mymod", Path("mymod.zip"))
        text = await provider.get("mymod", "entry.lua")
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._archives: dict[str, zipfile.ZipFile] = {}
        self._names: dict[str, list[str]] = {}

    def open(self, archive_id: str, path: Path) -> list[str]:
        """Open a zip file under an archive id, replacing any previous one.

        Args:
            archive_id: Identity to register the archive under
            path: Zip file on disk

        Returns:
            File entry names of the archive

        Raises:
            ArchiveOpenError: If the file is missing or not a zip archive
        """
        try:
            archive = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(f"Cannot open archive {path}: {e}") from e

        self.close(archive_id)
        self._archives[archive_id] = archive
        self._names[archive_id] = [info.filename for info in archive.infolist() if not info.is_dir()]

        log.info(
            LogEventNames.ARCHIVE_OPENED,
            archive_id=archive_id,
            path=str(path),
            files=len(self._names[archive_id]),
        )
        return list(self._names[archive_id])

    def names(self, archive_id: str) -> list[str]:
        """File entry names of an open archive (empty if unknown)."""
        return list(self._names.get(archive_id, []))

    async def get(self, archive_id: str, path: str) -> str | None:
        """Fetch the decoded text of an entry, or None if absent."""
        archive = self._archives.get(archive_id)
        if archive is None:
            return None

        name = resolve_entry(path, self._names[archive_id])
        if name is None:
            return None

        data = await asyncio.to_thread(archive.read, name)
        return data.decode(self._encoding, errors="replace")

    def close(self, archive_id: str) -> None:
        """Close one archive if it is open."""
        archive = self._archives.pop(archive_id, None)
        self._names.pop(archive_id, None)
        if archive is not None:
            archive.close()

    def close_all(self) -> None:
        """Close every open archive."""
        for archive_id in list(self._archives):
            self.close(archive_id)


class InMemoryContentProvider:
    """Serves text from already-decoded files held in memory."""

    def __init__(self, archives: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._archives: dict[str, dict[str, str]] = {
            archive_id: dict(files) for archive_id, files in (archives or {}).items()
        }

    def add(self, archive_id: str, files: Mapping[str, str]) -> None:
        """Register or replace an archive's files."""
        self._archives[archive_id] = dict(files)

    def remove(self, archive_id: str) -> None:
        self._archives.pop(archive_id, None)

    async def get(self, archive_id: str, path: str) -> str | None:
        files = self._archives.get(archive_id)
        if files is None:
            return None

        name = resolve_entry(path, list(files))
        return files[name] if name is not None else None
