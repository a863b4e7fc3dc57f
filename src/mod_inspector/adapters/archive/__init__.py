"""Archive content providers."""

from .providers import (
    ArchiveError,
    ArchiveOpenError,
    InMemoryContentProvider,
    ZipContentProvider,
    resolve_entry,
)

__all__ = [
    "ArchiveError",
    "ArchiveOpenError",
    "InMemoryContentProvider",
    "ZipContentProvider",
    "resolve_entry",
]
