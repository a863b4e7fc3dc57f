"""Adapter implementations for pluggable interfaces.

- archive: ContentProvider implementations (zip files, in-memory maps)
"""

from .archive import InMemoryContentProvider, ZipContentProvider

__all__ = ["InMemoryContentProvider", "ZipContentProvider"]
