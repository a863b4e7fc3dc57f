"""Recursive resolution of include directives into dependency trees.

This module implements the DependencyTreeBuilder class and the
AnalysisCache it works against. It handles:
- Depth-first expansion of include targets, siblings in order
- Cycle detection against the ancestors of the current branch
- Missing files (absent from the archive or reported by the analyzer)
- Per-archive content and tree caching with wholesale invalidation
"""

from __future__ import annotations

from collections.abc import Collection
from typing import TYPE_CHECKING

import structlog

from mod_inspector.core.include_parser import IncludeParser
from mod_inspector.core.path_matcher import path_to_segments, paths_match
from mod_inspector.models.tree import TreeNode
from mod_inspector.utils.logging import LogEventNames

if TYPE_CHECKING:
    from mod_inspector.interfaces.content import ContentProvider

log = structlog.get_logger()


class AnalysisCache:
    """Content and tree caches for one inspection session.

    Entries are keyed by ``(archive_id, path)``. Both maps are
    optimizations only; dropping them never changes a result.
    """

    def __init__(self) -> None:
        """Initialize empty caches."""
        self._content: dict[tuple[str, str], str | None] = {}
        self._trees: dict[tuple[str, str], TreeNode] = {}
        self._hits = 0
        self._misses = 0

    def has_content(self, archive_id: str, path: str) -> bool:
        """Check whether a lookup (hit or miss) is already recorded."""
        return (archive_id, path) in self._content

    def get_content(self, archive_id: str, path: str) -> str | None:
        """Get cached content; None for unknown paths and recorded misses alike."""
        return self._content.get((archive_id, path))

    def set_content(self, archive_id: str, path: str, content: str | None) -> None:
        """Record the result of a content lookup, None included."""
        self._content[(archive_id, path)] = content

    def get_tree(self, archive_id: str, entry_path: str) -> TreeNode | None:
        """Get a cached tree.

        Args:
            archive_id: Archive identity
            entry_path: Entry file the tree was built from

        Returns:
            The cached tree, or None if not cached
        """
        tree = self._trees.get((archive_id, entry_path))
        if tree is None:
            self._misses += 1
        else:
            self._hits += 1
        return tree

    def set_tree(self, archive_id: str, entry_path: str, tree: TreeNode) -> None:
        self._trees[(archive_id, entry_path)] = tree

    def invalidate_archive(self, archive_id: str) -> int:
        """Remove every cached entry of an archive.

        Args:
            archive_id: Archive being replaced or dropped

        Returns:
            Number of entries removed
        """
        removed = 0
        for cache in (self._content, self._trees):
            stale = [key for key in cache if key[0] == archive_id]
            for key in stale:
                del cache[key]
            removed += len(stale)

        log.debug(LogEventNames.CACHE_INVALIDATED, archive_id=archive_id, removed=removed)
        return removed

    def clear(self) -> None:
        """Clear all cached entries."""
        self._content.clear()
        self._trees.clear()

    @property
    def stats(self) -> dict[str, int]:
        """Return cache statistics."""
        return {
            "content_entries": len(self._content),
            "tree_entries": len(self._trees),
            "tree_hits": self._hits,
            "tree_misses": self._misses,
        }


def _normalize(path: str) -> str:
    return "/".join(path_to_segments(path))


class DependencyTreeBuilder:
    """Builds the include tree of an archive's entry file.

    Two pieces of traversal state are kept per build:
    - ``visited``: every path already expanded anywhere in this build.
      A second occurrence on another branch becomes a leaf, unflagged.
    - ``path_stack``: the ancestors on the current branch. Meeting one
      again is a cycle; the node is flagged ``circular`` and not expanded.

    Content reads are awaited one at a time, so traversal order (and any
    cycle path derived from it) is deterministic.

    Example:
        builder = DependencyTreeBuilder(AnalysisCache())
        tree = await builder.build_file_tree("mymod", "entry.lua", provider)
    """

    def __init__(
        self,
        cache: AnalysisCache | None = None,
        parser: IncludeParser | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            cache: Session cache (a private one if omitted)
            parser: Include parser (default ``include`` syntax if omitted)
        """
        self._cache = cache if cache is not None else AnalysisCache()
        self._parser = parser or IncludeParser()

    @property
    def cache(self) -> AnalysisCache:
        return self._cache

    async def build_file_tree(
        self,
        archive_id: str,
        entry_path: str,
        content_provider: ContentProvider,
        missing_files: Collection[str] | None = None,
    ) -> TreeNode:
        """Resolve the include tree rooted at ``entry_path``.

        Args:
            archive_id: Archive identity
            entry_path: Entry file to start from
            content_provider: Source of file contents
            missing_files: Paths the analyzer reported as unresolvable

        Returns:
            Root node of the tree (cached per archive and entry)
        """
        cached = self._cache.get_tree(archive_id, entry_path)
        if cached is not None:
            log.debug(LogEventNames.TREE_CACHE_HIT, archive_id=archive_id, entry_path=entry_path)
            return cached

        root = TreeNode(path=entry_path)
        await self._expand(
            root,
            archive_id,
            content_provider,
            reported_missing=list(missing_files or ()),
            visited=set(),
            path_stack=(),
        )

        self._cache.set_tree(archive_id, entry_path, root)

        nodes = list(root.walk())
        log.info(
            LogEventNames.TREE_BUILT,
            archive_id=archive_id,
            entry_path=entry_path,
            nodes=len(nodes),
            missing=sum(1 for node in nodes if node.missing),
            circular=sum(1 for node in nodes if node.circular),
        )
        return root

    async def _expand(
        self,
        node: TreeNode,
        archive_id: str,
        content_provider: ContentProvider,
        reported_missing: list[str],
        visited: set[str],
        path_stack: tuple[str, ...],
    ) -> None:
        key = _normalize(node.path)

        if key in path_stack:
            node.circular = True
            log.debug(LogEventNames.CIRCULAR_INCLUDE, archive_id=archive_id, path=node.path)
            return

        if key in visited:
            return
        visited.add(key)

        # Only a report naming this same file counts, never a nested namesake.
        if any(paths_match(node.path, reported) for reported in reported_missing):
            node.missing = True
            log.debug(
                LogEventNames.MISSING_INCLUDE,
                archive_id=archive_id,
                path=node.path,
                reported=True,
            )
            return

        content = await self._fetch(archive_id, node.path, content_provider)
        if content is None:
            node.missing = True
            log.debug(
                LogEventNames.MISSING_INCLUDE,
                archive_id=archive_id,
                path=node.path,
                reported=False,
            )
            return

        node.children = [TreeNode(path=target) for target in self._parser.parse(content)]

        branch = (*path_stack, key)
        for child in node.children:
            await self._expand(
                child,
                archive_id,
                content_provider,
                reported_missing,
                visited,
                branch,
            )

    async def _fetch(
        self,
        archive_id: str,
        path: str,
        content_provider: ContentProvider,
    ) -> str | None:
        if self._cache.has_content(archive_id, path):
            return self._cache.get_content(archive_id, path)

        try:
            content = await content_provider.get(archive_id, path)
        except OSError as e:
            log.warning(
                LogEventNames.CONTENT_READ_FAILED,
                archive_id=archive_id,
                path=path,
                error=str(e),
            )
            content = None

        self._cache.set_content(archive_id, path, content)
        return content
