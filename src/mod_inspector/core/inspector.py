"""Session orchestrator that ties the analysis components together.

This module implements the ModInspector class. It:
- Registers archives with their analyzer results and content providers
- Keeps one error index per archive, rebuilt whenever the archive is reloaded
- Builds dependency trees through a shared session cache
- Projects every archive into one cycle-checked graph
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from mod_inspector.config.schema import InspectorConfig
from mod_inspector.core.error_attributor import ErrorAttributor
from mod_inspector.core.graph_projector import GraphProjector
from mod_inspector.core.include_parser import IncludeParser
from mod_inspector.core.package_parser import extract_dependencies
from mod_inspector.core.transcript_parser import TranscriptParser
from mod_inspector.core.tree_builder import AnalysisCache, DependencyTreeBuilder
from mod_inspector.models.analysis import AnalysisResult, PackageDependencies
from mod_inspector.models.diagnostics import TranscriptEntry
from mod_inspector.models.graph import GraphSummary, ProjectedGraph
from mod_inspector.utils.logging import LogEventNames, bind_context, unbind_context

if TYPE_CHECKING:
    from mod_inspector.interfaces.content import ContentProvider
    from mod_inspector.models.tree import TreeNode

log = structlog.get_logger()


class InspectorError(Exception):
    """Base exception for inspector errors."""


class UnknownArchiveError(InspectorError):
    """Archive id was never loaded (or has been removed)."""


@dataclass
class ArchiveState:
    """Everything the session knows about one archive."""

    archive_id: str
    result: AnalysisResult
    provider: ContentProvider
    errors: ErrorAttributor
    missing_files: set[str] = field(default_factory=set)

    @property
    def package_id(self) -> str:
        """Graph id of the archive: the analyzed package id when known."""
        return self.result.id if self.result.valid else self.archive_id


class ModInspector:
    """Coordinates error attribution, tree building and graph projection.

    Example:
        inspector = ModInspector(config)
        inspector.load("mymod", provider, result)
        tree = await inspector.build_tree("mymod")
        graph = await inspector.build_graph()
    """

    def __init__(
        self,
        config: InspectorConfig | None = None,
        cache: AnalysisCache | None = None,
    ) -> None:
        """Initialize the inspector.

        Args:
            config: Application configuration (defaults if omitted)
            cache: Session cache (a new one if omitted)
        """
        self._config = config or InspectorConfig()
        self._cache = cache if cache is not None else AnalysisCache()
        self._transcripts = TranscriptParser()
        self._includes = IncludeParser(
            self._config.analysis.include_functions,
            self._config.analysis.comment_marker,
        )
        self._projector = GraphProjector()
        self._archives: dict[str, ArchiveState] = {}

    @property
    def cache(self) -> AnalysisCache:
        return self._cache

    @property
    def archive_ids(self) -> list[str]:
        return list(self._archives)

    def load(
        self,
        archive_id: str,
        provider: ContentProvider,
        result: AnalysisResult | None = None,
    ) -> ErrorAttributor:
        """Register an archive, replacing any earlier load of the same id.

        Replacing drops every cached entry of the archive and rebuilds its
        error index from the new transcript.

        Args:
            archive_id: Archive identity
            provider: Source of the archive's file contents
            result: Analyzer result for the archive, if any

        Returns:
            The archive's error index
        """
        if result is None:
            result = AnalysisResult(valid=False, error="No analyzer result")

        if archive_id in self._archives:
            self._cache.invalidate_archive(archive_id)
            log.info(LogEventNames.ARCHIVE_REPLACED, archive_id=archive_id)

        errors = ErrorAttributor(
            default_file=self._config.errors.default_file,
            parser=self._transcripts,
        )
        errors.parse_errors(result.stderr)

        self._archives[archive_id] = ArchiveState(
            archive_id=archive_id,
            result=result,
            provider=provider,
            errors=errors,
            missing_files=self._transcripts.extract_missing_scripts(result.stderr),
        )

        log.info(
            LogEventNames.ARCHIVE_LOADED,
            archive_id=archive_id,
            valid_result=result.valid,
            error_count=errors.get_total_error_count(),
        )
        return errors

    def remove(self, archive_id: str) -> None:
        """Forget an archive and its cached entries."""
        if self._archives.pop(archive_id, None) is not None:
            self._cache.invalidate_archive(archive_id)
            log.info(LogEventNames.ARCHIVE_REMOVED, archive_id=archive_id)

    def state(self, archive_id: str) -> ArchiveState:
        """Get the state of a loaded archive.

        Raises:
            UnknownArchiveError: If the archive is not loaded
        """
        try:
            return self._archives[archive_id]
        except KeyError:
            raise UnknownArchiveError(f"Archive not loaded: {archive_id}") from None

    def errors_for(self, archive_id: str) -> ErrorAttributor:
        return self.state(archive_id).errors

    def entries_for(self, archive_id: str) -> list[TranscriptEntry]:
        """Classified transcript lines of a loaded archive, in order."""
        return self._transcripts.extract_entries(self.state(archive_id).result.stderr)

    async def build_tree(self, archive_id: str, entry_path: str | None = None) -> TreeNode:
        """Build the include tree of a loaded archive.

        Args:
            archive_id: Archive identity
            entry_path: Entry file (configured entry file if omitted)

        Returns:
            Root of the dependency tree

        Raises:
            UnknownArchiveError: If the archive is not loaded
        """
        state = self.state(archive_id)
        cache = self._cache if self._config.cache.enabled else AnalysisCache()
        builder = DependencyTreeBuilder(cache, self._includes)

        bind_context(archive_id=archive_id)
        try:
            return await builder.build_file_tree(
                archive_id,
                entry_path or self._config.analysis.entry_file,
                state.provider,
                state.missing_files,
            )
        finally:
            unbind_context("archive_id")

    async def build_graph(self) -> ProjectedGraph:
        """Project every loaded archive and its package references.

        An archive whose tree cannot be built is logged and left out; the
        others are still projected.

        Returns:
            Combined graph with detected cycles
        """
        trees: dict[str, TreeNode] = {}
        packages: list[PackageDependencies] = []

        for state in list(self._archives.values()):
            if state.result.valid:
                packages.append(extract_dependencies(state.result))
            try:
                trees[state.package_id] = await self.build_tree(state.archive_id)
            except Exception as e:
                log.exception(
                    LogEventNames.ARCHIVE_SKIPPED,
                    archive_id=state.archive_id,
                    error=str(e),
                )

        return self._projector.project(trees, packages)

    def summarize(self, graph: ProjectedGraph) -> GraphSummary:
        return self._projector.summarize(graph)
