"""Tests for the ModInspector session."""

from typing import Any
from unittest.mock import AsyncMock

import pytest
import structlog

from mod_inspector.adapters.archive import InMemoryContentProvider
from mod_inspector.config.schema import AnalysisConfig, CacheConfig, ErrorsConfig, InspectorConfig
from mod_inspector.core.inspector import ModInspector, UnknownArchiveError
from mod_inspector.core.package_parser import parse_analysis_result
from mod_inspector.core.tree_builder import AnalysisCache
from mod_inspector.models.analysis import AnalysisResult
from mod_inspector.models.diagnostics import ErrorLocationRef
from mod_inspector.models.graph import NodeKind


@pytest.fixture
def inspector() -> ModInspector:
    """Create an inspector with default configuration."""
    return ModInspector()


class TestLoad:
    """Tests for loading and removing archives."""

    def test_load_indexes_transcript(
        self,
        inspector: ModInspector,
        provider: InMemoryContentProvider,
        library_result: dict[str, Any],
    ) -> None:
        """Test that loading builds the archive's error index."""
        errors = inspector.load("chain", provider, parse_analysis_result(library_result))

        assert errors.get_files_with_errors() == ["shield/entry.lua"]
        assert inspector.errors_for("chain") is errors
        assert inspector.archive_ids == ["chain"]

    def test_load_without_result(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test an archive with no analyzer result."""
        inspector.load("chain", provider)

        state = inspector.state("chain")
        assert state.result.valid is False
        assert state.package_id == "chain"
        assert inspector.errors_for("chain").get_total_error_count() == 0

    def test_package_id_from_result(
        self,
        inspector: ModInspector,
        provider: InMemoryContentProvider,
        library_result: dict[str, Any],
    ) -> None:
        """Test that analyzed archives are known by their package id."""
        inspector.load("chain", provider, parse_analysis_result(library_result))
        assert inspector.state("chain").package_id == "com.example.shieldlib"

    def test_missing_scripts_collected(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test that reported missing scripts are kept per archive."""
        result = AnalysisResult(valid=False, stderr="Script missing: lib/gone.lua\n")
        inspector.load("chain", provider, result)
        assert inspector.state("chain").missing_files == {"lib/gone.lua"}

    def test_configured_default_file(self, provider: InMemoryContentProvider) -> None:
        """Test that unattributed errors go to the configured file."""
        config = InspectorConfig(errors=ErrorsConfig(default_file="main.lua"))
        inspector = ModInspector(config)

        errors = inspector.load("chain", provider, AnalysisResult(valid=False, stderr="[1:1] x"))
        assert errors.get_files_with_errors() == ["main.lua"]

    def test_remove(self, inspector: ModInspector, provider: InMemoryContentProvider) -> None:
        """Test forgetting an archive."""
        inspector.load("chain", provider)
        inspector.remove("chain")

        assert inspector.archive_ids == []
        with pytest.raises(UnknownArchiveError, match="chain"):
            inspector.state("chain")

    def test_remove_unknown_is_noop(self, inspector: ModInspector) -> None:
        """Test removing an archive that was never loaded."""
        inspector.remove("nothing")
        assert inspector.archive_ids == []

    def test_unknown_archive(self, inspector: ModInspector) -> None:
        """Test queries for an archive that was never loaded."""
        with pytest.raises(UnknownArchiveError):
            inspector.errors_for("nope")


class TestBuildTree:
    """Tests for build_tree."""

    @pytest.mark.asyncio
    async def test_default_entry_file(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test that the configured entry file is the default root."""
        inspector.load("chain", provider)
        tree = await inspector.build_tree("chain")

        assert tree.path == "entry.lua"
        assert tree.count() == 3

    @pytest.mark.asyncio
    async def test_explicit_entry_path(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test building from another entry file."""
        inspector.load("cyclic", provider)
        tree = await inspector.build_tree("cyclic", "a.lua")
        assert tree.children[0].children[0].circular is True

    @pytest.mark.asyncio
    async def test_configured_entry_file(self, provider: InMemoryContentProvider) -> None:
        """Test the entry file from configuration."""
        inspector = ModInspector(InspectorConfig(analysis=AnalysisConfig(entry_file="b.lua")))
        inspector.load("cyclic", provider)

        tree = await inspector.build_tree("cyclic")
        assert tree.path == "b.lua"

    @pytest.mark.asyncio
    async def test_reported_missing_script(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test that the analyzer's missing-script report marks the node."""
        result = AnalysisResult(valid=False, stderr="Script missing: helpers.lua")
        inspector.load("chain", provider, result)

        tree = await inspector.build_tree("chain")
        helpers = tree.children[0].children[0]
        assert helpers.missing is True

    @pytest.mark.asyncio
    async def test_reload_invalidates_cache(self) -> None:
        """Test that replacing an archive drops its cached tree."""
        cache = AnalysisCache()
        inspector = ModInspector(cache=cache)
        provider = InMemoryContentProvider({"m": {"entry.lua": 'include("a.lua")'}})

        inspector.load("m", provider)
        first = await inspector.build_tree("m")

        provider.add("m", {"entry.lua": "return 1"})
        inspector.load("m", provider)
        second = await inspector.build_tree("m")

        assert first.children[0].missing is True
        assert second.children == []
        assert inspector.cache is cache

    @pytest.mark.asyncio
    async def test_cache_disabled(self, provider: InMemoryContentProvider) -> None:
        """Test that nothing is kept when caching is turned off."""
        inspector = ModInspector(InspectorConfig(cache=CacheConfig(enabled=False)))
        inspector.load("chain", provider)

        first = await inspector.build_tree("chain")
        second = await inspector.build_tree("chain")

        assert first is not second
        assert inspector.cache.stats["tree_entries"] == 0

    @pytest.mark.asyncio
    async def test_unknown_archive(self, inspector: ModInspector) -> None:
        """Test building a tree for an archive that was never loaded."""
        with pytest.raises(UnknownArchiveError):
            await inspector.build_tree("nope")


class TestBuildGraph:
    """Tests for build_graph and summarize."""

    @pytest.mark.asyncio
    async def test_graph_of_several_archives(
        self,
        inspector: ModInspector,
        provider: InMemoryContentProvider,
        library_result: dict[str, Any],
    ) -> None:
        """Test combining an analyzed and an unanalyzed archive."""
        inspector.load("chain", provider, parse_analysis_result(library_result))
        inspector.load("cyclic", provider)
        inspector.load("empty", InMemoryContentProvider({"empty": {}}))

        graph = await inspector.build_graph()
        by_id = {node.id: node for node in graph.nodes}

        assert by_id["com.example.shieldlib"].kind == NodeKind.PACKAGE
        assert by_id["com.example.shieldlib/guard.lua"].depth == 0
        assert by_id["com.example.core"].has_data is False
        assert by_id["cyclic"].kind == NodeKind.PACKAGE
        assert "empty" in by_id

        summary = inspector.summarize(graph)
        assert summary.external_packages == 3
        assert summary.analyzed_packages == 3

    @pytest.mark.asyncio
    async def test_failing_archive_is_skipped(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test that one broken archive does not stop the others."""
        broken = AsyncMock()
        broken.get.side_effect = RuntimeError("decoder exploded")

        inspector.load("broken", broken)
        inspector.load("chain", provider)

        graph = await inspector.build_graph()
        ids = {node.id for node in graph.nodes}

        assert "chain/guard.lua" in ids
        assert "broken" not in ids

    @pytest.mark.asyncio
    async def test_empty_session(self, inspector: ModInspector) -> None:
        """Test projecting with no archives loaded."""
        graph = await inspector.build_graph()
        assert graph.nodes == []
        assert inspector.summarize(graph).total_nodes == 0


class _ContextRecordingProvider:
    """Provider that records the bound log context on every read."""

    def __init__(self) -> None:
        self.contexts: list[dict[str, Any]] = []

    async def get(self, archive_id: str, path: str) -> str | None:
        self.contexts.append(structlog.contextvars.get_contextvars())
        return None


class TestLogContext:
    """Tests for log context binding during tree builds."""

    @pytest.mark.asyncio
    async def test_archive_id_bound_while_building(self, inspector: ModInspector) -> None:
        """Test that reads happen with the archive id bound, and it is removed after."""
        provider = _ContextRecordingProvider()
        inspector.load("mymod", provider)

        await inspector.build_tree("mymod")

        assert provider.contexts == [{"archive_id": "mymod"}]
        assert "archive_id" not in structlog.contextvars.get_contextvars()


class TestEntries:
    """Tests for entries_for."""

    def test_entries_are_classified_and_located(
        self, inspector: ModInspector, provider: InMemoryContentProvider
    ) -> None:
        """Test transcript entries of a loaded archive."""
        stderr = "[1:1] entry.lua:10:4: bad call\nWARN: old api\n"
        inspector.load("chain", provider, AnalysisResult(valid=False, stderr=stderr))

        entries = inspector.entries_for("chain")

        assert entries[0].message == "entry.lua:10:4: bad call"
        assert entries[0].location == ErrorLocationRef(file="entry.lua", line=10, column=4)
        assert entries[1].is_warning
        assert entries[1].location is None

    def test_no_transcript(self, inspector: ModInspector, provider: InMemoryContentProvider) -> None:
        """Test an archive loaded without analyzer output."""
        inspector.load("chain", provider)
        assert inspector.entries_for("chain") == []
