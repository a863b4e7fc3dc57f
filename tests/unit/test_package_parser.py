"""Tests for analyzer result normalization."""

from typing import Any

import pytest

from mod_inspector.core.package_parser import (
    extract_dependencies,
    parse_analysis_result,
    parse_uuid,
)
from mod_inspector.models.analysis import UNKNOWN, UNKNOWN_VERSION, UNNAMED, AnalysisResult


class TestParseUuid:
    """Tests for parse_uuid."""

    def test_full_uuid(self) -> None:
        """Test a uuid with game, version, category and name."""
        info = parse_uuid("onb@2.0.0/player/MegamanBN6_falzar")

        assert info.game == "onb"
        assert info.version == "2.0.0"
        assert info.category == "player"
        assert info.name == "MegamanBN6_falzar"
        assert info.path == "player/MegamanBN6_falzar"

    def test_nested_path(self) -> None:
        """Test that the name is the last segment of a longer path."""
        info = parse_uuid("onb@1.0/library/effects/sparks")
        assert info.category == "library"
        assert info.name == "sparks"
        assert info.path == "library/effects/sparks"

    def test_without_game_prefix(self) -> None:
        """Test a bare package id."""
        info = parse_uuid("com.example.mod")
        assert info.name == "com.example.mod"
        assert info.game == UNKNOWN
        assert info.version == UNKNOWN_VERSION

    def test_without_path(self) -> None:
        """Test a uuid that stops after the version."""
        info = parse_uuid("onb@2.0.0")
        assert info.game == "onb"
        assert info.version == "2.0.0"
        assert info.category == UNKNOWN

    @pytest.mark.parametrize("uuid", [None, "", 42])
    def test_invalid_input(self, uuid: Any) -> None:
        """Test that unusable input gives placeholders."""
        info = parse_uuid(uuid)
        assert info.name == UNKNOWN
        assert info.path == ""


class TestParseAnalysisResult:
    """Tests for parse_analysis_result."""

    def test_library_fixture(self, library_result: dict[str, Any]) -> None:
        """Test normalization of a complete library result."""
        result = parse_analysis_result(library_result)

        assert result.valid is True
        assert result.id == "com.example.shieldlib"
        assert result.name == "Shield Library"
        assert result.game == "onb"
        assert result.version == "2.0.0"
        assert result.category == "library"
        assert result.path == "library/com.example.shieldlib"
        assert result.bytes == 2048
        assert result.is_library is True
        assert result.dependencies == ("com.example.fx", "com.example.sound")
        assert result.stderr.startswith("[4:2]")

    def test_payload_under_data(self) -> None:
        """Test the alternative payload key and fallbacks from the payload."""
        result = parse_analysis_result(
            {"data": {"id": "com.example.x", "version": "1.2.0", "category": "card"}}
        )

        assert result.valid is True
        assert result.id == "com.example.x"
        assert result.name == "com.example.x"
        assert result.version == "1.2.0"
        assert result.category == "card"
        assert result.is_library is False

    def test_uuid_category_wins(self) -> None:
        """Test that the uuid's category overrides the payload's."""
        result = parse_analysis_result(
            {"json": {"uuid": "onb@2.0.0/player/x", "category": "card", "name": "X"}}
        )
        assert result.category == "player"

    def test_missing_everything(self) -> None:
        """Test placeholders for an empty payload object."""
        result = parse_analysis_result({"json": {"description": "only this"}})

        assert result.valid is True
        assert result.id == UNKNOWN
        assert result.name == UNNAMED
        assert result.version == UNKNOWN_VERSION
        assert result.description == "only this"

    def test_failed_run_keeps_transcript(self) -> None:
        """Test a result without payload."""
        result = parse_analysis_result(
            {"success": False, "error": "engine crashed", "stderr": "[1:1] boom"}
        )

        assert result.valid is False
        assert result.error == "engine crashed"
        assert result.stderr == "[1:1] boom"

    @pytest.mark.parametrize("raw", [None, [], "text"])
    def test_invalid_structure(self, raw: Any) -> None:
        """Test input that is not a mapping."""
        result = parse_analysis_result(raw)
        assert result.valid is False
        assert result.error == "Invalid result structure"

    def test_non_string_dependencies_are_dropped(self) -> None:
        """Test that only non-empty strings are kept as dependencies."""
        result = parse_analysis_result({"json": {"id": "a", "dependencies": ["b", 3, "", None]}})
        assert result.dependencies == ("b",)


class TestExtractDependencies:
    """Tests for extract_dependencies."""

    def test_library_dependencies_merged(self, library_result: dict[str, Any]) -> None:
        """Test library and top-level dependencies, de-duplicated in order."""
        deps = extract_dependencies(parse_analysis_result(library_result))

        assert deps.package_id == "com.example.shieldlib"
        assert deps.name == "Shield Library"
        assert deps.dependencies == ("com.example.core", "com.example.fx", "com.example.sound")

    def test_non_library_ignores_data_dependencies(self) -> None:
        """Test that only libraries list dependencies under data."""
        result = AnalysisResult(
            valid=True,
            id="p",
            data={"type": "player", "dependencies": ["x"]},
            dependencies=("y",),
        )
        assert extract_dependencies(result).dependencies == ("y",)

    def test_no_dependencies(self) -> None:
        """Test a package that depends on nothing."""
        deps = extract_dependencies(AnalysisResult(valid=True, id="p"))
        assert deps.dependencies == ()
