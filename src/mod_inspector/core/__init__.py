"""Core analysis components.

This module exports the main analysis classes and functions:
- path_to_segments / paths_match / find_best_path_match: fuzzy path matching
- TranscriptParser: Reads analyzer transcripts
- ErrorAttributor: Attributes transcript errors to source files
- IncludeParser: Extracts static include targets from Lua source
- DependencyTreeBuilder / AnalysisCache: Resolves include trees
- GraphProjector: Flattens trees into a cycle-checked graph
- ModInspector: Session orchestrator
"""

from mod_inspector.core.error_attributor import (
    AssociationStrategy,
    ErrorAttributor,
    associate_preceding_errors,
)
from mod_inspector.core.graph_projector import GraphProjector
from mod_inspector.core.include_parser import IncludeParser, parse_includes_from_lua
from mod_inspector.core.inspector import InspectorError, ModInspector, UnknownArchiveError
from mod_inspector.core.package_parser import (
    extract_dependencies,
    parse_analysis_result,
    parse_uuid,
)
from mod_inspector.core.path_matcher import find_best_path_match, path_to_segments, paths_match
from mod_inspector.core.transcript_parser import TranscriptParser
from mod_inspector.core.tree_builder import AnalysisCache, DependencyTreeBuilder

__all__ = [
    "AnalysisCache",
    "AssociationStrategy",
    "DependencyTreeBuilder",
    "ErrorAttributor",
    "GraphProjector",
    "IncludeParser",
    "InspectorError",
    "ModInspector",
    "TranscriptParser",
    "UnknownArchiveError",
    "associate_preceding_errors",
    "extract_dependencies",
    "find_best_path_match",
    "parse_analysis_result",
    "parse_includes_from_lua",
    "parse_uuid",
    "path_to_segments",
    "paths_match",
]
