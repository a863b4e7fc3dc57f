"""Data models and transfer objects."""

from .analysis import AnalysisResult, PackageDependencies, PackageUuid
from .diagnostics import (
    ErrorLocation,
    ErrorLocationRef,
    ErrorRecord,
    FileMention,
    TranscriptEntry,
)
from .graph import (
    EdgeKind,
    GraphData,
    GraphEdge,
    GraphNode,
    GraphSummary,
    NodeKind,
    ProjectedGraph,
)
from .tree import TreeNode

__all__ = [
    # Diagnostic models
    "ErrorRecord",
    "ErrorLocation",
    "ErrorLocationRef",
    "FileMention",
    "TranscriptEntry",
    # Tree models
    "TreeNode",
    # Graph models
    "NodeKind",
    "EdgeKind",
    "GraphNode",
    "GraphEdge",
    "GraphData",
    "ProjectedGraph",
    "GraphSummary",
    # Analysis models
    "PackageUuid",
    "AnalysisResult",
    "PackageDependencies",
]
