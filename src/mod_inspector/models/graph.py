"""Projection-only graph view objects.

These are rebuilt on every projection and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class NodeKind(StrEnum):
    """What a graph node stands for."""

    FILE = "file"
    PACKAGE = "package"


class EdgeKind(StrEnum):
    """How two graph nodes are related."""

    CONTAINS = "contains"  # archive root -> top-level include
    FILE_INCLUDE = "file-include"  # file -> file it includes
    PACKAGE_DEPENDENCY = "package-dependency"  # package -> package it requires


@dataclass(frozen=True)
class GraphNode:
    """A node of the flattened graph."""

    id: str
    name: str
    kind: NodeKind = NodeKind.FILE
    path: str | None = None
    depth: int = 0  # layout hint only
    missing: bool = False
    circular: bool = False
    has_data: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": str(self.kind),
            "path": self.path,
            "depth": self.depth,
            "missing": self.missing,
            "circular": self.circular,
            "has_data": self.has_data,
        }


@dataclass(frozen=True)
class GraphEdge:
    """A directed edge between two node ids."""

    source: str
    target: str
    kind: EdgeKind

    def to_dict(self) -> dict[str, str]:
        return {"source": self.source, "target": self.target, "kind": str(self.kind)}


@dataclass
class GraphData:
    """Flattened form of a single dependency tree."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    max_depth: int = 0


@dataclass
class ProjectedGraph:
    """Combined graph of several trees and package references."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    max_depth: int = 0

    @property
    def cycle_node_ids(self) -> set[str]:
        """Ids of every node that takes part in at least one cycle."""
        return {node_id for cycle in self.cycles for node_id in cycle}

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "cycles": [list(cycle) for cycle in self.cycles],
            "max_depth": self.max_depth,
        }


@dataclass(frozen=True)
class GraphSummary:
    """Headline numbers for a projected graph."""

    total_nodes: int
    analyzed_packages: int
    external_packages: int
    edge_count: int
    cycle_count: int

    @property
    def has_cycles(self) -> bool:
        return self.cycle_count > 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total_nodes": self.total_nodes,
            "analyzed_packages": self.analyzed_packages,
            "external_packages": self.external_packages,
            "edge_count": self.edge_count,
            "cycle_count": self.cycle_count,
        }
