"""Flattening of dependency trees and package references into one graph.

The projected graph is a display view: node ids are synthetic
(``root_id + "/" + normalized path``), depths are layout hints, and
everything is rebuilt on each call.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping, Sequence

import structlog

from mod_inspector.core.path_matcher import path_to_segments
from mod_inspector.models.analysis import PackageDependencies
from mod_inspector.models.graph import (
    EdgeKind,
    GraphData,
    GraphEdge,
    GraphNode,
    GraphSummary,
    NodeKind,
    ProjectedGraph,
)
from mod_inspector.models.tree import TreeNode
from mod_inspector.utils.logging import LogEventNames

log = structlog.get_logger()


class _GraphAccumulator:
    """Ordered, de-duplicating collection of nodes and edges."""

    def __init__(self) -> None:
        self.nodes: dict[str, GraphNode] = {}
        self.edges: list[GraphEdge] = []
        self._edge_keys: set[tuple[str, str, EdgeKind]] = set()

    def add_node(self, node: GraphNode) -> None:
        existing = self.nodes.get(node.id)
        if existing is None:
            self.nodes[node.id] = node
            return

        # First occurrence wins; flags and analyzed data accumulate.
        self.nodes[node.id] = dataclasses.replace(
            existing,
            missing=existing.missing or node.missing,
            circular=existing.circular or node.circular,
            has_data=existing.has_data or node.has_data,
            name=existing.name if existing.has_data or not node.has_data else node.name,
        )

    def add_edge(self, edge: GraphEdge) -> None:
        key = (edge.source, edge.target, edge.kind)
        if key in self._edge_keys:
            return
        self._edge_keys.add(key)
        self.edges.append(edge)


class GraphProjector:
    """Projects trees and package references into nodes, edges and cycles.

    Example:
        projector = GraphProjector()
        graph = projector.project({"mymod": tree}, [deps])
        for cycle in graph.cycles:
            print(" -> ".join(cycle))
    """

    def tree_to_graph_data(self, tree: TreeNode, root_id: str) -> GraphData:
        """Flatten one dependency tree.

        The root itself produces no node; its children link to ``root_id``
        with ``contains`` edges, deeper files link to their parent file
        with ``file-include`` edges. Depth counts from the root's children.

        Args:
            tree: Root of a dependency tree
            root_id: Id of the archive node the tree hangs from

        Returns:
            Nodes, edges and the deepest depth seen
        """
        acc = _GraphAccumulator()
        max_depth = 0

        stack: list[tuple[TreeNode, str, int]] = [
            (child, root_id, 0) for child in reversed(tree.children)
        ]
        while stack:
            node, parent_id, depth = stack.pop()
            segments = path_to_segments(node.path)
            # Separator spellings of one file share a node.
            key = "/".join(segments) or node.path
            node_id = f"{root_id}/{key}"

            acc.add_node(
                GraphNode(
                    id=node_id,
                    name=segments[-1] if segments else node.path,
                    kind=NodeKind.FILE,
                    path=node.path,
                    depth=depth,
                    missing=node.missing,
                    circular=node.circular,
                )
            )
            kind = EdgeKind.CONTAINS if parent_id == root_id else EdgeKind.FILE_INCLUDE
            acc.add_edge(GraphEdge(source=parent_id, target=node_id, kind=kind))
            max_depth = max(max_depth, depth)

            stack.extend((child, node_id, depth + 1) for child in reversed(node.children))

        return GraphData(nodes=list(acc.nodes.values()), edges=acc.edges, max_depth=max_depth)

    def detect_cycles(
        self,
        nodes: Iterable[GraphNode],
        edges: Iterable[GraphEdge],
    ) -> list[list[str]]:
        """Find cycles with a depth-first search over the combined graph.

        Each cycle runs from the revisited node's first occurrence on the
        current path to the current node, closed by the revisited node.
        Fully visited nodes are never expanded again.

        Args:
            nodes: Graph nodes (start points, in order)
            edges: Directed edges

        Returns:
            List of cycles, each a list of node ids
        """
        adjacency: dict[str, list[str]] = {}
        for edge in edges:
            adjacency.setdefault(edge.source, []).append(edge.target)

        cycles: list[list[str]] = []
        visited: set[str] = set()
        on_stack: set[str] = set()

        def dfs(node_id: str, path: list[str]) -> None:
            if node_id in on_stack:
                start = path.index(node_id)
                cycles.append([*path[start:], node_id])
                return
            if node_id in visited:
                return

            visited.add(node_id)
            on_stack.add(node_id)
            path.append(node_id)

            for neighbor in adjacency.get(node_id, []):
                dfs(neighbor, list(path))

            on_stack.discard(node_id)

        for node in nodes:
            if node.id not in visited:
                dfs(node.id, [])

        return cycles

    def project(
        self,
        trees: Mapping[str, TreeNode],
        packages: Sequence[PackageDependencies] = (),
    ) -> ProjectedGraph:
        """Combine several trees and package references into one graph.

        Args:
            trees: Dependency tree per archive root id
            packages: Package references between archives

        Returns:
            Combined nodes and edges with the cycles found in them
        """
        acc = _GraphAccumulator()
        max_depth = 0

        for package in packages:
            acc.add_node(
                GraphNode(
                    id=package.package_id,
                    name=package.name or package.package_id,
                    kind=NodeKind.PACKAGE,
                )
            )
            for dependency in package.dependencies:
                acc.add_node(
                    GraphNode(
                        id=dependency,
                        name=dependency,
                        kind=NodeKind.PACKAGE,
                        has_data=False,
                    )
                )
                acc.add_edge(
                    GraphEdge(
                        source=package.package_id,
                        target=dependency,
                        kind=EdgeKind.PACKAGE_DEPENDENCY,
                    )
                )

        for root_id, tree in trees.items():
            acc.add_node(GraphNode(id=root_id, name=root_id, kind=NodeKind.PACKAGE))
            data = self.tree_to_graph_data(tree, root_id)
            for node in data.nodes:
                acc.add_node(node)
            for edge in data.edges:
                acc.add_edge(edge)
            max_depth = max(max_depth, data.max_depth)

        nodes = list(acc.nodes.values())
        cycles = self.detect_cycles(nodes, acc.edges)

        log.info(
            LogEventNames.GRAPH_PROJECTED,
            trees=len(trees),
            packages=len(packages),
            nodes=len(nodes),
            edges=len(acc.edges),
            cycles=len(cycles),
        )
        return ProjectedGraph(nodes=nodes, edges=acc.edges, cycles=cycles, max_depth=max_depth)

    @staticmethod
    def summarize(graph: ProjectedGraph) -> GraphSummary:
        """Count nodes, packages, edges and cycles of a projected graph."""
        packages = [node for node in graph.nodes if node.kind == NodeKind.PACKAGE]
        external = sum(1 for node in packages if not node.has_data)
        return GraphSummary(
            total_nodes=len(graph.nodes),
            analyzed_packages=len(packages) - external,
            external_packages=external,
            edge_count=len(graph.edges),
            cycle_count=len(graph.cycles),
        )
