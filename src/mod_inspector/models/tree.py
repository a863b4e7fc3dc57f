"""Data models for include dependency trees."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TreeNode:
    """One file in a dependency tree.

    Each node is owned by its parent. A file included from two places
    appears as two distinct nodes.
    """

    path: str
    children: list[TreeNode] = field(default_factory=list)
    missing: bool = False
    circular: bool = False

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and all descendants, depth first, pre-order."""
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count(self) -> int:
        """Total number of nodes, this one included."""
        return sum(1 for _ in self.walk())

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "missing": self.missing,
            "circular": self.circular,
            "children": [child.to_dict() for child in self.children],
        }
