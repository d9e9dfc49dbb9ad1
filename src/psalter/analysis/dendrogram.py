"""Dendrogram tree built from a hierarchical-clustering linkage matrix.

Rows follow the SciPy convention ``[left, right, height, count]``: ids
below ``n`` are leaves (manuscripts), id ``n + k`` is the node created by
row ``k``. The last row is the root.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


@dataclass
class DendrogramNode:
    """A leaf (manuscript) or merge node of the dendrogram."""

    id: int
    name: str = ""
    height: float = 0.0
    children: list["DendrogramNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def to_dict(self) -> dict:
        """Serialize to nested dictionary."""
        data = {"id": self.id, "name": self.name, "height": self.height}
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


def build_dendrogram(
    manuscripts: Sequence[str], linkage: Sequence[Sequence[float]]
) -> DendrogramNode | None:
    """Assemble the tree; None when there are no manuscripts."""
    nodes = [DendrogramNode(id=i, name=name) for i, name in enumerate(manuscripts)]
    if not nodes:
        return None

    for row_index, row in enumerate(linkage):
        left, right = int(row[0]), int(row[1])
        for ref in (left, right):
            if ref < 0 or ref >= len(nodes):
                raise ValueError(
                    f"Linkage row {row_index} references unknown node {ref}"
                )
        nodes.append(
            DendrogramNode(
                id=len(nodes),
                height=float(row[2]),
                children=[nodes[left], nodes[right]],
            )
        )

    return nodes[-1]


def leaf_order(node: DendrogramNode | None) -> list[str]:
    """Leaf names in depth-first, left-to-right order."""
    if node is None:
        return []
    if node.is_leaf:
        return [node.name]
    order = []
    for child in node.children:
        order.extend(leaf_order(child))
    return order
