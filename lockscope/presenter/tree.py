"""Inverse dependency tree rendering."""

from typing import Set

from rich.console import Console
from rich.text import Text
from rich.tree import Tree as RichTree

from lockscope.core.graph import DependencyGraph

CYCLE_MARKER = " ⟳"


class Tree:
    """
    Inverse dependency tree: starting from one release, each level lists the
    packages that depend on the level above, up to the workspace roots.
    """

    def __init__(self, graph: DependencyGraph) -> None:
        self.graph = graph

    def label(self, node_id: int) -> str:
        release = self.graph.release(node_id)
        return f"{release.name} {release.version}"

    def build(self, node_id: int) -> RichTree:
        root = RichTree(Text(self.label(node_id)), highlight=False)
        self._add_dependents(root, node_id, {node_id})
        return root

    def _add_dependents(self, tree_node: RichTree, node_id: int, path: Set[int]) -> None:
        for dependent in self.graph.dependents(node_id):
            # Already on the current path: show it, but don't descend again
            if dependent in path:
                tree_node.add(Text(self.label(dependent) + CYCLE_MARKER))
                continue

            child = tree_node.add(Text(self.label(dependent)))

            path.add(dependent)
            self._add_dependents(child, dependent, path)
            path.discard(dependent)

    def print_node(self, node_id: int, console: Console) -> None:
        console.print(self.build(node_id), highlight=False)
