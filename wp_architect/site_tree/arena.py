"""Id-indexed view over a forest with copy-on-write editing.

TreeArena indexes an existing forest (id -> node, id -> parent id) without
copying it. PathCopier turns an edit at one node into fresh copies of that
node and its ancestors only; every other subtree keeps its object identity.
The input forest is never mutated, so callers can keep using their old
reference.
"""

import dataclasses
import logging
from typing import Dict, List, Optional

from .models import TreeNode

logger = logging.getLogger(__name__)


class TreeArena:
    """O(1) node lookup and parent pointers for a forest.

    Attributes:
        roots: The indexed forest (not copied)
        nodes: Node by id
        parent_of: Structural parent id by node id (None for roots)
    """

    def __init__(self, forest: List[TreeNode]):
        self.roots = forest
        self.nodes: Dict[str, TreeNode] = {}
        self.parent_of: Dict[str, Optional[str]] = {}

        stack = [(node, None) for node in reversed(forest)]
        while stack:
            node, parent_id = stack.pop()
            if node.id in self.nodes:
                logger.warning(f"Node {node.id} appears twice in the tree; ignoring second copy")
                continue
            self.nodes[node.id] = node
            self.parent_of[node.id] = parent_id
            stack.extend((child, node.id) for child in reversed(node.children))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def get(self, node_id: str) -> Optional[TreeNode]:
        return self.nodes.get(node_id)

    def siblings_of(self, node_id: str) -> List[TreeNode]:
        parent_id = self.parent_of[node_id]
        if parent_id is None:
            return self.roots
        return self.nodes[parent_id].children

    def index_of(self, node_id: str) -> int:
        node = self.nodes[node_id]
        return _identity_index(self.siblings_of(node_id), node)

    def is_ancestor(self, ancestor_id: str, node_id: str) -> bool:
        """Whether ancestor_id lies on the path from node_id up to its root."""
        current = self.parent_of.get(node_id)
        while current is not None:
            if current == ancestor_id:
                return True
            current = self.parent_of.get(current)
        return False


def _identity_index(nodes: List[TreeNode], target: TreeNode) -> int:
    for index, node in enumerate(nodes):
        if node is target:
            return index
    raise ValueError(f"Node {target.id} not found among its siblings")


class PathCopier:
    """Copy-on-write editor over a TreeArena.

    ``writable(node_id)`` returns a private copy of the node, copying its
    ancestors on the way up so the copy is reachable from ``roots``. Each
    node is copied at most once per editor.

    Example:
        >>> editor = PathCopier(TreeArena(forest))
        >>> editor.writable("42").title = "Renamed"
        >>> new_forest = editor.roots
    """

    def __init__(self, arena: TreeArena):
        self.arena = arena
        self.roots: List[TreeNode] = list(arena.roots)
        self._copies: Dict[str, TreeNode] = {}

    def children_of(self, parent_id: Optional[str]) -> List[TreeNode]:
        """Writable child list of a parent (the root list for None)."""
        if parent_id is None:
            return self.roots
        return self.writable(parent_id).children

    def writable(self, node_id: str) -> TreeNode:
        if node_id in self._copies:
            return self._copies[node_id]

        original = self.arena.nodes[node_id]
        copy = dataclasses.replace(original, children=list(original.children))
        self._copies[node_id] = copy

        siblings = self.children_of(self.arena.parent_of[node_id])
        siblings[_identity_index(siblings, original)] = copy
        return copy

    def detach(self, node_id: str) -> TreeNode:
        """Remove a node (with its subtree) from its current sibling list."""
        original = self.arena.nodes[node_id]
        siblings = self.children_of(self.arena.parent_of[node_id])
        current = self._copies.get(node_id, original)
        return siblings.pop(_identity_index(siblings, current))
