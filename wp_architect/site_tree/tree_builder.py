"""Conversion between the canonical flat page list and the nested tree.

build_tree groups pages under their parents, orders each level by
menu_order and then puts the biggest root sections first so they surface
at the top of the tree view. flatten_tree is the inverse and recomputes
parent_id and menu_order from the current tree shape, which is how a
drag-and-drop edit becomes canonical again.
"""

import logging
from typing import Dict, List, Optional, Set

from wp_architect.models import Page
from wp_architect.wp_client.errors import HierarchyDepthError
from .models import TreeNode

logger = logging.getLogger(__name__)

# Site hierarchies are shallow in practice; anything deeper is a broken structure
MAX_TREE_DEPTH = 50


def _safe_parent_id(page: Page) -> Optional[str]:
    # Stored data may still carry WordPress's "0" root sentinel
    if page.parent_id in (None, '', '0'):
        return None
    return page.parent_id


def count_descendants(node: TreeNode, depth: int = 0) -> int:
    """Total number of nodes below this one.

    Raises:
        HierarchyDepthError: If the subtree is deeper than MAX_TREE_DEPTH
    """
    if depth > MAX_TREE_DEPTH:
        raise HierarchyDepthError(MAX_TREE_DEPTH, node.id)
    return sum(1 + count_descendants(child, depth + 1) for child in node.children)


def _sort_by_menu_order(nodes: List[TreeNode], depth: int = 0) -> None:
    if depth > MAX_TREE_DEPTH:
        raise HierarchyDepthError(MAX_TREE_DEPTH)
    nodes.sort(key=lambda node: node.menu_order or 0)
    for node in nodes:
        if node.children:
            _sort_by_menu_order(node.children, depth + 1)


def _reachable_ids(roots: List[TreeNode]) -> Set[str]:
    reached: Set[str] = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        if node.id in reached:
            continue
        reached.add(node.id)
        stack.extend(node.children)
    return reached


def build_tree(pages: List[Page]) -> List[TreeNode]:
    """Build the nested forest shown by the tree view.

    Pages whose parent is absent become roots. Pages only reachable through
    a parent cycle are detached from their parent and promoted to roots so
    nothing disappears from the view. All nodes start collapsed.

    Args:
        pages: Flat page list (any order)

    Returns:
        Root nodes, largest sections first; each level below ordered by menu_order

    Raises:
        HierarchyDepthError: If the hierarchy is deeper than MAX_TREE_DEPTH
    """
    node_map: Dict[str, TreeNode] = {}
    for page in pages:
        if page.id in node_map:
            logger.warning(f"Duplicate page id {page.id}; keeping first occurrence")
            continue
        node_map[page.id] = TreeNode.from_page(page)

    roots: List[TreeNode] = []
    for node in node_map.values():
        parent_id = _safe_parent_id(node)
        if parent_id and parent_id != node.id and parent_id in node_map:
            node_map[parent_id].children.append(node)
        else:
            roots.append(node)

    reached = _reachable_ids(roots)
    if len(reached) < len(node_map):
        for node in node_map.values():
            if node.id in reached:
                continue
            logger.warning(f"Page {node.id} is part of a parent cycle; promoting it to root")
            parent = node_map[_safe_parent_id(node)]
            parent.children = [child for child in parent.children if child is not node]
            roots.append(node)
            reached |= _reachable_ids([node])

    _sort_by_menu_order(roots)

    weights = {node.id: count_descendants(node) for node in roots}
    roots.sort(key=lambda node: weights[node.id], reverse=True)
    return roots


def flatten_tree(
    forest: List[TreeNode],
    parent_id: Optional[str] = None,
    depth: int = 0
) -> List[Page]:
    """Flatten a forest back to pages in pre-order.

    parent_id is taken from the tree position and menu_order becomes the
    sibling index.

    Raises:
        HierarchyDepthError: If the forest is deeper than MAX_TREE_DEPTH
    """
    if depth > MAX_TREE_DEPTH:
        raise HierarchyDepthError(MAX_TREE_DEPTH, parent_id)

    flat: List[Page] = []
    for index, node in enumerate(forest):
        page = node.to_page()
        page.parent_id = parent_id
        page.menu_order = index
        flat.append(page)
        if node.children:
            flat.extend(flatten_tree(node.children, node.id, depth + 1))
    return flat
