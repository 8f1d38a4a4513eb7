"""Structure-preserving edits on the tree projection.

All functions take a forest and return a new one. Only the edited node and
its ancestors are copied; every other node keeps its object identity, so
UI state attached to untouched nodes (such as is_open) survives the edit.
"""

import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional

from wp_architect.models import Page, PageStatus
from .arena import PathCopier, TreeArena
from .errors import InvalidMoveError, InvalidPatchError
from .models import TreeNode

logger = logging.getLogger(__name__)

# Keys that change tree shape; those go through move_node instead
STRUCTURAL_FIELDS = frozenset({'id', 'parent_id', 'children'})

PATCHABLE_FIELDS = frozenset(
    f.name for f in dataclasses.fields(TreeNode)
) - STRUCTURAL_FIELDS


def move_node(
    forest: List[TreeNode],
    node_id: str,
    new_parent_id: Optional[str],
    index: int
) -> List[TreeNode]:
    """Move a node and its whole subtree to a new position.

    The node is detached first, then inserted at ``index`` among the new
    parent's children (the root list when new_parent_id is None). Indexes
    past the end append. When the parent changes, the previous parent is
    recorded in moved_from_parent_id.

    Args:
        forest: Current forest (not modified)
        node_id: Node to move
        new_parent_id: Target parent id, or None for root level
        index: Target sibling index

    Returns:
        The updated forest; the input forest if node_id is unknown

    Raises:
        InvalidMoveError: If the target parent is unknown or inside the moved subtree
    """
    arena = TreeArena(forest)
    node = arena.get(node_id)
    if node is None:
        logger.warning(f"move_node: node {node_id} not found, tree unchanged")
        return forest

    if new_parent_id is not None:
        if new_parent_id not in arena:
            raise InvalidMoveError(node_id, new_parent_id, "target parent does not exist")
        if new_parent_id == node_id or arena.is_ancestor(node_id, new_parent_id):
            raise InvalidMoveError(node_id, new_parent_id, "target lies inside the moved subtree")

    old_parent_id = arena.parent_of[node_id]

    editor = PathCopier(arena)
    editor.detach(node_id)

    moved = dataclasses.replace(node, parent_id=new_parent_id, children=list(node.children))
    if old_parent_id != new_parent_id:
        moved.moved_from_parent_id = old_parent_id

    siblings = editor.children_of(new_parent_id)
    siblings.insert(max(0, min(index, len(siblings))), moved)

    logger.debug(f"Moved {node_id} from {old_parent_id} to {new_parent_id} at index {index}")
    return editor.roots


def _coerce_updates(updates: Mapping[str, Any]) -> Dict[str, Any]:
    structural = STRUCTURAL_FIELDS & set(updates)
    if structural:
        raise ValueError(
            f"patch_node cannot change {', '.join(sorted(structural))}; use move_node"
        )
    unknown = set(updates) - PATCHABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown page fields: {', '.join(sorted(unknown))}")

    coerced = dict(updates)
    if isinstance(coerced.get('status'), str):
        coerced['status'] = PageStatus(coerced['status'])
    return coerced


def patch_node(
    forest: List[TreeNode],
    node_id: str,
    **fields: Any
) -> List[TreeNode]:
    """Merge field updates into one node without changing tree shape.

    Args:
        forest: Current forest (not modified)
        node_id: Node to update
        **fields: Field name to new value (structural fields are refused)

    Returns:
        The updated forest; the input forest if node_id is unknown

    Raises:
        ValueError: If fields names structural or unknown fields
        InvalidPatchError: If the result breaks a page invariant
    """
    coerced = _coerce_updates(fields)

    arena = TreeArena(forest)
    if node_id not in arena:
        logger.debug(f"patch_node: node {node_id} not found, tree unchanged")
        return forest

    editor = PathCopier(arena)
    node = editor.writable(node_id)
    for name, value in coerced.items():
        setattr(node, name, value)

    try:
        node.validate()
    except ValueError as e:
        raise InvalidPatchError(node_id, str(e)) from e

    return editor.roots


def patch_pages(pages: List[Page], page_id: str, **fields: Any) -> List[Page]:
    """Flat-list counterpart of patch_node.

    Raises:
        ValueError: If fields names structural or unknown fields
        InvalidPatchError: If the result breaks a page invariant
    """
    coerced = _coerce_updates(fields)
    coerced.pop('is_open', None)
    result = []
    for page in pages:
        if page.id == page_id:
            page = dataclasses.replace(page, **coerced)
            try:
                page.validate()
            except ValueError as e:
                raise InvalidPatchError(page_id, str(e)) from e
        result.append(page)
    return result


def update_tree_images(forest: List[TreeNode], image_map: Mapping[str, str]) -> List[TreeNode]:
    """Replace thumbnail URLs for every node id present in image_map."""
    arena = TreeArena(forest)
    editor = PathCopier(arena)
    for node_id, url in image_map.items():
        if node_id in arena:
            editor.writable(node_id).thumbnail_url = url
    return editor.roots
