"""Keeps the flat page list and its tree projection in step.

The flat list stays the source of truth; every edit returns a new SiteMap
whose pages were canonicalized from the edited tree, so both views always
describe the same hierarchy.
"""

import dataclasses
import logging
from typing import Any, List, Optional, Tuple

from wp_architect.models import Page
from .arena import TreeArena
from .errors import InvalidMoveError, PageNotFoundError
from .graph_builder import Layout, build_graph
from .models import GraphData, MoveRecord, TreeNode
from .tree_builder import build_tree, flatten_tree
from .tree_editor import move_node, patch_node, patch_pages

logger = logging.getLogger(__name__)


class SiteMap:
    """Immutable pair of (pages, tree) for one project.

    Attributes:
        pages: Canonical flat page list
        tree: Forest built from pages
    """

    def __init__(self, pages: List[Page], tree: Optional[List[TreeNode]] = None):
        self.pages = list(pages)
        self.tree = tree if tree is not None else build_tree(self.pages)

    def __len__(self) -> int:
        return len(self.pages)

    def __contains__(self, page_id: object) -> bool:
        return any(page.id == page_id for page in self.pages)

    def get(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def move(
        self,
        page_id: str,
        new_parent_id: Optional[str],
        index: int
    ) -> Tuple['SiteMap', MoveRecord]:
        """Move a page (and its subtree) and describe the move.

        Returns:
            Tuple of (new SiteMap, MoveRecord)

        Raises:
            PageNotFoundError: If page_id is not in the site map
            InvalidMoveError: If the target parent is invalid
        """
        arena = TreeArena(self.tree)
        if page_id not in arena:
            raise PageNotFoundError(page_id)

        old_parent_id = arena.parent_of[page_id]
        old_index = arena.index_of(page_id)

        tree = move_node(self.tree, page_id, new_parent_id, index)
        moved_arena = TreeArena(tree)
        record = MoveRecord(
            page_id=page_id,
            old_parent_id=old_parent_id,
            new_parent_id=new_parent_id,
            old_menu_order=old_index,
            new_menu_order=moved_arena.index_of(page_id),
        )

        logger.info(f"Moved page {page_id}: {old_parent_id} -> {new_parent_id}")
        return SiteMap(flatten_tree(tree), tree), record

    def patch(self, page_id: str, **fields: Any) -> 'SiteMap':
        """Update fields of one page in both the list and the tree.

        Raises:
            PageNotFoundError: If page_id is not in the site map
            ValueError: If fields names structural or unknown fields
            InvalidPatchError: If the result breaks a page invariant
        """
        if page_id not in self:
            raise PageNotFoundError(page_id)

        tree = patch_node(self.tree, page_id, **fields)
        pages = patch_pages(self.pages, page_id, **fields)
        return SiteMap(pages, tree)

    def add_page(self, page: Page) -> 'SiteMap':
        """Add a new page (typically a ghost) under an existing parent.

        Raises:
            InvalidMoveError: If the id is taken or the parent does not exist
        """
        if page.id in self:
            raise InvalidMoveError(page.id, page.parent_id, "a page with this id already exists")
        if page.parent_id is not None and page.parent_id not in self:
            raise InvalidMoveError(page.id, page.parent_id, "target parent does not exist")

        siblings = [p for p in self.pages if p.parent_id == page.parent_id]
        menu_order = max((p.menu_order for p in siblings), default=-1) + 1
        return SiteMap(self.pages + [dataclasses.replace(page, menu_order=menu_order)])

    def graph(self, direction: str = "TB", layout: Optional[Layout] = None) -> GraphData:
        return build_graph(self.pages, layout=layout, direction=direction)
