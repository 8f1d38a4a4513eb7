"""Tree and graph projections of the canonical page list."""

from .arena import PathCopier, TreeArena
from .errors import InvalidMoveError, InvalidPatchError, PageNotFoundError, SiteTreeError
from .filters import PageFilter, apply_filter, hide_empty_roots, matching_ids, page_matches
from .ghost import create_ghost_page, is_ghost
from .graph_builder import (
    DIRECTIONS,
    NODE_HEIGHT,
    NODE_SEP,
    NODE_WIDTH,
    RANK_SEP,
    build_graph,
    layered_layout,
)
from .models import GraphData, GraphEdge, GraphNode, MoveRecord, Position, TreeNode
from .site_map import SiteMap
from .tree_builder import MAX_TREE_DEPTH, build_tree, count_descendants, flatten_tree
from .tree_editor import move_node, patch_node, patch_pages, update_tree_images

__all__ = [
    'SiteTreeError',
    'InvalidMoveError',
    'InvalidPatchError',
    'PageNotFoundError',
    'TreeNode',
    'Position',
    'GraphNode',
    'GraphEdge',
    'GraphData',
    'MoveRecord',
    'TreeArena',
    'PathCopier',
    'MAX_TREE_DEPTH',
    'build_tree',
    'flatten_tree',
    'count_descendants',
    'move_node',
    'patch_node',
    'patch_pages',
    'update_tree_images',
    'DIRECTIONS',
    'NODE_WIDTH',
    'NODE_HEIGHT',
    'NODE_SEP',
    'RANK_SEP',
    'build_graph',
    'layered_layout',
    'PageFilter',
    'page_matches',
    'matching_ids',
    'apply_filter',
    'hide_empty_roots',
    'create_ghost_page',
    'is_ghost',
    'SiteMap',
]
