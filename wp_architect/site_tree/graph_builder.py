"""Positioned node/edge projection for the flow diagram."""

import logging
from typing import Callable, Dict, List, Optional, Set, Tuple

import networkx as nx

from wp_architect.models import Page
from .models import GraphData, GraphEdge, GraphNode, Position

logger = logging.getLogger(__name__)

NODE_WIDTH = 240
NODE_HEIGHT = 80
NODE_SEP = 60
RANK_SEP = 100

DIRECTIONS = ("TB", "LR")

Size = Tuple[float, float]
Layout = Callable[[Dict[str, Size], List[Tuple[str, str]], str], Dict[str, Tuple[float, float]]]


def layered_layout(
    sizes: Dict[str, Size],
    edges: List[Tuple[str, str]],
    direction: str = "TB"
) -> Dict[str, Tuple[float, float]]:
    """Tidy layered layout for a forest.

    Each node's rank is its depth below its root. Leaves take consecutive
    slots along the breadth axis in depth-first order and every parent is
    centered over its first and last child. Components are laid out side by
    side. A component with no root (a parent cycle) is entered at its first
    node in input order.

    Args:
        sizes: Node id to (width, height)
        edges: (parent id, child id) pairs
        direction: "TB" for top-to-bottom ranks, "LR" for left-to-right

    Returns:
        Node id to center coordinates
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(sizes)
    graph.add_edges_from(edges)

    width = max((size[0] for size in sizes.values()), default=NODE_WIDTH)
    height = max((size[1] for size in sizes.values()), default=NODE_HEIGHT)

    entries = [node for node in graph.nodes if graph.in_degree(node) == 0]
    entries.extend(node for node in graph.nodes if graph.in_degree(node) > 0)

    rank: Dict[str, int] = {}
    slot: Dict[str, float] = {}
    next_slot = 0
    for entry in entries:
        if entry in rank:
            continue
        tree = nx.dfs_tree(graph, source=entry)
        rank.update(nx.single_source_shortest_path_length(tree, entry))
        for node in nx.dfs_postorder_nodes(tree, source=entry):
            children = list(tree.successors(node))
            if children:
                slot[node] = (slot[children[0]] + slot[children[-1]]) / 2
            else:
                slot[node] = next_slot
                next_slot += 1

    if direction == "LR":
        breadth_step, rank_step = height + NODE_SEP, width + RANK_SEP
        return {
            node: (rank[node] * rank_step + width / 2, slot[node] * breadth_step + height / 2)
            for node in graph.nodes
        }

    breadth_step, rank_step = width + NODE_SEP, height + RANK_SEP
    return {
        node: (slot[node] * breadth_step + width / 2, rank[node] * rank_step + height / 2)
        for node in graph.nodes
    }


def build_graph(
    pages: List[Page],
    layout: Optional[Layout] = None,
    direction: str = "TB"
) -> GraphData:
    """Build positioned graph nodes and parent edges for a page list.

    Args:
        pages: Flat page list
        layout: Callable (sizes, edges, direction) -> {id: (cx, cy)};
            defaults to layered_layout
        direction: "TB" or "LR"

    Returns:
        GraphData with one node per page and one edge per parent present in pages

    Raises:
        ValueError: If direction is not "TB" or "LR"
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {', '.join(DIRECTIONS)}, got {direction!r}")

    unique: List[Page] = []
    seen: Set[str] = set()
    for page in pages:
        if page.id in seen:
            logger.warning(f"Duplicate page id {page.id} skipped in graph")
            continue
        seen.add(page.id)
        unique.append(page)

    edges = [
        GraphEdge(id=f"e{page.parent_id}-{page.id}", source=page.parent_id, target=page.id)
        for page in unique
        if page.parent_id and page.parent_id != page.id and page.parent_id in seen
    ]

    sizes = {page.id: (NODE_WIDTH, NODE_HEIGHT) for page in unique}
    place = layout or layered_layout
    centers = place(sizes, [(edge.source, edge.target) for edge in edges], direction)

    horizontal = direction == "LR"
    nodes = []
    for page in unique:
        node = GraphNode(id=page.id, data=page)
        if page.id in centers:
            cx, cy = centers[page.id]
            node.position = Position(cx - NODE_WIDTH / 2, cy - NODE_HEIGHT / 2)
        if horizontal:
            node.source_position = "right"
            node.target_position = "left"
        nodes.append(node)

    logger.debug(f"Built graph with {len(nodes)} nodes and {len(edges)} edges ({direction})")
    return GraphData(nodes=nodes, edges=edges)
