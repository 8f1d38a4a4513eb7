"""Data models for the tree and graph projections.

TreeNode extends Page with an owned child list and a UI-only expand flag.
GraphNode and GraphEdge are the positioned projection used by the flow
view; positions are presentational only.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import List, Optional

from wp_architect.models import Page


@dataclass
class TreeNode(Page):
    """A Page with its children.

    Attributes:
        children: Child nodes, owned exclusively by this node
        is_open: Transient expand/collapse state of the tree view
    """
    children: List['TreeNode'] = field(default_factory=list)
    is_open: bool = False

    @classmethod
    def from_page(cls, page: Page) -> 'TreeNode':
        values = {f.name: getattr(page, f.name) for f in fields(Page)}
        return cls(**values)

    def to_page(self) -> Page:
        values = {f.name: getattr(self, f.name) for f in fields(Page)}
        return Page(**values)


@dataclass
class Position:
    """Top-left corner of a node in diagram coordinates."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class GraphNode:
    """One page placed on the flow diagram."""
    id: str
    data: Page
    position: Position = field(default_factory=Position)
    type: str = "custom"
    source_position: str = "bottom"
    target_position: str = "top"


@dataclass
class GraphEdge:
    """Parent-to-child connector."""
    id: str
    source: str
    target: str
    type: str = "smoothstep"


@dataclass
class GraphData:
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class MoveRecord:
    """Audit entry for one reparenting or reordering.

    Attributes:
        page_id: The moved page
        old_parent_id: Parent before the move (None for root)
        new_parent_id: Parent after the move (None for root)
        old_menu_order: Sibling index before the move
        new_menu_order: Sibling index after the move
        moved_at: ISO 8601 timestamp (UTC)
    """
    page_id: str
    old_parent_id: Optional[str]
    new_parent_id: Optional[str]
    old_menu_order: int
    new_menu_order: int
    moved_at: str = field(default_factory=_utc_now)
