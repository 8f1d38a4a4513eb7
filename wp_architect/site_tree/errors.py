"""Typed exception hierarchy for tree and graph editing errors."""

from wp_architect.errors import ArchitectError


class SiteTreeError(ArchitectError):
    """Base exception for all tree/graph projection errors."""
    pass


class InvalidMoveError(SiteTreeError):
    """Raised when a move would lose the node or create a cycle."""

    def __init__(self, node_id: str, new_parent_id: str, reason: str):
        super().__init__(
            f"Cannot move {node_id} under {new_parent_id}: {reason}"
        )
        self.node_id = node_id
        self.new_parent_id = new_parent_id
        self.reason = reason


class InvalidPatchError(SiteTreeError):
    """Raised when a field update would break a page invariant."""

    def __init__(self, node_id: str, reason: str):
        super().__init__(f"Invalid update for {node_id}: {reason}")
        self.node_id = node_id
        self.reason = reason


class PageNotFoundError(SiteTreeError):
    """Raised when an edit names a page that is not in the site map."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id
