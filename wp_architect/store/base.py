"""Persistence contract for crawled and edited site maps."""

from abc import ABC, abstractmethod
from typing import Any, List

from wp_architect.models import Page
from wp_architect.reconciler.reconciler import flatten_by_menu_order
from wp_architect.site_tree.models import MoveRecord


def canonical_order(pages: List[Page]) -> List[Page]:
    """Depth-first pre-order from the roots, siblings by menu_order.

    Pages no root reaches (a parent cycle, or a parent missing from
    hand-edited data) follow in their given order, unchanged.
    """
    ordered = flatten_by_menu_order(pages)
    reached = {page.id for page in ordered}
    return ordered + [page for page in pages if page.id not in reached]


class PageStore(ABC):
    """Project-scoped storage for pages and their move history.

    Pages are keyed by (project_id, page id). Implementations must make
    save_pages an upsert: pages not named in the call are left alone.
    """

    @abstractmethod
    def save_pages(self, project_id: str, pages: List[Page]) -> None:
        """Insert or replace pages by id."""

    @abstractmethod
    def get_pages(self, project_id: str) -> List[Page]:
        """Return all pages of a project in canonical_order."""

    @abstractmethod
    def patch_page(self, project_id: str, page_id: str, **fields: Any) -> Page:
        """Update fields of one page and return the stored result."""

    @abstractmethod
    def append_move(self, project_id: str, record: MoveRecord) -> None:
        """Append one entry to the project's move history."""

    @abstractmethod
    def get_history(self, project_id: str) -> List[MoveRecord]:
        """Return the move history, oldest first."""

    @abstractmethod
    def delete_page(self, project_id: str, page_id: str) -> None:
        """Delete a ghost page. Other page types cannot be deleted."""
