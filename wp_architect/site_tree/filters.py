"""Status/owner filtering and the "hide empty roots" view option."""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set

from wp_architect.models import Page, PageStatus

logger = logging.getLogger(__name__)


@dataclass
class PageFilter:
    """Active filter selection.

    Attributes:
        statuses: Statuses to keep (empty means any status)
        owner_ids: Owners to keep (empty means any owner)
        hide_filtered: Drop non-matching pages instead of only marking them
    """
    statuses: FrozenSet[PageStatus] = field(default_factory=frozenset)
    owner_ids: FrozenSet[str] = field(default_factory=frozenset)
    hide_filtered: bool = True

    @property
    def is_active(self) -> bool:
        return bool(self.statuses or self.owner_ids)


def page_matches(page: Page, page_filter: PageFilter) -> bool:
    if page_filter.statuses and page.status not in page_filter.statuses:
        return False
    if page_filter.owner_ids and page.owner_id not in page_filter.owner_ids:
        return False
    return True


def matching_ids(pages: List[Page], page_filter: PageFilter) -> Set[str]:
    return {page.id for page in pages if page_matches(page, page_filter)}


def apply_filter(pages: List[Page], page_filter: PageFilter) -> List[Page]:
    """Keep matching pages plus the ancestors needed to reach them.

    Returns pages unchanged when the filter is inactive or hide_filtered is
    off. Order is preserved, and every kept page's parent is kept too.
    """
    if not page_filter.is_active or not page_filter.hide_filtered:
        return pages

    by_id: Dict[str, Page] = {page.id: page for page in pages}
    keep: Set[str] = set()
    for page_id in matching_ids(pages, page_filter):
        current: Optional[str] = page_id
        while current is not None and current in by_id and current not in keep:
            keep.add(current)
            current = by_id[current].parent_id

    logger.debug(f"Filter kept {len(keep)} of {len(pages)} pages")
    return [page for page in pages if page.id in keep]


def hide_empty_roots(pages: List[Page]) -> List[Page]:
    """Drop root pages that have no children."""
    parent_ids = {page.parent_id for page in pages if page.parent_id}
    return [page for page in pages if page.parent_id or page.id in parent_ids]
