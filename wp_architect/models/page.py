"""Canonical page data model."""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional


class ContentType(str, Enum):
    """Kind of item a Page represents."""
    PAGE = "page"
    POST = "post"
    CUSTOM = "custom"
    GHOST = "ghost"


class PageStatus(str, Enum):
    """Workflow tag a user can put on a page while restructuring."""
    NEUTRAL = "neutral"
    MOVE = "move"
    ACTIVE = "active"
    ARCHIVED = "archived"
    REDIRECT = "redirect"
    NEW = "new"
    REMOVE = "remove"
    UPDATE = "update"
    MERGE = "merge"
    HIDE_IN_NAVIGATION = "hide_in_navigation"
    GHOST = "ghost"


MIN_RELEVANCE = 1
MAX_RELEVANCE = 5


@dataclass
class Page:
    """One node of the site map.

    The flat, ordered list of Pages produced by the reconciler is the single
    source of truth; trees and graphs are projections of it.

    Attributes:
        id: Stable identifier from the source system (unique per crawl)
        title: Display title (plain text)
        type: Page, post, custom container or ghost placeholder
        parent_id: Parent page id (None for root pages)
        url: Canonical URL ('' for ghost pages)
        summary: Plain-text summary, HTML stripped
        thumbnail_url: Featured image or placeholder image URL
        menu_order: Sibling sort key, only meaningful among siblings
        status: Optional workflow tag
        notes: Free-form user notes
        owner_id: Reference to an externally managed owner
        relevance: Relevance score 1-5
        moved_from_parent_id: Parent before the most recent move
        merge_target_id: Master page of a merge (only with status=merge)
    """
    id: str
    title: str
    type: ContentType
    parent_id: Optional[str]
    url: str = ""
    summary: str = ""
    thumbnail_url: str = ""
    menu_order: int = 0
    status: Optional[PageStatus] = None
    notes: Optional[str] = None
    owner_id: Optional[str] = None
    relevance: Optional[int] = None
    moved_from_parent_id: Optional[str] = None
    merge_target_id: Optional[str] = None

    def validate(self) -> None:
        """Check field-level invariants.

        Raises:
            ValueError: If relevance is out of range or merge_target_id is set
                without status=merge
        """
        if self.relevance is not None:
            if isinstance(self.relevance, bool) or not isinstance(self.relevance, int):
                raise ValueError(f"relevance must be an integer, got {self.relevance!r}")
            if not MIN_RELEVANCE <= self.relevance <= MAX_RELEVANCE:
                raise ValueError(
                    f"relevance must be between {MIN_RELEVANCE} and {MAX_RELEVANCE}, "
                    f"got {self.relevance}"
                )
        if self.merge_target_id is not None and self.status != PageStatus.MERGE:
            raise ValueError("merge_target_id is only valid when status is 'merge'")
        if self.merge_target_id is not None and self.merge_target_id == self.id:
            raise ValueError("a page cannot be merged into itself")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain types (enums become their string values)."""
        data = asdict(self)
        data['type'] = self.type.value
        data['status'] = self.status.value if self.status is not None else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Page':
        """Build a Page from a dict produced by to_dict (unknown keys ignored).

        Raises:
            ValueError: If required keys are missing or enum values are unknown
        """
        missing = [key for key in ('id', 'title', 'type') if key not in data]
        if missing:
            raise ValueError(f"Page record missing required keys: {', '.join(missing)}")

        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values['id'] = str(values['id'])
        values['type'] = ContentType(values['type'])
        values.setdefault('parent_id', None)
        if values['parent_id'] is not None:
            values['parent_id'] = str(values['parent_id'])
        if values.get('status') is not None:
            values['status'] = PageStatus(values['status'])
        if values.get('menu_order') is None:
            values['menu_order'] = 0
        return cls(**values)
