"""Ghost pages: planned pages with no backing URL yet."""

import uuid
from typing import Optional

from wp_architect.models import ContentType, Page, PageStatus

GHOST_ID_PREFIX = "ghost-"


def create_ghost_page(
    title: str,
    parent_id: Optional[str] = None,
    notes: Optional[str] = None
) -> Page:
    """Create a placeholder page for a planned section.

    Raises:
        ValueError: If title is empty
    """
    if not title or not title.strip():
        raise ValueError("Ghost page title cannot be empty")

    return Page(
        id=f"{GHOST_ID_PREFIX}{uuid.uuid4().hex}",
        title=title.strip(),
        type=ContentType.GHOST,
        parent_id=parent_id,
        status=PageStatus.GHOST,
        notes=notes,
    )


def is_ghost(page: Page) -> bool:
    return page.type == ContentType.GHOST
