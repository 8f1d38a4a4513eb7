"""Mapping of raw WordPress records to canonical Pages.

Handles the untidy parts of the REST payload: rendered HTML in titles and
excerpts, WordPress's ``0`` root sentinel for parents, and optional embedded
featured media.
"""

import logging
from typing import Any, Optional

from bs4 import BeautifulSoup

from wp_architect.models import ContentType, Page
from wp_architect.wp_client.schemas import RawContentItem, embedded_media_url

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"
RESCUED_SUMMARY = "Recovered parent item"

# Length of the content-derived summary when no excerpt exists
SUMMARY_LENGTH = 150

PLACEHOLDER_IMAGE = "https://picsum.photos/300/200?random={id}"


def strip_html(html: Optional[str]) -> str:
    """Return the plain text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return " ".join(text.split())


def resolve_parent_id(raw_parent: Any) -> Optional[str]:
    """Normalize a raw parent reference.

    WordPress uses ``0`` for "no parent"; the API and proxies may also hand
    back ``"0"``, ``None``, ``False`` or an empty string. All of these mean
    root.

    Returns:
        The parent id as a string, or None for root items
    """
    if not raw_parent:
        return None
    parent = str(raw_parent).strip()
    if parent in ('', '0'):
        return None
    return parent


def featured_image_url(item: RawContentItem) -> str:
    """Embedded featured image, else a placeholder keyed by item id."""
    return embedded_media_url(item) or PLACEHOLDER_IMAGE.format(id=item.id)


def _title(item: RawContentItem, placeholder: str) -> str:
    return strip_html(item.title) or placeholder


def map_page(item: RawContentItem) -> Page:
    """Map a record from the pages endpoint."""
    summary = strip_html(item.excerpt)
    if not summary:
        summary = strip_html(item.content)[:SUMMARY_LENGTH] + "..."

    return Page(
        id=str(item.id),
        title=_title(item, UNTITLED),
        type=ContentType.PAGE,
        parent_id=resolve_parent_id(item.parent),
        url=item.link,
        summary=summary,
        thumbnail_url=featured_image_url(item),
        menu_order=item.menu_order or 0,
    )


def map_post(item: RawContentItem, container_id: str) -> Page:
    """Map a record from the posts endpoint, hung under the blog container."""
    return Page(
        id=str(item.id),
        title=_title(item, UNTITLED),
        type=ContentType.POST,
        parent_id=container_id,
        url=item.link,
        summary=strip_html(item.excerpt) or "...",
        thumbnail_url=featured_image_url(item),
        menu_order=0,
    )


def map_rescued(item: RawContentItem, requested_id: str) -> Page:
    """Map a page fetched out-of-band because it was someone's missing parent."""
    page = map_page(item)
    if not strip_html(item.title):
        page.title = f"Rescued Parent {requested_id}"
    if not strip_html(item.excerpt):
        page.summary = RESCUED_SUMMARY
    return page
