"""Validated records for the WordPress REST responses we consume.

The pages and posts endpoints return loosely-typed JSON. Instead of
optimistic field access, each record is decoded into a RawContentItem and
any shape mismatch fails closed with MalformedResponseError, which the
fetcher treats exactly like a transport failure.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import MalformedResponseError

RawParent = Union[int, str, bool, None]


def _rendered(data: Dict[str, Any], key: str, item_id: Any) -> str:
    """Extract ``data[key]["rendered"]`` as a string ('' when absent)."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, dict):
        raise MalformedResponseError(
            f"Item {item_id}: field '{key}' must be an object, got {type(value).__name__}"
        )
    rendered = value.get('rendered', "")
    if rendered is None:
        return ""
    if not isinstance(rendered, str):
        raise MalformedResponseError(
            f"Item {item_id}: field '{key}.rendered' must be a string, got {type(rendered).__name__}"
        )
    return rendered


def _decode_id(data: Dict[str, Any]) -> int:
    raw_id = data.get('id')
    if isinstance(raw_id, bool):
        raise MalformedResponseError("Item id must be an integer, got bool")
    if isinstance(raw_id, int):
        return raw_id
    if isinstance(raw_id, str) and raw_id.strip().isdigit():
        return int(raw_id.strip())
    raise MalformedResponseError(f"Item id must be an integer, got {raw_id!r}")


@dataclass
class RawContentItem:
    """One record from /wp/v2/pages or /wp/v2/posts.

    Attributes:
        id: WordPress post id
        link: Canonical permalink ('' when the API omitted it)
        title: Rendered title HTML
        excerpt: Rendered excerpt HTML
        content: Rendered content HTML
        parent: Raw parent reference exactly as sent (0, "0", None, False or an id)
        menu_order: Sibling sort key
        embedded: The ``_embedded`` block requested via ``_embed``
    """
    id: int
    link: str = ""
    title: str = ""
    excerpt: str = ""
    content: str = ""
    parent: RawParent = None
    menu_order: int = 0
    embedded: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> 'RawContentItem':
        """Decode and validate one raw record.

        Args:
            data: A decoded JSON value

        Returns:
            RawContentItem with validated fields

        Raises:
            MalformedResponseError: If any field has an unexpected shape
        """
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Item must be a JSON object, got {type(data).__name__}"
            )

        item_id = _decode_id(data)

        link = data.get('link', "")
        if link is None:
            link = ""
        if not isinstance(link, str):
            raise MalformedResponseError(
                f"Item {item_id}: field 'link' must be a string, got {type(link).__name__}"
            )

        parent = data.get('parent')
        if parent is not None and not isinstance(parent, (int, str, bool)):
            raise MalformedResponseError(
                f"Item {item_id}: field 'parent' has unsupported type {type(parent).__name__}"
            )

        menu_order = data.get('menu_order', 0)
        if menu_order is None:
            menu_order = 0
        if isinstance(menu_order, bool) or not isinstance(menu_order, int):
            raise MalformedResponseError(
                f"Item {item_id}: field 'menu_order' must be an integer, got {menu_order!r}"
            )

        embedded = data.get('_embedded', {})
        if embedded is None:
            embedded = {}
        if not isinstance(embedded, dict):
            raise MalformedResponseError(
                f"Item {item_id}: field '_embedded' must be an object"
            )

        return cls(
            id=item_id,
            link=link,
            title=_rendered(data, 'title', item_id),
            excerpt=_rendered(data, 'excerpt', item_id),
            content=_rendered(data, 'content', item_id),
            parent=parent,
            menu_order=menu_order,
            embedded=embedded,
        )


def _raise_for_wp_error(payload: Dict[str, Any]) -> None:
    """Raise for a WordPress error object such as ``{"code": "rest_no_route"}``."""
    code = payload.get('code')
    if code:
        message = payload.get('message') or "no message"
        raise MalformedResponseError(f"WordPress error {code}: {message}")


def decode_collection(payload: Any) -> List[RawContentItem]:
    """Decode a collection response (one page of pagination).

    Raises:
        MalformedResponseError: If the payload is not an array of valid records
    """
    if isinstance(payload, dict):
        _raise_for_wp_error(payload)
        raise MalformedResponseError("Expected a JSON array of items, got an object")
    if not isinstance(payload, list):
        raise MalformedResponseError(
            f"Expected a JSON array of items, got {type(payload).__name__}"
        )
    return [RawContentItem.from_dict(entry) for entry in payload]


def decode_item(payload: Any) -> RawContentItem:
    """Decode a single-item response.

    Raises:
        MalformedResponseError: If the payload is not a valid record
    """
    if isinstance(payload, dict):
        _raise_for_wp_error(payload)
    return RawContentItem.from_dict(payload)


def embedded_media_url(item: RawContentItem) -> Optional[str]:
    """Return the featured image URL from the embedded media block, if any."""
    media = item.embedded.get('wp:featuredmedia')
    if not isinstance(media, list) or not media:
        return None
    first = media[0]
    if not isinstance(first, dict):
        return None
    source_url = first.get('source_url')
    if isinstance(source_url, str) and source_url:
        return source_url
    return None
