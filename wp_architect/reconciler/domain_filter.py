"""Host matching that keeps a crawl on its own language site.

WPML-style multilingual setups leak items from language mirrors
(``en.example.com``) into the main site's API responses. Only a leading
``www.`` is considered insignificant.
"""

from typing import Optional
from urllib.parse import urlparse


def normalize_host(url: str) -> Optional[str]:
    """Lower-cased hostname without a leading ``www.`` (None if unparsable)."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    hostname = hostname.lower()
    if hostname.startswith('www.'):
        hostname = hostname[len('www.'):]
    return hostname


def is_same_domain(item_url: str, base_url: str) -> bool:
    """Whether an item's URL belongs to the crawl target's host.

    Items are kept when either URL is empty or cannot be parsed.

    Example:
        >>> is_same_domain("https://fme.de/about", "https://www.fme.de")
        True
        >>> is_same_domain("https://en.fme.de/about", "https://www.fme.de")
        False
    """
    if not item_url or not base_url:
        return True

    item_host = normalize_host(item_url)
    base_host = normalize_host(base_url)
    if item_host is None or base_host is None:
        return True

    return item_host == base_host
