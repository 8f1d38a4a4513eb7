"""API wrapper for the WordPress REST API (wp/v2).

This module builds collection and single-item URLs, drives sequential
pagination through the fallback transport, and decodes every response into
validated RawContentItem records.
"""

import logging
import re
from typing import List

from .errors import MalformedResponseError, TransportExhaustedError
from .schemas import RawContentItem, decode_collection, decode_item
from .transport import FallbackTransport

logger = logging.getLogger(__name__)

PAGES_ENDPOINT = "/wp-json/wp/v2/pages"
POSTS_ENDPOINT = "/wp-json/wp/v2/posts"

# Items requested per collection page
PER_PAGE = 50

# Page-count ceiling per endpoint (30 pages / 1,500 items)
MAX_PAGES = 30


class WordPressAPI:
    """Thin wrapper over the pages/posts REST endpoints.

    Example:
        >>> api = WordPressAPI(FallbackTransport(client))
        >>> items = await api.fetch_all_items("https://example.com", PAGES_ENDPOINT)
    """

    def __init__(self, transport: FallbackTransport):
        """Initialize the wrapper.

        Args:
            transport: Transport used for every HTTP GET
        """
        self._transport = transport

    @staticmethod
    def collection_url(base_url: str, endpoint_path: str, page: int) -> str:
        separator = '&' if '?' in endpoint_path else '?'
        return f"{base_url}{endpoint_path}{separator}per_page={PER_PAGE}&page={page}&_embed"

    @staticmethod
    def _validate_page_id(page_id: str) -> None:
        """Validate that a page ID is numeric.

        WordPress post ids are always numeric; anything else would be spliced
        into the request path.

        Raises:
            ValueError: If page_id is not a valid numeric string
        """
        if not page_id or not str(page_id).strip():
            raise ValueError("page_id cannot be empty")

        if not re.match(r'^\d+$', str(page_id).strip()):
            raise ValueError(
                f"Invalid page_id format: '{page_id}'. "
                f"Page IDs must contain only numeric characters."
            )

    async def fetch_all_items(self, base_url: str, endpoint_path: str) -> List[RawContentItem]:
        """Fetch every item of a collection endpoint, one page at a time.

        Pagination stops on a short page, an empty page, the MAX_PAGES
        ceiling, or an error on any page after the first.

        Args:
            base_url: Site root without trailing slash
            endpoint_path: Collection path, e.g. PAGES_ENDPOINT

        Returns:
            All decoded items in response order

        Raises:
            TransportExhaustedError: If the first page cannot be fetched
            MalformedResponseError: If the first page is not a valid collection
        """
        all_items: List[RawContentItem] = []
        page = 1

        while page <= MAX_PAGES:
            url = self.collection_url(base_url, endpoint_path, page)

            try:
                payload = await self._transport.fetch_json(url)
                items = decode_collection(payload)
            except (TransportExhaustedError, MalformedResponseError) as e:
                if page == 1:
                    raise
                logger.warning(f"Error fetching page {page} of {endpoint_path}: {e}")
                logger.warning("Stopping pagination due to error on subsequent page.")
                break

            if not items:
                break

            all_items.extend(items)
            logger.info(f"Page {page} of {endpoint_path} loaded: {len(items)} items.")

            if len(items) < PER_PAGE:
                break
            page += 1

        return all_items

    async def fetch_page_by_id(self, base_url: str, page_id: str) -> RawContentItem:
        """Fetch a single page by id (used to rescue missing parents).

        Args:
            base_url: Site root without trailing slash
            page_id: Numeric WordPress page id

        Returns:
            The decoded page record

        Raises:
            ValueError: If page_id is not numeric
            TransportExhaustedError: If the page cannot be fetched
            MalformedResponseError: If the response is not a valid record
        """
        self._validate_page_id(page_id)
        url = f"{base_url}{PAGES_ENDPOINT}/{str(page_id).strip()}?_embed"
        payload = await self._transport.fetch_json(url)
        return decode_item(payload)
