"""Site-structure reconciliation engine.

This module turns the raw, semi-structured output of a WordPress crawl into
the canonical flat list of Pages: fetch and map each content type, hang
posts under a blog container, rescue parents that were referenced but not
fetched, prune items whose parent never turned up, and flatten the rest
into a deterministic depth-first order.

The output guarantees that every non-null parent_id references a page in
the same list and that the parent relation forms a forest.
"""

import asyncio
import dataclasses
import logging
import re
from typing import Dict, List, Optional, Set

from wp_architect.models import ContentType, CrawlConfig, Page
from wp_architect.wp_client.api_wrapper import PAGES_ENDPOINT, POSTS_ENDPOINT, WordPressAPI
from wp_architect.wp_client.errors import HierarchyDepthError, RescueFailedError, WordPressError
from .domain_filter import is_same_domain
from .errors import NoContentFoundError
from .item_mapper import map_page, map_post, map_rescued
from .models import ReconciliationReport

logger = logging.getLogger(__name__)

# Rescue rounds per crawl; round N+1 only runs if round N recovered something
MAX_RESCUE_ROUNDS = 2

# Maximum hierarchy depth before the structure is treated as malformed
MAX_HIERARCHY_DEPTH = 50

BLOG_TITLE_PATTERN = re.compile(r'blog|news|aktuelles', re.IGNORECASE)

VIRTUAL_BLOG_ID = "virtual-blog-root"
VIRTUAL_BLOG_TITLE = "Blog / Posts"
VIRTUAL_BLOG_SUMMARY = "Automatically created container"
VIRTUAL_BLOG_THUMBNAIL = "https://picsum.photos/300/200?grayscale"
VIRTUAL_BLOG_MENU_ORDER = 9999


def deduplicate(items: List[Page]) -> List[Page]:
    """Keep the first occurrence of every id."""
    seen: Set[str] = set()
    unique = []
    for item in items:
        if item.id in seen:
            logger.debug(f"Dropping duplicate item {item.id}")
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def find_missing_parent_ids(items: List[Page]) -> List[str]:
    """Parent ids referenced by some item but absent from the set.

    Returns:
        Missing ids in first-referenced order
    """
    existing = {item.id for item in items}
    missing: Dict[str, None] = {}
    for item in items:
        if item.parent_id and item.parent_id not in existing:
            missing[item.parent_id] = None
    return list(missing)


def prune_dangling(items: List[Page]) -> List[Page]:
    """Drop every item whose parent is absent from the working set.

    An item whose parent is still absent after rescue is treated as a
    language-fallback artifact pointing into another language tree. This is
    a single pass: children of a dropped item keep their (now dangling)
    parent and are re-rooted by attach_orphans. Root items are always kept.
    """
    ids = {item.id for item in items}
    survivors = []
    for item in items:
        if item.parent_id is None or item.parent_id in ids:
            survivors.append(item)
        else:
            logger.info(
                f"Hiding item \"{item.title}\" (ID: {item.id}) because "
                f"parent {item.parent_id} cannot be found."
            )
    return survivors


def flatten_by_menu_order(items: List[Page], max_depth: int = MAX_HIERARCHY_DEPTH) -> List[Page]:
    """Depth-first pre-order walk from the roots, siblings by menu_order.

    Sibling ties keep their input order (stable sort). A visited guard stops
    the walk from looping on a cycle; items only reachable through a cycle
    are simply not emitted.

    Raises:
        HierarchyDepthError: If the hierarchy is deeper than max_depth
    """
    children_of: Dict[Optional[str], List[Page]] = {}
    for item in items:
        children_of.setdefault(item.parent_id, []).append(item)
    for siblings in children_of.values():
        siblings.sort(key=lambda page: page.menu_order or 0)

    result: List[Page] = []
    visited: Set[str] = set()

    def visit(parent_id: Optional[str], depth: int) -> None:
        if depth > max_depth:
            raise HierarchyDepthError(max_depth, parent_id)
        for child in children_of.get(parent_id, []):
            if child.id in visited:
                continue
            visited.add(child.id)
            result.append(child)
            visit(child.id, depth + 1)

    visit(None, 0)
    return result


def attach_orphans(items: List[Page], ordered: List[Page]) -> List[Page]:
    """Append items the flatten step never reached, re-rooted.

    Items below a pruned parent and members of a parent cycle are never
    reached from a root. Forcing them to root keeps the output free of
    dangling references.
    """
    reached = {item.id for item in ordered}
    orphans = [item for item in items if item.id not in reached]
    if not orphans:
        return ordered

    logger.warning(
        f"Found {len(orphans)} orphans (pruned parent or circular reference). Appending as roots."
    )
    return ordered + [dataclasses.replace(orphan, parent_id=None) for orphan in orphans]


class SiteReconciler:
    """Runs fetch, map, filter, rescue, prune and flatten for one site.

    The reconciler owns its working set for the duration of a call; nothing
    is shared between calls except the injected API.

    Example:
        >>> reconciler = SiteReconciler(WordPressAPI(transport))
        >>> pages = await reconciler.analyze_site_structure(CrawlConfig(url="https://www.fme.de"))
        >>> print(reconciler.last_report.total)
    """

    def __init__(self, api: WordPressAPI):
        """Initialize the reconciler.

        Args:
            api: WordPress API wrapper used for collection and rescue fetches
        """
        self._api = api
        self.last_report: Optional[ReconciliationReport] = None

    async def analyze_site_structure(self, config: CrawlConfig) -> List[Page]:
        """Crawl a site and return its canonical, ordered page list.

        Args:
            config: Crawl configuration

        Returns:
            Pages in depth-first pre-order, siblings by menu_order

        Raises:
            TransportExhaustedError: If the first page of an enabled endpoint fails
            MalformedResponseError: If the first page of an enabled endpoint is malformed
            HierarchyDepthError: If the hierarchy is implausibly deep
            NoContentFoundError: If nothing survives the pipeline
        """
        base_url = config.base_url
        report = ReconciliationReport()
        logger.info(f"Analyzing structure of {base_url}")

        items: List[Page] = []

        if config.include_pages:
            raw_pages = await self._api.fetch_all_items(base_url, PAGES_ENDPOINT)
            kept = [raw for raw in raw_pages if is_same_domain(raw.link, base_url)]
            report.filtered_foreign += len(raw_pages) - len(kept)
            report.fetched_pages = len(kept)
            logger.info(f"Filtered {len(raw_pages) - len(kept)} pages from other domains.")
            items.extend(map_page(raw) for raw in kept)

        if config.include_posts:
            raw_posts = await self._api.fetch_all_items(base_url, POSTS_ENDPOINT)
            kept = [raw for raw in raw_posts if is_same_domain(raw.link, base_url)]
            report.filtered_foreign += len(raw_posts) - len(kept)
            report.fetched_posts = len(kept)

            if kept:
                container_id = self._resolve_blog_container(items, base_url, report)
                items.extend(map_post(raw, container_id) for raw in kept)

        unique = deduplicate(items)
        report.duplicates = len(items) - len(unique)
        items = unique

        await self._rescue_missing_parents(base_url, items, report)

        if not items:
            raise NoContentFoundError(config.url)

        valid = prune_dangling(items)
        report.pruned = len(items) - len(valid)
        if not valid:
            raise NoContentFoundError(config.url)

        logger.info(f"Flattening tree... Kept {len(valid)} of {len(items)} items.")
        ordered = flatten_by_menu_order(valid)
        result = attach_orphans(valid, ordered)
        report.orphans = len(result) - len(ordered)
        report.total = len(result)

        self.last_report = report
        return result

    def _resolve_blog_container(
        self,
        items: List[Page],
        base_url: str,
        report: ReconciliationReport
    ) -> str:
        """Find the page posts hang under, synthesizing one if needed."""
        for item in items:
            if BLOG_TITLE_PATTERN.search(item.title):
                logger.debug(f"Attaching posts to existing page {item.id} ('{item.title}')")
                return item.id

        items.append(Page(
            id=VIRTUAL_BLOG_ID,
            title=VIRTUAL_BLOG_TITLE,
            type=ContentType.CUSTOM,
            parent_id=None,
            url=f"{base_url}/blog",
            summary=VIRTUAL_BLOG_SUMMARY,
            thumbnail_url=VIRTUAL_BLOG_THUMBNAIL,
            menu_order=VIRTUAL_BLOG_MENU_ORDER,
        ))
        report.container_created = True
        return VIRTUAL_BLOG_ID

    async def _rescue_missing_parents(
        self,
        base_url: str,
        items: List[Page],
        report: ReconciliationReport
    ) -> None:
        """Fetch referenced-but-absent parents, extending items in place.

        Fetches within a round run concurrently; rounds run one after the
        other since round 2 looks for parents of what round 1 recovered.
        """
        for round_number in range(1, MAX_RESCUE_ROUNDS + 1):
            missing = find_missing_parent_ids(items)
            if not missing:
                return

            logger.info(
                f"Rescue round {round_number}: found {len(missing)} missing parents. Fetching..."
            )
            report.rescue_rounds = round_number
            results = await asyncio.gather(
                *(self._try_rescue(base_url, parent_id) for parent_id in missing)
            )

            known = {item.id for item in items}
            rescued = []
            for page in results:
                if page is None or page.id in known:
                    continue
                if not is_same_domain(page.url, base_url):
                    logger.info(f"Discarding rescued item {page.id} from foreign host {page.url}")
                    continue
                known.add(page.id)
                rescued.append(page)

            if not rescued:
                return

            logger.info(f"Rescued {len(rescued)} items.")
            items.extend(rescued)
            report.rescued += len(rescued)

    async def _rescue_item(self, base_url: str, page_id: str) -> Page:
        """Fetch and map one missing parent.

        Raises:
            RescueFailedError: If the id is invalid or the fetch failed
        """
        try:
            raw = await self._api.fetch_page_by_id(base_url, page_id)
        except (WordPressError, ValueError) as e:
            raise RescueFailedError(page_id, str(e)) from e
        return map_rescued(raw, page_id)

    async def _try_rescue(self, base_url: str, page_id: str) -> Optional[Page]:
        """_rescue_item with failures logged and absorbed."""
        try:
            return await self._rescue_item(base_url, page_id)
        except RescueFailedError as e:
            logger.info(str(e))
            return None
