"""Crawl configuration data model."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CrawlConfig:
    """Inbound configuration for one reconciliation run.

    Attributes:
        url: Target site root (required)
        include_pages: Fetch the pages endpoint
        include_posts: Fetch the posts endpoint and hang posts under a blog container
        include_custom: Reserved for custom post types, unused by the reconciler
        username: Optional WordPress user for HTTP Basic auth
        app_password: Optional application password for HTTP Basic auth
    """
    url: str
    include_pages: bool = True
    include_posts: bool = False
    include_custom: bool = False
    username: Optional[str] = None
    app_password: Optional[str] = None

    @property
    def base_url(self) -> str:
        """Target URL with a single trailing slash removed."""
        return self.url[:-1] if self.url.endswith('/') else self.url
