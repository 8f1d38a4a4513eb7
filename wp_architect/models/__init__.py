"""Data models for site pages and crawl configuration."""

from wp_architect.models.page import ContentType, Page, PageStatus
from wp_architect.models.crawl_config import CrawlConfig

__all__ = ['ContentType', 'Page', 'PageStatus', 'CrawlConfig']
