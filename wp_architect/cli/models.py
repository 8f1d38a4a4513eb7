"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum

from wp_architect.models import CrawlConfig


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Config, store, validation or unexpected errors
    - AUTH_ERROR (3): Credentials incomplete or rejected by the site
    - NETWORK_ERROR (4): Site unreachable on every transport, or unreadable responses
    - NO_CONTENT (5): The crawl (or the project) produced no pages

    Example:
        >>> raise typer.Exit(ExitCode.NO_CONTENT)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
    NO_CONTENT = 5


@dataclass
class AppConfig:
    """Resolved settings for one CLI invocation.

    Attributes:
        crawl: What to crawl and how to authenticate
        store_dir: Root directory of the YAML page store
    """
    crawl: CrawlConfig
    store_dir: str = '.wp-architect/projects'
