"""Typed exception hierarchy for reconciliation errors."""

from wp_architect.errors import ArchitectError


class ReconciliationError(ArchitectError):
    """Base exception for all reconciliation errors."""
    pass


class NoContentFoundError(ReconciliationError):
    """Raised when a crawl produced no pages at all."""

    def __init__(self, url: str):
        super().__init__(
            f"No content found at {url}. Check the URL or authentication settings."
        )
        self.url = url
