"""Typed exception hierarchy for WordPress REST API errors.

This module defines all custom exceptions used by the WordPress client
library. All exceptions inherit from WordPressError base class for easy
catching and include descriptive messages with context to help with
debugging.
"""

from typing import List, Optional

from wp_architect.errors import ArchitectError


class WordPressError(ArchitectError):
    """Base exception for all WordPress-related errors."""
    pass


class InvalidCredentialsError(WordPressError):
    """Raised when credentials are incomplete (username without password or vice versa)."""

    def __init__(self, username: str, reason: str):
        super().__init__(
            f"Credentials are invalid (user: {username or 'unknown'}): {reason}"
        )
        self.username = username
        self.reason = reason


class TransportExhaustedError(WordPressError):
    """Raised when every transport in the fallback chain failed for one URL."""

    def __init__(self, url: str, attempted_methods: List[str], auth_rejected: bool = False):
        methods = ", ".join(attempted_methods) or "none"
        if auth_rejected:
            message = (
                f"Authentication likely rejected for {url} "
                f"(tried: {methods}). Check the application password or CORS settings."
            )
        else:
            message = f"All connection methods failed for {url} (tried: {methods})"
        super().__init__(message)
        self.url = url
        self.attempted_methods = list(attempted_methods)
        self.auth_rejected = auth_rejected


class MalformedResponseError(WordPressError):
    """Raised when a response body is not JSON-shaped or does not match its schema."""

    def __init__(self, message: str, preview: Optional[str] = None):
        full_message = message
        if preview:
            full_message = f'{message}. Preview: "{preview}..."'
        super().__init__(full_message)
        self.preview = preview


class HierarchyDepthError(MalformedResponseError):
    """Raised when a page hierarchy is deeper than the supported maximum.

    Signals a parent cycle that slipped past pruning rather than a real
    site structure.
    """

    def __init__(self, max_depth: int, page_id: Optional[str] = None):
        message = f"Page hierarchy exceeds maximum depth of {max_depth}"
        if page_id:
            message += f" (at page {page_id})"
        super().__init__(message)
        self.max_depth = max_depth
        self.page_id = page_id


class RescueFailedError(WordPressError):
    """Raised when a single missing-parent lookup fails.

    Never surfaced to callers: the reconciler absorbs it and the orphaned
    children are pruned.
    """

    def __init__(self, page_id: str, reason: Optional[str] = None):
        message = f"Could not rescue parent {page_id}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.page_id = page_id
        self.reason = reason
