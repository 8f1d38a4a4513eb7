"""WordPress REST client library.

This package provides the transport chain (direct request plus CORS-relay
fallbacks), credential handling, validated response records and the
paginated fetcher used by the reconciler.
"""

from .errors import (
    WordPressError,
    InvalidCredentialsError,
    TransportExhaustedError,
    MalformedResponseError,
    HierarchyDepthError,
    RescueFailedError,
)
from .auth import Authenticator, Credentials
from .schemas import RawContentItem
from .transport import FallbackTransport, create_http_client
from .api_wrapper import WordPressAPI, PAGES_ENDPOINT, POSTS_ENDPOINT

__all__ = [
    "WordPressError",
    "InvalidCredentialsError",
    "TransportExhaustedError",
    "MalformedResponseError",
    "HierarchyDepthError",
    "RescueFailedError",
    "Authenticator",
    "Credentials",
    "RawContentItem",
    "FallbackTransport",
    "create_http_client",
    "WordPressAPI",
    "PAGES_ENDPOINT",
    "POSTS_ENDPOINT",
]
