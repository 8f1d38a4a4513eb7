"""Root of the typed exception hierarchy.

Every sub-package defines its own errors module whose base class inherits
from ArchitectError, so callers can catch any application-level failure
with a single except clause.
"""


class ArchitectError(Exception):
    """Base exception for all wp-structure-architect errors.

    Use this to catch any application-level error from the tool.
    """
    pass
