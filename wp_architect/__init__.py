"""WordPress site-structure architect.

Crawls a WordPress site's REST API, reconciles pages and posts into a
consistent hierarchical site map, and provides tree and graph projections
that stay consistent under interactive restructuring.
"""

__version__ = "0.1.0"
