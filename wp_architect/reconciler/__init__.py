"""Reconciliation of crawled WordPress content into a consistent site map."""

from .errors import ReconciliationError, NoContentFoundError
from .models import ReconciliationReport
from .reconciler import SiteReconciler
from .domain_filter import is_same_domain
from .item_mapper import map_page, map_post, resolve_parent_id, strip_html

__all__ = [
    'ReconciliationError',
    'NoContentFoundError',
    'ReconciliationReport',
    'SiteReconciler',
    'is_same_domain',
    'map_page',
    'map_post',
    'resolve_parent_id',
    'strip_html',
]
