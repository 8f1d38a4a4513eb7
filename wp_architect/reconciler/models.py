"""Data models for reconciliation runs."""

from dataclasses import dataclass


@dataclass
class ReconciliationReport:
    """Counters collected during one reconciliation run.

    Attributes:
        fetched_pages: Pages kept after the domain filter
        fetched_posts: Posts kept after the domain filter
        filtered_foreign: Items dropped because their host differs from the target
        duplicates: Items dropped because their id was already seen
        container_created: Whether a virtual blog container was synthesized
        rescue_rounds: Number of rescue rounds that issued fetches
        rescued: Parents recovered by rescue fetches
        pruned: Items dropped because their parent never appeared
        orphans: Items forced to root by the orphan safety net
        total: Pages in the final output
    """
    fetched_pages: int = 0
    fetched_posts: int = 0
    filtered_foreign: int = 0
    duplicates: int = 0
    container_created: bool = False
    rescue_rounds: int = 0
    rescued: int = 0
    pruned: int = 0
    orphans: int = 0
    total: int = 0
