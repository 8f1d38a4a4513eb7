"""Terminal output handling using Rich library.

OutputHandler is the only place the CLI writes user-facing text. Logging
goes to stderr separately (see main._configure_logging).
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Set

from rich.console import Console
from rich.spinner import Spinner
from rich.live import Live
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from wp_architect.models import ContentType, PageStatus
from wp_architect.reconciler.models import ReconciliationReport
from wp_architect.site_tree.models import MoveRecord, TreeNode

STATUS_STYLES = {
    PageStatus.NEUTRAL: "white",
    PageStatus.MOVE: "cyan",
    PageStatus.ACTIVE: "green",
    PageStatus.ARCHIVED: "bright_black",
    PageStatus.REDIRECT: "magenta",
    PageStatus.NEW: "bright_green",
    PageStatus.REMOVE: "red",
    PageStatus.UPDATE: "yellow",
    PageStatus.MERGE: "blue",
    PageStatus.HIDE_IN_NAVIGATION: "bright_black",
    PageStatus.GHOST: "italic bright_black",
}


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> with handler.spinner("Crawling..."):
        ...     pass
        >>> handler.success("Crawl finished")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print(self, message: str) -> None:
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display a spinner while a single long operation runs.

        Example:
            >>> with handler.spinner("Fetching pages..."):
            ...     pages = crawl()
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_crawl_summary(self, report: ReconciliationReport, project_id: str) -> None:
        """Display reconciliation counters as a table.

        Args:
            report: Counters from the finished crawl
            project_id: Project the pages were saved to
        """
        table = Table(title=f"Crawl Summary ({project_id})", show_header=False)
        table.add_column("Step")
        table.add_column("Count", justify="right")

        table.add_row("Pages fetched", str(report.fetched_pages))
        table.add_row("Posts fetched", str(report.fetched_posts))
        if report.filtered_foreign:
            table.add_row("Other-domain items skipped", str(report.filtered_foreign))
        if report.duplicates:
            table.add_row("Duplicates skipped", str(report.duplicates))
        if report.container_created:
            table.add_row("Blog container", "created")
        table.add_row("Rescue rounds", str(report.rescue_rounds))
        table.add_row("Parents rescued", str(report.rescued))
        table.add_row("Unreachable items pruned", str(report.pruned))
        if report.orphans:
            table.add_row("[yellow]Orphans moved to root[/yellow]", str(report.orphans))
        table.add_row("[bold]Pages in site map[/bold]", f"[bold]{report.total}[/bold]")

        self.console.print(table)

    def print_tree(
        self,
        forest: List[TreeNode],
        title: str,
        highlight: Optional[Set[str]] = None
    ) -> None:
        """Render the site tree.

        Args:
            forest: Root nodes to render
            title: Label of the tree root
            highlight: When given, pages not in this set are dimmed
        """
        root = Tree(f"[bold]{title}[/bold]")
        stack = [(root, node) for node in reversed(forest)]
        while stack:
            branch, node = stack.pop()
            child_branch = branch.add(self._node_label(node, highlight))
            stack.extend((child_branch, child) for child in reversed(node.children))
        self.console.print(root)

    @staticmethod
    def _node_label(node: TreeNode, highlight: Optional[Set[str]]) -> str:
        title = escape(node.title)
        if node.type == ContentType.GHOST:
            title = f"[italic]{title}[/italic]"
        label = f"{title} [dim]({node.id})[/dim]"
        if node.status is not None and node.status != PageStatus.NEUTRAL:
            style = STATUS_STYLES[node.status]
            label += f" [{style}]\\[{node.status.value}][/]"
        if node.type == ContentType.POST:
            label += " [dim]post[/dim]"
        if highlight is not None and node.id not in highlight:
            label = f"[dim]{label}[/dim]"
        return label

    def print_history(self, history: List[MoveRecord]) -> None:
        if not history:
            self.console.print("[yellow]No moves recorded[/yellow]")
            return

        table = Table(title="Move History")
        table.add_column("When")
        table.add_column("Page")
        table.add_column("From")
        table.add_column("To")
        table.add_column("Position", justify="right")
        for record in history:
            table.add_row(
                record.moved_at,
                record.page_id,
                record.old_parent_id or "(root)",
                record.new_parent_id or "(root)",
                f"{record.old_menu_order} → {record.new_menu_order}",
            )
        self.console.print(table)
