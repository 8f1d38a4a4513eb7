"""Main CLI entry point for the wp-architect command.

Subcommands:
    crawl       Crawl a WordPress site and save its reconciled site map
    show        Render a saved site map as a tree
    move        Move a page (with its subtree) to a new parent or position
    set-status  Tag a page with a workflow status
    add-ghost   Add a placeholder page for a planned section
    remove-ghost  Delete a ghost page
    history     List recorded moves
    graph       Write the positioned node/edge diagram as JSON
    export      Write a project to a JSON export file
    import      Load a JSON export file into the store
"""

import asyncio
import dataclasses
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import typer

from wp_architect import __version__
from wp_architect.errors import ArchitectError
from wp_architect.models import CrawlConfig, Page, PageStatus
from wp_architect.reconciler import NoContentFoundError, ReconciliationReport, SiteReconciler
from wp_architect.site_tree import (
    DIRECTIONS,
    PageFilter,
    SiteMap,
    apply_filter,
    build_tree,
    create_ghost_page,
    hide_empty_roots,
    matching_ids,
)
from wp_architect.store import (
    YamlPageStore,
    default_export_filename,
    export_project,
    import_project,
)
from wp_architect.wp_client import (
    Authenticator,
    FallbackTransport,
    InvalidCredentialsError,
    MalformedResponseError,
    TransportExhaustedError,
    WordPressAPI,
    create_http_client,
)
from .errors import CLIError
from .config import ConfigLoader
from .models import ExitCode
from .output import OutputHandler

app = typer.Typer(
    name="wp-architect",
    help="""Crawl a WordPress site into a site map and restructure it.

QUICK START:
  wp-architect crawl https://www.example.com --posts        # Crawl pages and posts
  wp-architect show example.com                             # Show the tree
  wp-architect move example.com 42 --parent 7 --index 0     # Reparent a page
  wp-architect export example.com                           # Write a JSON export""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

CONNECTIVITY_HINT = "Check the URL or authentication/CORS settings."

ConfigOption = typer.Option(
    None,
    "--config",
    help="Path to config file (default: .wp-architect/config.yaml)",
    metavar="FILE",
)
VerbosityOption = typer.Option(
    0,
    "--verbosity",
    "-v",
    help="Verbosity level: 0=summary, 1=info, 2=debug",
)
NoColorOption = typer.Option(
    False,
    "--no-color",
    help="Disable colored output",
)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'wp_architect' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("wp_architect")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"wp-architect_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _default_project_id(url: str) -> str:
    """Project id derived from the site host, e.g. ``example.com``."""
    host = (urlparse(url).hostname or url).lower()
    if host.startswith("www."):
        host = host[4:]
    return re.sub(r'[^a-z0-9._-]', '_', host).strip('._-') or "site"


async def _crawl(crawl_config: CrawlConfig) -> Tuple[List[Page], ReconciliationReport]:
    """Run one reconciliation with a client scoped to this call."""
    credentials = Authenticator().get_credentials(
        crawl_config.username,
        crawl_config.app_password
    )
    async with create_http_client() as http_client:
        transport = FallbackTransport(http_client, credentials)
        reconciler = SiteReconciler(WordPressAPI(transport))
        pages = await reconciler.analyze_site_structure(crawl_config)
    return pages, reconciler.last_report


def _fail(output: OutputHandler, message: str, exit_code: ExitCode) -> None:
    logger.error(message)
    output.error(message)
    raise typer.Exit(exit_code)


def _open_store(config_path: Optional[str]) -> YamlPageStore:
    return YamlPageStore(ConfigLoader.store_dir(config_path))


def _load_site_map(store: YamlPageStore, project_id: str, output: OutputHandler) -> SiteMap:
    pages = store.get_pages(project_id)
    if not pages:
        _fail(output, f"Project '{project_id}' has no pages. Run 'wp-architect crawl' first.", ExitCode.NO_CONTENT)
    return SiteMap(pages)


@app.command()
def crawl(
    url: Optional[str] = typer.Argument(
        None,
        help="Site root URL (falls back to 'url' in the config file)",
    ),
    include_pages: Optional[bool] = typer.Option(
        None,
        "--pages/--no-pages",
        help="Crawl pages (default: on)",
    ),
    include_posts: Optional[bool] = typer.Option(
        None,
        "--posts/--no-posts",
        help="Crawl posts under a blog container (default: off)",
    ),
    username: Optional[str] = typer.Option(
        None,
        "--user",
        help="WordPress username (or WP_USERNAME)",
    ),
    app_password: Optional[str] = typer.Option(
        None,
        "--app-password",
        help="WordPress application password (or WP_APP_PASSWORD)",
    ),
    project: Optional[str] = typer.Option(
        None,
        "--project",
        help="Project id to save to (default: derived from the site host)",
    ),
    export_file: Optional[str] = typer.Option(
        None,
        "--export",
        help="Also write a JSON export to this file",
        metavar="FILE",
    ),
    config: Optional[str] = ConfigOption,
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Crawl a WordPress site and save the reconciled site map."""
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        app_config = ConfigLoader.load(config, {
            'url': url,
            'include_pages': include_pages,
            'include_posts': include_posts,
            'username': username,
            'app_password': app_password,
        })
        project_id = project or _default_project_id(app_config.crawl.url)
        store = YamlPageStore(app_config.store_dir)
        store.project_dir(project_id)

        output.info(f"Crawling {app_config.crawl.base_url} into project '{project_id}'")
        with output.spinner(f"Crawling {app_config.crawl.base_url}..."):
            pages, report = asyncio.run(_crawl(app_config.crawl))

        store.save_pages(project_id, pages)
        output.print_crawl_summary(report, project_id)
        output.success(f"Saved {len(pages)} pages to project '{project_id}'")

        if export_file:
            export_project(export_file, project_id, pages)
            output.success(f"Exported to {export_file}")

    except InvalidCredentialsError as e:
        _fail(output, str(e), ExitCode.AUTH_ERROR)

    except TransportExhaustedError as e:
        exit_code = ExitCode.AUTH_ERROR if e.auth_rejected else ExitCode.NETWORK_ERROR
        _fail(output, f"Could not load content from the site. {CONNECTIVITY_HINT}", exit_code)

    except MalformedResponseError as e:
        logger.debug(f"Malformed response: {e}")
        _fail(output, f"The site did not return usable WordPress data. {CONNECTIVITY_HINT}", ExitCode.NETWORK_ERROR)

    except NoContentFoundError as e:
        _fail(output, str(e), ExitCode.NO_CONTENT)

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during crawl")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _parse_statuses(values: Optional[List[str]]) -> frozenset:
    try:
        return frozenset(PageStatus(value) for value in values or [])
    except ValueError as e:
        valid = ", ".join(status.value for status in PageStatus)
        raise CLIError(f"{e}. Valid statuses: {valid}")


@app.command()
def show(
    project: str = typer.Argument(..., help="Project id"),
    filter_status: Optional[List[str]] = typer.Option(
        None,
        "--filter-status",
        help="Only show pages with this status (repeatable)",
        metavar="STATUS",
    ),
    owner: Optional[List[str]] = typer.Option(
        None,
        "--owner",
        help="Only show pages owned by this owner id (repeatable)",
    ),
    dim_filtered: bool = typer.Option(
        False,
        "--dim-filtered",
        help="Dim non-matching pages instead of hiding them",
    ),
    empty_roots: bool = typer.Option(
        True,
        "--show-empty-roots/--hide-empty-roots",
        help="Show root pages without children",
    ),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Render a saved site map as a tree."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        page_filter = PageFilter(
            statuses=_parse_statuses(filter_status),
            owner_ids=frozenset(owner or []),
            hide_filtered=not dim_filtered,
        )
        site_map = _load_site_map(_open_store(config), project, output)

        pages = site_map.pages
        if not empty_roots:
            pages = hide_empty_roots(pages)
        pages = apply_filter(pages, page_filter)

        highlight = None
        if page_filter.is_active and not page_filter.hide_filtered:
            highlight = matching_ids(pages, page_filter)

        if not pages:
            output.warning("No pages match the current filter")
            raise typer.Exit(ExitCode.SUCCESS)

        output.print_tree(build_tree(pages), project, highlight)
        output.info(f"{len(pages)} of {len(site_map)} pages shown")

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command()
def move(
    project: str = typer.Argument(..., help="Project id"),
    page_id: str = typer.Argument(..., help="Page to move"),
    parent: Optional[str] = typer.Option(
        None,
        "--parent",
        help="New parent page id (omit to move to root level)",
    ),
    index: int = typer.Option(
        0,
        "--index",
        min=0,
        help="Position among the new siblings (past the end appends)",
    ),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Move a page and its subtree, saving the result and a move record."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        store = _open_store(config)
        site_map = _load_site_map(store, project, output)
        moved_map, record = site_map.move(page_id, parent, index)

        store.save_pages(project, moved_map.pages)
        store.append_move(project, record)

        target = record.new_parent_id or "root level"
        output.success(f"Moved {page_id} to {target} at position {record.new_menu_order}")

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command("set-status")
def set_status(
    project: str = typer.Argument(..., help="Project id"),
    page_id: str = typer.Argument(..., help="Page to tag"),
    status: str = typer.Argument(..., help="One of: " + ", ".join(s.value for s in PageStatus)),
    notes: Optional[str] = typer.Option(None, "--notes", help="Replace the page notes"),
    merge_target: Optional[str] = typer.Option(
        None,
        "--merge-target",
        help="Master page id (only with status 'merge')",
    ),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Set the workflow status of a page."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        new_status = next(iter(_parse_statuses([status])))
        fields: Dict[str, Any] = {'status': new_status}
        if merge_target is not None:
            fields['merge_target_id'] = merge_target
        elif new_status != PageStatus.MERGE:
            fields['merge_target_id'] = None
        if notes is not None:
            fields['notes'] = notes

        store = _open_store(config)
        site_map = _load_site_map(store, project, output)
        if merge_target is not None and merge_target not in site_map:
            raise CLIError(f"Merge target {merge_target} is not a page of project '{project}'")

        page = store.patch_page(project, page_id, **fields)
        output.success(f"{page.title} ({page_id}) is now '{new_status.value}'")

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command("add-ghost")
def add_ghost(
    project: str = typer.Argument(..., help="Project id"),
    title: str = typer.Argument(..., help="Title of the planned page"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent page id"),
    notes: Optional[str] = typer.Option(None, "--notes", help="Notes for the planned page"),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Add a ghost page (a planned page with no URL yet)."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        ghost = create_ghost_page(title, parent_id=parent, notes=notes)
        store = _open_store(config)
        site_map = SiteMap(store.get_pages(project))
        updated = site_map.add_page(ghost)

        store.save_pages(project, [updated.get(ghost.id)])
        output.success(f"Added ghost page '{ghost.title}' ({ghost.id})")

    except ValueError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command("remove-ghost")
def remove_ghost(
    project: str = typer.Argument(..., help="Project id"),
    page_id: str = typer.Argument(..., help="Ghost page to delete"),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Delete a ghost page. Crawled pages cannot be deleted."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        _open_store(config).delete_page(project, page_id)
        output.success(f"Deleted ghost page {page_id}")

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command()
def history(
    project: str = typer.Argument(..., help="Project id"),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """List recorded moves, oldest first."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        output.print_history(_open_store(config).get_history(project))

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command()
def graph(
    project: str = typer.Argument(..., help="Project id"),
    file: str = typer.Argument(..., help="Output JSON file"),
    direction: str = typer.Option(
        "TB",
        "--direction",
        help="Layout direction: TB (top-bottom) or LR (left-right)",
    ),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Write positioned diagram nodes and edges as JSON."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        if direction not in DIRECTIONS:
            raise CLIError(f"Unknown direction {direction!r}; use {' or '.join(DIRECTIONS)}")

        site_map = _load_site_map(_open_store(config), project, output)
        graph_data = site_map.graph(direction=direction)

        nodes = []
        for node in graph_data.nodes:
            entry = dataclasses.asdict(node)
            entry['data'] = node.data.to_dict()
            nodes.append(entry)
        document = {
            'nodes': nodes,
            'edges': [dataclasses.asdict(edge) for edge in graph_data.edges],
        }

        with open(file, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        output.success(f"Wrote {len(nodes)} nodes and {len(document['edges'])} edges to {file}")

    except OSError as e:
        _fail(output, f"Cannot write {file}: {e}", ExitCode.GENERAL_ERROR)

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command("export")
def export_command(
    project: str = typer.Argument(..., help="Project id"),
    file: Optional[str] = typer.Argument(
        None,
        help="Output JSON file (default: <project>_<date>.json)",
    ),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Write a project to a JSON export file."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        site_map = _load_site_map(_open_store(config), project, output)
        target = file or default_export_filename(project)
        export_project(target, project, site_map.pages)
        output.success(f"Exported {len(site_map)} pages to {target}")

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command("import")
def import_command(
    file: str = typer.Argument(..., help="JSON export file"),
    project: Optional[str] = typer.Option(
        None,
        "--project",
        help="Project id to import into (default: the id stored in the file)",
    ),
    config: Optional[str] = ConfigOption,
    verbosity: int = VerbosityOption,
    no_color: bool = NoColorOption,
) -> None:
    """Load a JSON export file into the store."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        exported_project, pages = import_project(file)
        project_id = project or exported_project
        _open_store(config).save_pages(project_id, pages)
        output.success(f"Imported {len(pages)} pages into project '{project_id}'")

    except ArchitectError as e:
        _fail(output, str(e), ExitCode.GENERAL_ERROR)


@app.command()
def version() -> None:
    """Show version and exit."""
    typer.echo(f"wp-architect version {__version__}")


def main() -> None:
    """Main entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
