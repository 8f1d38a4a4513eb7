"""Unit tests for cli.output module."""

import pytest
from rich.console import Console

from wp_architect.cli.output import OutputHandler
from wp_architect.models import ContentType, PageStatus
from wp_architect.reconciler.models import ReconciliationReport
from wp_architect.site_tree import build_tree
from wp_architect.site_tree.ghost import create_ghost_page
from wp_architect.site_tree.models import MoveRecord
from tests.fixtures.wordpress_records import make_page


@pytest.fixture
def handler():
    handler = OutputHandler(verbosity=0, no_color=True)
    handler.console = Console(record=True, width=120, no_color=True)
    return handler


def _text(handler):
    return handler.console.export_text(clear=False)


class TestOutputHandlerInit:
    """Test cases for OutputHandler initialization."""

    def test_defaults(self):
        handler = OutputHandler()

        assert handler.verbosity == 0
        assert handler.console.no_color is False

    def test_no_color(self):
        assert OutputHandler(no_color=True).console.no_color is True


class TestMessages:
    """Test cases for the message helpers."""

    def test_success(self, handler):
        handler.success("Saved")
        assert "✓ Saved" in _text(handler)

    def test_error(self, handler):
        handler.error("Broken")
        assert "✗ Broken" in _text(handler)

    def test_warning(self, handler):
        handler.warning("Careful")
        assert "⚠ Careful" in _text(handler)

    def test_info_hidden_at_verbosity_0(self, handler):
        handler.info("details")
        assert "details" not in _text(handler)

    def test_info_shown_at_verbosity_1(self, handler):
        handler.verbosity = 1
        handler.info("details")
        assert "details" in _text(handler)

    def test_debug_needs_verbosity_2(self, handler):
        handler.verbosity = 1
        handler.debug("trace")
        assert "trace" not in _text(handler)

        handler.verbosity = 2
        handler.debug("trace")
        assert "trace" in _text(handler)

    def test_spinner_yields(self, handler):
        with handler.spinner("Crawling..."):
            handler.print("inside")
        assert "inside" in _text(handler)


class TestPrintCrawlSummary:
    """Test cases for print_crawl_summary()."""

    def test_counts(self, handler):
        report = ReconciliationReport(
            fetched_pages=50, fetched_posts=20, rescue_rounds=1, rescued=2,
            pruned=3, orphans=1, total=71, container_created=True,
        )

        handler.print_crawl_summary(report, "fme")

        text = _text(handler)
        assert "Crawl Summary (fme)" in text
        assert "Pages fetched" in text and "50" in text
        assert "Blog container" in text
        assert "Orphans moved to root" in text
        assert "71" in text

    def test_optional_rows_hidden(self, handler):
        handler.print_crawl_summary(ReconciliationReport(total=1, fetched_pages=1), "fme")

        text = _text(handler)
        assert "Duplicates skipped" not in text
        assert "Orphans" not in text


class TestPrintTree:
    """Test cases for print_tree()."""

    def test_nested_titles(self, handler):
        pages = [make_page("1", title="Home"), make_page("2", "1", title="About")]

        handler.print_tree(build_tree(pages), "fme")

        lines = _text(handler).splitlines()
        assert lines[0] == "fme"
        home = next(i for i, line in enumerate(lines) if "Home (1)" in line)
        about = next(i for i, line in enumerate(lines) if "About (2)" in line)
        assert about > home

    def test_status_tag_and_post_marker(self, handler):
        pages = [
            make_page("1", title="Home", status=PageStatus.REDIRECT),
            make_page("2", title="News", page_type=ContentType.POST),
        ]

        handler.print_tree(build_tree(pages), "fme")

        text = _text(handler)
        assert "Home (1) [redirect]" in text
        assert "News (2) post" in text

    def test_neutral_status_not_tagged(self, handler):
        handler.print_tree(build_tree([make_page("1", title="Home", status=PageStatus.NEUTRAL)]), "fme")
        assert "[neutral]" not in _text(handler)

    def test_markup_in_title_escaped(self, handler):
        handler.print_tree(build_tree([make_page("1", title="[bold]Sale[/bold]")]), "fme")
        assert "[bold]Sale[/bold] (1)" in _text(handler)

    def test_ghost_rendered(self, handler):
        ghost = create_ghost_page("Careers")

        handler.print_tree(build_tree([ghost]), "fme")

        text = _text(handler)
        assert "Careers" in text
        assert "[ghost]" in text


class TestPrintHistory:
    """Test cases for print_history()."""

    def test_empty(self, handler):
        handler.print_history([])
        assert "No moves recorded" in _text(handler)

    def test_rows(self, handler):
        handler.print_history([
            MoveRecord("2", "1", None, 0, 3, moved_at="2026-01-08T08:11:03+00:00"),
        ])

        text = _text(handler)
        assert "Move History" in text
        assert "(root)" in text
        assert "0 → 3" in text
