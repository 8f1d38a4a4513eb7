"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner. Crawls are replaced by
patching _crawl; every other command runs against a YAML store in tmp_path.
"""

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from wp_architect.cli.main import _configure_logging, _default_project_id, app
from wp_architect.cli.models import ExitCode
from wp_architect.models import PageStatus
from wp_architect.reconciler import NoContentFoundError, ReconciliationReport
from wp_architect.site_tree.ghost import create_ghost_page
from wp_architect.store import YamlPageStore
from wp_architect.wp_client import InvalidCredentialsError, TransportExhaustedError
from tests.fixtures.wordpress_records import make_page


runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_default_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def store_dir(tmp_path):
    return str(tmp_path / "projects")


@pytest.fixture
def config_file(tmp_path, store_dir):
    path = tmp_path / "config.yaml"
    path.write_text(f"url: https://www.fme.de\nstore_dir: {store_dir}\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def store(store_dir):
    store = YamlPageStore(store_dir)
    store.save_pages("fme", [
        make_page("1", title="Home"),
        make_page("2", "1", title="About"),
        make_page("3", "1", title="Team", menu_order=1),
        make_page("4", title="Contact", menu_order=1),
    ])
    return store


def _crawl_result(pages=None):
    pages = pages or [make_page("1", title="Home"), make_page("2", "1", title="About")]
    return AsyncMock(return_value=(pages, ReconciliationReport(fetched_pages=len(pages), total=len(pages))))


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    @pytest.mark.parametrize("verbosity,level", [
        (0, logging.WARNING),
        (1, logging.INFO),
        (2, logging.DEBUG),
        (5, logging.DEBUG),
    ])
    def test_level_from_verbosity(self, verbosity, level):
        _configure_logging(verbosity)

        assert logging.getLogger("wp_architect").level == level

    def test_root_logger_untouched(self):
        root_handlers = list(logging.getLogger().handlers)

        _configure_logging(2)

        assert logging.getLogger().handlers == root_handlers

    def test_logdir_creates_log_file(self, tmp_path):
        logdir = tmp_path / "logs"

        _configure_logging(1, str(logdir))

        log_files = list(logdir.glob("wp-architect_*.log"))
        assert len(log_files) == 1
        handlers = logging.getLogger("wp_architect").handlers
        assert len(handlers) == 2
        for handler in handlers:
            handler.close()


class TestDefaultProjectId:
    """Test cases for _default_project_id()."""

    @pytest.mark.parametrize("url,expected", [
        ("https://www.fme.de", "fme.de"),
        ("https://WWW.Example.COM/blog/", "example.com"),
        ("http://localhost:8080", "localhost"),
    ])
    def test_host_based(self, url, expected):
        assert _default_project_id(url) == expected


class TestCrawlCommand:
    """Test cases for crawl command."""

    def test_saves_pages(self, config_file, store_dir):
        with patch("wp_architect.cli.main._crawl", _crawl_result()) as mock_crawl:
            result = runner.invoke(app, ["crawl", "--config", config_file, "--project", "fme"])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "Saved 2 pages" in result.output
        assert [page.id for page in YamlPageStore(store_dir).get_pages("fme")] == ["1", "2"]
        crawl_config = mock_crawl.call_args.args[0]
        assert crawl_config.url == "https://www.fme.de"

    def test_cli_overrides_config(self, config_file):
        with patch("wp_architect.cli.main._crawl", _crawl_result()) as mock_crawl:
            result = runner.invoke(app, [
                "crawl", "https://blog.fme.de", "--posts", "--no-pages",
                "--user", "anna", "--app-password", "abcd efgh",
                "--config", config_file,
            ])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        crawl_config = mock_crawl.call_args.args[0]
        assert crawl_config.url == "https://blog.fme.de"
        assert crawl_config.include_posts is True
        assert crawl_config.include_pages is False
        assert crawl_config.username == "anna"

    def test_project_defaults_to_host(self, config_file, store_dir):
        with patch("wp_architect.cli.main._crawl", _crawl_result()):
            result = runner.invoke(app, ["crawl", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert YamlPageStore(store_dir).list_projects() == ["fme.de"]

    def test_export_option(self, config_file, tmp_path):
        export_file = tmp_path / "fme.json"

        with patch("wp_architect.cli.main._crawl", _crawl_result()):
            result = runner.invoke(app, [
                "crawl", "--config", config_file, "--project", "fme", "--export", str(export_file),
            ])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert json.loads(export_file.read_text())["projectId"] == "fme"

    def test_missing_url(self):
        result = runner.invoke(app, ["crawl"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "url" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["crawl", "--config", str(tmp_path / "missing.yaml")])

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_invalid_credentials(self, config_file):
        crawl = AsyncMock(side_effect=InvalidCredentialsError("anna", "application password missing"))

        with patch("wp_architect.cli.main._crawl", crawl):
            result = runner.invoke(app, ["crawl", "--config", config_file])

        assert result.exit_code == ExitCode.AUTH_ERROR

    @pytest.mark.parametrize("auth_rejected,exit_code", [
        (True, ExitCode.AUTH_ERROR),
        (False, ExitCode.NETWORK_ERROR),
    ])
    def test_transport_exhausted(self, config_file, auth_rejected, exit_code):
        error = TransportExhaustedError("https://www.fme.de/wp-json/wp/v2/pages", ["direct"], auth_rejected)

        with patch("wp_architect.cli.main._crawl", AsyncMock(side_effect=error)):
            result = runner.invoke(app, ["crawl", "--config", config_file])

        assert result.exit_code == exit_code
        assert "authentication/CORS" in result.output

    def test_no_content(self, config_file, store_dir):
        error = NoContentFoundError("https://www.fme.de")

        with patch("wp_architect.cli.main._crawl", AsyncMock(side_effect=error)):
            result = runner.invoke(app, ["crawl", "--config", config_file, "--project", "fme"])

        assert result.exit_code == ExitCode.NO_CONTENT
        assert YamlPageStore(store_dir).get_pages("fme") == []

    def test_unexpected_error(self, config_file):
        with patch("wp_architect.cli.main._crawl", AsyncMock(side_effect=RuntimeError("boom"))):
            result = runner.invoke(app, ["crawl", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "boom" in result.output

    def test_invalid_project_id(self, config_file):
        with patch("wp_architect.cli.main._crawl", _crawl_result()) as mock_crawl:
            result = runner.invoke(app, ["crawl", "--config", config_file, "--project", "../x"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        mock_crawl.assert_not_called()


class TestShowCommand:
    """Test cases for show command."""

    def test_renders_tree(self, config_file, store):
        result = runner.invoke(app, ["show", "fme", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        for title in ("Home", "About", "Team", "Contact"):
            assert title in result.output

    def test_unknown_project(self, config_file):
        result = runner.invoke(app, ["show", "nothing", "--config", config_file])

        assert result.exit_code == ExitCode.NO_CONTENT

    def test_filter_by_status(self, config_file, store):
        store.patch_page("fme", "3", status="remove")

        result = runner.invoke(app, ["show", "fme", "--filter-status", "remove", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "Team" in result.output
        assert "Home" in result.output
        assert "Contact" not in result.output

    def test_filter_without_matches(self, config_file, store):
        result = runner.invoke(app, ["show", "fme", "--filter-status", "merge", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS
        assert "No pages match" in result.output

    def test_invalid_status(self, config_file, store):
        result = runner.invoke(app, ["show", "fme", "--filter-status", "bogus", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "Valid statuses" in result.output

    def test_hide_empty_roots(self, config_file, store):
        result = runner.invoke(app, ["show", "fme", "--hide-empty-roots", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS
        assert "Contact" not in result.output


class TestMoveCommand:
    """Test cases for move command."""

    def test_reparents_and_records(self, config_file, store):
        result = runner.invoke(app, ["move", "fme", "3", "--parent", "4", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        pages = {page.id: page for page in store.get_pages("fme")}
        assert pages["3"].parent_id == "4"
        assert pages["3"].moved_from_parent_id == "1"
        history = store.get_history("fme")
        assert len(history) == 1
        assert (history[0].old_parent_id, history[0].new_parent_id) == ("1", "4")

    def test_move_to_root(self, config_file, store):
        result = runner.invoke(app, ["move", "fme", "2", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert "root level" in result.output
        pages = {page.id: page for page in store.get_pages("fme")}
        assert pages["2"].parent_id is None

    def test_cycle_rejected(self, config_file, store):
        result = runner.invoke(app, ["move", "fme", "1", "--parent", "2", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert store.get_history("fme") == []

    def test_unknown_page(self, config_file, store):
        result = runner.invoke(app, ["move", "fme", "99", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "not found" in result.output


class TestSetStatusCommand:
    """Test cases for set-status command."""

    def test_sets_status_and_notes(self, config_file, store):
        result = runner.invoke(app, [
            "set-status", "fme", "2", "redirect", "--notes", "to /team", "--config", config_file,
        ])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        page = {page.id: page for page in store.get_pages("fme")}["2"]
        assert page.status == PageStatus.REDIRECT
        assert page.notes == "to /team"

    def test_merge_with_target(self, config_file, store):
        result = runner.invoke(app, [
            "set-status", "fme", "3", "merge", "--merge-target", "2", "--config", config_file,
        ])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        page = {page.id: page for page in store.get_pages("fme")}["3"]
        assert page.merge_target_id == "2"

    def test_leaving_merge_clears_target(self, config_file, store):
        store.patch_page("fme", "3", status="merge", merge_target_id="2")

        result = runner.invoke(app, ["set-status", "fme", "3", "active", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        page = {page.id: page for page in store.get_pages("fme")}["3"]
        assert page.merge_target_id is None

    def test_unknown_merge_target(self, config_file, store):
        result = runner.invoke(app, [
            "set-status", "fme", "3", "merge", "--merge-target", "99", "--config", config_file,
        ])

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_merge_target_requires_merge_status(self, config_file, store):
        result = runner.invoke(app, [
            "set-status", "fme", "3", "active", "--merge-target", "2", "--config", config_file,
        ])

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_unknown_status(self, config_file, store):
        result = runner.invoke(app, ["set-status", "fme", "3", "bogus", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestGhostCommands:
    """Test cases for add-ghost and remove-ghost commands."""

    def test_add_ghost_under_parent(self, config_file, store):
        result = runner.invoke(app, [
            "add-ghost", "fme", "Careers", "--parent", "1", "--notes", "Q3", "--config", config_file,
        ])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        ghosts = [page for page in store.get_pages("fme") if page.id.startswith("ghost-")]
        assert len(ghosts) == 1
        assert ghosts[0].parent_id == "1"
        assert ghosts[0].menu_order == 2
        assert ghosts[0].notes == "Q3"

    def test_add_ghost_unknown_parent(self, config_file, store):
        result = runner.invoke(app, ["add-ghost", "fme", "Careers", "--parent", "99", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_add_ghost_blank_title(self, config_file, store):
        result = runner.invoke(app, ["add-ghost", "fme", "   ", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_remove_ghost(self, config_file, store):
        ghost = create_ghost_page("Careers")
        store.save_pages("fme", [ghost])

        result = runner.invoke(app, ["remove-ghost", "fme", ghost.id, "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert ghost.id not in {page.id for page in store.get_pages("fme")}

    def test_remove_crawled_page_refused(self, config_file, store):
        result = runner.invoke(app, ["remove-ghost", "fme", "2", "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "2" in {page.id for page in store.get_pages("fme")}


class TestHistoryCommand:
    """Test cases for history command."""

    def test_empty(self, config_file, store):
        result = runner.invoke(app, ["history", "fme", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS
        assert "No moves recorded" in result.output


class TestGraphCommand:
    """Test cases for graph command."""

    def test_writes_nodes_and_edges(self, config_file, store, tmp_path):
        target = tmp_path / "graph.json"

        result = runner.invoke(app, ["graph", "fme", str(target), "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        document = json.loads(target.read_text())
        assert {node["id"] for node in document["nodes"]} == {"1", "2", "3", "4"}
        assert {(edge["source"], edge["target"]) for edge in document["edges"]} == {("1", "2"), ("1", "3")}
        assert document["nodes"][0]["data"]["type"] == "page"

    def test_left_right(self, config_file, store, tmp_path):
        target = tmp_path / "graph.json"

        result = runner.invoke(app, ["graph", "fme", str(target), "--direction", "LR", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        node = json.loads(target.read_text())["nodes"][0]
        assert node["source_position"] == "right"

    def test_invalid_direction(self, config_file, store, tmp_path):
        result = runner.invoke(app, ["graph", "fme", str(tmp_path / "g.json"), "--direction", "BT",
                                     "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestExportImportCommands:
    """Test cases for export and import commands."""

    def test_export_then_import_into_new_project(self, config_file, store, tmp_path):
        target = tmp_path / "fme.json"

        exported = runner.invoke(app, ["export", "fme", str(target), "--config", config_file])
        imported = runner.invoke(app, ["import", str(target), "--project", "copy", "--config", config_file])

        assert exported.exit_code == ExitCode.SUCCESS, exported.output
        assert imported.exit_code == ExitCode.SUCCESS, imported.output
        assert store.get_pages("copy") == store.get_pages("fme")

    def test_export_default_filename(self, config_file, store, tmp_path):
        result = runner.invoke(app, ["export", "fme", "--config", config_file])

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert len(list(tmp_path.glob("fme_*.json"))) == 1

    def test_import_invalid_file(self, config_file, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"version": "1.0"}')

        result = runner.invoke(app, ["import", str(bad), "--config", config_file])

        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestVersionCommand:
    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "wp-architect version" in result.output
