"""Unit tests for site_tree.site_map module."""

import pytest

from wp_architect.models import PageStatus
from wp_architect.site_tree.errors import InvalidMoveError, PageNotFoundError
from wp_architect.site_tree.ghost import create_ghost_page
from wp_architect.site_tree.site_map import SiteMap
from tests.fixtures.wordpress_records import make_page


def _site_map():
    return SiteMap([
        make_page("1", title="Home"),
        make_page("2", "1", menu_order=0),
        make_page("3", "2"),
        make_page("4", "2", menu_order=1),
        make_page("5", "1", menu_order=1),
        make_page("6", menu_order=1),
    ])


class TestSiteMapMove:
    """Test cases for SiteMap.move()."""

    def test_move_returns_record_and_consistent_views(self):
        site_map = _site_map()

        moved, record = site_map.move("2", "6", 0)

        assert record.page_id == "2"
        assert record.old_parent_id == "1"
        assert record.new_parent_id == "6"
        assert record.old_menu_order == 0
        assert record.new_menu_order == 0
        assert record.moved_at

        page = moved.get("2")
        assert page.parent_id == "6"
        assert page.moved_from_parent_id == "1"
        assert {p.id for p in moved.pages if p.parent_id == "2"} == {"3", "4"}

    def test_original_untouched(self):
        site_map = _site_map()
        site_map.move("2", "6", 0)
        assert site_map.get("2").parent_id == "1"

    def test_unknown_page(self):
        with pytest.raises(PageNotFoundError):
            _site_map().move("99", None, 0)

    def test_cycle_rejected(self):
        with pytest.raises(InvalidMoveError):
            _site_map().move("1", "3", 0)


class TestSiteMapPatch:
    """Test cases for SiteMap.patch()."""

    def test_patch_updates_pages_and_tree(self):
        patched = _site_map().patch("3", status=PageStatus.UPDATE, relevance=2)

        assert patched.get("3").status == PageStatus.UPDATE
        tree_node = patched.tree[0].children[0].children[0]
        assert tree_node.id == "3"
        assert tree_node.relevance == 2

    def test_unknown_page(self):
        with pytest.raises(PageNotFoundError):
            _site_map().patch("99", title="x")


class TestSiteMapAddPage:
    """Test cases for SiteMap.add_page()."""

    def test_adds_ghost_at_end_of_siblings(self):
        ghost = create_ghost_page("Careers", parent_id="1")

        updated = _site_map().add_page(ghost)

        added = updated.get(ghost.id)
        assert added.menu_order == 2
        assert len(updated) == 7
        assert ghost.menu_order == 0

    def test_missing_parent(self):
        with pytest.raises(InvalidMoveError):
            _site_map().add_page(create_ghost_page("X", parent_id="404"))

    def test_duplicate_id(self):
        with pytest.raises(InvalidMoveError):
            _site_map().add_page(make_page("1"))


class TestSiteMapGraph:
    """Test cases for SiteMap.graph()."""

    def test_graph_matches_pages(self):
        graph = _site_map().graph()

        assert len(graph.nodes) == 6
        assert len(graph.edges) == 4
