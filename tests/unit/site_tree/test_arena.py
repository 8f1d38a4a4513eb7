"""Unit tests for site_tree.arena module."""

from wp_architect.site_tree.arena import PathCopier, TreeArena
from wp_architect.site_tree.tree_builder import build_tree
from tests.fixtures.wordpress_records import make_page


def _forest():
    return build_tree([
        make_page("1"),
        make_page("2", "1"),
        make_page("3", "2"),
        make_page("4", "1", menu_order=1),
        make_page("5", menu_order=1),
    ])


class TestTreeArena:
    """Test cases for TreeArena."""

    def test_indexes_all_nodes(self):
        arena = TreeArena(_forest())

        assert set(arena.nodes) == {"1", "2", "3", "4", "5"}
        assert "3" in arena
        assert "9" not in arena

    def test_parent_pointers(self):
        arena = TreeArena(_forest())

        assert arena.parent_of["1"] is None
        assert arena.parent_of["3"] == "2"
        assert arena.parent_of["4"] == "1"

    def test_index_of(self):
        arena = TreeArena(_forest())

        assert arena.index_of("2") == 0
        assert arena.index_of("4") == 1
        assert arena.index_of("5") == 1

    def test_is_ancestor(self):
        arena = TreeArena(_forest())

        assert arena.is_ancestor("1", "3") is True
        assert arena.is_ancestor("2", "3") is True
        assert arena.is_ancestor("3", "1") is False
        assert arena.is_ancestor("5", "3") is False

    def test_duplicate_node_ignored(self, caplog):
        forest = _forest()
        forest.append(forest[0].children[0])

        arena = TreeArena(forest)

        assert arena.parent_of["2"] == "1"
        assert "appears twice" in caplog.text


class TestPathCopier:
    """Test cases for PathCopier."""

    def test_writable_copies_path_only(self):
        forest = _forest()
        editor = PathCopier(TreeArena(forest))

        editor.writable("3").title = "Changed"

        new_root = editor.roots[0]
        assert new_root is not forest[0]
        assert new_root.children[0] is not forest[0].children[0]
        assert new_root.children[1] is forest[0].children[1]
        assert editor.roots[1] is forest[1]
        assert new_root.children[0].children[0].title == "Changed"
        assert forest[0].children[0].children[0].title == "Page 3"

    def test_writable_is_cached(self):
        editor = PathCopier(TreeArena(_forest()))
        assert editor.writable("2") is editor.writable("2")

    def test_detach(self):
        forest = _forest()
        editor = PathCopier(TreeArena(forest))

        detached = editor.detach("2")

        assert detached.id == "2"
        assert [child.id for child in editor.roots[0].children] == ["4"]
        assert [child.id for child in forest[0].children] == ["2", "4"]

    def test_children_of_root(self):
        forest = _forest()
        editor = PathCopier(TreeArena(forest))

        roots = editor.children_of(None)

        assert roots is editor.roots
        assert roots is not forest
