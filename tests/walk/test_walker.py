"""Tests for the recursive walker."""

import os

import pytest

from dirlens.core.constants import EntryType
from dirlens.core.errors import SkipDir, WalkConfigurationError, WalkError
from dirlens.walk import ErrorAction, WalkOptions, halt_on_error, skip_on_error, walk


@pytest.fixture
def tree(temp_dir):
    """
    root/
        a.txt
        b/
            c.txt
            d/
                e.txt
        .hidden/
            h.txt
        node_modules/
            pkg.js
        z.txt
    """
    root = temp_dir / "root"
    (root / "b" / "d").mkdir(parents=True)
    (root / ".hidden").mkdir()
    (root / "node_modules").mkdir()
    (root / "a.txt").write_text("a")
    (root / "b" / "c.txt").write_text("c")
    (root / "b" / "d" / "e.txt").write_text("e")
    (root / ".hidden" / "h.txt").write_text("h")
    (root / "node_modules" / "pkg.js").write_text("p")
    (root / "z.txt").write_text("z")
    return root


def collect(root, options=None):
    visited = []
    walk(str(root), lambda path, de: visited.append(os.path.relpath(path, root)), options)
    return visited


class TestWalkOrder:
    """Traversal order and completeness."""

    def test_visits_everything_sorted(self, tree):
        assert collect(tree) == [
            ".",
            ".hidden",
            ".hidden/h.txt",
            "a.txt",
            "b",
            "b/c.txt",
            "b/d",
            "b/d/e.txt",
            "node_modules",
            "node_modules/pkg.js",
            "z.txt",
        ]

    def test_unsorted_visits_same_set(self, tree):
        assert sorted(collect(tree, WalkOptions(unsorted=True))) == sorted(collect(tree))

    def test_parent_before_children(self, tree):
        order = collect(tree, WalkOptions(unsorted=True))
        for index, path in enumerate(order):
            parent = os.path.dirname(path)
            if parent:
                assert order.index(parent) < index

    def test_dirent_types(self, tree):
        types = {}
        walk(str(tree), lambda path, de: types.__setitem__(os.path.basename(path), de.type))
        assert types["b"] is EntryType.DIRECTORY
        assert types["a.txt"] is EntryType.REGULAR
        assert types["root"] is EntryType.DIRECTORY


class TestFiltering:
    """Hidden and ignore rules."""

    def test_no_hidden_prunes_but_reports(self, tree):
        visited = collect(tree, WalkOptions(no_hidden=True))
        assert ".hidden" in visited
        assert ".hidden/h.txt" not in visited

    def test_ignore_prunes_but_reports(self, tree):
        visited = collect(tree, WalkOptions(ignore=("node_modules", "d")))
        assert "node_modules" in visited
        assert "node_modules/pkg.js" not in visited
        assert "b/d" in visited
        assert "b/d/e.txt" not in visited
        assert "b/c.txt" in visited

    def test_root_is_exempt(self, tree):
        hidden_root = tree / ".hidden"
        visited = collect(hidden_root, WalkOptions(no_hidden=True, ignore=(".hidden",)))
        assert visited == [".", "h.txt"]


class TestSkipDir:
    """The prune signal."""

    def test_skip_directory_subtree(self, tree):
        visited = []

        def callback(path, de):
            visited.append(os.path.relpath(path, tree))
            if de.name == "b":
                raise SkipDir()

        walk(str(tree), callback)
        assert "b" in visited
        assert "b/c.txt" not in visited
        assert "z.txt" in visited

    def test_skip_on_file_skips_siblings(self, tree):
        visited = []

        def callback(path, de):
            visited.append(os.path.relpath(path, tree))
            if de.name == "a.txt":
                raise SkipDir()

        walk(str(tree), callback)
        assert visited[-1] == "a.txt"
        assert "z.txt" not in visited

    def test_skip_on_file_only_affects_its_directory(self, tree):
        visited = []

        def callback(path, de):
            visited.append(os.path.relpath(path, tree))
            if de.name == "c.txt":
                raise SkipDir()

        walk(str(tree), callback)
        assert "b/d" not in visited
        assert "node_modules" in visited
        assert "z.txt" in visited

    def test_skip_at_root_is_silenced(self, tree):
        def callback(path, de):
            raise SkipDir()

        walk(str(tree), callback)


class TestErrors:
    """Error-callback protocol."""

    def test_missing_root(self, temp_dir):
        with pytest.raises(WalkConfigurationError):
            walk(str(temp_dir / "missing"), lambda p, d: None)

    def test_file_root(self, tree):
        with pytest.raises(WalkConfigurationError, match="non-directory"):
            walk(str(tree / "a.txt"), lambda p, d: None)

    def test_callback_error_halts_by_default(self, tree):
        def callback(path, de):
            if de.name == "c.txt":
                raise ValueError("boom")

        with pytest.raises(WalkError) as exc_info:
            walk(str(tree), callback)
        assert isinstance(exc_info.value.cause, ValueError)
        assert exc_info.value.path.endswith("c.txt")

    def test_skip_node_continues(self, tree):
        visited = []
        errors = []

        def callback(path, de):
            if de.name == "c.txt":
                raise ValueError("boom")
            visited.append(de.name)

        def on_error(path, error):
            errors.append(path)
            return ErrorAction.SKIP_NODE

        walk(str(tree), callback, WalkOptions(error_callback=on_error))
        assert len(errors) == 1
        assert "e.txt" in visited
        assert "z.txt" in visited

    def test_skip_on_error_helper(self, tree):
        visited = []

        def callback(path, de):
            if de.name == "b":
                raise OSError("vanished")
            visited.append(de.name)

        walk(str(tree), callback, WalkOptions(error_callback=skip_on_error))
        assert "c.txt" not in visited
        assert "z.txt" in visited

    def test_halt_on_error_helper(self):
        assert halt_on_error("/x", WalkError("x")) is ErrorAction.HALT

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read any directory")
    def test_unreadable_directory(self, tree):
        locked = tree / "b" / "d"
        locked.chmod(0)
        try:
            with pytest.raises(WalkError):
                collect(tree)
            visited = collect(tree, WalkOptions(error_callback=skip_on_error))
            assert "b/d" in visited
            assert "z.txt" in visited
        finally:
            locked.chmod(0o755)


class TestSymlinks:
    """Symlink policy and cycle detection."""

    def test_symlinks_reported_not_followed(self, tree):
        os.symlink(tree / "b", tree / "link")
        visited = collect(tree)
        assert "link" in visited
        assert "link/c.txt" not in visited

    def test_follow_symlinks(self, tree):
        os.symlink(tree / "b", tree / "link")
        visited = collect(tree, WalkOptions(follow_symlinks=True))
        assert "link/c.txt" in visited
        assert "link/d/e.txt" in visited

    def test_cycle_is_not_followed_forever(self, tree):
        os.symlink(tree, tree / "b" / "loop")
        visited = collect(tree, WalkOptions(follow_symlinks=True))
        assert "b/loop" in visited
        assert not any(p.startswith("b/loop/") for p in visited)

    def test_dangling_symlink_with_follow(self, tree):
        os.symlink(tree / "nowhere", tree / "dangling")
        with pytest.raises(WalkError):
            collect(tree, WalkOptions(follow_symlinks=True))
        visited = collect(tree, WalkOptions(follow_symlinks=True, error_callback=skip_on_error))
        assert "dangling" in visited


class TestPostChildren:
    """post_children_callback."""

    def test_called_after_subtree(self, tree):
        events = []
        walk(
            str(tree),
            lambda p, d: events.append(("pre", d.name)),
            WalkOptions(post_children_callback=lambda p, d: events.append(("post", d.name))),
        )
        assert events.index(("post", "d")) > events.index(("pre", "e.txt"))
        assert events.index(("post", "b")) > events.index(("post", "d"))
        assert events[-1] == ("post", "root")
        assert ("post", "a.txt") not in events
