"""Tests for concurrent listing assembly."""

import os
from unittest.mock import patch

import pytest

import dirlens.listing.assembler as assembler_module
from dirlens.core.errors import DirectoryReadError, WalkConfigurationError, WalkError
from dirlens.infrastructure.config_manager import ConfigError, ConfigManager
from dirlens.listing import ListingOptions, build_listing, file_list, list_directory
from dirlens.listing.file import make_file
from dirlens.mime import Detector, Node
from dirlens.mime.matchers import always


def sorts(listing):
    return [f.sort for f in listing]


class TestFlatListing:
    """Single-level listings."""

    def test_text_and_image(self, listing_dir):
        listing = build_listing(str(listing_dir))
        assert listing.names() == ["a.txt", "b.png"]
        assert [f.mime for f in listing] == ["text/plain", "image/png"]
        assert [(f.number, f.total) for f in listing] == [(0, 2), (1, 2)]

    def test_include_hidden(self, listing_dir):
        listing = build_listing(str(listing_dir), include_hidden=True)
        assert listing.names() == [".secret", "a.txt", "b.png"]
        assert listing[0].hidden

    def test_folders_first(self, source_dir):
        listing = build_listing(str(source_dir))
        assert listing.names() == [
            "docs",
            "node_modules",
            "subdir",
            "README.md",
            "file.txt",
            "script.py",
        ]
        assert listing[-1].mime == "application/x-python"

    def test_folders_only(self, source_dir):
        listing = build_listing(str(source_dir), include_files=False)
        assert all(f.is_dir for f in listing)
        assert listing.names() == ["docs", "node_modules", "subdir"]

    def test_files_only(self, source_dir):
        listing = build_listing(str(source_dir), include_folders=False)
        assert listing.names() == ["README.md", "file.txt", "script.py"]

    def test_nothing(self, source_dir):
        assert build_listing(str(source_dir), include_folders=False, include_files=False) == []

    def test_empty_directory(self, temp_dir):
        assert build_listing(str(temp_dir)) == []

    def test_default_ignore(self, source_dir):
        (source_dir / ".git").mkdir()
        listing = build_listing(str(source_dir), include_hidden=True)
        assert ".git" not in listing.names()
        assert ".config" in listing.names()

    def test_custom_ignore(self, source_dir):
        options = ListingOptions(ignore=("docs", "file.txt"))
        listing = build_listing(str(source_dir), options=options)
        assert listing.names() == ["node_modules", "subdir", "README.md", "script.py"]

    def test_byte_order(self, temp_dir):
        for name in ("b", "B", "a", "_"):
            (temp_dir / name).write_text("")
        assert build_listing(str(temp_dir)).names() == ["B", "_", "a", "b"]

    def test_disk_usage(self, source_dir):
        plain = build_listing(str(source_dir), options=ListingOptions(disk_usage=True))
        sizes = {f.name: f.size for f in plain}
        assert sizes["docs"] == len("# API Documentation")
        assert sizes["subdir"] == len("Nested content")

    def test_disk_usage_with_symlinked_directory(self, temp_dir):
        (temp_dir / "real").mkdir()
        (temp_dir / "real" / "data").write_bytes(b"x" * 10)
        os.symlink(temp_dir / "real", temp_dir / "link")
        (temp_dir / "a.txt").write_text("hello")

        listing = build_listing(str(temp_dir), options=ListingOptions(disk_usage=True))
        sizes = {f.name: f.size for f in listing}
        assert listing.names() == ["link", "real", "a.txt"]
        assert sizes == {"link": 0, "real": 10, "a.txt": 5}

    def test_disk_usage_of_vanished_directory(self, source_dir):
        error = WalkConfigurationError("No such file or directory")
        with patch("dirlens.listing.sizes.walk", side_effect=error):
            listing = build_listing(str(source_dir), options=ListingOptions(disk_usage=True))
        assert "docs" in listing.names()
        assert all(f.size == 0 for f in listing if f.is_dir)

    def test_missing_directory(self, temp_dir):
        with pytest.raises(DirectoryReadError):
            build_listing(str(temp_dir / "missing"))

    def test_not_a_directory(self, listing_dir):
        with pytest.raises(DirectoryReadError):
            build_listing(str(listing_dir / "a.txt"))


class TestRecursiveListing:
    """Whole-subtree listings."""

    def test_relative_sort_keys(self, source_dir):
        listing = build_listing(str(source_dir), recursive=True)
        assert sorts(listing) == [
            "docs",
            "node_modules",
            "subdir",
            "README.md",
            "docs/api.md",
            "file.txt",
            "script.py",
            "subdir/nested.txt",
        ]
        assert listing[4].name == "api.md"

    def test_root_is_excluded(self, source_dir):
        listing = build_listing(str(source_dir), recursive=True)
        assert str(source_dir) not in listing.paths()

    def test_ignored_directories_are_not_descended(self, source_dir):
        listing = build_listing(str(source_dir), recursive=True)
        assert "node_modules" in sorts(listing)
        assert "node_modules/left-pad.js" not in sorts(listing)

    def test_hidden_directories(self, source_dir):
        hidden = build_listing(str(source_dir), recursive=True, include_hidden=True)
        assert ".config/settings.ini" in sorts(hidden)
        assert ".hidden" in sorts(hidden)
        settings = hidden[sorts(hidden).index(".config/settings.ini")]
        assert settings.ignore

    def test_custom_recursive_ignore(self, source_dir):
        options = ListingOptions(ignore_recursive=("subdir",))
        listing = build_listing(str(source_dir), recursive=True, options=options)
        assert "node_modules/left-pad.js" in sorts(listing)
        assert "subdir/nested.txt" not in sorts(listing)

    def test_symlinks(self, source_dir):
        os.symlink(source_dir / "subdir", source_dir / "linked")
        plain = build_listing(str(source_dir), recursive=True)
        assert "linked" in sorts(plain)
        assert "linked/nested.txt" not in sorts(plain)

        options = ListingOptions(follow_symlinks=True)
        followed = build_listing(str(source_dir), recursive=True, options=options)
        assert "linked/nested.txt" in sorts(followed)
        assert followed[sorts(followed).index("linked")].is_dir

    def test_root_must_be_directory(self, listing_dir):
        with pytest.raises(WalkConfigurationError):
            build_listing(str(listing_dir / "a.txt"), recursive=True)


class TestConcurrency:
    """Per-node tasks and the barrier."""

    def test_ordinals_are_dense(self, temp_dir):
        for i in range(60):
            (temp_dir / f"file-{i:02d}").write_text(str(i))
        listing = build_listing(str(temp_dir), options=ListingOptions(max_workers=3))
        assert [f.number for f in listing] == list(range(60))
        assert {f.total for f in listing} == {60}
        assert listing.names() == [f"file-{i:02d}" for i in range(60)]

    def test_single_worker(self, source_dir):
        serial = build_listing(str(source_dir), recursive=True, options=ListingOptions(max_workers=1))
        parallel = build_listing(str(source_dir), recursive=True, options=ListingOptions(max_workers=8))
        assert sorts(serial) == sorts(parallel)

    def test_vanished_node_is_dropped(self, listing_dir):
        def flaky(path, *args, **kwargs):
            if path.endswith("b.png"):
                raise FileNotFoundError(2, "No such file or directory", path)
            return make_file(path, *args, **kwargs)

        with patch.object(assembler_module, "make_file", side_effect=flaky):
            listing = build_listing(str(listing_dir))
        assert listing.names() == ["a.txt"]
        assert [(f.number, f.total) for f in listing] == [(0, 1)]

    def test_node_failing_with_walk_error_is_dropped(self, listing_dir):
        def flaky(path, *args, **kwargs):
            if path.endswith("b.png"):
                raise WalkError("Cannot walk", path)
            return make_file(path, *args, **kwargs)

        with patch.object(assembler_module, "make_file", side_effect=flaky):
            listing = build_listing(str(listing_dir))
        assert listing.names() == ["a.txt"]

    def test_unexpected_task_error_propagates(self, listing_dir):
        with patch.object(assembler_module, "make_file", side_effect=ValueError("bug")):
            with pytest.raises(ValueError, match="bug"):
                build_listing(str(listing_dir))

    def test_file_list_is_unordered_raw_material(self, listing_dir):
        entries = file_list(str(listing_dir), recursive=False)
        assert sorted(f.name for f in entries) == [".secret", "a.txt", "b.png"]
        assert all(f.number == 0 for f in entries)

    def test_custom_detector(self, listing_dir):
        options = ListingOptions(detector=Detector(Node("x/custom", "", always)))
        listing = build_listing(str(listing_dir), options=options)
        assert {f.mime for f in listing} == {"x/custom"}


class TestListingOptions:
    """Options from configuration."""

    def test_defaults(self):
        options = ListingOptions()
        assert options.ignore == (".git",)
        assert options.ignore_recursive == ("node_modules", ".git")
        assert options.max_workers is None
        assert not options.include_hidden

    def test_from_dict(self):
        options = ListingOptions.from_dict({"include_hidden": True, "ignore": ["build"]})
        assert options.include_hidden
        assert options.ignore == ("build",)
        assert options.ignore_recursive == ("node_modules", ".git")

    def test_from_config(self, config_file):
        options = ListingOptions.from_config(ConfigManager(str(config_file)))
        assert options.include_hidden
        assert options.ignore == (".git", "build")
        assert options.ignore_recursive == ("node_modules", ".git", "target")
        assert options.max_workers == 4

    def test_from_config_invalid(self):
        config = ConfigManager()
        config.load_dict({"dirlens": {"listing": {"max_workers": 0}}})
        with pytest.raises(ConfigError, match="max_workers"):
            ListingOptions.from_config(config)

    def test_list_directory(self, listing_dir):
        listing = list_directory(str(listing_dir), ListingOptions(include_hidden=True))
        assert listing.names() == [".secret", "a.txt", "b.png"]

    def test_list_directory_recursive(self, source_dir):
        listing = list_directory(str(source_dir), ListingOptions(recursive=True, include_folders=False))
        assert "subdir/nested.txt" in sorts(listing)
        assert not any(f.is_dir for f in listing)
