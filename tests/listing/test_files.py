"""Tests for the Files collection."""

from datetime import datetime, timedelta

import pytest

from dirlens.listing import Files, make_files


@pytest.fixture
def files(temp_dir):
    (temp_dir / "medium.txt").write_text("x" * 50)
    (temp_dir / "big.txt").write_text("x" * 500)
    (temp_dir / "small.txt").write_text("x")
    listing = make_files(*(str(temp_dir / n) for n in ("medium.txt", "big.txt", "small.txt")))
    start = datetime(2024, 1, 1)
    for offset, f in enumerate(listing):
        f.created = start + timedelta(days=offset)
    return listing.number()


def numbers(listing):
    return [(f.number, f.total) for f in listing]


class TestNumbering:
    """Ordinals and totals."""

    def test_number(self, files):
        assert numbers(files) == [(0, 3), (1, 3), (2, 3)]

    def test_filter_renumbers(self, files):
        small = files.filter(lambda f: f.size < 100)
        assert isinstance(small, Files)
        assert small.names() == ["medium.txt", "small.txt"]
        assert numbers(small) == [(0, 2), (1, 2)]

    def test_empty(self):
        assert Files().number() == []


class TestSorting:
    """Sort helpers keep ordinals consistent."""

    def test_by_name(self, files):
        assert files.sort_by_name().names() == ["big.txt", "medium.txt", "small.txt"]
        assert numbers(files) == [(0, 3), (1, 3), (2, 3)]

    def test_by_name_reverse(self, files):
        assert files.sort_by_name(reverse=True).names() == ["small.txt", "medium.txt", "big.txt"]

    def test_by_size(self, files):
        assert files.sort_by_size().names() == ["small.txt", "medium.txt", "big.txt"]
        assert files.sort_by_size(reverse=True)[0].name == "big.txt"
        assert files[0].number == 0

    def test_by_date(self, files):
        assert files.sort_by_date(reverse=True).names() == ["small.txt", "big.txt", "medium.txt"]

    def test_paths(self, files, temp_dir):
        assert files.paths()[0] == str(temp_dir / "medium.txt")


class TestSelection:
    """Selection and cursor."""

    def test_select(self, files):
        files.select(2)
        assert files.selected().names() == ["small.txt"]
        files.select(2, selected=False)
        assert files.selected() == []

    def test_active_counts_as_selected(self, files):
        files.select(0)
        files.activate(1)
        assert files.selected().names() == ["medium.txt", "big.txt"]

    def test_activate_moves_cursor(self, files):
        files.activate(0)
        files.activate(2)
        assert [f.active for f in files] == [False, False, True]

    def test_selected_shares_files(self, files):
        files.select(1)
        assert files.selected()[0] is files[1]
        assert files.selected()[0].number == 1
