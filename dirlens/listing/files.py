"""
dirlens Listing: Ordered File collection.

Every operation that changes membership or order renumbers the collection,
so ordinals are always ``0..N-1`` and ``total`` is always ``N``.
"""

from typing import Callable, List

from dirlens.listing.file import File


class Files(list):
    """A listing: list of File with sorting, numbering and selection helpers."""

    def number(self) -> "Files":
        """Write ordinal and total into every File."""
        total = len(self)
        for index, file in enumerate(self):
            file.number = index
            file.total = total
        return self

    def sort_by_name(self, reverse: bool = False) -> "Files":
        self.sort(key=lambda f: f.sort, reverse=reverse)
        return self.number()

    def sort_by_size(self, reverse: bool = False) -> "Files":
        self.sort(key=lambda f: f.size, reverse=reverse)
        return self.number()

    def sort_by_date(self, reverse: bool = False) -> "Files":
        self.sort(key=lambda f: f.created, reverse=reverse)
        return self.number()

    def filter(self, predicate: Callable[[File], bool]) -> "Files":
        """New renumbered collection of the Files accepted by ``predicate``."""
        return Files(f for f in self if predicate(f)).number()

    def names(self) -> List[str]:
        return [f.name for f in self]

    def paths(self) -> List[str]:
        return [f.path for f in self]

    def selected(self) -> "Files":
        """Files that are selected or under the cursor.

        The result shares File objects with this listing and is not
        renumbered.
        """
        return Files(f for f in self if f.selected or f.active)

    def select(self, index: int, selected: bool = True) -> File:
        file = self[index]
        file.selected = selected
        return file

    def activate(self, index: int) -> File:
        """Move the cursor to position ``index``."""
        for file in self:
            file.active = False
        file = self[index]
        file.active = True
        return file
