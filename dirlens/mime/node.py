"""
dirlens Mime: Matcher tree node.

A node pairs a MIME type and canonical extension with a predicate over a
byte prefix, plus an ordered tuple of more specific child nodes. Matching
descends depth-first: at each level the first child whose predicate accepts
the input is entered, and the deepest node reached is the result. Only one
edge per level is ever explored, so declaration order breaks ties between
siblings that would both accept the same input.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, Tuple

Predicate = Callable[[bytes], bool]


@dataclass(frozen=True)
class Node:
    """Immutable node of the classifier tree.

    Attributes:
        mime: MIME type reported when this node is the deepest match
        extension: Canonical extension (without dot), empty if none
        predicate: Returns True when the input belongs to this type
        children: More specific subtypes, tested in declared order
    """

    mime: str
    extension: str
    predicate: Predicate = field(compare=False, repr=False)
    children: Tuple["Node", ...] = field(default=(), compare=False, repr=False)

    def accepts(self, data: bytes) -> bool:
        return self.predicate(data)

    def match(self, data: bytes) -> "Node":
        """Return the deepest node whose whole ancestry accepts ``data``.

        The receiver is assumed to match already; for the root this is the
        universal octet-stream match.
        """
        node = self
        while True:
            for child in node.children:
                if child.accepts(data):
                    node = child
                    break
            else:
                return node

    def iter_nodes(self) -> Iterator["Node"]:
        """Pre-order iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def tree(self) -> str:
        """Render the subtree as indented text, one MIME type per line.

        Nodes with children are prefixed with ``+``.
        """
        lines = []

        def render(node: "Node", level: int) -> None:
            marker = "+" if node.children else ""
            lines.append("|\t" * level + marker + node.mime)
            for child in node.children:
                render(child, level + 1)

        render(self, 0)
        return "\n".join(lines) + "\n"
