"""
Prisms and path-targeted updates for documents.

A :class:`Prism` focuses on one variant: ``get_option`` extracts the variant's
payload when the document matches, ``reverse_get`` rebuilds the variant from a
payload. Paths are sequences of child indices walked from the root.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from celldoc._vendor import NOTHING, Maybe, Some
from celldoc.document import Document, Horizontal, Leaf, Vertical

A = TypeVar("A")
P = TypeVar("P")


@dataclass(frozen=True)
class Prism(Generic[P]):
    variant: type[Document[Any]]
    extract: Callable[[Any], P]
    build: Callable[[P], Document[Any]]

    def get_option(self, doc: Document[Any]) -> Maybe[P]:
        if isinstance(doc, self.variant):
            return Some(self.extract(doc))
        return NOTHING

    def reverse_get(self, payload: P) -> Document[Any]:
        return self.build(payload)

    def modify(self, doc: Document[Any], f: Callable[[P], P]) -> Document[Any]:
        """Rebuild ``doc`` with ``f`` applied to its payload; other variants are returned as is."""

        if isinstance(doc, self.variant):
            return self.build(f(self.extract(doc)))
        return doc


leaf_prism: Prism[Any] = Prism(Leaf, lambda doc: doc.value, Leaf)
horizontal_prism: Prism[list[Document[Any]]] = Prism(
    Horizontal, lambda doc: list(doc.children), Horizontal
)
vertical_prism: Prism[list[Document[Any]]] = Prism(
    Vertical, lambda doc: list(doc.children), Vertical
)


def first_leaf_value(doc: Document[A]) -> Maybe[A]:
    values = doc.leaves()
    if values:
        return Some(values[0])
    return NOTHING


def filter_leaves(doc: Document[A], predicate: Callable[[A], bool]) -> list[A]:
    return [value for value in doc.leaves() if predicate(value)]


def transform_at_path(
    doc: Document[A], path: Sequence[int], f: Callable[[A], A]
) -> Document[A]:
    """
    Apply ``f`` to every leaf under the node at ``path``.

    An index that is negative or past the end of a container, or a path that
    continues through a leaf or ``Empty``, leaves the document unchanged.
    """

    if not path:
        return doc.fmap(f)
    index, rest = path[0], path[1:]
    if isinstance(doc, (Horizontal, Vertical)) and 0 <= index < len(doc.children):
        children = list(doc.children)
        children[index] = transform_at_path(children[index], rest, f)
        return doc.with_children(children)
    return doc


def node_at(doc: Document[A], path: Sequence[int]) -> Maybe[Document[A]]:
    node = doc
    for index in path:
        if not isinstance(node, (Horizontal, Vertical)) or not 0 <= index < len(node.children):
            return NOTHING
        node = node.children[index]
    return Some(node)


__all__ = [
    "Prism",
    "filter_leaves",
    "first_leaf_value",
    "horizontal_prism",
    "leaf_prism",
    "node_at",
    "transform_at_path",
    "vertical_prism",
]
