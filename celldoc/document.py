"""
Document model for celldoc.

A document is an immutable tree of cells. Every node is one of four variants:

- ``Leaf(value)`` holds exactly one value.
- ``Horizontal(children)`` arranges sub-documents left to right.
- ``Vertical(children)`` arranges sub-documents top to bottom.
- ``Empty()`` holds nothing and is the identity of :func:`combine`.

Children are stored as tuples owned by their parent, so a document is always a
finite tree. Every operation here is structural and side-effect free; the
effectful traversal lives in :mod:`celldoc.traverse`.

Example:
    >>> doc = Horizontal([Leaf(1), Vertical([Leaf(2), Leaf(3)]), Leaf(4)])
    >>> str(doc)
    'Horizontal[Leaf(1), Vertical[Leaf(2), Leaf(3)], Leaf(4)]'
    >>> doc.fmap(lambda v: v * 10).leaves()
    [10, 20, 30, 40]
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Any, Generic, TypeVar

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
R = TypeVar("R")
S = TypeVar("S")


class Orientation(Enum):
    """Direction in which a container arranges its children."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def opposite(self) -> Orientation:
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL

    def container(self, children: Iterable[Document[A]]) -> Document[A]:
        """Build the container variant matching this orientation."""

        if self is Orientation.HORIZONTAL:
            return Horizontal(children)
        return Vertical(children)


class Document(ABC, Generic[A]):
    """Runtime base class for the four document variants."""

    __slots__ = ()

    def cata(
        self,
        leaf: Callable[[A], R],
        horizontal: Callable[[list[R]], R],
        vertical: Callable[[list[R]], R],
        empty: Callable[[], R],
    ) -> R:
        """
        Tear the document down bottom-up with one function per variant.

        Nodes are visited depth-first, left to right, from an explicit stack,
        so arbitrarily deep documents do not hit the recursion limit.
        """

        results: list[R] = []
        pending: list[tuple[Document[A], bool]] = [(self, False)]
        while pending:
            node, expanded = pending.pop()
            if isinstance(node, Leaf):
                results.append(leaf(node.value))
            elif isinstance(node, _Container):
                if expanded:
                    start = len(results) - len(node.children)
                    parts = results[start:]
                    del results[start:]
                    build = horizontal if isinstance(node, Horizontal) else vertical
                    results.append(build(parts))
                else:
                    pending.append((node, True))
                    pending.extend((child, False) for child in reversed(node.children))
            elif isinstance(node, Empty):
                results.append(empty())
            else:
                raise TypeError(f"Unknown document variant: {type(node).__name__}")
        return results[0]

    def fold(
        self,
        leaf: Callable[[A], R],
        horizontal: Callable[[list[R]], R],
        vertical: Callable[[list[R]], R],
    ) -> R:
        """Like :meth:`cata`, treating ``Empty`` as a horizontal group with no children."""

        return self.cata(leaf, horizontal, vertical, lambda: horizontal([]))

    def fmap(self, f: Callable[[A], B]) -> Document[B]:
        """Apply ``f`` to every leaf value, keeping the shape."""

        return self.cata(
            lambda value: Leaf(f(value)),
            Horizontal,
            Vertical,
            lambda: EMPTY,
        )

    def flat_map(self, f: Callable[[A], Document[B]]) -> Document[B]:
        """Replace every leaf with the document ``f`` builds from its value."""

        def substitute(value: A) -> Document[B]:
            result = f(value)
            if not isinstance(result, Document):
                raise TypeError(
                    f"flat_map must return a Document; got {type(result).__name__}"
                )
            return result

        return self.cata(substitute, Horizontal, Vertical, lambda: EMPTY)

    def fold_left(self, initial: S, f: Callable[[S, A], S]) -> S:
        """Accumulate leaf values left to right."""

        return reduce(f, self.leaves(), initial)

    def fold_right(self, initial: S, f: Callable[[A, S], S]) -> S:
        """Accumulate leaf values right to left."""

        acc = initial
        for value in reversed(self.leaves()):
            acc = f(value, acc)
        return acc

    def leaves(self) -> list[A]:
        """Return the leaf values in depth-first, left-to-right order."""

        collected: list[A] = []
        stack: list[Document[A]] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Leaf):
                collected.append(node.value)
            elif isinstance(node, (Horizontal, Vertical)):
                stack.extend(reversed(node.children))
        return collected

    def leaf_count(self) -> int:
        return len(self.leaves())

    def size(self) -> int:
        """Number of leaf and container nodes. ``Empty`` counts as zero."""

        return self.cata(
            lambda _: 1,
            lambda sizes: 1 + sum(sizes),
            lambda sizes: 1 + sum(sizes),
            lambda: 0,
        )

    def depth(self) -> int:
        """Height of the tree: ``Empty`` is 0, a leaf is 1, a container adds 1."""

        return self.cata(
            lambda _: 1,
            lambda depths: 1 + max(depths, default=0),
            lambda depths: 1 + max(depths, default=0),
            lambda: 0,
        )

    def shape(self) -> Document[None]:
        """The same tree with every leaf value replaced by ``None``."""

        return self.fmap(lambda _: None)

    def is_empty(self) -> bool:
        return isinstance(self, Empty)

    def pretty(self, indent: int = 0) -> str:
        """Indented multi-line rendering, one node per line."""

        lines: list[str] = []
        stack: list[tuple[Document[A], int, bool]] = [(self, indent, False)]
        while stack:
            node, level, closing = stack.pop()
            spaces = "  " * level
            if closing:
                lines.append(f"{spaces})")
            elif isinstance(node, Leaf):
                lines.append(f"{spaces}Leaf({node.value})")
            elif isinstance(node, _Container):
                name = type(node).__name__
                if not node.children:
                    lines.append(f"{spaces}{name}()")
                    continue
                lines.append(f"{spaces}{name}(")
                stack.append((node, level, True))
                stack.extend((child, level + 1, False) for child in reversed(node.children))
            else:
                lines.append(f"{spaces}Empty")
        return "\n".join(lines)

    def __add__(self, other: Document[A]) -> Document[A]:
        if not isinstance(other, Document):
            return NotImplemented
        return combine(self, other)

    def __str__(self) -> str:
        return self.cata(
            lambda value: f"Leaf({value})",
            lambda parts: f"Horizontal[{', '.join(parts)}]",
            lambda parts: f"Vertical[{', '.join(parts)}]",
            lambda: "Empty",
        )


@dataclass(frozen=True)
class Leaf(Document[A]):
    """Terminal node holding a single value."""

    value: A


@dataclass(frozen=True, eq=False, repr=False)
class _Container(Document[A]):
    children: tuple[Document[A], ...]

    def __post_init__(self) -> None:
        if isinstance(self.children, (str, bytes, Document)):
            raise TypeError(
                f"{type(self).__name__} expects an iterable of documents; "
                f"got {type(self.children).__name__}"
            )
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Document):
                raise TypeError(
                    f"{type(self).__name__} children must be documents; "
                    f"got {type(child).__name__}"
                )
        object.__setattr__(self, "children", children)

    def with_children(self, children: Iterable[Document[B]]) -> Document[B]:
        """Return a container of the same variant holding ``children``."""

        return type(self)(tuple(children))

    # Iterative replacements for the recursive dataclass defaults.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        pairs: list[tuple[Document[Any], Document[Any]]] = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if type(left) is not type(right):
                return False
            if isinstance(left, _Container):
                if len(left.children) != len(right.children):
                    return False
                pairs.extend(zip(left.children, right.children))
            elif left != right:
                return False
        return True

    def __hash__(self) -> int:
        return self.cata(
            lambda value: hash((Leaf, value)),
            lambda hashes: hash((Horizontal, *hashes)),
            lambda hashes: hash((Vertical, *hashes)),
            lambda: hash(Empty),
        )

    def __repr__(self) -> str:
        def container(name: str) -> Callable[[list[str]], str]:
            def build(parts: list[str]) -> str:
                trailing = "," if len(parts) == 1 else ""
                return f"{name}(children=({', '.join(parts)}{trailing}))"

            return build

        return self.cata(
            lambda value: repr(Leaf(value)),
            container("Horizontal"),
            container("Vertical"),
            lambda: "Empty()",
        )


@dataclass(frozen=True, eq=False, repr=False)
class Horizontal(_Container[A]):
    """Left-to-right arrangement of sub-documents."""

    orientation = Orientation.HORIZONTAL


@dataclass(frozen=True, eq=False, repr=False)
class Vertical(_Container[A]):
    """Top-to-bottom arrangement of sub-documents."""

    orientation = Orientation.VERTICAL


@dataclass(frozen=True)
class Empty(Document[Any]):
    """The document with no content; identity element of :func:`combine`."""


EMPTY: Empty = Empty()


def pure(value: A) -> Document[A]:
    """Lift a plain value into a single-leaf document."""

    return Leaf(value)


def _horizontal_parts(doc: Document[A]) -> tuple[Document[A], ...]:
    if isinstance(doc, Horizontal):
        return doc.children
    return (doc,)


def combine(left: Document[A], right: Document[A]) -> Document[A]:
    """
    Merge two documents into one.

    ``Empty`` on either side returns the other side unchanged. Otherwise the
    result is a ``Horizontal`` whose children are the children of each
    ``Horizontal`` operand, or the operand itself for any other variant. The
    top-level flattening makes the operation associative:
    ``combine(combine(a, b), c) == combine(a, combine(b, c))``.
    """

    if not isinstance(left, Document) or not isinstance(right, Document):
        raise TypeError("combine expects two documents")
    if isinstance(left, Empty):
        return right
    if isinstance(right, Empty):
        return left
    return Horizontal(_horizontal_parts(left) + _horizontal_parts(right))


def combine_all(docs: Iterable[Document[A]]) -> Document[A]:
    """Combine documents left to right, starting from ``EMPTY``."""

    return reduce(combine, docs, EMPTY)


def map2(
    first: Document[A], second: Document[B], f: Callable[[A, B], C]
) -> Document[C]:
    """Pair every leaf of ``first`` with the whole of ``second`` through ``f``."""

    return first.flat_map(lambda a: second.fmap(lambda b: f(a, b)))


def unfold(
    seed: S,
    coalgebra: Callable[[S], Document[A] | tuple[Orientation, Sequence[S]]],
) -> Document[A]:
    """
    Build a document from a seed (anamorphism).

    ``coalgebra`` returns either a terminal document (``Leaf`` or ``Empty``)
    or an ``(orientation, child_seeds)`` pair describing a container whose
    children are unfolded from ``child_seeds`` in order.
    """

    step = coalgebra(seed)
    if isinstance(step, (Leaf, Empty)):
        return step
    if isinstance(step, tuple) and len(step) == 2:
        orientation, child_seeds = step
        return Orientation(orientation).container(
            unfold(child, coalgebra) for child in child_seeds
        )
    raise TypeError(
        "coalgebra must return Leaf, Empty or (Orientation, seeds); "
        f"got {type(step).__name__}"
    )


def from_values(
    values: Iterable[A],
    splits: Sequence[int] = (),
    orientation: Orientation | str = Orientation.HORIZONTAL,
) -> Document[A]:
    """
    Build a document from ordered leaf values and an arrangement policy.

    The values are cut into groups at the ``splits`` indices. Each group
    becomes a container of leaves in ``orientation``; when there is more than
    one group, the groups are arranged in the opposite orientation. With
    ``orientation="horizontal"`` this lays the values out as rows:

        >>> str(from_values([1, 2, 3, 4], splits=[2]))
        'Vertical[Horizontal[Leaf(1), Leaf(2)], Horizontal[Leaf(3), Leaf(4)]]'

    No values produce ``EMPTY``.
    """

    items = list(values)
    direction = Orientation(orientation)
    if not items:
        if splits:
            raise ValueError("split points require at least one value")
        return EMPTY

    bounds = list(splits)
    previous = 0
    for point in bounds:
        if not isinstance(point, int) or isinstance(point, bool):
            raise TypeError(f"split points must be integers; got {point!r}")
        if point <= previous or point >= len(items):
            raise ValueError(
                f"split points must be strictly increasing within 1..{len(items) - 1}; "
                f"got {bounds}"
            )
        previous = point

    edges = [0, *bounds, len(items)]
    groups = [
        direction.container(Leaf(value) for value in items[start:stop])
        for start, stop in zip(edges, edges[1:])
    ]
    if len(groups) == 1:
        return groups[0]
    return direction.opposite.container(groups)


__all__ = [
    "EMPTY",
    "Document",
    "Empty",
    "Horizontal",
    "Leaf",
    "Orientation",
    "Vertical",
    "combine",
    "combine_all",
    "from_values",
    "map2",
    "pure",
    "unfold",
]
