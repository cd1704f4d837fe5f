"""
Algebras over documents.

A render or metrics algebra supplies one function per document variant and is
applied with :meth:`Document.cata`. The module also holds the document
composition helpers (zipping, applying, sequencing, Kleisli composition) and
leaf-value validation that accumulates every failure.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from celldoc._vendor import Err, Ok, Result
from celldoc.document import EMPTY, Document, Horizontal, Leaf, Vertical, map2
from celldoc.errors import ValidationError, ValidationErrors
from celldoc.monad import VALIDATION
from celldoc.traverse import traverse

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")


# =========================================================
# Rendering
# =========================================================
@dataclass(frozen=True)
class RenderAlgebra(Generic[A]):
    """One rendering function per variant."""

    leaf: Callable[[A], str]
    horizontal: Callable[[list[str]], str]
    vertical: Callable[[list[str]], str]
    empty: Callable[[], str]


ASCII_RENDERER: RenderAlgebra[Any] = RenderAlgebra(
    leaf=lambda value: f"[{value}]",
    horizontal=" | ".join,
    vertical="\n".join,
    empty=lambda: "∅",
)

HTML_RENDERER: RenderAlgebra[Any] = RenderAlgebra(
    leaf=lambda value: f"<span>{html.escape(str(value))}</span>",
    horizontal=lambda parts: f"<div class='horizontal'>{''.join(parts)}</div>",
    vertical=lambda parts: f"<div class='vertical'>{''.join(parts)}</div>",
    empty=lambda: "<div class='empty'></div>",
)


def render(doc: Document[A], algebra: RenderAlgebra[A] = ASCII_RENDERER) -> str:
    return doc.cata(algebra.leaf, algebra.horizontal, algebra.vertical, algebra.empty)


# =========================================================
# Metrics
# =========================================================
@dataclass(frozen=True)
class DocumentSize:
    """Width and height of a laid-out document, plus its leaf count."""

    width: int = 0
    height: int = 0
    leaf_count: int = 0

    def __add__(self, other: DocumentSize) -> DocumentSize:
        """Stack ``other`` below ``self``."""

        return DocumentSize(
            max(self.width, other.width),
            self.height + other.height,
            self.leaf_count + other.leaf_count,
        )


def _beside(sizes: list[DocumentSize]) -> DocumentSize:
    return DocumentSize(
        sum(size.width for size in sizes),
        max((size.height for size in sizes), default=0),
        sum(size.leaf_count for size in sizes),
    )


def _stacked(sizes: list[DocumentSize]) -> DocumentSize:
    return sum(sizes, DocumentSize())


def _text_metrics(value: Any) -> DocumentSize:
    return DocumentSize(len(str(value)), 1, 1)


def calculate_metrics(
    doc: Document[A], leaf_metrics: Callable[[A], DocumentSize] | None = None
) -> DocumentSize:
    """
    Lay the document out and measure it.

    By default a leaf is one line as wide as its text. Horizontal groups add
    widths and take the tallest child; vertical groups take the widest child
    and add heights.
    """

    return doc.cata(leaf_metrics or _text_metrics, _beside, _stacked, DocumentSize)


# =========================================================
# Aggregation
# =========================================================
@dataclass(frozen=True)
class ContentAggregate:
    values: tuple[str, ...] = field(default_factory=tuple)
    total_length: int = 0

    def __add__(self, other: ContentAggregate) -> ContentAggregate:
        return ContentAggregate(
            self.values + other.values, self.total_length + other.total_length
        )


def aggregate_content(doc: Document[Any]) -> ContentAggregate:
    """Collect the textual form of every leaf and their total length."""

    return doc.fold_left(
        ContentAggregate(),
        lambda acc, value: acc + ContentAggregate((str(value),), len(str(value))),
    )


def fold_values(doc: Document[A], combine: Callable[[A, A], A]) -> A:
    """
    Reduce the leaf values with an associative ``combine``.

    Raises:
        ValueError: The document has no leaves.
    """

    values = doc.leaves()
    if not values:
        raise ValueError("Cannot fold a document without any values")
    acc = values[0]
    for value in values[1:]:
        acc = combine(acc, value)
    return acc


# =========================================================
# Composition
# =========================================================
def zip_with(first: Document[A], second: Document[B], f: Callable[[A, B], C]) -> Document[C]:
    """
    Combine two documents position by position.

    Where the variants differ, or either side is ``Empty``, the result is
    ``Empty`` at that position. Containers are zipped up to the shorter child
    list.
    """

    if isinstance(first, Leaf) and isinstance(second, Leaf):
        return Leaf(f(first.value, second.value))
    if isinstance(first, Horizontal) and isinstance(second, Horizontal):
        return Horizontal(zip_with(a, b, f) for a, b in zip(first.children, second.children))
    if isinstance(first, Vertical) and isinstance(second, Vertical):
        return Vertical(zip_with(a, b, f) for a, b in zip(first.children, second.children))
    return EMPTY


def ap(functions: Document[Callable[[A], B]], doc: Document[A]) -> Document[B]:
    """Apply every function leaf to the whole of ``doc``."""

    return functions.flat_map(doc.fmap)


def sequence_documents(docs: Iterable[Document[A]]) -> Document[list[A]]:
    """Every way of picking one leaf from each document, as a document of lists."""

    acc: Document[list[A]] = Leaf([])
    for doc in docs:
        acc = map2(acc, doc, lambda values, value: [*values, value])
    return acc


def distribute(doc: Document[A], values: Sequence[B]) -> Document[tuple[A, B]]:
    """
    Pair every leaf value with each of ``values``.

    Each leaf becomes a ``Horizontal`` group of ``(leaf_value, value)`` leaves
    in the order of ``values``; with no values every leaf becomes ``Empty``.

        >>> str(distribute(Vertical([Leaf("a"), Leaf("b")]), [1, 2]))
        "Vertical[Horizontal[Leaf(('a', 1)), Leaf(('a', 2))], Horizontal[Leaf(('b', 1)), Leaf(('b', 2))]]"
    """

    options = list(values)
    if not options:
        return doc.flat_map(lambda _: EMPTY)
    return doc.flat_map(lambda a: Horizontal(Leaf((a, b)) for b in options))


def kleisli_compose(
    f: Callable[[A], Document[B]], g: Callable[[B], Document[C]]
) -> Callable[[A], Document[C]]:
    return lambda value: f(value).flat_map(g)


# =========================================================
# Validation
# =========================================================
def non_empty_value(value: Any) -> Result[Any]:
    """Default leaf rule: reject empty strings and ``None``."""

    if value is None or (isinstance(value, str) and not value):
        return Err(ValidationError("value", "Empty value not allowed"))
    return Ok(value)


def validate_values(
    doc: Document[A], rule: Callable[[A], Result[B]] = non_empty_value
) -> Result[Document[B]]:
    """
    Check every leaf with ``rule`` and report all failures at once.

    Returns ``Ok(document)`` when every leaf passes, otherwise
    ``Err(ValidationErrors(...))`` listing each failure in leaf order.
    """

    result = traverse(rule, doc, VALIDATION)
    if isinstance(result, Err) and not isinstance(result.error, ValidationErrors):
        return Err(ValidationErrors([result.error]))
    return result


__all__ = [
    "ASCII_RENDERER",
    "HTML_RENDERER",
    "ContentAggregate",
    "DocumentSize",
    "RenderAlgebra",
    "aggregate_content",
    "ap",
    "calculate_metrics",
    "distribute",
    "fold_values",
    "kleisli_compose",
    "non_empty_value",
    "render",
    "sequence_documents",
    "validate_values",
    "zip_with",
]
