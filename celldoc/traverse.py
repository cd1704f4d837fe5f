"""
Effectful traversal over documents.

:func:`traverse` maps an effectful function over every leaf and collects the
effects with the supplied :class:`~celldoc.monad.Applicative`, rebuilding a
document of exactly the same shape inside the effect. The engine knows nothing
about failure: with ``MAYBE`` or ``RESULT`` a single failing leaf makes the
whole result fail purely through the instance's ``sequence``.

Example:
    >>> from celldoc import MAYBE, Horizontal, Leaf, Some, Vertical
    >>> doc = Horizontal([Leaf(1), Vertical([Leaf(2), Leaf(3)]), Leaf(4)])
    >>> traverse(Some, doc, MAYBE) == Some(doc)
    True
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from celldoc.document import EMPTY, Document, Horizontal, Leaf, Vertical
from celldoc.monad import Applicative

A = TypeVar("A")
B = TypeVar("B")


def traverse(
    map_leaf: Callable[[A], Any],
    doc: Document[A],
    applicative: Applicative,
) -> Any:
    """
    Map ``map_leaf`` over every leaf of ``doc`` inside ``applicative``.

    Leaves are visited depth-first, left to right. Children effects are
    sequenced in their original order and the result holds a document with the
    same variant at every position. ``Empty`` lifts directly with ``pure``
    without calling ``map_leaf``. The walk is iterative, so document depth is
    not bounded by the recursion limit.

    Args:
        map_leaf: Function from a leaf value to an effect of the new value.
        doc: Document to traverse.
        applicative: Effect abstraction supplying ``pure`` and ``sequence``.

    Returns:
        An effect of the transformed document.
    """

    if not isinstance(doc, Document):
        raise TypeError(f"traverse expects a Document; got {type(doc).__name__}")

    def rebuild(container: Callable[[list[Document[B]]], Document[B]]) -> Callable[[list[Any]], Any]:
        return lambda effects: applicative.map(applicative.sequence(effects), container)

    return doc.cata(
        lambda value: applicative.map(map_leaf(value), Leaf),
        rebuild(Horizontal),
        rebuild(Vertical),
        lambda: applicative.pure(EMPTY),
    )


def sequence_document(doc: Document[Any], applicative: Applicative) -> Any:
    """Turn a document whose leaves are effects into an effect of a document."""

    return traverse(lambda effect: effect, doc, applicative)


__all__ = ["sequence_document", "traverse"]
