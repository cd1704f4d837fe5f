"""Staged document-building programs.

These programs only describe construction steps; run them with
:func:`celldoc.interpreter.run_pure`, :func:`~celldoc.interpreter.run_maybe`
or any other interpreter to choose the effect semantics.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from celldoc.do import EffectGenerator, do
from celldoc.document import Document
from celldoc.instructions import (
    combine_documents,
    create_horizontal,
    create_leaf,
    create_vertical,
    validate_document,
)
from celldoc.program import Program


@do
def build_document(values: Sequence[Any]) -> EffectGenerator[Document[Any]]:
    """Leaves for every value; the first two side by side, the rest stacked, then combined."""

    leaves = yield Program.traverse(values, create_leaf)
    horizontal = yield create_horizontal(leaves[:2])
    vertical = yield create_vertical(leaves[2:])
    return (yield combine_documents(horizontal, vertical))


@do
def build_complex_document(values: Sequence[Any]) -> EffectGenerator[Document[Any]]:
    """
    :func:`build_document` followed by validation.

    When validation reports an error the result falls back to a single leaf
    holding the first value. Interpreters that treat validation failure as
    fatal (maybe, result) never reach the fallback.
    """

    combined = yield build_document(values)
    validated = yield validate_document(combined)
    if validated.is_ok():
        return validated.unwrap()
    if not values:
        raise ValueError("build_complex_document needs at least one value to fall back to")
    return (yield create_leaf(values[0]))


__all__ = ["build_complex_document", "build_document"]
