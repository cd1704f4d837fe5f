"""Document construction instructions.

Each instruction is an immutable request yielded from a ``@do`` program. It
carries its inputs and is given meaning only by the interpreter that runs the
program, so the same program can be executed with different effect semantics.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from celldoc.document import Document


class Instruction:
    """Base class for every instruction an interpreter can handle."""

    __slots__ = ()


def _documents(docs: Iterable[Document[Any]], owner: str) -> tuple[Document[Any], ...]:
    children = tuple(docs)
    for child in children:
        if not isinstance(child, Document):
            raise TypeError(f"{owner} expects documents; got {type(child).__name__}")
    return children


@dataclass(frozen=True)
class CreateLeaf(Instruction):
    """Build ``Leaf(value)``. Result: ``Document``."""

    value: Any


@dataclass(frozen=True)
class CreateHorizontal(Instruction):
    """Group documents left to right. Result: ``Document``."""

    children: tuple[Document[Any], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _documents(self.children, "CreateHorizontal"))


@dataclass(frozen=True)
class CreateVertical(Instruction):
    """Group documents top to bottom. Result: ``Document``."""

    children: tuple[Document[Any], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _documents(self.children, "CreateVertical"))


@dataclass(frozen=True)
class CombineDocuments(Instruction):
    """Merge two documents with :func:`celldoc.document.combine`. Result: ``Document``."""

    left: Document[Any]
    right: Document[Any]

    def __post_init__(self) -> None:
        _documents((self.left, self.right), "CombineDocuments")


@dataclass(frozen=True)
class ValidateDocument(Instruction):
    """Check that a document is not ``Empty``. Result: ``Result[Document]``."""

    doc: Document[Any]

    def __post_init__(self) -> None:
        _documents((self.doc,), "ValidateDocument")


def create_leaf(value: Any) -> CreateLeaf:
    return CreateLeaf(value=value)


def create_horizontal(children: Iterable[Document[Any]]) -> CreateHorizontal:
    return CreateHorizontal(children=tuple(children))


def create_vertical(children: Iterable[Document[Any]]) -> CreateVertical:
    return CreateVertical(children=tuple(children))


def combine_documents(left: Document[Any], right: Document[Any]) -> CombineDocuments:
    return CombineDocuments(left=left, right=right)


def validate_document(doc: Document[Any]) -> ValidateDocument:
    return ValidateDocument(doc=doc)


__all__ = [
    "CombineDocuments",
    "CreateHorizontal",
    "CreateLeaf",
    "CreateVertical",
    "Instruction",
    "ValidateDocument",
    "combine_documents",
    "create_horizontal",
    "create_leaf",
    "create_vertical",
    "validate_document",
]
