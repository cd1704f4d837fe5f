"""
Capability-interface document construction.

The same five operations as the instruction set, exposed as direct method
calls that return effects of the capability's ``monad``. Building a document
this way composes effects immediately instead of staging a program first;
for the same effect choice the results equal those of the staged programs in
:mod:`celldoc.dsl`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any

from celldoc._vendor import NOTHING, Err, Ok, Some
from celldoc.document import Document, Empty, Horizontal, Leaf, Vertical, combine
from celldoc.errors import EmptyDocumentError
from celldoc.instructions import (
    CombineDocuments,
    CreateHorizontal,
    CreateLeaf,
    CreateVertical,
    ValidateDocument,
)
from celldoc.interpreter import DocumentInterpreter
from celldoc.monad import IDENTITY, MAYBE, RESULT, Monad


class DocumentCapability(ABC):
    """Document construction operations parameterised over ``monad``."""

    monad: Monad

    @abstractmethod
    def create_leaf(self, value: Any) -> Any: ...

    @abstractmethod
    def create_horizontal(self, children: Iterable[Document[Any]]) -> Any: ...

    @abstractmethod
    def create_vertical(self, children: Iterable[Document[Any]]) -> Any: ...

    @abstractmethod
    def combine_documents(self, left: Document[Any], right: Document[Any]) -> Any: ...

    @abstractmethod
    def validate_document(self, doc: Document[Any]) -> Any:
        """Effect of ``Result[Document]``."""


class _LiftingCapability(DocumentCapability):
    """Construction always succeeds and is lifted with ``monad.pure``."""

    def create_leaf(self, value: Any) -> Any:
        return self.monad.pure(Leaf(value))

    def create_horizontal(self, children: Iterable[Document[Any]]) -> Any:
        return self.monad.pure(Horizontal(children))

    def create_vertical(self, children: Iterable[Document[Any]]) -> Any:
        return self.monad.pure(Vertical(children))

    def combine_documents(self, left: Document[Any], right: Document[Any]) -> Any:
        return self.monad.pure(combine(left, right))


class PureDocumentCapability(_LiftingCapability):
    monad = IDENTITY

    def validate_document(self, doc: Document[Any]) -> Any:
        if isinstance(doc, Empty):
            return Err(EmptyDocumentError())
        return Ok(doc)


class MaybeDocumentCapability(_LiftingCapability):
    monad = MAYBE

    def validate_document(self, doc: Document[Any]) -> Any:
        if isinstance(doc, Empty):
            return NOTHING
        return Some(Ok(doc))


class ResultDocumentCapability(_LiftingCapability):
    monad = RESULT

    def validate_document(self, doc: Document[Any]) -> Any:
        if isinstance(doc, Empty):
            return Err(EmptyDocumentError())
        return Ok(Ok(doc))


class InterpretedCapability(DocumentCapability):
    """Expose any :class:`DocumentInterpreter` as a capability."""

    def __init__(self, interpreter: DocumentInterpreter) -> None:
        self.interpreter = interpreter
        self.monad = interpreter.monad

    def create_leaf(self, value: Any) -> Any:
        return self.interpreter.handle(CreateLeaf(value))

    def create_horizontal(self, children: Iterable[Document[Any]]) -> Any:
        return self.interpreter.handle(CreateHorizontal(tuple(children)))

    def create_vertical(self, children: Iterable[Document[Any]]) -> Any:
        return self.interpreter.handle(CreateVertical(tuple(children)))

    def combine_documents(self, left: Document[Any], right: Document[Any]) -> Any:
        return self.interpreter.handle(CombineDocuments(left, right))

    def validate_document(self, doc: Document[Any]) -> Any:
        return self.interpreter.handle(ValidateDocument(doc))


def build_document(capability: DocumentCapability, values: Sequence[Any]) -> Any:
    """Direct-call counterpart of :func:`celldoc.dsl.build_document`."""

    monad = capability.monad
    leaves = monad.traverse(values, capability.create_leaf)

    def group(docs: list[Document[Any]]) -> Any:
        return monad.flat_map(
            capability.create_horizontal(docs[:2]),
            lambda horizontal: monad.flat_map(
                capability.create_vertical(docs[2:]),
                lambda vertical: capability.combine_documents(horizontal, vertical),
            ),
        )

    return monad.flat_map(leaves, group)


def build_complex_document(capability: DocumentCapability, values: Sequence[Any]) -> Any:
    """Direct-call counterpart of :func:`celldoc.dsl.build_complex_document`."""

    monad = capability.monad

    def check(combined: Document[Any]) -> Any:
        return monad.flat_map(capability.validate_document(combined), fallback)

    def fallback(validated: Any) -> Any:
        if validated.is_ok():
            return monad.pure(validated.unwrap())
        if not values:
            raise ValueError("build_complex_document needs at least one value to fall back to")
        return capability.create_leaf(values[0])

    return monad.flat_map(build_document(capability, values), check)


__all__ = [
    "DocumentCapability",
    "InterpretedCapability",
    "MaybeDocumentCapability",
    "PureDocumentCapability",
    "ResultDocumentCapability",
    "build_complex_document",
    "build_document",
]
