from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class DocumentError(Exception):
    """Base class for document construction and validation failures.

    Document errors are plain values: two errors of the same class built from
    the same arguments compare equal, so ``Err(EmptyDocumentError())`` can be
    compared against an interpreter result.
    """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class EmptyDocumentError(DocumentError):
    """Raised (or returned as ``Err``) when validating an ``Empty`` document."""

    def __init__(self) -> None:
        super().__init__("Document is empty")


class ParseError(DocumentError):
    """Raised when a serialized document cannot be decoded."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DocumentError):
    """A leaf value failed a field-level validation rule."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(field, reason)

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class ValidationErrors(DocumentError):
    """Every error gathered while validating a document, in leaf order."""

    def __init__(self, errors: Iterable[Exception]) -> None:
        self.errors = tuple(errors)
        super().__init__(*self.errors)

    def __str__(self) -> str:
        return "; ".join(str(error) for error in self.errors)


class UnhandledInstructionError(TypeError):
    """Raised when an interpreter receives an instruction it has no handler for."""

    def __init__(self, instruction: Any, interpreter: Any) -> None:
        self.instruction = instruction
        self.interpreter = interpreter
        super().__init__(
            f"{type(interpreter).__name__} has no handler for {type(instruction).__name__}\n"
            f"Hint: register one in `handlers()` or yield only celldoc instructions from @do programs"
        )


class StepLimitExceededError(RuntimeError):
    """Raised when a program yields more instructions than the interpreter allows."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"Program exceeded the step limit of {limit} instructions")


__all__ = [
    "DocumentError",
    "EmptyDocumentError",
    "ParseError",
    "StepLimitExceededError",
    "UnhandledInstructionError",
    "ValidationError",
    "ValidationErrors",
]
