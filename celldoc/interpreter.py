"""
Interpreters for staged document programs.

An interpreter pairs an effect abstraction (``monad``) with one handler per
instruction type. :func:`fold_map` walks a program, hands every yielded
instruction to the interpreter, and threads the handler's result back into the
program through the monad's bind, so the final value is an effect of the
program's return value.

Interpreters provided here:

- :class:`PureInterpreter` (identity monad): everything succeeds;
  validating ``Empty`` returns ``Err(EmptyDocumentError())`` as a value.
- :class:`MaybeInterpreter` (maybe monad): validating ``Empty`` makes the
  whole run ``Nothing``.
- :class:`ResultInterpreter` (result monad): validating ``Empty`` makes the
  whole run ``Err(EmptyDocumentError())``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Generator, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from celldoc._vendor import NOTHING, Err, FrozenDict, Maybe, Ok, Result, Some
from celldoc.document import Document, Empty, Horizontal, Leaf, Vertical, combine
from celldoc.errors import EmptyDocumentError, StepLimitExceededError, UnhandledInstructionError
from celldoc.instructions import (
    CombineDocuments,
    CreateHorizontal,
    CreateLeaf,
    CreateVertical,
    Instruction,
    ValidateDocument,
)
from celldoc.monad import IDENTITY, MAYBE, RESULT, Continue, Done, Monad
from celldoc.program import Program, flatten
from celldoc.utils import DEBUG_INTERPRETER, truncate_repr

T = TypeVar("T")

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class DocumentInterpreter(ABC):
    """
    Base class mapping each instruction to an effect of ``monad``.

    Subclasses set ``monad`` and implement :meth:`validate_document`; the
    construction handlers default to lifting the built document with
    ``monad.pure``. Additional instruction types can be supported by
    overriding :meth:`handlers`.
    """

    monad: Monad

    def __init__(self, *, max_steps: int | None = None, trace: bool | None = None):
        """Initialize the dispatch table.

        Args:
            max_steps: Optional cap on the number of instructions a single run
                may hand to this interpreter.
            trace: Log every handled instruction at DEBUG level. Defaults to
                the ``CELLDOC_DEBUG`` environment flag.
        """
        if max_steps is not None and max_steps < 1:
            raise ValueError("max_steps must be >= 1 or None")

        self._max_steps = max_steps
        self._trace = DEBUG_INTERPRETER if trace is None else trace
        self._handlers: FrozenDict[type, Handler] = FrozenDict(self.handlers())

    @property
    def max_steps(self) -> int | None:
        return self._max_steps

    def handlers(self) -> Mapping[type, Handler]:
        return {
            CreateLeaf: self.create_leaf,
            CreateHorizontal: self.create_horizontal,
            CreateVertical: self.create_vertical,
            CombineDocuments: self.combine_documents,
            ValidateDocument: self.validate_document,
        }

    def create_leaf(self, instruction: CreateLeaf) -> Any:
        return self.monad.pure(Leaf(instruction.value))

    def create_horizontal(self, instruction: CreateHorizontal) -> Any:
        return self.monad.pure(Horizontal(instruction.children))

    def create_vertical(self, instruction: CreateVertical) -> Any:
        return self.monad.pure(Vertical(instruction.children))

    def combine_documents(self, instruction: CombineDocuments) -> Any:
        return self.monad.pure(combine(instruction.left, instruction.right))

    @abstractmethod
    def validate_document(self, instruction: ValidateDocument) -> Any:
        """Return an effect of ``Result[Document]`` for the validated document."""

    def handle(self, instruction: Instruction) -> Any:
        """Dispatch ``instruction`` to its handler and return the handler's effect."""

        for cls in type(instruction).__mro__:
            handler = self._handlers.get(cls)
            if handler is not None:
                effect = handler(instruction)
                if self._trace:
                    logger.debug(
                        "%s handled %s -> %s",
                        type(self).__name__,
                        truncate_repr(instruction),
                        truncate_repr(effect),
                    )
                return effect
        raise UnhandledInstructionError(instruction, self)

    def run(self, program: Program[T] | Instruction) -> Any:
        return fold_map(program, self)


class PureInterpreter(DocumentInterpreter):
    """Every instruction succeeds; validation failures are returned as ``Err``."""

    monad = IDENTITY

    def validate_document(self, instruction: ValidateDocument) -> Result[Document[Any]]:
        if isinstance(instruction.doc, Empty):
            return Err(EmptyDocumentError())
        return Ok(instruction.doc)


class MaybeInterpreter(DocumentInterpreter):
    """Validating ``Empty`` leaves the whole run without a result."""

    monad = MAYBE

    def validate_document(self, instruction: ValidateDocument) -> Maybe[Result[Document[Any]]]:
        if isinstance(instruction.doc, Empty):
            return NOTHING
        return Some(Ok(instruction.doc))


class ResultInterpreter(DocumentInterpreter):
    """Validating ``Empty`` fails the whole run with ``EmptyDocumentError``."""

    monad = RESULT

    def validate_document(self, instruction: ValidateDocument) -> Result[Result[Document[Any]]]:
        if isinstance(instruction.doc, Empty):
            return Err(EmptyDocumentError())
        return Ok(Ok(instruction.doc))


@dataclass(frozen=True, eq=False)
class _Cursor:
    """
    Position in a run: the result fed to the program at this step.

    Under a multi-shot monad ``parent`` links back to the previous cursor, so
    the chain holds every result so far. Single-shot runs link to
    ``_DETACHED`` instead and keep only the newest result alive.
    """

    parent: _Cursor | None
    value: Any = None
    step: int = 0

    def history(self) -> list[Any]:
        values: list[Any] = []
        node: _Cursor | None = self
        while node is not None and node.parent is not None:
            if node.parent is _DETACHED:
                raise RuntimeError(
                    "A single-shot run was resumed twice; set multi_shot = True on its monad"
                )
            values.append(node.value)
            node = node.parent
        values.reverse()
        return values


_DETACHED = _Cursor(None)


class _Replay:
    """
    Drives a program's generator to the instruction that follows a cursor.

    Single-shot monads only ever resume the newest cursor, which advances the
    live generator with one ``send``. Multi-shot monads (lists) resume older
    cursors as well; those restart the program and replay the recorded results.
    """

    def __init__(self, program: Program[Any]) -> None:
        self._program = program
        self._gen: Generator[Instruction, Any, Any] | None = None
        self._at: _Cursor | None = None
        self.replays = 0

    def advance(self, cursor: _Cursor) -> Instruction | Done[Any]:
        try:
            if self._resumes_live(cursor):
                current = self._gen.send(cursor.value)
            else:
                current = self._restart(cursor)
        except StopIteration as stop_exc:
            self._gen = None
            self._at = None
            return Done(stop_exc.value)
        self._at = cursor
        return current

    def _resumes_live(self, cursor: _Cursor) -> bool:
        if self._gen is None or self._at is None or cursor.step != self._at.step + 1:
            return False
        return cursor.parent is _DETACHED or cursor.parent is self._at

    def _restart(self, cursor: _Cursor) -> Instruction:
        self.close()
        if cursor.parent is not None:
            self.replays += 1
        self._gen = flatten(self._program.to_generator())
        current = next(self._gen)
        for value in cursor.history():
            current = self._gen.send(value)
        return current

    def close(self) -> None:
        if self._gen is not None:
            self._gen.close()
            self._gen = None
            self._at = None


def fold_map(program: Program[T] | Instruction, interpreter: DocumentInterpreter) -> Any:
    """
    Run ``program`` with ``interpreter`` and return an effect of its result.

    Iteration goes through ``monad.tail_rec_m``, so long programs do not grow
    the Python stack under the built-in monads.

    Raises:
        UnhandledInstructionError: The program yielded an instruction the
            interpreter has no handler for.
        StepLimitExceededError: The run handled more than
            ``interpreter.max_steps`` instructions.
    """

    program = Program.lift(program)
    monad = interpreter.monad
    replay = _Replay(program)
    limit = interpreter.max_steps
    steps = 0

    def step(cursor: _Cursor) -> Any:
        nonlocal steps
        outcome = replay.advance(cursor)
        if isinstance(outcome, Done):
            return monad.pure(outcome)
        steps += 1
        if limit is not None and steps > limit:
            raise StepLimitExceededError(limit)
        effect = interpreter.handle(outcome)
        parent = cursor if monad.multi_shot else _DETACHED
        return monad.map(effect, lambda value: Continue(_Cursor(parent, value, cursor.step + 1)))

    try:
        result = monad.tail_rec_m(_Cursor(None), step)
    finally:
        replay.close()
    logger.debug(
        "%s ran %r: %d instructions, %d replays",
        type(interpreter).__name__,
        program,
        steps,
        replay.replays,
    )
    if monad is not IDENTITY and (result is NOTHING or isinstance(result, Err)):
        logger.debug("%s short-circuited: %s", type(interpreter).__name__, truncate_repr(result))
    return result


def run_pure(program: Program[T] | Instruction) -> Any:
    """Run with :class:`PureInterpreter`; the result is the plain value."""

    return PureInterpreter().run(program)


def run_maybe(program: Program[T] | Instruction) -> Maybe[Any]:
    return MaybeInterpreter().run(program)


def run_result(program: Program[T] | Instruction) -> Result[Any]:
    return ResultInterpreter().run(program)


__all__ = [
    "DocumentInterpreter",
    "MaybeInterpreter",
    "PureInterpreter",
    "ResultInterpreter",
    "fold_map",
    "run_maybe",
    "run_pure",
    "run_result",
]
