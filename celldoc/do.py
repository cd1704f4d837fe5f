"""
The do decorator for celldoc programs.

This module provides the @do decorator that converts generator functions
into KleisliPrograms, enabling do-notation for staged document construction.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import Any, Generic, ParamSpec, TypeVar

from celldoc.instructions import Instruction
from celldoc.program import Program, ProgramCall

P = ParamSpec("P")
T = TypeVar("T")

EffectGenerator = Generator["Instruction | Program[Any]", Any, T]


@dataclass
class KleisliProgram(Generic[P, T]):
    """
    Thin wrapper around a generator function representing a Kleisli arrow.

    Calling it does not run anything; it captures the arguments in a
    :class:`~celldoc.program.ProgramCall` that creates a fresh generator each
    time an interpreter runs it.
    """

    func: Callable[P, EffectGenerator[T]]

    def __post_init__(self) -> None:
        for attr in ("__name__", "__qualname__", "__doc__", "__module__"):
            value = getattr(self.func, attr, None)
            if value is not None:
                setattr(self, attr, value)
        try:
            self.__signature__ = inspect.signature(self.func)
        except (TypeError, ValueError):
            pass

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return types.MethodType(self, instance)

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Program[T]:
        return ProgramCall(
            func=self.func,
            args=tuple(args),
            kwargs=dict(kwargs),
            function_name=getattr(self, "__name__", "<unknown>"),
        )


def do(func: Callable[P, EffectGenerator[T]]) -> KleisliProgram[P, T]:
    """
    Decorator that converts a generator function into a KleisliProgram.

    Inside the function, ``yield`` an instruction (or another program) to
    receive its result from whichever interpreter runs the program:

        @do
        def two_leaves(a, b):
            left = yield create_leaf(a)
            right = yield create_leaf(b)
            return (yield combine_documents(left, right))

        run_pure(two_leaves(1, 2))   # Horizontal[Leaf(1), Leaf(2)]
        run_maybe(two_leaves(1, 2))  # Some(Horizontal[Leaf(1), Leaf(2)])

    Do not wrap a ``yield`` in try/except to handle interpreter failures: a
    failing instruction (for example ``validate_document(EMPTY)`` under the
    maybe interpreter) ends the run without resuming the generator. Express
    recoverable failures with the ``Result`` an instruction returns instead.

    Interpreters for multi-shot effects (such as the list monad) re-create the
    generator and replay earlier results, so the function body should not
    perform side effects of its own.
    """

    return KleisliProgram(func)


__all__ = ["EffectGenerator", "KleisliProgram", "do"]
