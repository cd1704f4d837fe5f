"""
Program representation for staged document construction.

A program is a lazy description of work: nothing runs until an interpreter
asks for a fresh generator via :meth:`Program.to_generator`. Generators yield
:class:`~celldoc.instructions.Instruction` values (or nested programs) and
receive each instruction's result back, which is how one step depends on the
previous step's result. Because a new generator can be created at any time, the
same program can be run many times and under different interpreters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Generator, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from celldoc.instructions import Instruction

T = TypeVar("T")
U = TypeVar("U")

ProgramGenerator = Generator["Instruction | Program[Any]", Any, T]


class Program(ABC, Generic[T]):
    """Runtime base class for all celldoc programs."""

    @abstractmethod
    def to_generator(self) -> ProgramGenerator[T]:
        """Create a new generator that performs this program's steps."""

    def map(self, f: Callable[[T], U]) -> Program[U]:
        """Map a function over this program's result."""

        if not callable(f):
            raise TypeError("mapper must be callable")

        def factory() -> ProgramGenerator[U]:
            value = yield self
            return f(value)

        return GeneratorProgram(factory)

    def flat_map(self, f: Callable[[T], Program[U]]) -> Program[U]:
        """Monadic bind operation."""

        if not callable(f):
            raise TypeError("binder must be callable returning a Program")

        def factory() -> ProgramGenerator[U]:
            value = yield self
            next_prog = f(value)
            if not isinstance(next_prog, Program):
                raise TypeError(
                    "binder must return a Program; got "
                    f"{type(next_prog).__name__}"
                )
            return (yield next_prog)

        return GeneratorProgram(factory)

    def and_then_k(self, binder: Callable[[T], Program[U]]) -> Program[U]:
        """Alias for flat_map for Kleisli-style composition."""

        return self.flat_map(binder)

    def __rshift__(self, binder: Callable[[T], Program[U]]) -> Program[U]:
        return self.flat_map(binder)

    @staticmethod
    def pure(value: T) -> Program[T]:
        return PureProgram(value)

    @staticmethod
    def lift(value: Program[U] | Instruction | U) -> Program[U]:
        """Wrap an instruction or plain value so it can be composed as a program."""

        if isinstance(value, Program):
            return value
        if isinstance(value, Instruction):
            return InstructionProgram(value)
        return PureProgram(value)

    @staticmethod
    def sequence(programs: Iterable[Program[T] | Instruction]) -> Program[list[T]]:
        """Run programs one after another and collect their results in order."""

        steps = [Program.lift(program) for program in programs]

        def sequence_generator() -> ProgramGenerator[list[T]]:
            results: list[T] = []
            for step in steps:
                results.append((yield step))
            return results

        return GeneratorProgram(sequence_generator)

    @staticmethod
    def traverse(
        items: Iterable[T], func: Callable[[T], Program[U] | Instruction]
    ) -> Program[list[U]]:
        return Program.sequence([func(item) for item in items])


@dataclass(frozen=True)
class PureProgram(Program[T]):
    """Program that performs no instruction and returns ``value``."""

    value: T

    def to_generator(self) -> ProgramGenerator[T]:
        return self.value
        yield  # pragma: no cover - marks this method as a generator


@dataclass(frozen=True)
class InstructionProgram(Program[T]):
    """Program consisting of a single instruction."""

    instruction: Instruction

    def to_generator(self) -> ProgramGenerator[T]:
        return (yield self.instruction)


@dataclass
class GeneratorProgram(Program[T]):
    """Program backed by a generator factory."""

    factory: Callable[[], ProgramGenerator[T]]

    def to_generator(self) -> ProgramGenerator[T]:
        return self.factory()


@dataclass
class ProgramCall(Program[T]):
    """Bound invocation of a ``@do`` function with captured arguments."""

    func: Callable[..., Any]
    args: tuple[Any, ...]
    kwargs: dict[str, Any] = field(default_factory=dict)
    function_name: str = "<anonymous>"

    def to_generator(self) -> ProgramGenerator[T]:
        return _call_generator(self.func, self.args, self.kwargs)

    def __repr__(self) -> str:
        return f"ProgramCall({self.function_name})"


def _call_generator(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> ProgramGenerator[Any]:
    gen_or_value = func(*args, **kwargs)
    if not isinstance(gen_or_value, Generator):
        return gen_or_value
    return (yield from gen_or_value)


def flatten(gen: ProgramGenerator[T]) -> Generator[Instruction, Any, T]:
    """
    Inline nested programs so that only instructions are yielded.

    Whenever ``gen`` yields a :class:`Program`, that program's own generator is
    run in place and its result is sent back to ``gen``.
    """

    try:
        current = next(gen)
    except StopIteration as stop_exc:
        return stop_exc.value

    while True:
        if isinstance(current, Program):
            value = yield from flatten(current.to_generator())
        elif isinstance(current, Instruction):
            value = yield current
        else:
            gen.close()
            raise TypeError(
                "Programs may only yield instructions or programs; got "
                f"{type(current).__name__}"
            )
        try:
            current = gen.send(value)
        except StopIteration as stop_exc:
            return stop_exc.value


__all__ = [
    "GeneratorProgram",
    "InstructionProgram",
    "Program",
    "ProgramCall",
    "PureProgram",
    "flatten",
]
