"""
Test the program combinators (pure, lift, map, flat_map, sequence, traverse)
and the @do decorator.
"""

import inspect

import pytest

from celldoc import (
    EMPTY,
    Horizontal,
    KleisliProgram,
    Leaf,
    Program,
    Some,
    combine_documents,
    create_horizontal,
    create_leaf,
    do,
    run_maybe,
    run_pure,
)
from celldoc.program import InstructionProgram, ProgramCall, PureProgram


def test_program_pure() -> None:
    """Program.pure returns its value without handling any instruction."""
    assert run_pure(Program.pure(42)) == 42
    assert run_maybe(Program.pure(42)) == Some(42)


def test_program_lift() -> None:
    program = Program.pure(1)
    assert Program.lift(program) is program
    assert isinstance(Program.lift(create_leaf(1)), InstructionProgram)
    assert Program.lift("plain") == PureProgram("plain")


def test_program_map() -> None:
    """Program.map transforms the result of a program."""
    program = Program.lift(create_leaf(3)).map(lambda leaf: leaf.value * 2)
    assert run_pure(program) == 6

    with pytest.raises(TypeError, match="mapper must be callable"):
        Program.pure(1).map(42)  # type: ignore[arg-type]


def test_program_flat_map_and_rshift() -> None:
    """flat_map feeds the previous result into the next program."""
    program = Program.lift(create_leaf(1)).flat_map(
        lambda left: Program.lift(create_leaf(2)).flat_map(
            lambda right: Program.lift(combine_documents(left, right))
        )
    )
    assert run_pure(program) == Horizontal([Leaf(1), Leaf(2)])

    chained = Program.pure("x") >> (lambda value: Program.lift(create_leaf(value)))
    assert run_pure(chained) == Leaf("x")
    assert run_pure(Program.pure(2).and_then_k(lambda v: Program.pure(v + 1))) == 3


def test_program_flat_map_requires_program() -> None:
    program = Program.pure(1).flat_map(lambda v: v + 1)  # type: ignore[arg-type, return-value]
    with pytest.raises(TypeError, match="binder must return a Program"):
        run_pure(program)


def test_program_sequence_and_traverse() -> None:
    leaves = Program.traverse([1, 2, 3], create_leaf)
    assert run_pure(leaves) == [Leaf(1), Leaf(2), Leaf(3)]

    mixed = Program.sequence([Program.pure("a"), create_leaf("b")])
    assert run_pure(mixed) == ["a", Leaf("b")]
    assert run_pure(Program.sequence([])) == []


class TestDoDecorator:
    def test_preserves_metadata(self) -> None:
        @do
        def titled(title: str, count: int = 1):
            """Build a titled row."""
            leaf = yield create_leaf(title)
            return leaf

        assert isinstance(titled, KleisliProgram)
        assert titled.__name__ == "titled"
        assert titled.__doc__ == "Build a titled row."
        assert list(inspect.signature(titled).parameters) == ["title", "count"]

    def test_calling_builds_a_lazy_program(self) -> None:
        calls = []

        @do
        def tracked(value):
            calls.append(value)
            return (yield create_leaf(value))

        program = tracked(5)
        assert isinstance(program, ProgramCall)
        assert repr(program) == "ProgramCall(tracked)"
        assert calls == []
        assert run_pure(program) == Leaf(5)
        assert run_pure(program) == Leaf(5)
        assert calls == [5, 5]

    def test_non_generator_function(self) -> None:
        @do
        def constant():
            return EMPTY

        assert run_pure(constant()) == EMPTY

    def test_kwargs(self) -> None:
        @do
        def row(*values, wrap=True):
            leaves = yield Program.traverse(values, create_leaf)
            if wrap:
                return (yield create_horizontal(leaves))
            return leaves

        assert run_pure(row(1, 2)) == Horizontal([Leaf(1), Leaf(2)])
        assert run_pure(row(1, 2, wrap=False)) == [Leaf(1), Leaf(2)]

    def test_methods(self) -> None:
        class Builder:
            def __init__(self, prefix: str) -> None:
                self.prefix = prefix

            @do
            def labelled(self, value):
                return (yield create_leaf(f"{self.prefix}{value}"))

        builder = Builder("#")
        assert run_pure(builder.labelled(1)) == Leaf("#1")
        assert isinstance(Builder.labelled, KleisliProgram)
