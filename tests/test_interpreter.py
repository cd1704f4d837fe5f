"""Tests for program interpreters and the fold_map runner."""

import gc
import logging
import weakref
from dataclasses import dataclass
from typing import Any

import pytest

from celldoc import (
    EMPTY,
    IDENTITY,
    LIST,
    NOTHING,
    CreateLeaf,
    DocumentInterpreter,
    Empty,
    EmptyDocumentError,
    Err,
    Horizontal,
    Instruction,
    Leaf,
    MaybeInterpreter,
    Ok,
    Program,
    PureInterpreter,
    ResultInterpreter,
    Some,
    StepLimitExceededError,
    UnhandledInstructionError,
    ValidationError,
    Vertical,
    build_complex_document,
    build_document,
    create_leaf,
    do,
    fold_map,
    run_maybe,
    run_pure,
    run_result,
    validate_document,
)


@dataclass(frozen=True)
class Shout(Instruction):
    text: str


@dataclass(frozen=True)
class CreateLabel(CreateLeaf):
    pass


class ShoutingInterpreter(PureInterpreter):
    def handlers(self):
        return {**super().handlers(), Shout: lambda instruction: instruction.text.upper()}


class StrictInterpreter(PureInterpreter):
    """Rejects any document with fewer than three leaves."""

    def validate_document(self, instruction):
        if instruction.doc.leaf_count() < 3:
            return Err(ValidationError("doc", "too small"))
        return super().validate_document(instruction)


class ChoiceInterpreter(DocumentInterpreter):
    """Every leaf is created both as itself and negated."""

    monad = LIST

    def create_leaf(self, instruction):
        return [Leaf(instruction.value), Leaf(-instruction.value)]

    def validate_document(self, instruction):
        if isinstance(instruction.doc, Empty):
            return []
        return [Ok(instruction.doc)]


@do
def sum_of_leaves(n: int):
    total = 0
    for i in range(n):
        leaf = yield create_leaf(i)
        total += leaf.value
    return total


class TestValidation:
    def test_validating_empty(self):
        assert run_pure(validate_document(EMPTY)) == Err(EmptyDocumentError())
        assert run_maybe(validate_document(EMPTY)) is NOTHING
        assert run_result(validate_document(EMPTY)) == Err(EmptyDocumentError())

    def test_validating_non_empty_returns_document_unchanged(self, concrete_doc):
        assert run_pure(validate_document(concrete_doc)) == Ok(concrete_doc)
        assert run_maybe(validate_document(concrete_doc)) == Some(Ok(concrete_doc))
        assert run_result(validate_document(concrete_doc)) == Ok(Ok(concrete_doc))


class TestRepresentativeProgram:
    expected = Horizontal([Leaf(1), Leaf(2), Vertical([Leaf(3)])])

    def test_pure(self):
        assert run_pure(build_complex_document([1, 2, 3])) == self.expected

    def test_maybe(self):
        assert run_maybe(build_complex_document([1, 2, 3])) == Some(self.expected)

    def test_result(self):
        assert run_result(build_complex_document([1, 2, 3])) == Ok(self.expected)

    def test_no_values_still_passes_validation(self):
        assert run_pure(build_complex_document([])) == Horizontal([Vertical([])])
        assert run_maybe(build_complex_document([])) == Some(Horizontal([Vertical([])]))

    def test_fallback_to_first_value(self):
        strict = StrictInterpreter()
        assert strict.run(build_complex_document([7, 8])) == Leaf(7)
        assert strict.run(build_complex_document([1, 2, 3])) == self.expected

    def test_fallback_without_values_raises(self):
        with pytest.raises(ValueError, match="at least one value"):
            StrictInterpreter().run(build_complex_document([]))

    def test_program_is_reusable_across_interpreters(self):
        program = build_document(["a", "b"])
        expected = Horizontal([Leaf("a"), Leaf("b"), Vertical([])])
        assert run_pure(program) == expected
        assert run_maybe(program) == Some(expected)
        assert run_pure(program) == expected


class TestDispatch:
    def test_unhandled_instruction(self):
        @do
        def shouting():
            return (yield Shout("hi"))

        with pytest.raises(UnhandledInstructionError, match="PureInterpreter has no handler for Shout"):
            run_pure(shouting())
        assert issubclass(UnhandledInstructionError, TypeError)

    def test_extra_handlers(self):
        @do
        def shouting():
            first = yield Shout("hi")
            leaf = yield create_leaf(first)
            return leaf

        assert ShoutingInterpreter().run(shouting()) == Leaf("HI")

    def test_handler_lookup_follows_instruction_subclasses(self):
        assert run_pure(CreateLabel("title")) == Leaf("title")

    def test_non_instruction_yield(self):
        @do
        def bad():
            yield 42

        with pytest.raises(TypeError, match="only yield instructions or programs"):
            run_pure(bad())

    def test_plain_values_and_programs(self):
        assert run_maybe(Program.pure(5)) == Some(5)
        assert fold_map(create_leaf(1), ResultInterpreter()) == Ok(Leaf(1))


class TestConfiguration:
    def test_max_steps(self):
        program = build_document([1, 2, 3])
        assert PureInterpreter(max_steps=6).run(program) == Horizontal(
            [Leaf(1), Leaf(2), Vertical([Leaf(3)])]
        )
        with pytest.raises(StepLimitExceededError, match="step limit of 5"):
            PureInterpreter(max_steps=5).run(program)

    @pytest.mark.parametrize("max_steps", [0, -3])
    def test_invalid_max_steps(self, max_steps):
        with pytest.raises(ValueError):
            PureInterpreter(max_steps=max_steps)

    def test_trace_logs_each_instruction(self, caplog):
        caplog.set_level(logging.DEBUG, logger="celldoc.interpreter")
        PureInterpreter(trace=True).run(create_leaf(1))
        assert "PureInterpreter handled CreateLeaf(value=1)" in caplog.text

    def test_no_trace_by_default(self, caplog, monkeypatch):
        monkeypatch.setattr("celldoc.interpreter.DEBUG_INTERPRETER", False)
        caplog.set_level(logging.DEBUG, logger="celldoc.interpreter")
        PureInterpreter().run(create_leaf(1))
        assert "handled" not in caplog.text

    def test_short_circuit_is_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="celldoc.interpreter")
        run_maybe(validate_document(EMPTY))
        assert "MaybeInterpreter short-circuited" in caplog.text


class TestStackSafety:
    @pytest.mark.parametrize("runner", [run_pure, run_maybe, run_result])
    def test_long_program(self, runner):
        n = 20_000
        result: Any = runner(sum_of_leaves(n))
        expected = n * (n - 1) // 2
        assert result in (expected, Some(expected), Ok(expected))

    def test_many_nested_programs(self):
        @do
        def outer(n):
            total = 0
            for i in range(n):
                total += yield sum_of_leaves(2)
            return total

        assert run_result(outer(5_000)) == Ok(5_000)


class TestMultiShot:
    def test_every_branch_is_explored_in_order(self):
        result = ChoiceInterpreter().run(build_document([1, 2]))
        assert result == [
            Horizontal([Leaf(1), Leaf(2), Vertical([])]),
            Horizontal([Leaf(1), Leaf(-2), Vertical([])]),
            Horizontal([Leaf(-1), Leaf(2), Vertical([])]),
            Horizontal([Leaf(-1), Leaf(-2), Vertical([])]),
        ]

    def test_branches_see_their_own_history(self):
        @do
        def pair():
            first = yield create_leaf(1)
            second = yield create_leaf(first.value * 10)
            return (first.value, second.value)

        assert ChoiceInterpreter().run(pair()) == [(1, 10), (1, -10), (-1, -10), (-1, 10)]

    def test_failing_validation_drops_the_branch(self):
        assert ChoiceInterpreter().run(validate_document(EMPTY)) == []

    def test_list_like_monad_must_declare_multi_shot(self):
        class ForgetfulList(type(LIST)):
            multi_shot = False

        class ForgetfulChoice(ChoiceInterpreter):
            monad = ForgetfulList()

        with pytest.raises(RuntimeError, match="multi_shot"):
            ForgetfulChoice().run(build_document([1, 2]))


class TestSingleShotHistory:
    @pytest.mark.parametrize("interpreter", [PureInterpreter(), MaybeInterpreter(), ResultInterpreter()])
    def test_earlier_results_are_released(self, interpreter):
        @do
        def build_and_drop():
            refs = []
            for i in range(4):
                leaf = yield create_leaf(i)
                refs.append(weakref.ref(leaf))
            del leaf
            gc.collect()
            return [ref() is None for ref in refs]

        released = interpreter.run(build_and_drop())
        if interpreter.monad is not IDENTITY:
            released = released.unwrap()
        assert released[:2] == [True, True]

    def test_long_run_does_not_replay(self, caplog):
        caplog.set_level(logging.DEBUG, logger="celldoc.interpreter")
        assert run_result(sum_of_leaves(500)) == Ok(sum(range(500)))
        assert "500 instructions, 0 replays" in caplog.text
