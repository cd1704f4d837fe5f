"""The capability interface must agree with the staged programs for the same effect."""

import pytest

from celldoc import (
    EMPTY,
    LIST,
    NOTHING,
    DocumentInterpreter,
    Empty,
    EmptyDocumentError,
    Err,
    InterpretedCapability,
    Leaf,
    MaybeDocumentCapability,
    MaybeInterpreter,
    Ok,
    PureDocumentCapability,
    PureInterpreter,
    ResultDocumentCapability,
    ResultInterpreter,
    Some,
    ValidationError,
    capability,
    dsl,
)

VALUES = [[], [1], [1, 2], [1, 2, 3], ["a", "b", "c", "d", "e"]]


class StrictInterpreter(PureInterpreter):
    def validate_document(self, instruction):
        if instruction.doc.leaf_count() < 3:
            return Err(ValidationError("doc", "too small"))
        return super().validate_document(instruction)


class ChoiceInterpreter(DocumentInterpreter):
    monad = LIST

    def create_leaf(self, instruction):
        return [Leaf(instruction.value), Leaf(-instruction.value)]

    def validate_document(self, instruction):
        return [] if isinstance(instruction.doc, Empty) else [Ok(instruction.doc)]


PAIRS = [
    pytest.param(PureDocumentCapability(), PureInterpreter(), id="pure"),
    pytest.param(MaybeDocumentCapability(), MaybeInterpreter(), id="maybe"),
    pytest.param(ResultDocumentCapability(), ResultInterpreter(), id="result"),
    pytest.param(InterpretedCapability(ResultInterpreter()), ResultInterpreter(), id="interpreted"),
]


@pytest.mark.parametrize("cap, interpreter", PAIRS)
@pytest.mark.parametrize("values", VALUES)
def test_build_document_equivalence(cap, interpreter, values):
    assert capability.build_document(cap, values) == interpreter.run(dsl.build_document(values))


@pytest.mark.parametrize("cap, interpreter", PAIRS)
@pytest.mark.parametrize("values", VALUES)
def test_build_complex_document_equivalence(cap, interpreter, values):
    assert capability.build_complex_document(cap, values) == interpreter.run(
        dsl.build_complex_document(values)
    )


@pytest.mark.parametrize("values", [[1, 2], [1, 2, 3]])
def test_equivalence_with_multi_shot_effect(values):
    interpreter = ChoiceInterpreter()
    direct = capability.build_complex_document(InterpretedCapability(interpreter), values)
    assert direct == interpreter.run(dsl.build_complex_document(values))
    assert len(direct) == 2 ** len(values)


@pytest.mark.parametrize("values", [[7, 8], [1, 2, 3]])
def test_fallback_equivalence(values):
    interpreter = StrictInterpreter()
    direct = capability.build_complex_document(InterpretedCapability(interpreter), values)
    assert direct == interpreter.run(dsl.build_complex_document(values))


def test_fallback_value():
    assert capability.build_complex_document(InterpretedCapability(StrictInterpreter()), [7, 8]) == Leaf(7)
    with pytest.raises(ValueError):
        capability.build_complex_document(InterpretedCapability(StrictInterpreter()), [])


class TestValidateDocument:
    def test_empty(self):
        assert PureDocumentCapability().validate_document(EMPTY) == Err(EmptyDocumentError())
        assert MaybeDocumentCapability().validate_document(EMPTY) is NOTHING
        assert ResultDocumentCapability().validate_document(EMPTY) == Err(EmptyDocumentError())

    def test_non_empty(self, concrete_doc):
        assert PureDocumentCapability().validate_document(concrete_doc) == Ok(concrete_doc)
        assert MaybeDocumentCapability().validate_document(concrete_doc) == Some(Ok(concrete_doc))
        assert ResultDocumentCapability().validate_document(concrete_doc) == Ok(Ok(concrete_doc))

    def test_construction_is_lifted(self):
        assert MaybeDocumentCapability().create_leaf(1) == Some(Leaf(1))
        assert ResultDocumentCapability().combine_documents(Leaf(1), EMPTY) == Ok(Leaf(1))
        assert InterpretedCapability(MaybeInterpreter()).monad is MaybeInterpreter.monad
