"""
celldoc - Shape-preserving effectful traversal over cell-layout documents.

A document is an immutable tree of cells arranged by horizontal and vertical
subdivision. :func:`traverse` maps an effectful function over every leaf while
keeping the tree's shape, collecting effects with a pluggable monad
(``IDENTITY``, ``MAYBE``, ``RESULT``, ``LIST``, ``VALIDATION`` or your own).
Documents can also be built through staged ``@do`` programs run by an
interpreter, or through a capability interface parameterised over the monad.

Example:
    >>> from celldoc import Horizontal, Leaf, MAYBE, Some, Vertical, traverse
    >>> doc = Horizontal([Leaf(1), Vertical([Leaf(2), Leaf(3)]), Leaf(4)])
    >>> traverse(lambda v: Some(v * 2), doc, MAYBE)
    Some(value=Horizontal(children=(Leaf(value=2), Vertical(children=(Leaf(value=4), Leaf(value=6))), Leaf(value=8))))
"""

from celldoc._vendor import NOTHING, Err, FrozenDict, Maybe, Nothing, Ok, Result, Some
from celldoc.algebras import (
    ASCII_RENDERER,
    HTML_RENDERER,
    ContentAggregate,
    DocumentSize,
    RenderAlgebra,
    aggregate_content,
    ap,
    calculate_metrics,
    distribute,
    fold_values,
    kleisli_compose,
    non_empty_value,
    render,
    sequence_documents,
    validate_values,
    zip_with,
)
from celldoc.capability import (
    DocumentCapability,
    InterpretedCapability,
    MaybeDocumentCapability,
    PureDocumentCapability,
    ResultDocumentCapability,
)
from celldoc.do import EffectGenerator, KleisliProgram, do
from celldoc.document import (
    EMPTY,
    Document,
    Empty,
    Horizontal,
    Leaf,
    Orientation,
    Vertical,
    combine,
    combine_all,
    from_values,
    map2,
    pure,
    unfold,
)
from celldoc.dsl import build_complex_document, build_document
from celldoc.errors import (
    DocumentError,
    EmptyDocumentError,
    ParseError,
    StepLimitExceededError,
    UnhandledInstructionError,
    ValidationError,
    ValidationErrors,
)
from celldoc.instructions import (
    CombineDocuments,
    CreateHorizontal,
    CreateLeaf,
    CreateVertical,
    Instruction,
    ValidateDocument,
    combine_documents,
    create_horizontal,
    create_leaf,
    create_vertical,
    validate_document,
)
from celldoc.interpreter import (
    DocumentInterpreter,
    MaybeInterpreter,
    PureInterpreter,
    ResultInterpreter,
    fold_map,
    run_maybe,
    run_pure,
    run_result,
)
from celldoc.monad import (
    IDENTITY,
    LIST,
    MAYBE,
    RESULT,
    VALIDATION,
    Applicative,
    Continue,
    Done,
    Monad,
)
from celldoc.optics import (
    Prism,
    filter_leaves,
    first_leaf_value,
    horizontal_prism,
    leaf_prism,
    node_at,
    transform_at_path,
    vertical_prism,
)
from celldoc.program import Program
from celldoc.serialization import from_dict, from_json, parse_document, to_dict, to_json
from celldoc.traverse import sequence_document, traverse

__version__ = "0.1.0"

__all__ = [
    # Document model
    "Document",
    "Leaf",
    "Horizontal",
    "Vertical",
    "Empty",
    "EMPTY",
    "Orientation",
    "combine",
    "combine_all",
    "from_values",
    "map2",
    "pure",
    "unfold",
    # Effects
    "Applicative",
    "Monad",
    "Continue",
    "Done",
    "IDENTITY",
    "MAYBE",
    "RESULT",
    "LIST",
    "VALIDATION",
    # Vendored types
    "Ok",
    "Err",
    "Result",
    "Maybe",
    "Some",
    "Nothing",
    "NOTHING",
    "FrozenDict",
    # Traversal
    "traverse",
    "sequence_document",
    # Staged construction
    "Instruction",
    "CreateLeaf",
    "CreateHorizontal",
    "CreateVertical",
    "CombineDocuments",
    "ValidateDocument",
    "create_leaf",
    "create_horizontal",
    "create_vertical",
    "combine_documents",
    "validate_document",
    "Program",
    "KleisliProgram",
    "EffectGenerator",
    "do",
    "DocumentInterpreter",
    "PureInterpreter",
    "MaybeInterpreter",
    "ResultInterpreter",
    "fold_map",
    "run_pure",
    "run_maybe",
    "run_result",
    "build_document",
    "build_complex_document",
    # Capability interface
    "DocumentCapability",
    "PureDocumentCapability",
    "MaybeDocumentCapability",
    "ResultDocumentCapability",
    "InterpretedCapability",
    # Algebras
    "RenderAlgebra",
    "ASCII_RENDERER",
    "HTML_RENDERER",
    "render",
    "DocumentSize",
    "calculate_metrics",
    "distribute",
    "ContentAggregate",
    "aggregate_content",
    "fold_values",
    "zip_with",
    "ap",
    "sequence_documents",
    "kleisli_compose",
    "non_empty_value",
    "validate_values",
    # Optics
    "Prism",
    "leaf_prism",
    "horizontal_prism",
    "vertical_prism",
    "first_leaf_value",
    "filter_leaves",
    "transform_at_path",
    "node_at",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    "parse_document",
    # Errors
    "DocumentError",
    "EmptyDocumentError",
    "ParseError",
    "ValidationError",
    "ValidationErrors",
    "UnhandledInstructionError",
    "StepLimitExceededError",
]
