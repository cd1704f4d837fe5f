"""
Shared fixtures for celldoc tests.

Provides a seeded random document generator and a fixed set of sample
documents so property-style checks run over many shapes without an extra
dependency.
"""

import random
from typing import Any

import pytest

from celldoc import EMPTY, Document, Horizontal, Leaf, Vertical

SEED = 20240611


def random_document(rng: random.Random, max_depth: int = 4, allow_empty: bool = True) -> Document[int]:
    """Build a random document with integer leaves."""

    roll = rng.random()
    if max_depth <= 0 or roll < 0.3:
        return Leaf(rng.randint(-50, 50))
    if allow_empty and roll < 0.38:
        return EMPTY
    children = [random_document(rng, max_depth - 1, allow_empty) for _ in range(rng.randint(0, 4))]
    if roll < 0.69:
        return Horizontal(children)
    return Vertical(children)


def sample_documents(count: int = 40, seed: int = SEED) -> list[Document[int]]:
    rng = random.Random(seed)
    fixed: list[Document[Any]] = [
        Leaf(1),
        EMPTY,
        Horizontal([]),
        Vertical([]),
        Horizontal([Leaf(1), Vertical([Leaf(2), Leaf(3)]), Leaf(4)]),
        Vertical([Horizontal([Leaf(5)]), EMPTY, Leaf(6)]),
    ]
    return fixed + [random_document(rng) for _ in range(count)]


SAMPLE_DOCUMENTS = sample_documents()


@pytest.fixture
def concrete_doc() -> Document[int]:
    """``Horizontal[Leaf(1), Vertical[Leaf(2), Leaf(3)], Leaf(4)]``."""

    return Horizontal([Leaf(1), Vertical([Leaf(2), Leaf(3)]), Leaf(4)])


@pytest.fixture
def rng() -> random.Random:
    return random.Random(SEED)


@pytest.fixture(params=SAMPLE_DOCUMENTS, ids=lambda doc: f"size{doc.size()}-depth{doc.depth()}")
def sample_doc(request: pytest.FixtureRequest) -> Document[int]:
    """Each of the sample documents in turn."""

    return request.param


@pytest.fixture
def random_doc(rng: random.Random):
    """Factory for random documents drawn from the seeded ``rng``."""

    def make(max_depth: int = 4, allow_empty: bool = True) -> Document[int]:
        return random_document(rng, max_depth, allow_empty)

    return make


def deep_document(depth: int, value: Any = 0) -> Document[Any]:
    """A single leaf wrapped in ``depth - 1`` alternating one-child containers."""

    doc: Document[Any] = Leaf(value)
    for i in range(1, depth):
        doc = Vertical([doc]) if i % 2 else Horizontal([doc])
    return doc


@pytest.fixture
def deep_doc():
    """Factory for documents nested well past the interpreter's recursion limit."""

    return deep_document
