"""
Effect values carried by the built-in monad instances.

``Result`` is ``Ok(value)`` or ``Err(error)``. Interpreters and leaf
validation use it to report an outcome as a value instead of raising.
``Maybe`` is ``Some(value)`` or the ``NOTHING`` singleton; the maybe
interpreter uses it for a run that produced no document.

Each variant implements only the combinators :mod:`celldoc.monad` sequences
them with, so branching happens by dispatch rather than ``isinstance`` checks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, Generic, NoReturn, TypeVar

from frozendict import frozendict

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)
U = TypeVar("U")


class Result(ABC, Generic[T_co]):
    """A validated document, or the error that stopped it."""

    __slots__ = ()

    @abstractmethod
    def is_ok(self) -> bool: ...

    @abstractmethod
    def unwrap(self) -> T_co:
        """Return the ``Ok`` value; an ``Err`` raises its error."""

    @abstractmethod
    def map(self, f: Callable[[T_co], U]) -> Result[U]: ...

    @abstractmethod
    def and_then(self, f: Callable[[T_co], Result[U]]) -> Result[U]: ...


@dataclass(frozen=True)
class Ok(Result[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        chained = f(self.value)
        if not isinstance(chained, Result):
            raise TypeError(f"and_then expects a Result; got {type(chained).__name__}")
        return chained


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    error: Exception

    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise self.error

    def map(self, f: Callable[[Any], Any]) -> Err:
        return self

    def and_then(self, f: Callable[[Any], Any]) -> Err:
        return self


class Maybe(ABC, Generic[T_co]):
    """A value that a run may not have produced."""

    __slots__ = ()

    @abstractmethod
    def unwrap(self) -> T_co: ...

    @abstractmethod
    def map(self, f: Callable[[T_co], U]) -> Maybe[U]: ...

    @abstractmethod
    def flat_map(self, f: Callable[[T_co], Maybe[U]]) -> Maybe[U]: ...


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T

    def unwrap(self) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return Some(f(self.value))

    def flat_map(self, f: Callable[[T], Maybe[U]]) -> Maybe[U]:
        chained = f(self.value)
        if not isinstance(chained, Maybe):
            raise TypeError(f"flat_map expects a Maybe; got {type(chained).__name__}")
        return chained


class Nothing(Maybe[NoReturn]):
    """No value. There is exactly one instance, ``NOTHING``."""

    __slots__ = ()
    _instance: Nothing | None = None

    def __new__(cls) -> Nothing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def unwrap(self) -> NoReturn:
        raise ValueError("NOTHING holds no value")

    def map(self, f: Callable[[Any], Any]) -> Nothing:
        return self

    def flat_map(self, f: Callable[[Any], Any]) -> Nothing:
        return self

    def __repr__(self) -> str:
        return "NOTHING"


NOTHING: Final[Nothing] = Nothing()

# Immutable mapping used for interpreter dispatch tables.
FrozenDict = frozendict

__all__ = ["NOTHING", "Err", "FrozenDict", "Maybe", "Nothing", "Ok", "Result", "Some"]
