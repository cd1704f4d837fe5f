"""
Effect abstractions for celldoc.

Python has no higher-kinded generics, so "any monad" is modelled as an
explicit instance object passed alongside the values it operates on. The
traversal engine only needs the applicative part (``pure`` and an
order-preserving ``sequence``); the interpreters additionally need ``flat_map``
and a stack-safe ``tail_rec_m``.

Provided instances:

- ``IDENTITY``: the effect is the value itself (no wrapping).
- ``MAYBE``: ``Some``/``Nothing``; any ``Nothing`` makes the whole result ``Nothing``.
- ``RESULT``: ``Ok``/``Err``; the first ``Err`` in sequencing order wins.
- ``LIST``: non-determinism; sequencing yields every combination in order.
- ``VALIDATION``: applicative-only ``Ok``/``Err`` that accumulates every error.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from celldoc._vendor import NOTHING, Err, Maybe, Ok, Result, Some
from celldoc.errors import ValidationErrors

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


@dataclass(frozen=True)
class Continue(Generic[T]):
    """``tail_rec_m`` step result: run the step function again with ``seed``."""

    seed: T


@dataclass(frozen=True)
class Done(Generic[U]):
    """``tail_rec_m`` step result: stop with ``value``."""

    value: U


Step = Continue[T] | Done[U]


class Applicative(ABC):
    """Lift plain values and combine independent effects in order."""

    name: str = "applicative"

    @abstractmethod
    def pure(self, value: Any) -> Any:
        """Lift a plain value into the effect."""

    @abstractmethod
    def map2(self, first: Any, second: Any, f: Callable[[Any, Any], Any]) -> Any:
        """Combine two effects, ``first`` before ``second``."""

    def map(self, effect: Any, f: Callable[[Any], Any]) -> Any:
        return self.map2(effect, self.pure(None), lambda value, _: f(value))

    def sequence(self, effects: Iterable[Any]) -> Any:
        """Turn effects into one effect of a list, preserving order."""

        acc = self.pure(())
        for effect in effects:
            acc = self.map2(acc, effect, lambda values, value: (*values, value))
        return self.map(acc, list)

    def traverse(self, items: Iterable[T], f: Callable[[T], Any]) -> Any:
        """Map ``f`` over ``items`` (left to right) and sequence the effects."""

        return self.sequence([f(item) for item in items])

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Monad(Applicative):
    """
    Applicative with sequential composition (each step sees the previous value).

    Set ``multi_shot`` on instances whose bind may call its continuation more
    than once; interpreters then keep enough history to resume a run twice.
    """

    name = "monad"
    multi_shot = False

    @abstractmethod
    def flat_map(self, effect: Any, f: Callable[[Any], Any]) -> Any:
        """Monadic bind."""

    def map(self, effect: Any, f: Callable[[Any], Any]) -> Any:
        return self.flat_map(effect, lambda value: self.pure(f(value)))

    def map2(self, first: Any, second: Any, f: Callable[[Any, Any], Any]) -> Any:
        return self.flat_map(first, lambda a: self.map(second, lambda b: f(a, b)))

    def tail_rec_m(self, seed: T, step: Callable[[T], Any]) -> Any:
        """
        Repeat ``step`` until it produces ``Done``.

        ``step`` returns an effect of ``Continue(next_seed)`` or ``Done(value)``.
        This default recurses through ``flat_map``; instances whose bind runs
        eagerly override it with a loop.
        """

        def resume(outcome: Step[T, Any]) -> Any:
            if isinstance(outcome, Continue):
                return self.tail_rec_m(outcome.seed, step)
            return self.pure(outcome.value)

        return self.flat_map(step(seed), resume)


class IdentityMonad(Monad):
    """The effect is the value itself."""

    name = "identity"

    def pure(self, value: T) -> T:
        return value

    def flat_map(self, effect: T, f: Callable[[T], U]) -> U:
        return f(effect)

    def map(self, effect: T, f: Callable[[T], U]) -> U:
        return f(effect)

    def sequence(self, effects: Iterable[T]) -> list[T]:
        return list(effects)

    def tail_rec_m(self, seed: T, step: Callable[[T], Step[T, U]]) -> U:
        outcome = step(seed)
        while isinstance(outcome, Continue):
            outcome = step(outcome.seed)
        return outcome.value


class MaybeMonad(Monad):
    """Optional effect: ``Nothing`` anywhere short-circuits to ``Nothing``."""

    name = "maybe"

    def pure(self, value: T) -> Maybe[T]:
        return Some(value)

    def flat_map(self, effect: Maybe[T], f: Callable[[T], Maybe[U]]) -> Maybe[U]:
        _expect(effect, Maybe, self)
        return effect.flat_map(f)

    def map(self, effect: Maybe[T], f: Callable[[T], U]) -> Maybe[U]:
        _expect(effect, Maybe, self)
        return effect.map(f)

    def sequence(self, effects: Iterable[Maybe[T]]) -> Maybe[list[T]]:
        values: list[T] = []
        for effect in effects:
            _expect(effect, Maybe, self)
            if isinstance(effect, Some):
                values.append(effect.value)
            else:
                return NOTHING
        return Some(values)

    def tail_rec_m(self, seed: T, step: Callable[[T], Maybe[Step[T, U]]]) -> Maybe[U]:
        current = seed
        while True:
            outcome = step(current)
            _expect(outcome, Maybe, self)
            if not isinstance(outcome, Some):
                return NOTHING
            if isinstance(outcome.value, Done):
                return Some(outcome.value.value)
            current = outcome.value.seed


class ResultMonad(Monad):
    """Failure effect: the first ``Err`` in evaluation order wins."""

    name = "result"

    def pure(self, value: T) -> Result[T]:
        return Ok(value)

    def flat_map(self, effect: Result[T], f: Callable[[T], Result[U]]) -> Result[U]:
        _expect(effect, Result, self)
        return effect.and_then(f)

    def map(self, effect: Result[T], f: Callable[[T], U]) -> Result[U]:
        _expect(effect, Result, self)
        return effect.map(f)

    def sequence(self, effects: Iterable[Result[T]]) -> Result[list[T]]:
        values: list[T] = []
        for effect in effects:
            _expect(effect, Result, self)
            if isinstance(effect, Err):
                return effect
            values.append(effect.value)
        return Ok(values)

    def tail_rec_m(self, seed: T, step: Callable[[T], Result[Step[T, U]]]) -> Result[U]:
        current = seed
        while True:
            outcome = step(current)
            _expect(outcome, Result, self)
            if isinstance(outcome, Err):
                return outcome
            if isinstance(outcome.value, Done):
                return Ok(outcome.value.value)
            current = outcome.value.seed


class ListMonad(Monad):
    """Non-deterministic effect: every combination, in order."""

    name = "list"
    multi_shot = True

    def pure(self, value: T) -> list[T]:
        return [value]

    def flat_map(self, effect: list[T], f: Callable[[T], list[U]]) -> list[U]:
        _expect(effect, list, self)
        results: list[U] = []
        for value in effect:
            produced = f(value)
            _expect(produced, list, self)
            results.extend(produced)
        return results

    def map(self, effect: list[T], f: Callable[[T], U]) -> list[U]:
        _expect(effect, list, self)
        return [f(value) for value in effect]

    def sequence(self, effects: Iterable[list[T]]) -> list[list[T]]:
        options = list(effects)
        for effect in options:
            _expect(effect, list, self)
        return [list(combo) for combo in itertools.product(*options)]

    def tail_rec_m(self, seed: T, step: Callable[[T], list[Step[T, U]]]) -> list[U]:
        results: list[U] = []
        pending = [iter(step(seed))]
        while pending:
            try:
                outcome = next(pending[-1])
            except StopIteration:
                pending.pop()
                continue
            if isinstance(outcome, Continue):
                pending.append(iter(step(outcome.seed)))
            else:
                results.append(outcome.value)
        return results


def _collect_errors(error: Exception) -> tuple[Exception, ...]:
    if isinstance(error, ValidationErrors):
        return error.errors
    return (error,)


class ValidationApplicative(Applicative):
    """``Ok``/``Err`` that keeps going after a failure and gathers every error."""

    name = "validation"

    def pure(self, value: T) -> Result[T]:
        return Ok(value)

    def map(self, effect: Result[T], f: Callable[[T], U]) -> Result[U]:
        _expect(effect, Result, self)
        return effect.map(f)

    def map2(
        self, first: Result[T], second: Result[U], f: Callable[[T, U], V]
    ) -> Result[V]:
        _expect(first, Result, self)
        _expect(second, Result, self)
        if isinstance(first, Err) and isinstance(second, Err):
            return Err(
                ValidationErrors(_collect_errors(first.error) + _collect_errors(second.error))
            )
        if isinstance(first, Err):
            return first
        if isinstance(second, Err):
            return second
        return Ok(f(first.value, second.value))


def _expect(effect: Any, expected: type, instance: Applicative) -> None:
    if not isinstance(effect, expected):
        raise TypeError(
            f"{instance!r} expected a {expected.__name__} effect; got {type(effect).__name__}"
        )


IDENTITY = IdentityMonad()
MAYBE = MaybeMonad()
RESULT = ResultMonad()
LIST = ListMonad()
VALIDATION = ValidationApplicative()

__all__ = [
    "IDENTITY",
    "LIST",
    "MAYBE",
    "RESULT",
    "VALIDATION",
    "Applicative",
    "Continue",
    "Done",
    "IdentityMonad",
    "ListMonad",
    "MaybeMonad",
    "Monad",
    "ResultMonad",
    "ValidationApplicative",
]
