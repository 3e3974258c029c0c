# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Function-or-value resolution for intent fields.

Several intent fields (``endpoint``, ``headers``, ``options``, ``bailout``)
may be given either as a plain value or as a callable of the current
external state. Rather than branching on the run-time shape of the field at
every use site, the executor wraps each one once in a tagged strategy:

* Static(value): resolves to ``value`` without touching external state
* Dynamic(fn): reads the external state, calls ``fn(state)`` and awaits the
  result if it is awaitable

Both kinds resolve through the same ``resolve`` coroutine.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

StateReader = Callable[[], Any]


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def read_state(get_state: StateReader) -> Any:
    """Read the external state; the reader may be sync or async."""
    return await maybe_await(get_state())


@dataclass(frozen=True)
class Static(Generic[T]):
    """A field given as a plain value."""

    value: T

    async def resolve(self, get_state: StateReader) -> T:
        return self.value


@dataclass(frozen=True)
class Dynamic(Generic[T]):
    """A field given as a function of external state.

    The state is read fresh on every resolution; two resolutions within one
    intent's processing may legitimately observe different states.
    """

    fn: Callable[[Any], Union[T, Awaitable[T]]]

    async def resolve(self, get_state: StateReader) -> T:
        state = await read_state(get_state)
        result: T = await maybe_await(self.fn(state))
        return result


Resolvable = Union[Static[T], Dynamic[T]]


def as_resolvable(value: Any) -> "Resolvable[Any]":
    """Wrap a raw intent field in the matching resolution strategy."""
    if isinstance(value, (Static, Dynamic)):
        return value
    if callable(value):
        return Dynamic(value)
    return Static(value)


async def resolve(field: "Resolvable[T]", get_state: StateReader) -> T:
    """Resolve a wrapped field against the current external state."""
    return await field.resolve(get_state)


__all__ = [
    "Dynamic",
    "Resolvable",
    "StateReader",
    "Static",
    "as_resolvable",
    "maybe_await",
    "read_state",
    "resolve",
]
