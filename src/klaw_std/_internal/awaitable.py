"""Helpers for values that may or may not be awaitable."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from typing import Any, TypeGuard, TypeVar, Union

__all__ = ['MaybeAwaitable', 'is_awaitable', 'resolve']

T = TypeVar('T')

MaybeAwaitable = Union[T, Awaitable[T]]


def is_awaitable(x: object) -> TypeGuard[Awaitable[Any]]:
    """Return True if ``x`` can be used in an ``await`` expression."""
    return inspect.isawaitable(x)


async def resolve(x: MaybeAwaitable[T]) -> T:
    """Await ``x`` if it is awaitable, otherwise return it unchanged.

    This is the single normalization point between plain values,
    coroutines, futures and the pending containers.
    """
    if inspect.isawaitable(x):
        return await x
    return x
