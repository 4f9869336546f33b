"""PendingResult: an awaitable Result that never raises.

A ``PendingResult`` owns one memoized awaitable of a ``Result``; the source
starts resolving when the wrapper is built (or on the first ``await`` when
no asyncio loop is running), is awaited at most once, and every ``await``
yields the same ``Result``.
Where ``PendingOption`` collapses failures to None, ``PendingResult`` keeps
them: a failing source or a failing awaitable returned by a callback
resolves to ``Err(Unexpected(REJECTION_DURING_PENDING))`` with the original
exception as reason, and a callback raising synchronously resolves to
``Err(Unexpected(PREDICATE_EXCEPTION))``.

Example:
    ```python
    async def fetch_user(user_id: int) -> Result[User, str]: ...

    result = await (
        pending_result(fetch_user(1))
        .and_then(validate_user)
        .map(lambda user: user.name)
    )
    ```
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Generator
from typing import Any, Generic, Literal, TypeGuard, TypeVar, Union

import anyio

from klaw_std._internal.awaitable import MaybeAwaitable, is_awaitable, resolve
from klaw_std._internal.once import Once
from klaw_std._logging import log_absorbed
from klaw_std.errors import ResultError, ResultErrorKind
from klaw_std.option.option import Option
from klaw_std.option.pending import PendingOption, pending_option
from klaw_std.result.checked import CheckedError, Expected, unexpected_error
from klaw_std.result.result import Err, Ok, Result, err, is_result, ok

__all__ = [
    'PendingResult',
    'is_pending_result',
    'pending_err',
    'pending_ok',
    'pending_result',
]

T = TypeVar('T')
E = TypeVar('E')
U = TypeVar('U')
F = TypeVar('F')


def _rejection(exc: Exception) -> Err[Any, Any]:
    msg = 'pending result source failed'
    return Err(unexpected_error(msg, ResultErrorKind.REJECTION_DURING_PENDING, exc))


def _callback_err(operation: str, exc: Exception) -> Err[Any, Any]:
    msg = f'{operation} callback raised an exception'
    return Err(unexpected_error(msg, ResultErrorKind.PREDICATE_EXCEPTION, exc))


async def _settle(source: Awaitable[Result[T, E]]) -> Result[T, E]:
    """Await ``source``, mapping any failure to an unexpected Err."""
    try:
        result = await source
    except Exception as e:  # noqa: BLE001
        log_absorbed('PendingResult', e)
        return _rejection(e)
    if not is_result(result):
        return _rejection(TypeError(f'expected a Result, got {type(result).__name__}'))
    return result


def _deferred(step: Callable[[], Awaitable[Result[T, E]]]) -> PendingResult[T, E]:
    return PendingResult(Once(lambda: _settle(step())))


class PendingResult(Generic[T, E]):
    """Async facade over a Result that is not available yet.

    Create with ``pending_result()``, ``pending_ok()``, ``pending_err()`` or
    ``Result.to_pending()``. Combinators return new ``PendingResult``s;
    terminal methods are coroutines (``ok``/``err`` return ``PendingOption``).
    """

    __slots__ = ('_once',)

    def __init__(self, once: Once[Result[T, E]]) -> None:
        self._once = once
        once.start()

    def __await__(self) -> Generator[Any, Any, Result[T, E]]:
        return self._once.get().__await__()

    async def __aiter__(self) -> AsyncIterator[T]:
        """Yield the value once if the resolved result is Ok."""
        result = await self
        if isinstance(result, Ok):
            yield result.value

    # --- Combinators ---

    def and_(self, other: MaybeAwaitable[Result[U, E]]) -> PendingResult[U, E]:
        """Resolve to ``other`` if self is Ok, otherwise to a copy of the Err.

        ``other`` is fully resolved first; if it fails the combined result is
        an unexpected Err.
        """

        async def _and() -> Result[U, E]:
            result = await self
            if isinstance(result, Err):
                return result.copy()
            return (await resolve(other)).copy()

        return _deferred(_and)

    def and_then(self, f: Callable[[T], MaybeAwaitable[Result[U, E]]]) -> PendingResult[U, E]:
        """Chain a Result-returning (sync or async) function on the Ok value.

        Args:
            f: Function returning a Result or an awaitable of one.

        Returns:
            New PendingResult with the chained result.
        """

        async def _and_then() -> Result[U, E]:
            result = await self
            if isinstance(result, Err):
                return result.copy()
            try:
                produced = f(result.value)
            except Exception as e:  # noqa: BLE001
                return _callback_err('and_then', e)
            return await resolve(produced)

        return _deferred(_and_then)

    def clone(self) -> PendingResult[T, E]:
        """Resolve to a deep copy of the result."""

        async def _clone() -> Result[T, E]:
            return (await self).clone()

        return _deferred(_clone)

    def flatten(self) -> PendingResult[Any, E]:
        """Remove one level of nesting.

        The Ok value may be a ``Result``, a ``PendingResult`` or an awaitable of
        a ``Result``. Any other value yields an unexpected Err
        (FLATTEN_ON_NON_RESULT).
        """

        async def _flatten() -> Result[Any, E]:
            result = await self
            if isinstance(result, Err):
                return result.copy()
            inner = await resolve(result.value)
            return Ok(inner).flatten()

        return _deferred(_flatten)

    def inspect(self, f: Callable[[T], Any]) -> PendingResult[T, E]:
        """Call ``f`` (sync or async) with the Ok value; exceptions are ignored."""

        async def _inspect() -> Result[T, E]:
            result = await self
            if isinstance(result, Ok):
                try:
                    await resolve(f(result.value))
                except Exception as e:  # noqa: BLE001
                    log_absorbed('PendingResult.inspect', e)
            return result.copy()

        return _deferred(_inspect)

    def inspect_err(self, f: Callable[[CheckedError[E]], Any]) -> PendingResult[T, E]:
        """Call ``f`` (sync or async) with the checked error; exceptions are ignored."""

        async def _inspect_err() -> Result[T, E]:
            result = await self
            if isinstance(result, Err):
                try:
                    await resolve(f(result.error))
                except Exception as e:  # noqa: BLE001
                    log_absorbed('PendingResult.inspect_err', e)
            return result.copy()

        return _deferred(_inspect_err)

    def map(self, f: Callable[[T], MaybeAwaitable[U]]) -> PendingResult[U, E]:
        """Transform the Ok value with a sync or async function."""

        async def _map() -> Result[U, E]:
            result = await self
            if isinstance(result, Err):
                return result.copy()
            try:
                produced = f(result.value)
            except Exception as e:  # noqa: BLE001
                return _callback_err('map', e)
            return ok(await resolve(produced))

        return _deferred(_map)

    def map_err(self, f: Callable[[E], MaybeAwaitable[F]]) -> PendingResult[T, F]:
        """Transform an expected error with a sync or async function.

        Unexpected errors pass through unchanged.
        """

        async def _map_err() -> Result[T, F]:
            result = await self
            if isinstance(result, Ok) or not isinstance(result.error, Expected):
                return result.copy()
            try:
                produced = f(result.error.value)
            except Exception as e:  # noqa: BLE001
                return _callback_err('map_err', e)
            return err(await resolve(produced))

        return _deferred(_map_err)

    def map_all(self, f: Callable[[Result[T, E]], MaybeAwaitable[Result[U, F]]]) -> PendingResult[U, F]:
        """Map the whole resolved result (either variant) through ``f``."""

        async def _map_all() -> Result[U, F]:
            result = await self
            try:
                produced = f(result.copy())
            except Exception as e:  # noqa: BLE001
                return _callback_err('map_all', e)
            return await resolve(produced)

        return _deferred(_map_all)

    def or_(self, other: MaybeAwaitable[Result[T, F]]) -> PendingResult[T, F]:
        """Resolve to a copy of self if Ok, otherwise to ``other``."""

        async def _or() -> Result[T, F]:
            result = await self
            if isinstance(result, Ok):
                return result.copy()
            return (await resolve(other)).copy()

        return _deferred(_or)

    def or_else(self, f: Callable[[CheckedError[E]], MaybeAwaitable[Result[T, F]]]) -> PendingResult[T, F]:
        """Recover from the error with a Result-returning (sync or async) function."""

        async def _or_else() -> Result[T, F]:
            result = await self
            if isinstance(result, Ok):
                return result.copy()
            try:
                produced = f(result.error)
            except Exception as e:  # noqa: BLE001
                return _callback_err('or_else', e)
            return await resolve(produced)

        return _deferred(_or_else)

    def zip(self, other: MaybeAwaitable[Result[U, E]]) -> PendingResult[tuple[T, U], E]:
        """Resolve self and ``other`` concurrently and pair their values.

        If both are Ok, resolves to ``Ok((a, b))``. Otherwise resolves to the
        first Err by position (self first, then other).
        """

        async def _zipped() -> Result[tuple[T, U], E]:
            left: Result[T, E] | None = None
            right: Result[U, E] | None = None

            async with anyio.create_task_group() as tg:

                async def run_self() -> None:
                    nonlocal left
                    left = await self

                async def run_other() -> None:
                    nonlocal right
                    right = await pending_result(other)

                tg.start_soon(run_self)
                tg.start_soon(run_other)

            assert left is not None
            assert right is not None
            return left.combine(right)

        return _deferred(_zipped)

    # --- Terminals ---

    async def match(
        self,
        f: Callable[[T], MaybeAwaitable[U]],
        g: Callable[[CheckedError[E]], MaybeAwaitable[F]],
    ) -> U | F:
        """Resolve the result and return ``f(value)`` or ``g(error)``, awaiting the branch result.

        Raises:
            ResultError: PREDICATE_EXCEPTION if the called branch raises.
        """
        result = await self
        try:
            return await resolve(f(result.value) if isinstance(result, Ok) else g(result.error))
        except Exception as e:
            msg = 'match callback raised an exception'
            raise ResultError(msg, ResultErrorKind.PREDICATE_EXCEPTION, e) from e

    async def check(self) -> tuple[Literal[True], T] | tuple[Literal[False], CheckedError[E]]:
        """Resolve the result and return ``Result.check()``."""
        return (await self).check()

    async def try_(self) -> tuple[Literal[True], None, T] | tuple[Literal[False], CheckedError[E], None]:
        """Resolve the result and return ``Result.try_()``."""
        return (await self).try_()

    async def unwrap_or(self, default: T) -> T:
        """Resolve the result and return the Ok value, or ``default``."""
        return (await self).unwrap_or(default)

    def ok(self) -> PendingOption[T]:
        """Convert to a ``PendingOption`` of the Ok value."""

        async def _ok() -> Option[T]:
            return (await self).ok()

        return pending_option(_ok)

    def err(self) -> PendingOption[E]:
        """Convert to a ``PendingOption`` of the expected error value."""

        async def _err() -> Option[E]:
            return (await self).err()

        return pending_option(_err)

    def __str__(self) -> str:
        return 'PendingResult { ... }'

    __repr__ = __str__


PendingResultSource = Union[
    Result[T, E],
    PendingResult[T, E],
    Awaitable[Result[T, E]],
    Callable[[], Union[Result[T, E], Awaitable[Result[T, E]]]],
]


def pending_result(source: PendingResultSource[T, E]) -> PendingResult[T, E]:
    """Create a PendingResult.

    Args:
        source: One of
            - a ``Result`` (resolves to it immediately),
            - a ``PendingResult`` (cloned),
            - an awaitable of a ``Result``,
            - a zero-argument callable returning any of the above; it is
              called right away and a raising factory resolves to an
              unexpected Err.

    Returns:
        A PendingResult that never raises when awaited.

    Examples:
        >>> await pending_result(ok(1))
        Ok { 1 }
        >>> async def boom() -> Result[int, str]:
        ...     raise RuntimeError('boom')
        >>> (await pending_result(boom())).unwrap_err().unexpected.kind
        <ResultErrorKind.REJECTION_DURING_PENDING: 'RejectionDuringPending'>
    """
    if isinstance(source, PendingResult):
        return source.clone()
    if is_result(source):
        return PendingResult(Once.resolved(source))
    if is_awaitable(source):
        return PendingResult(Once(lambda: _settle(source)))
    if callable(source):
        try:
            produced = source()
        except Exception as e:  # noqa: BLE001
            log_absorbed('pending_result', e)
            return PendingResult(Once.resolved(_rejection(e)))
        return pending_result(produced)
    return PendingResult(Once.resolved(_rejection(TypeError(f'unsupported source {type(source).__name__}'))))


def pending_ok(value: MaybeAwaitable[T]) -> PendingResult[T, Any]:
    """Create a PendingResult resolving to ``Ok(value)``; an awaitable value is awaited first."""

    async def _ok() -> Result[T, Any]:
        return ok(await resolve(value))

    return pending_result(_ok)


def pending_err(error: MaybeAwaitable[E | CheckedError[E]]) -> PendingResult[Any, E]:
    """Create a PendingResult resolving to ``err(error)``; an awaitable error is awaited first."""

    async def _err() -> Result[Any, E]:
        return err(await resolve(error))

    return pending_result(_err)


def is_pending_result(x: object) -> TypeGuard[PendingResult[Any, Any]]:
    """Check if a value is a ``PendingResult``."""
    return isinstance(x, PendingResult)
