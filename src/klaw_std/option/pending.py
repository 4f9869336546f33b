"""PendingOption: an awaitable Option that never raises.

A ``PendingOption`` owns one memoized awaitable of an ``Option``. The
underlying source starts resolving when the wrapper is built (lazily, on the
first ``await``, when no asyncio loop is running) and is awaited at most
once. Every ``await`` yields a fresh copy of the same ``Option``, so mutating
what one caller received never changes what the next one sees. Any ``Exception`` raised by the
source, or by a callback somewhere in a combinator chain, resolves the
wrapper to None. Cancellation and other ``BaseException``s propagate.

Example:
    ```python
    async def fetch_user(user_id: int) -> Option[User]: ...

    name = await (
        pending_option(fetch_user(1))
        .filter(lambda user: user.active)
        .map(lambda user: user.name)
        .unwrap_or('anonymous')
    )
    ```
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from typing import TYPE_CHECKING, Any, Generic, TypeGuard, TypeVar, Union

import anyio

from klaw_std._internal.awaitable import MaybeAwaitable, is_awaitable, resolve
from klaw_std._internal.once import Once
from klaw_std._logging import log_absorbed
from klaw_std.errors import OptionError, OptionErrorKind, ResultError, ResultErrorKind
from klaw_std.option.option import Option, Some, is_option, none, some

if TYPE_CHECKING:
    from klaw_std.result.result import Result

__all__ = ['PendingOption', 'is_pending_option', 'pending_option']

T = TypeVar('T')
U = TypeVar('U')
F = TypeVar('F')
E = TypeVar('E')


async def _settle(source: Awaitable[Option[T]]) -> Option[T]:
    """Await ``source``, mapping any failure to None."""
    try:
        option = await source
    except Exception as e:  # noqa: BLE001
        log_absorbed('PendingOption', e)
        return none()
    if not is_option(option):
        log_absorbed('PendingOption', TypeError(f'expected an Option, got {type(option).__name__}'))
        return none()
    return option


def _deferred(step: Callable[[], Awaitable[Option[T]]]) -> PendingOption[T]:
    return PendingOption(Once(lambda: _settle(step())))


class PendingOption(Generic[T]):
    """Async facade over an Option that is not available yet.

    Create with ``pending_option()`` or ``Option.to_pending()``. Combinators
    return new ``PendingOption``s; terminal methods are coroutines.

    Note:
        Unlike ``Option``, a ``PendingOption`` has no mutation methods: its
        memoized value is read-only once set.
    """

    __slots__ = ('_once',)

    def __init__(self, once: Once[Option[T]]) -> None:
        """Create a PendingOption over a once-cell.

        Prefer ``pending_option()``, which accepts any supported source.
        """
        self._once = once
        once.start()

    async def _get(self) -> Option[T]:
        return (await self._once.get()).copy()

    def __await__(self) -> Generator[Any, Any, Option[T]]:
        return self._get().__await__()

    # --- Combinators ---

    def and_(self, other: MaybeAwaitable[Option[U]]) -> PendingOption[U]:
        """Resolve to None if self is None, otherwise to a copy of ``other``."""

        async def _and() -> Option[U]:
            option = await self
            if option.is_none():
                return none()
            return (await resolve(other)).copy()

        return _deferred(_and)

    def and_then(self, f: Callable[[T], MaybeAwaitable[Option[U]]]) -> PendingOption[U]:
        """Chain an Option-returning (sync or async) function on the value.

        Args:
            f: Function returning an Option or an awaitable of one.

        Returns:
            New PendingOption with the chained option; None if ``f`` raised.
        """

        async def _and_then() -> Option[U]:
            state = (await self).state
            if not isinstance(state, Some):
                return none()
            return await resolve(f(state.value))

        return _deferred(_and_then)

    def clone(self) -> PendingOption[T]:
        """Resolve to a deep copy of the option."""

        async def _clone() -> Option[T]:
            return (await self).clone()

        return _deferred(_clone)

    def filter(self, pred: Callable[[T], MaybeAwaitable[bool]]) -> PendingOption[T]:
        """Keep the value only if ``pred(value)`` (sync or async) is truthy."""

        async def _filter() -> Option[T]:
            option = await self
            state = option.state
            if not isinstance(state, Some):
                return none()
            return option.copy() if await resolve(pred(state.value)) else none()

        return _deferred(_filter)

    def flatten(self) -> PendingOption[Any]:
        """Remove one level of nesting.

        The contained value may be an ``Option``, a ``PendingOption`` or an
        awaitable of an ``Option``.
        """

        async def _flatten() -> Option[Any]:
            option = await self
            state = option.state
            if not isinstance(state, Some):
                return none()
            inner = await resolve(state.value)
            return inner.copy() if is_option(inner) else option.copy()

        return _deferred(_flatten)

    def inspect(self, f: Callable[[T], Any]) -> PendingOption[T]:
        """Call ``f`` (sync or async) with the value for side effects.

        Exceptions raised by ``f`` are ignored.
        """

        async def _inspect() -> Option[T]:
            option = await self
            state = option.state
            if isinstance(state, Some):
                try:
                    await resolve(f(state.value))
                except Exception as e:  # noqa: BLE001
                    log_absorbed('PendingOption.inspect', e)
            return option.copy()

        return _deferred(_inspect)

    def tap(self, f: Callable[[Option[T]], Any]) -> PendingOption[T]:
        """Call ``f`` (sync or async) with a copy of the whole resolved option.

        Runs for Some and None alike. Exceptions raised by ``f``, and failures
        of an awaitable it returns, are ignored.
        """

        async def _tap() -> Option[T]:
            option = await self
            try:
                await resolve(f(option.copy()))
            except Exception as e:  # noqa: BLE001
                log_absorbed('PendingOption.tap', e)
            return option

        return _deferred(_tap)

    def map(self, f: Callable[[T], MaybeAwaitable[U]]) -> PendingOption[U]:
        """Transform the value with a sync or async function.

        Example:
            ```python
            async def double(x: int) -> int:
                return x * 2

            assert await some(5).to_pending().map(double) == some(10)
            ```
        """

        async def _map() -> Option[U]:
            state = (await self).state
            if not isinstance(state, Some):
                return none()
            return some(await resolve(f(state.value)))

        return _deferred(_map)

    def map_all(self, f: Callable[[Option[T]], MaybeAwaitable[Option[U]]]) -> PendingOption[U]:
        """Map the whole resolved option (either state) through ``f``."""

        async def _map_all() -> Option[U]:
            return await resolve(f((await self).copy()))

        return _deferred(_map_all)

    def or_(self, other: MaybeAwaitable[Option[T]]) -> PendingOption[T]:
        """Resolve to self if Some, otherwise to a copy of ``other``."""

        async def _or() -> Option[T]:
            option = await self
            if option.is_some():
                return option.copy()
            return (await resolve(other)).copy()

        return _deferred(_or)

    def or_else(self, f: Callable[[], MaybeAwaitable[Option[T]]]) -> PendingOption[T]:
        """Resolve to self if Some, otherwise to the option produced by ``f``."""

        async def _or_else() -> Option[T]:
            option = await self
            if option.is_some():
                return option.copy()
            return await resolve(f())

        return _deferred(_or_else)

    def xor(self, other: MaybeAwaitable[Option[T]]) -> PendingOption[T]:
        """Resolve to the Some side if exactly one side is Some, otherwise None."""

        async def _xor() -> Option[T]:
            option = await self
            return option.xor(await resolve(other))

        return _deferred(_xor)

    def zip(self, other: MaybeAwaitable[Option[U]]) -> PendingOption[tuple[T, U]]:
        """Resolve self and ``other`` concurrently and pair their values.

        Resolves to ``Some((a, b))`` if both are Some, otherwise None.
        """

        async def _zipped() -> Option[tuple[T, U]]:
            left: Option[T] | None = None
            right: Option[U] | None = None

            async with anyio.create_task_group() as tg:

                async def run_self() -> None:
                    nonlocal left
                    left = await self

                async def run_other() -> None:
                    nonlocal right
                    right = await pending_option(other)

                tg.start_soon(run_self)
                tg.start_soon(run_other)

            assert left is not None
            assert right is not None
            return left.zip(right)

        return _deferred(_zipped)

    def take_if(self, pred: Callable[[T], MaybeAwaitable[bool]]) -> PendingOption[T]:
        """Take the value from a copy of the resolved option if ``pred`` holds.

        The memoized option itself is never modified.
        """

        async def _take_if() -> Option[T]:
            option = (await self).copy()
            state = option.state
            if not isinstance(state, Some):
                return none()
            return option.take() if await resolve(pred(state.value)) else none()

        return _deferred(_take_if)

    def transpose_awaitable(self) -> PendingOption[Any]:
        """Resolve ``PendingOption[Awaitable[U]]`` into ``PendingOption[U]``."""

        async def _transpose() -> Option[Any]:
            state = (await self).state
            if not isinstance(state, Some):
                return none()
            return some(await resolve(state.value))

        return _deferred(_transpose)

    # --- Terminals ---

    async def is_some(self) -> bool:
        """Return True if the resolved option holds a value."""
        return (await self).is_some()

    async def is_none(self) -> bool:
        """Return True if the resolved option holds no value."""
        return (await self).is_none()

    async def match(self, f: Callable[[T], MaybeAwaitable[U]], g: Callable[[], MaybeAwaitable[F]]) -> U | F:
        """Resolve the option and return ``f(value)`` or ``g()``, awaiting the branch result.

        Raises:
            OptionError: PREDICATE_EXCEPTION if the called branch raises.
        """
        state = (await self).state
        try:
            return await resolve(f(state.value) if isinstance(state, Some) else g())
        except Exception as e:
            msg = 'one of match callbacks raised an exception'
            raise OptionError(msg, OptionErrorKind.PREDICATE_EXCEPTION, e) from e

    async def map_or(self, default: U, f: Callable[[T], MaybeAwaitable[U]]) -> U:
        """Return ``f(value)`` if Some, otherwise ``default``; a raising ``f`` yields ``default``."""
        state = (await self).state
        if not isinstance(state, Some):
            return default
        try:
            return await resolve(f(state.value))
        except Exception as e:  # noqa: BLE001
            log_absorbed('PendingOption.map_or', e)
            return default

    async def map_or_else(self, mk_default: Callable[[], MaybeAwaitable[U]], f: Callable[[T], MaybeAwaitable[U]]) -> U:
        """Return ``f(value)`` if Some, otherwise ``mk_default()``.

        Raises:
            OptionError: PREDICATE_EXCEPTION if ``mk_default`` raises.
        """
        state = (await self).state
        if isinstance(state, Some):
            try:
                return await resolve(f(state.value))
            except Exception as e:  # noqa: BLE001
                log_absorbed('PendingOption.map_or_else', e)
        try:
            return await resolve(mk_default())
        except Exception as e:
            msg = 'map_or_else callback `mk_default` raised an exception'
            raise OptionError(msg, OptionErrorKind.PREDICATE_EXCEPTION, e) from e

    async def ok_or(self, error: E) -> Result[T, E]:
        """Resolve the option and convert it with ``Option.ok_or``."""
        return (await self).ok_or(error)

    async def ok_or_else(self, mk_error: Callable[[], MaybeAwaitable[E]]) -> Result[T, E]:
        """Resolve the option; on None, produce the error with a sync or async ``mk_error``.

        A raising ``mk_error`` produces an unexpected Err of kind
        FROM_OPTIONAL_CONVERSION_EXCEPTION.
        """
        from klaw_std.result.result import err, ok  # noqa: PLC0415

        state = (await self).state
        if isinstance(state, Some):
            return ok(state.value)
        try:
            return err(await resolve(mk_error()))
        except Exception as e:  # noqa: BLE001
            msg = 'ok_or_else callback `mk_error` raised an exception'
            return err(ResultError(msg, ResultErrorKind.FROM_OPTIONAL_CONVERSION_EXCEPTION, e))

    async def transpose(self) -> Result[Option[Any], Any]:
        """Resolve the option and convert it with ``Option.transpose``."""
        return (await self).transpose()

    async def unwrap_or(self, default: T) -> T:
        """Resolve the option and return its value, or ``default`` if None."""
        return (await self).unwrap_or(default)

    def __str__(self) -> str:
        return 'PendingOption { ... }'

    __repr__ = __str__


PendingOptionSource = Union[
    Option[T], PendingOption[T], Awaitable[Option[T]], Callable[[], Union[Option[T], Awaitable[Option[T]]]]
]


def pending_option(source: PendingOptionSource[T]) -> PendingOption[T]:
    """Create a PendingOption.

    Args:
        source: One of
            - an ``Option`` (resolves to it immediately),
            - a ``PendingOption`` (cloned),
            - an awaitable of an ``Option``,
            - a zero-argument callable returning any of the above; it is
              called right away and a raising factory resolves to None.

    Returns:
        A PendingOption that never raises when awaited.

    Examples:
        >>> await pending_option(some(1))
        Some { 1 }
        >>> async def boom() -> Option[int]:
        ...     raise RuntimeError('boom')
        >>> await pending_option(boom())
        None
    """
    if isinstance(source, PendingOption):
        return source.clone()
    if is_option(source):
        return PendingOption(Once.resolved(source.copy()))
    if is_awaitable(source):
        return PendingOption(Once(lambda: _settle(source)))
    if callable(source):
        try:
            produced = source()
        except Exception as e:  # noqa: BLE001
            log_absorbed('pending_option', e)
            return PendingOption(Once.resolved(none()))
        return pending_option(produced)
    log_absorbed('pending_option', TypeError(f'unsupported source {type(source).__name__}'))
    return PendingOption(Once.resolved(none()))


def is_pending_option(x: object) -> TypeGuard[PendingOption[Any]]:
    """Check if a value is a ``PendingOption``."""
    return isinstance(x, PendingOption)
