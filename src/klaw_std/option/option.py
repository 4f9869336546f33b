"""Option type: an owner over the Some[T] | Nothing state variants.

The state variants are frozen msgspec Structs, so ``match option.state``
works like any sum type. The ``Option`` owner is the only mutable part: the
mutation family (``insert``, ``replace``, ``take``, ``take_if``,
``get_or_insert``, ``get_or_insert_with``) swaps the owner's state, every
other method returns a fresh ``Option``.

Callback exceptions follow two tiers:

- transform methods (``map``, ``and_then``, ``filter``, ``inspect``, ``tap``,
  ``is_some_and``, ``is_none_or``, ``map_or``, ``or_else``, ``take_if``)
  discard the exception and return their empty default;
- methods with no safe default (``match``, ``map_or_else``'s default
  producer, ``unwrap_or_else``, ``get_or_insert_with``) raise
  ``OptionError(PREDICATE_EXCEPTION)`` with the original exception as reason.
"""

from __future__ import annotations

import copy as _copy
from collections.abc import Awaitable, Callable, Iterator
from typing import TYPE_CHECKING, Any, Final, Generic, TypeGuard, TypeVar, overload

import msgspec

from klaw_std._internal.awaitable import is_awaitable, resolve
from klaw_std._internal.stringify import stringify
from klaw_std._logging import log_absorbed
from klaw_std.errors import OptionError, OptionErrorKind

if TYPE_CHECKING:
    from klaw_std.option.pending import PendingOption
    from klaw_std.result.result import Result

__all__ = ['Nothing', 'NothingType', 'Option', 'Some', 'is_option', 'none', 'some']

T = TypeVar('T')
U = TypeVar('U')
F = TypeVar('F')
E = TypeVar('E')


class Some(msgspec.Struct, Generic[T], frozen=True, gc=False):
    """State variant of an Option holding a value.

    Examples:
        >>> Some(42).value
        42
        >>> match some(42).state:
        ...     case Some(v):
        ...         print(v)
        42
    """

    value: T

    def __str__(self) -> str:
        return f'Some {{ {stringify(self.value, quote_string=True)} }}'


class NothingType(msgspec.Struct, frozen=True, gc=False):
    """State variant of an Option holding no value.

    Use the ``Nothing`` constant instead of instantiating directly; all
    instances compare equal.
    """

    def __str__(self) -> str:
        return 'None'


Nothing: Final[NothingType] = NothingType()
"""Singleton instance representing the absence of a value."""


class Option(Generic[T]):
    """An optional value: either ``Some(value)`` or ``None``.

    Create instances with ``some(value)`` and ``none()``. Two options are
    equal when their states are equal. Options are mutable through a small
    family of methods and are therefore unhashable.

    Examples:
        >>> some(2).and_(some(3))
        Some { 3 }
        >>> none().or_(some(3))
        Some { 3 }
        >>> x = some(1)
        >>> x.take()
        Some { 1 }
        >>> x
        None
    """

    __slots__ = ('_state',)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, state: Some[T] | NothingType = Nothing) -> None:
        self._state: Some[T] | NothingType = state

    # --- Queries ---

    @property
    def state(self) -> Some[T] | NothingType:
        """The current state variant, for structural pattern matching."""
        return self._state

    @property
    def value(self) -> T:
        """The contained value.

        Raises:
            OptionError: VALUE_ACCESSED_ON_NONE if the option is None.
        """
        state = self._state
        if isinstance(state, Some):
            return state.value
        raise OptionError('`value` is accessed on `None`', OptionErrorKind.VALUE_ACCESSED_ON_NONE)

    def is_some(self) -> bool:
        """Return True if the option holds a value."""
        return isinstance(self._state, Some)

    def is_none(self) -> bool:
        """Return True if the option holds no value."""
        return not isinstance(self._state, Some)

    def is_some_and(self, pred: Callable[[T], bool]) -> bool:
        """Return True if the option is Some and ``pred(value)`` is truthy.

        A raising predicate counts as False.
        """
        state = self._state
        if not isinstance(state, Some):
            return False
        try:
            return bool(pred(state.value))
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.is_some_and', e)
            return False

    def is_none_or(self, pred: Callable[[T], bool]) -> bool:
        """Return True if the option is None, or Some and ``pred(value)`` is truthy.

        A raising predicate counts as False.
        """
        state = self._state
        if not isinstance(state, Some):
            return True
        try:
            return bool(pred(state.value))
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.is_none_or', e)
            return False

    # --- Transform family (silent on callback exceptions) ---

    def map(self, f: Callable[[T], U]) -> Option[U]:
        """Transform the contained value with ``f``.

        Args:
            f: Function applied to the value if Some.

        Returns:
            ``Some(f(value))``, or None if the option is None or ``f`` raised.

        Examples:
            >>> some(2).map(lambda x: x * 10)
            Some { 20 }
            >>> some(2).map(lambda x: 1 / 0)
            None
        """
        state = self._state
        if not isinstance(state, Some):
            return none()
        try:
            return some(f(state.value))
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.map', e)
            return none()

    @overload
    def and_then(self, f: Callable[[T], Awaitable[Option[U]]]) -> PendingOption[U]: ...

    @overload
    def and_then(self, f: Callable[[T], Option[U]]) -> Option[U]: ...

    def and_then(self, f: Callable[[T], Any]) -> Option[U] | PendingOption[U]:
        """Chain an Option-returning function on the contained value.

        If ``f`` returns an awaitable the result is a ``PendingOption``. A
        raising ``f`` yields None.

        Args:
            f: Function returning an Option (or an awaitable of one).

        Returns:
            The option produced by ``f``, or None.
        """
        state = self._state
        if not isinstance(state, Some):
            return none()
        try:
            option = f(state.value)
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.and_then', e)
            return none()
        if is_awaitable(option):
            from klaw_std.option.pending import pending_option  # noqa: PLC0415

            return pending_option(option)
        return option

    def filter(self, pred: Callable[[T], bool]) -> Option[T]:
        """Keep the value only if ``pred(value)`` is truthy; a raising predicate yields None."""
        state = self._state
        if not isinstance(state, Some):
            return none()
        try:
            return some(state.value) if pred(state.value) else none()
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.filter', e)
            return none()

    def inspect(self, f: Callable[[T], Any]) -> Option[T]:
        """Call ``f`` with the value for side effects and return a copy of self.

        Exceptions raised by ``f`` are ignored.
        """
        state = self._state
        if isinstance(state, Some):
            try:
                f(state.value)
            except Exception as e:  # noqa: BLE001
                log_absorbed('Option.inspect', e)
        return self.copy()

    @overload
    def tap(self, f: Callable[[Option[T]], Awaitable[Any]]) -> PendingOption[T]: ...

    @overload
    def tap(self, f: Callable[[Option[T]], Any]) -> Option[T]: ...

    def tap(self, f: Callable[[Option[T]], Any]) -> Option[T] | PendingOption[T]:
        """Call ``f`` with a copy of the whole option (Some or None) for side effects.

        Exceptions raised by ``f`` are ignored. When ``f`` returns an
        awaitable, the result is a ``PendingOption`` that awaits it, ignores
        its failure and resolves to a copy of self.

        Example:
            ```python
            seen = []
            assert none().tap(seen.append) == none()
            assert seen == [none()]
            ```
        """
        try:
            produced = f(self.copy())
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.tap', e)
            return self.copy()
        if is_awaitable(produced):
            return self.to_pending().tap(lambda _: produced)
        return self.copy()

    def map_or(self, default: U, f: Callable[[T], U]) -> U:
        """Return ``f(value)`` if Some, otherwise ``default``; a raising ``f`` yields ``default``."""
        state = self._state
        if not isinstance(state, Some):
            return default
        try:
            return f(state.value)
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.map_or', e)
            return default

    def or_else(self, f: Callable[[], Option[T]]) -> Option[T]:
        """Return a copy of self if Some, otherwise the option produced by ``f``.

        A raising ``f`` yields None.
        """
        state = self._state
        if isinstance(state, Some):
            return some(state.value)
        try:
            return f()
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.or_else', e)
            return none()

    @overload
    def map_all(self, f: Callable[[Option[T]], Awaitable[Option[U]]]) -> PendingOption[U]: ...

    @overload
    def map_all(self, f: Callable[[Option[T]], Option[U]]) -> Option[U]: ...

    def map_all(self, f: Callable[[Option[T]], Any]) -> Option[U] | PendingOption[U]:
        """Map the whole option (either state) through ``f``.

        ``f`` receives a copy of self. An awaitable return value produces a
        ``PendingOption``; a raising ``f`` yields None.
        """
        try:
            option = f(self.copy())
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.map_all', e)
            return none()
        if is_awaitable(option):
            from klaw_std.option.pending import pending_option  # noqa: PLC0415

            return pending_option(option)
        return option

    # --- No-fallback family (raise OptionError on callback exceptions) ---

    def match(self, f: Callable[[T], U], g: Callable[[], F]) -> U | F:
        """Return ``f(value)`` if Some, otherwise ``g()``.

        Raises:
            OptionError: PREDICATE_EXCEPTION if the called branch raises.
        """
        state = self._state
        try:
            return f(state.value) if isinstance(state, Some) else g()
        except Exception as e:
            msg = 'one of match callbacks raised an exception'
            raise OptionError(msg, OptionErrorKind.PREDICATE_EXCEPTION, e) from e

    def map_or_else(self, mk_default: Callable[[], U], f: Callable[[T], U]) -> U:
        """Return ``f(value)`` if Some, otherwise ``mk_default()``.

        A raising ``f`` falls back to ``mk_default()``.

        Raises:
            OptionError: PREDICATE_EXCEPTION if ``mk_default`` raises.
        """
        state = self._state
        if isinstance(state, Some):
            try:
                return f(state.value)
            except Exception as e:  # noqa: BLE001
                log_absorbed('Option.map_or_else', e)
        try:
            return mk_default()
        except Exception as e:
            msg = 'map_or_else callback `mk_default` raised an exception'
            raise OptionError(msg, OptionErrorKind.PREDICATE_EXCEPTION, e) from e

    def unwrap_or_else(self, mk_default: Callable[[], T]) -> T:
        """Return the value if Some, otherwise ``mk_default()``.

        Raises:
            OptionError: PREDICATE_EXCEPTION if ``mk_default`` raises.
        """
        state = self._state
        if isinstance(state, Some):
            return state.value
        try:
            return mk_default()
        except Exception as e:
            msg = 'unwrap_or_else callback raised an exception'
            raise OptionError(msg, OptionErrorKind.PREDICATE_EXCEPTION, e) from e

    # --- Combinators with another option ---

    @overload
    def and_(self, other: Awaitable[Option[U]]) -> PendingOption[U]: ...

    @overload
    def and_(self, other: Option[U]) -> Option[U]: ...

    def and_(self, other: Option[U] | Awaitable[Option[U]]) -> Option[U] | PendingOption[U]:
        """Return None if self is None, otherwise a copy of ``other``.

        An awaitable ``other`` produces a ``PendingOption``.
        """
        if is_awaitable(other):
            return self.to_pending().and_(other)
        return none() if self.is_none() else other.copy()

    @overload
    def or_(self, other: Awaitable[Option[T]]) -> PendingOption[T]: ...

    @overload
    def or_(self, other: Option[T]) -> Option[T]: ...

    def or_(self, other: Option[T] | Awaitable[Option[T]]) -> Option[T] | PendingOption[T]:
        """Return a copy of self if Some, otherwise a copy of ``other``.

        An awaitable ``other`` produces a ``PendingOption``.
        """
        if is_awaitable(other):
            return self.to_pending().or_(other)
        return self.copy() if self.is_some() else other.copy()

    @overload
    def xor(self, other: Awaitable[Option[T]]) -> PendingOption[T]: ...

    @overload
    def xor(self, other: Option[T]) -> Option[T]: ...

    def xor(self, other: Option[T] | Awaitable[Option[T]]) -> Option[T] | PendingOption[T]:
        """Return the Some side if exactly one of self and ``other`` is Some, otherwise None.

        An awaitable ``other`` produces a ``PendingOption``.
        """
        if is_awaitable(other):
            return self.to_pending().xor(other)
        if self.is_some() and other.is_none():
            return self.copy()
        if self.is_none() and other.is_some():
            return other.copy()
        return none()

    @overload
    def zip(self, other: Awaitable[Option[U]]) -> PendingOption[tuple[T, U]]: ...

    @overload
    def zip(self, other: Option[U]) -> Option[tuple[T, U]]: ...

    def zip(self, other: Option[U] | Awaitable[Option[U]]) -> Option[tuple[T, U]] | PendingOption[tuple[T, U]]:
        """Return ``Some((a, b))`` if both options are Some, otherwise None.

        Examples:
            >>> some(1).zip(some('a'))
            Some { [1,"a"] }
            >>> some(1).zip(none())
            None
        """
        if is_awaitable(other):
            return self.to_pending().zip(other)
        a, b = self._state, other.state
        if isinstance(a, Some) and isinstance(b, Some):
            return some((a.value, b.value))
        return none()

    # --- Mutation family ---

    def insert(self, value: T) -> T:
        """Store ``value``, overwriting any current value, and return it."""
        self._state = Some(value)
        return value

    def get_or_insert(self, value: T) -> T:
        """Store ``value`` if the option is None, then return the contained value."""
        state = self._state
        if isinstance(state, Some):
            return state.value
        return self.insert(value)

    def get_or_insert_with(self, f: Callable[[], T]) -> T:
        """Store ``f()`` if the option is None, then return the contained value.

        Raises:
            OptionError: PREDICATE_EXCEPTION if ``f`` raises; the option is left None.
        """
        state = self._state
        if isinstance(state, Some):
            return state.value
        try:
            value = f()
        except Exception as e:
            msg = 'get_or_insert_with callback raised an exception'
            raise OptionError(msg, OptionErrorKind.PREDICATE_EXCEPTION, e) from e
        return self.insert(value)

    def replace(self, value: T) -> Option[T]:
        """Store ``value`` and return the previous state as a new option."""
        previous = self._state
        self._state = Some(value)
        return Option(previous)

    def take(self) -> Option[T]:
        """Take the value out, leaving None in its place.

        Returns:
            The previous state as a new option.
        """
        previous = self._state
        self._state = Nothing
        return Option(previous)

    def take_if(self, pred: Callable[[T], bool]) -> Option[T]:
        """Take the value out only if ``pred(value)`` is truthy.

        On a false or raising predicate the state is unchanged and the
        result is None.
        """
        state = self._state
        if not isinstance(state, Some):
            return none()
        try:
            taken = bool(pred(state.value))
        except Exception as e:  # noqa: BLE001
            log_absorbed('Option.take_if', e)
            return none()
        return self.take() if taken else none()

    # --- Bridging ---

    def ok_or(self, error: E) -> Result[T, E]:
        """Convert to ``Ok(value)`` if Some, otherwise ``Err(error)``."""
        from klaw_std.result.result import err, ok  # noqa: PLC0415

        state = self._state
        return ok(state.value) if isinstance(state, Some) else err(error)

    def ok_or_else(self, mk_error: Callable[[], E]) -> Result[T, E]:
        """Convert to ``Ok(value)`` if Some, otherwise ``Err(mk_error())``.

        A raising ``mk_error`` produces an unexpected ``Err`` of kind
        FROM_OPTIONAL_CONVERSION_EXCEPTION instead of raising.
        """
        from klaw_std.errors import ResultError, ResultErrorKind  # noqa: PLC0415
        from klaw_std.result.result import err, ok  # noqa: PLC0415

        state = self._state
        if isinstance(state, Some):
            return ok(state.value)
        try:
            return err(mk_error())
        except Exception as e:  # noqa: BLE001
            msg = 'ok_or_else callback `mk_error` raised an exception'
            return err(ResultError(msg, ResultErrorKind.FROM_OPTIONAL_CONVERSION_EXCEPTION, e))

    def transpose(self) -> Result[Option[Any], Any]:
        """Convert ``Option[Result[U, E]]`` into ``Result[Option[U], E]``.

        - None becomes ``Ok(None)``
        - ``Some(Ok(v))`` becomes ``Ok(Some(v))``
        - ``Some(Err(e))`` becomes ``Err(e)``
        - Some holding anything else becomes ``Ok(None)``
        """
        from klaw_std.result.result import Err, Ok, ok  # noqa: PLC0415

        state = self._state
        if isinstance(state, Some):
            match state.value:
                case Ok(v):
                    return ok(some(v))
                case Err(e):
                    return Err(e)
        return ok(none())

    def transpose_awaitable(self) -> PendingOption[Any]:
        """Convert ``Option[Awaitable[U]]`` into ``PendingOption[U]``."""
        from klaw_std.option.pending import pending_option  # noqa: PLC0415

        state = self._state
        if not isinstance(state, Some):
            return pending_option(none())

        async def _resolved() -> Option[Any]:
            return some(await resolve(state.value))

        return pending_option(_resolved)

    def to_pending(self) -> PendingOption[T]:
        """Wrap a copy of this option in an already-resolved ``PendingOption``."""
        from klaw_std.option.pending import pending_option  # noqa: PLC0415

        return pending_option(self.copy())

    def to_pending_cloned(self) -> PendingOption[T]:
        """Wrap a deep copy of this option in an already-resolved ``PendingOption``."""
        from klaw_std.option.pending import pending_option  # noqa: PLC0415

        return pending_option(self.clone())

    # --- Accessors ---

    def unwrap(self) -> T:
        """Return the contained value.

        Raises:
            OptionError: UNWRAP_CALLED_ON_NONE if the option is None.
        """
        state = self._state
        if isinstance(state, Some):
            return state.value
        raise OptionError('`unwrap` is called on `None`', OptionErrorKind.UNWRAP_CALLED_ON_NONE)

    def expect(self, msg: str | None = None) -> T:
        """Return the contained value.

        Args:
            msg: Message for the raised error; a default is used when None.

        Raises:
            OptionError: EXPECT_CALLED_ON_NONE if the option is None.
        """
        state = self._state
        if isinstance(state, Some):
            return state.value
        raise OptionError(msg or '`expect` is called on `None`', OptionErrorKind.EXPECT_CALLED_ON_NONE)

    def unwrap_or(self, default: T) -> T:
        """Return the contained value, or ``default`` if None."""
        state = self._state
        return state.value if isinstance(state, Some) else default

    # --- Copying and nesting ---

    def copy(self) -> Option[T]:
        """Return a new owner over the same state (the value is shared)."""
        return Option(self._state)

    def clone(self) -> Option[T]:
        """Return a new owner over a deep copy of the value."""
        state = self._state
        if isinstance(state, Some):
            return some(_copy.deepcopy(state.value))
        return none()

    def flatten(self) -> Option[Any]:
        """Remove one level of nesting from ``Option[Option[U]]``.

        Some holding a non-option is returned as a copy.
        """
        state = self._state
        if not isinstance(state, Some):
            return none()
        inner = state.value
        return inner.copy() if isinstance(inner, Option) else self.copy()

    def __iter__(self) -> Iterator[T]:
        state = self._state
        if isinstance(state, Some):
            yield state.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return self._state == other._state

    def __str__(self) -> str:
        return str(self._state)

    __repr__ = __str__


def some(value: T) -> Option[T]:
    """Create an option holding ``value``."""
    return Option(Some(value))


def none() -> Option[T]:
    """Create an option holding no value."""
    return Option(Nothing)


def is_option(x: object) -> TypeGuard[Option[Any]]:
    """Check if a value is an ``Option``."""
    return isinstance(x, Option)
