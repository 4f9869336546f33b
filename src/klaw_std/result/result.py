"""Result type: Ok[T, E] | Err[T, E] for fallible computations.

``Err`` always carries a ``CheckedError``: ``Expected(value)`` for domain
errors, ``Unexpected(ResultError)`` for internal failures. Results are
immutable; every method returns a new Result or a plain value.

Unlike Option, a Result never drops a callback exception on the floor.
``map``, ``map_err``, ``and_then``, ``or_else`` and ``map_all`` turn a raising
callback into ``Err(Unexpected(PREDICATE_EXCEPTION))``; ``match``,
``unwrap_or_else`` and the default producer of ``map_or_else`` raise a
``ResultError``. Only the observational methods (``inspect``,
``inspect_err``, ``tap``, ``is_ok_and``, ``is_err_and``, ``map_or``) ignore
callback exceptions.
"""

from __future__ import annotations

import copy as _copy
from collections.abc import Awaitable, Callable, Iterator
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeGuard, TypeVar, Union

import msgspec

from klaw_std._internal.awaitable import is_awaitable
from klaw_std._internal.stringify import stringify
from klaw_std._logging import log_absorbed
from klaw_std.errors import ResultError, ResultErrorKind
from klaw_std.option.option import Option, Some, none, some
from klaw_std.result.checked import CheckedError, Expected, Unexpected, checked_error

if TYPE_CHECKING:
    from klaw_std.result.pending import PendingResult

__all__ = ['Err', 'Ok', 'Result', 'err', 'is_result', 'ok']

T = TypeVar('T')
E = TypeVar('E')
U = TypeVar('U')
F = TypeVar('F')


def _callback_err(operation: str, exc: Exception) -> Err[Any, Any]:
    msg = f'{operation} callback raised an exception'
    return Err(Unexpected(ResultError(msg, ResultErrorKind.PREDICATE_EXCEPTION, exc)))


def _raise_callback_error(operation: str, exc: Exception) -> Any:
    msg = f'{operation} callback raised an exception'
    raise ResultError(msg, ResultErrorKind.PREDICATE_EXCEPTION, exc) from exc


def _to_pending(source: Result[Any, Any] | Awaitable[Any]) -> PendingResult[Any, Any]:
    from klaw_std.result.pending import pending_result  # noqa: PLC0415

    return pending_result(source)


class Ok(msgspec.Struct, Generic[T, E], frozen=True, gc=False):
    """Success variant of Result containing a value of type T.

    Examples:
        >>> ok(2).map(lambda x: x * 2)
        Ok { 4 }
        >>> ok(1).and_then(lambda x: ok(x + 1))
        Ok { 2 }
        >>> ok(1).and_then(lambda x: 1 / 0).unwrap_err().is_unexpected()
        True
    """

    value: T

    @property
    def error(self) -> CheckedError[E]:
        """Raises: ResultError ERROR_ACCESSED_ON_OK, always."""
        raise ResultError('`error` is accessed on `Ok`', ResultErrorKind.ERROR_ACCESSED_ON_OK)

    # --- Queries ---

    def is_ok(self) -> Literal[True]:
        """Return True, this is a successful result."""
        return True

    def is_err(self) -> Literal[False]:
        """Return False, this is not an error result."""
        return False

    def is_ok_and(self, pred: Callable[[T], bool]) -> bool:
        """Test the value against ``pred``; a raising predicate counts as False."""
        try:
            return bool(pred(self.value))
        except Exception as e:  # noqa: BLE001
            log_absorbed('Ok.is_ok_and', e)
            return False

    def is_err_and(self, pred: Callable[[CheckedError[E]], bool]) -> Literal[False]:
        """Return False without calling ``pred``."""
        return False

    # --- Transformations ---

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Transform the value.

        Args:
            f: Function applied to the value.

        Returns:
            ``Ok(f(value))``, or an unexpected Err (PREDICATE_EXCEPTION) if ``f`` raised.
        """
        try:
            return Ok(f(self.value))
        except Exception as e:  # noqa: BLE001
            return _callback_err('map', e)

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Return a copy of self; ``f`` is not called."""
        return Ok(self.value)

    def map_or(self, default: U, f: Callable[[T], U]) -> U:
        """Return ``f(value)``; a raising ``f`` yields ``default``."""
        try:
            return f(self.value)
        except Exception as e:  # noqa: BLE001
            log_absorbed('Ok.map_or', e)
            return default

    def map_or_else(self, mk_default: Callable[[], U], f: Callable[[T], U]) -> U:
        """Return ``f(value)``; a raising ``f`` falls back to ``mk_default()``.

        Raises:
            ResultError: PREDICATE_EXCEPTION if ``mk_default`` is called and raises.
        """
        try:
            return f(self.value)
        except Exception as e:  # noqa: BLE001
            log_absorbed('Ok.map_or_else', e)
        try:
            return mk_default()
        except Exception as e:  # noqa: BLE001
            return _raise_callback_error('map_or_else `mk_default`', e)

    def map_all(self, f: Callable[[Result[T, E]], Any]) -> Result[U, F] | PendingResult[U, F]:
        """Map the whole result (either variant) through ``f``.

        ``f`` receives a copy of self. An awaitable return value produces a
        ``PendingResult``; a raising ``f`` yields an unexpected Err.
        """
        try:
            result = f(self.copy())
        except Exception as e:  # noqa: BLE001
            return _callback_err('map_all', e)
        return _to_pending(result) if is_awaitable(result) else result

    def inspect(self, f: Callable[[T], Any]) -> Result[T, E]:
        """Call ``f`` with the value for side effects and return a copy of self.

        Exceptions raised by ``f`` are ignored.
        """
        try:
            f(self.value)
        except Exception as e:  # noqa: BLE001
            log_absorbed('Ok.inspect', e)
        return self.copy()

    def inspect_err(self, f: Callable[[CheckedError[E]], Any]) -> Result[T, E]:
        """Return a copy of self; ``f`` is not called."""
        return self.copy()

    def tap(self, f: Callable[[Result[T, E]], Any]) -> Result[T, E]:
        """Call ``f`` with a copy of self for side effects; exceptions are ignored."""
        try:
            f(self.copy())
        except Exception as e:  # noqa: BLE001
            log_absorbed('Ok.tap', e)
        return self.copy()

    # --- Chaining ---

    def and_(self, other: Result[U, E] | Awaitable[Result[U, E]]) -> Result[U, E] | PendingResult[U, E]:
        """Return ``other``; an awaitable ``other`` produces a ``PendingResult``."""
        if is_awaitable(other):
            return self.to_pending().and_(other)
        return other.copy()

    def and_then(self, f: Callable[[T], Any]) -> Result[U, E] | PendingResult[U, E]:
        """Chain a Result-returning function on the value.

        Args:
            f: Function returning a Result (or an awaitable of one).

        Returns:
            The result produced by ``f`` (a ``PendingResult`` when it is
            awaitable), or an unexpected Err (PREDICATE_EXCEPTION) if ``f`` raised.
        """
        try:
            result = f(self.value)
        except Exception as e:  # noqa: BLE001
            return _callback_err('and_then', e)
        return _to_pending(result) if is_awaitable(result) else result

    def or_(self, other: Result[T, Any] | Awaitable[Result[T, Any]]) -> Result[T, E] | PendingResult[T, E]:
        """Return a copy of self; an awaitable ``other`` produces a ``PendingResult``."""
        if is_awaitable(other):
            return self.to_pending().or_(other)
        return self.copy()

    def or_else(self, f: Callable[[CheckedError[E]], Any]) -> Result[T, E]:
        """Return a copy of self; ``f`` is not called."""
        return self.copy()

    def match(self, f: Callable[[T], U], g: Callable[[CheckedError[E]], F]) -> U | F:
        """Return ``f(value)``.

        Raises:
            ResultError: PREDICATE_EXCEPTION if ``f`` raises.
        """
        try:
            return f(self.value)
        except Exception as e:  # noqa: BLE001
            return _raise_callback_error('match', e)

    def flatten(self) -> Result[Any, Any]:
        """Remove one level of nesting from ``Result[Result[U, E], E]``.

        An Ok holding a non-result yields an unexpected Err (FLATTEN_ON_NON_RESULT).
        """
        inner = self.value
        if isinstance(inner, Ok | Err):
            return inner.copy()
        msg = '`flatten` is called on `Ok` holding a non-result value'
        return Err(Unexpected(ResultError(msg, ResultErrorKind.FLATTEN_ON_NON_RESULT, inner)))

    def combine(self, *others: Result[Any, E]) -> Result[tuple[Any, ...], E]:
        """Collect the values of self and ``others`` into ``Ok(tuple)``.

        Returns a copy of the first Err among ``others`` if there is one.
        """
        values: list[Any] = [self.value]
        for other in others:
            if isinstance(other, Err):
                return other.copy()
            values.append(other.value)
        return Ok(tuple(values))

    # --- Accessors ---

    def unwrap(self) -> T:
        """Return the value."""
        return self.value

    def expect(self, msg: str | None = None) -> T:
        """Return the value; ``msg`` is only used on Err."""
        return self.value

    def unwrap_err(self) -> CheckedError[E]:
        """Raises: ResultError UNWRAP_ERR_CALLED_ON_OK, always."""
        raise ResultError('`unwrap_err` is called on `Ok`', ResultErrorKind.UNWRAP_ERR_CALLED_ON_OK)

    def expect_err(self, msg: str | None = None) -> CheckedError[E]:
        """Raises: ResultError EXPECT_ERR_CALLED_ON_OK, with ``msg`` if given."""
        raise ResultError(msg or '`expect_err` is called on `Ok`', ResultErrorKind.EXPECT_ERR_CALLED_ON_OK)

    def unwrap_or(self, default: T) -> T:
        """Return the value."""
        return self.value

    def unwrap_or_else(self, f: Callable[[CheckedError[E]], T]) -> T:
        """Return the value; ``f`` is not called."""
        return self.value

    # --- Conversions ---

    def ok(self) -> Option[T]:
        """Return ``Some(value)``."""
        return some(self.value)

    def err(self) -> Option[E]:
        """Return None."""
        return none()

    def check(self) -> tuple[Literal[True], T]:
        """Return ``(True, value)``."""
        return (True, self.value)

    def try_(self) -> tuple[Literal[True], None, T]:
        """Return ``(True, None, value)``."""
        return (True, None, self.value)

    def transpose(self) -> Option[Result[Any, E]]:
        """Convert ``Result[Option[U], E]`` into ``Option[Result[U, E]]``.

        ``Ok(None)`` becomes None, ``Ok(Some(v))`` becomes ``Some(Ok(v))``.
        An Ok holding a non-option also becomes None.
        """
        inner = self.value
        if isinstance(inner, Option):
            state = inner.state
            if isinstance(state, Some):
                return some(Ok(state.value))
        return none()

    def copy(self) -> Ok[T, E]:
        """Return a shallow copy (the value is shared)."""
        return Ok(self.value)

    def clone(self) -> Ok[T, E]:
        """Return a copy holding a deep copy of the value."""
        return Ok(_copy.deepcopy(self.value))

    def to_pending(self) -> PendingResult[T, E]:
        """Wrap a shallow copy in an already-resolved ``PendingResult``."""
        return _to_pending(self.copy())

    def to_pending_cloned(self) -> PendingResult[T, E]:
        """Wrap a deep copy in an already-resolved ``PendingResult``."""
        return _to_pending(self.clone())

    def __iter__(self) -> Iterator[T]:
        yield self.value

    def __str__(self) -> str:
        return f'Ok {{ {stringify(self.value, quote_string=True)} }}'

    def __repr__(self) -> str:
        return self.__str__()


class Err(msgspec.Struct, Generic[T, E], frozen=True, gc=False):
    """Error variant of Result containing a ``CheckedError``.

    Create with ``err()``, which classifies the raw error.

    Examples:
        >>> err('e')
        Err { 'e' }
        >>> err('e').and_then(lambda x: ok(x + 1))
        Err { 'e' }
        >>> err('e').unwrap_err().expected
        'e'
    """

    error: CheckedError[E]

    @property
    def value(self) -> T:
        """Raises: ResultError VALUE_ACCESSED_ON_ERR, always."""
        raise ResultError('`value` is accessed on `Err`', ResultErrorKind.VALUE_ACCESSED_ON_ERR)

    # --- Queries ---

    def is_ok(self) -> Literal[False]:
        """Return False, this is not a successful result."""
        return False

    def is_err(self) -> Literal[True]:
        """Return True, this is an error result."""
        return True

    def is_ok_and(self, pred: Callable[[T], bool]) -> Literal[False]:
        """Return False without calling ``pred``."""
        return False

    def is_err_and(self, pred: Callable[[CheckedError[E]], bool]) -> bool:
        """Test the checked error against ``pred``; a raising predicate counts as False."""
        try:
            return bool(pred(self.error))
        except Exception as e:  # noqa: BLE001
            log_absorbed('Err.is_err_and', e)
            return False

    # --- Transformations ---

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Return a copy of self; ``f`` is not called."""
        return self.copy()

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Transform an expected error.

        Unexpected errors pass through unchanged and ``f`` is not called.

        Args:
            f: Function applied to the expected error value.

        Returns:
            ``Err(f(error))``, or an unexpected Err (PREDICATE_EXCEPTION) if ``f`` raised.
        """
        error = self.error
        if not isinstance(error, Expected):
            return Err(error)
        try:
            return err(f(error.value))
        except Exception as e:  # noqa: BLE001
            return _callback_err('map_err', e)

    def map_or(self, default: U, f: Callable[[T], U]) -> U:
        """Return ``default``."""
        return default

    def map_or_else(self, mk_default: Callable[[], U], f: Callable[[T], U]) -> U:
        """Return ``mk_default()``.

        Raises:
            ResultError: PREDICATE_EXCEPTION if ``mk_default`` raises.
        """
        try:
            return mk_default()
        except Exception as e:  # noqa: BLE001
            return _raise_callback_error('map_or_else `mk_default`', e)

    def map_all(self, f: Callable[[Result[T, E]], Any]) -> Result[U, F] | PendingResult[U, F]:
        """Map the whole result (either variant) through ``f``.

        ``f`` receives a copy of self. An awaitable return value produces a
        ``PendingResult``; a raising ``f`` yields an unexpected Err.
        """
        try:
            result = f(self.copy())
        except Exception as e:  # noqa: BLE001
            return _callback_err('map_all', e)
        return _to_pending(result) if is_awaitable(result) else result

    def inspect(self, f: Callable[[T], Any]) -> Result[T, E]:
        """Return a copy of self; ``f`` is not called."""
        return self.copy()

    def inspect_err(self, f: Callable[[CheckedError[E]], Any]) -> Result[T, E]:
        """Call ``f`` with the checked error for side effects and return a copy of self.

        Exceptions raised by ``f`` are ignored.
        """
        try:
            f(self.error)
        except Exception as e:  # noqa: BLE001
            log_absorbed('Err.inspect_err', e)
        return self.copy()

    def tap(self, f: Callable[[Result[T, E]], Any]) -> Result[T, E]:
        """Call ``f`` with a copy of self for side effects; exceptions are ignored."""
        try:
            f(self.copy())
        except Exception as e:  # noqa: BLE001
            log_absorbed('Err.tap', e)
        return self.copy()

    # --- Chaining ---

    def and_(self, other: Result[U, E] | Awaitable[Result[U, E]]) -> Result[U, E] | PendingResult[U, E]:
        """Return a copy of self; an awaitable ``other`` produces a ``PendingResult``."""
        if is_awaitable(other):
            return self.to_pending().and_(other)
        return self.copy()

    def and_then(self, f: Callable[[T], Any]) -> Result[U, E]:
        """Return a copy of self; ``f`` is not called."""
        return self.copy()

    def or_(self, other: Result[T, F] | Awaitable[Result[T, F]]) -> Result[T, F] | PendingResult[T, F]:
        """Return ``other``; an awaitable ``other`` produces a ``PendingResult``."""
        if is_awaitable(other):
            return self.to_pending().or_(other)
        return other.copy()

    def or_else(self, f: Callable[[CheckedError[E]], Any]) -> Result[T, F] | PendingResult[T, F]:
        """Recover from the error with a Result-returning function.

        Args:
            f: Function receiving the checked error and returning a Result
                (or an awaitable of one).

        Returns:
            The result produced by ``f`` (a ``PendingResult`` when it is
            awaitable), or an unexpected Err (PREDICATE_EXCEPTION) if ``f`` raised.
        """
        try:
            result = f(self.error)
        except Exception as e:  # noqa: BLE001
            return _callback_err('or_else', e)
        return _to_pending(result) if is_awaitable(result) else result

    def match(self, f: Callable[[T], U], g: Callable[[CheckedError[E]], F]) -> U | F:
        """Return ``g(error)``.

        Raises:
            ResultError: PREDICATE_EXCEPTION if ``g`` raises.
        """
        try:
            return g(self.error)
        except Exception as e:  # noqa: BLE001
            return _raise_callback_error('match', e)

    def flatten(self) -> Result[Any, E]:
        """Return a copy of self."""
        return self.copy()

    def combine(self, *others: Result[Any, E]) -> Result[tuple[Any, ...], E]:
        """Return a copy of self."""
        return self.copy()

    # --- Accessors ---

    def unwrap(self) -> T:
        """Raises: ResultError UNWRAP_CALLED_ON_ERR, always."""
        raise ResultError('`unwrap` is called on `Err`', ResultErrorKind.UNWRAP_CALLED_ON_ERR)

    def expect(self, msg: str | None = None) -> T:
        """Raises: ResultError EXPECT_CALLED_ON_ERR, with ``msg`` if given."""
        raise ResultError(msg or '`expect` is called on `Err`', ResultErrorKind.EXPECT_CALLED_ON_ERR)

    def unwrap_err(self) -> CheckedError[E]:
        """Return the checked error."""
        return self.error

    def expect_err(self, msg: str | None = None) -> CheckedError[E]:
        """Return the checked error; ``msg`` is only used on Ok."""
        return self.error

    def unwrap_or(self, default: T) -> T:
        """Return ``default``."""
        return default

    def unwrap_or_else(self, f: Callable[[CheckedError[E]], T]) -> T:
        """Return ``f(error)``.

        Raises:
            ResultError: PREDICATE_EXCEPTION if ``f`` raises.
        """
        try:
            return f(self.error)
        except Exception as e:  # noqa: BLE001
            return _raise_callback_error('unwrap_or_else', e)

    # --- Conversions ---

    def ok(self) -> Option[T]:
        """Return None."""
        return none()

    def err(self) -> Option[E]:
        """Return ``Some(error)`` for an expected error, None for an unexpected one."""
        error = self.error
        return some(error.value) if isinstance(error, Expected) else none()

    def check(self) -> tuple[Literal[False], CheckedError[E]]:
        """Return ``(False, error)``."""
        return (False, self.error)

    def try_(self) -> tuple[Literal[False], CheckedError[E], None]:
        """Return ``(False, error, None)``."""
        return (False, self.error, None)

    def transpose(self) -> Option[Result[Any, E]]:
        """Return ``Some`` of a copy of self."""
        return some(self.copy())

    def copy(self) -> Err[T, E]:
        """Return a shallow copy (the checked error is shared)."""
        return Err(self.error)

    def clone(self) -> Err[T, E]:
        """Return a copy holding a deep copy of an expected error.

        An unexpected error is rebuilt as a new ``ResultError`` with the same
        kind, message and reason; the reason itself is shared.
        """
        error = self.error
        if isinstance(error, Expected):
            return Err(Expected(_copy.deepcopy(error.value)))
        return Err(Unexpected(error.error.clone()))

    def to_pending(self) -> PendingResult[T, E]:
        """Wrap a shallow copy in an already-resolved ``PendingResult``."""
        return _to_pending(self.copy())

    def to_pending_cloned(self) -> PendingResult[T, E]:
        """Wrap a deep copy in an already-resolved ``PendingResult``."""
        return _to_pending(self.clone())

    def __iter__(self) -> Iterator[T]:
        return iter(())

    def __str__(self) -> str:
        return f'Err {{ {self.error} }}'

    def __repr__(self) -> str:
        return self.__str__()


Result = Union[Ok[T, E], Err[T, E]]


def ok(value: T) -> Ok[T, Any]:
    """Create a successful result holding ``value``."""
    return Ok(value)


def err(error: E | CheckedError[E]) -> Err[Any, E]:
    """Create an error result.

    The raw error is classified: a ``ResultError`` becomes ``Unexpected``,
    an existing ``Expected``/``Unexpected`` is kept, anything else becomes
    ``Expected``.

    Examples:
        >>> err('not found').unwrap_err().is_expected()
        True
        >>> err(ResultError('boom', ResultErrorKind.UNEXPECTED)).unwrap_err().is_unexpected()
        True
    """
    return Err(checked_error(error))


def is_result(x: object) -> TypeGuard[Ok[Any, Any] | Err[Any, Any]]:
    """Check if a value is a ``Result`` (``Ok`` or ``Err``)."""
    return isinstance(x, Ok | Err)
