"""CheckedError: the error payload of an ``Err``.

An ``Err`` never holds a raw error. It holds either ``Expected(value)``, a
domain error the caller anticipated, or ``Unexpected(error)``, a
``ResultError`` describing an internal failure (a raising callback, a failed
awaitable, a conversion gone wrong) with the original exception as reason.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeGuard, TypeVar, Union

import msgspec

from klaw_std._internal.stringify import stringify
from klaw_std.errors import ResultError, ResultErrorKind

__all__ = [
    'CheckedError',
    'Expected',
    'Unexpected',
    'checked_error',
    'expected_error',
    'is_checked_error',
    'unexpected_error',
]

E = TypeVar('E')
U = TypeVar('U')


class Expected(msgspec.Struct, Generic[E], frozen=True, gc=False):
    """An anticipated domain error.

    Examples:
        >>> e = Expected('not found')
        >>> e.is_expected()
        True
        >>> e.expected
        'not found'
        >>> e.unexpected is None
        True
    """

    value: E

    def is_expected(self) -> bool:
        return True

    def is_unexpected(self) -> bool:
        return False

    @property
    def expected(self) -> E:
        """The domain error."""
        return self.value

    @property
    def unexpected(self) -> None:
        """Always None for an expected error."""
        return None

    def get(self) -> E:
        """Return the contained domain error."""
        return self.value

    def handle(self, f: Callable[[ResultError], U], g: Callable[[E], U]) -> U:
        """Apply ``g`` to the domain error (``f`` handles unexpected errors)."""
        return g(self.value)

    def __str__(self) -> str:
        return stringify(self.value, quote_string=True)


class Unexpected(msgspec.Struct, frozen=True, gc=False):
    """An internal failure, described by a ``ResultError``.

    Examples:
        >>> e = unexpected_error('boom')
        >>> e.is_unexpected()
        True
        >>> e.unexpected.kind
        <ResultErrorKind.UNEXPECTED: 'Unexpected'>
    """

    error: ResultError

    def is_expected(self) -> bool:
        return False

    def is_unexpected(self) -> bool:
        return True

    @property
    def expected(self) -> None:
        """Always None for an unexpected error."""
        return None

    @property
    def unexpected(self) -> ResultError:
        """The internal error."""
        return self.error

    def get(self) -> ResultError:
        """Return the contained ``ResultError``."""
        return self.error

    def handle(self, f: Callable[[ResultError], U], g: Callable[[Any], U]) -> U:
        """Apply ``f`` to the internal error (``g`` handles expected errors)."""
        return f(self.error)

    def __str__(self) -> str:
        return self.error.message


CheckedError = Union[Expected[E], Unexpected]

_CHECKED_TYPES = (Expected, Unexpected)


def is_checked_error(x: object) -> TypeGuard[Expected[Any] | Unexpected]:
    """Check if a value is a ``CheckedError`` (``Expected`` or ``Unexpected``)."""
    return isinstance(x, _CHECKED_TYPES)


def checked_error(raw: E | CheckedError[E]) -> CheckedError[E]:
    """Classify a raw error value.

    - an existing ``Expected``/``Unexpected`` is returned unchanged
    - a ``ResultError`` becomes ``Unexpected``
    - anything else becomes ``Expected``
    """
    if isinstance(raw, _CHECKED_TYPES):
        return raw  # type: ignore[return-value]
    if isinstance(raw, ResultError):
        return Unexpected(raw)
    return Expected(raw)  # type: ignore[arg-type]


def expected_error(error: E) -> Expected[E]:
    """Wrap ``error`` as an expected error, without classification."""
    return Expected(error)


def unexpected_error(
    error: ResultError | str,
    kind: ResultErrorKind = ResultErrorKind.UNEXPECTED,
    reason: Any = None,
) -> Unexpected:
    """Create an unexpected error.

    Args:
        error: An existing ``ResultError``, or a message for a new one.
        kind: Kind of the new error (ignored when ``error`` is a ``ResultError``).
        reason: Cause of the new error (ignored when ``error`` is a ``ResultError``).

    Returns:
        The ``Unexpected`` checked error.
    """
    if isinstance(error, ResultError):
        return Unexpected(error)
    if reason is None:
        return Unexpected(ResultError(error, kind))
    return Unexpected(ResultError(error, kind, reason))
