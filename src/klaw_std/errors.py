"""Error taxonomy for Option and Result operations.

Every error raised by this package (or carried inside an ``Unexpected``
checked error) is an ``AnyError``: a message, a ``kind`` from a closed
``StrEnum`` per container family, and an optional ``reason`` holding the
original cause.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Generic, Self, TypeGuard, TypeVar

from klaw_std._internal.stringify import stringify

__all__ = [
    'AnyError',
    'OptionError',
    'OptionErrorKind',
    'ResultError',
    'ResultErrorKind',
    'is_result_error',
]

K = TypeVar('K', bound=StrEnum)

_NO_REASON: Any = object()


def _format_message(message: str, kind: Any, reason: Any) -> str:
    text = f'[{stringify(kind)}] {message}.'
    if reason is not _NO_REASON:
        text += f' Reason: {stringify(reason)}'
    return text


def _as_exception(reason: Any) -> BaseException:
    if isinstance(reason, BaseException):
        return reason
    return Exception(stringify(reason))


class AnyError(Exception, Generic[K]):
    """Base error with a typed ``kind`` and an optional ``reason``.

    The rendered message is ``[<kind>] <message>.``, followed by
    `` Reason: <reason>`` when a reason was given. A reason that is not an
    exception is wrapped in ``Exception(stringify(reason))``; either way it is
    also installed as ``__cause__`` so tracebacks show the chain.

    Attributes:
        message: The formatted message.
        kind: The error category.
        reason: The underlying cause, or None.

    Examples:
        >>> AnyError('Invalid input', OptionErrorKind.PREDICATE_EXCEPTION).message
        '[PredicateException] Invalid input.'
        >>> e = AnyError('File not found', ResultErrorKind.UNEXPECTED, OSError('ENOENT'))
        >>> e.message
        '[Unexpected] File not found. Reason: OSError: ENOENT'
        >>> e.reason
        OSError('ENOENT')
    """

    def __init__(self, message: str, kind: K, reason: Any = _NO_REASON) -> None:
        self.kind = kind
        self.message = _format_message(message, kind, reason)
        self.reason: BaseException | None = None if reason is _NO_REASON else _as_exception(reason)
        self._parts = (message, reason)
        super().__init__(self.message)
        if self.reason is not None:
            self.__cause__ = self.reason

    def clone(self) -> Self:
        """Build a new error of the same type from the same message, kind and reason."""
        message, reason = self._parts
        return type(self)(message, self.kind, reason)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.message!r})'


class OptionErrorKind(StrEnum):
    """Error kinds raised by Option operations."""

    VALUE_ACCESSED_ON_NONE = 'ValueAccessedOnNone'
    EXPECT_CALLED_ON_NONE = 'ExpectCalledOnNone'
    UNWRAP_CALLED_ON_NONE = 'UnwrapCalledOnNone'
    PREDICATE_EXCEPTION = 'PredicateException'


class OptionError(AnyError[OptionErrorKind]):
    """Raised by Option accessors and by callbacks that have no safe fallback.

    Example:
        ```python
        try:
            none().unwrap()
        except OptionError as e:
            assert e.kind is OptionErrorKind.UNWRAP_CALLED_ON_NONE
        ```
    """


class ResultErrorKind(StrEnum):
    """Error kinds raised by Result operations or carried by ``Unexpected`` errors."""

    VALUE_ACCESSED_ON_ERR = 'ValueAccessedOnErr'
    ERROR_ACCESSED_ON_OK = 'ErrorAccessedOnOk'
    EXPECT_CALLED_ON_ERR = 'ExpectCalledOnErr'
    EXPECT_ERR_CALLED_ON_OK = 'ExpectErrCalledOnOk'
    UNWRAP_CALLED_ON_ERR = 'UnwrapCalledOnErr'
    UNWRAP_ERR_CALLED_ON_OK = 'UnwrapErrCalledOnOk'
    REJECTION_DURING_PENDING = 'RejectionDuringPending'
    PREDICATE_EXCEPTION = 'PredicateException'
    FROM_OPTIONAL_CONVERSION_EXCEPTION = 'FromOptionalConversionException'
    FLATTEN_ON_NON_RESULT = 'FlattenOnNonResult'
    UNEXPECTED = 'Unexpected'


class ResultError(AnyError[ResultErrorKind]):
    """Raised by Result accessors, and wrapped as ``Unexpected`` inside ``Err``.

    A ``ResultError`` passed to ``err()`` is classified as an unexpected
    error rather than an expected domain error.
    """


def is_result_error(x: object) -> TypeGuard[ResultError]:
    """Check if a value is a ``ResultError``."""
    return isinstance(x, ResultError)
