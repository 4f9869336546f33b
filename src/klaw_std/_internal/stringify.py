"""Human-readable rendering of arbitrary values for debug strings and error messages."""

from __future__ import annotations

import inspect
from typing import Any

import msgspec

__all__ = ['stringify']

_JSON_ENCODER = msgspec.json.Encoder()


def stringify(value: Any, quote_string: bool = False) -> str:  # noqa: FBT001, FBT002
    """Convert a value to a short diagnostic string.

    - Awaitables render as ``'awaitable'`` since their value is not known yet.
    - Strings are returned as-is, or wrapped in single quotes if ``quote_string``.
    - Exceptions render as ``'<TypeName>: <message>'``.
    - Functions render as ``'[Function: <name>]'`` (``anonymous`` for lambdas).
    - Objects with their own ``__str__`` use it; plain containers are JSON
      encoded with msgspec, falling back to ``repr()`` when that fails.

    Args:
        value: The value to render.
        quote_string: Whether to quote string values.

    Returns:
        The rendered string.

    Examples:
        >>> stringify(42)
        '42'
        >>> stringify('hello', quote_string=True)
        "'hello'"
        >>> stringify({'a': 1})
        '{"a":1}'
    """
    if inspect.isawaitable(value):
        return 'awaitable'

    if value is None:
        return 'None'

    if isinstance(value, str):
        return f"'{value}'" if quote_string else value

    if isinstance(value, bool | int | float):
        return str(value)

    if isinstance(value, BaseException):
        return f'{type(value).__name__}: {value}'

    if inspect.isfunction(value) or inspect.isbuiltin(value) or inspect.ismethod(value):
        name = value.__name__
        return f'[Function: {"anonymous" if name == "<lambda>" else name}]'

    if type(value).__str__ is not object.__str__:
        return str(value)

    try:
        return _JSON_ENCODER.encode(value).decode()
    except (TypeError, ValueError, RecursionError):
        return repr(value)
