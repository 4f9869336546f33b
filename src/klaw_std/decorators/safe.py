"""@safe and @safe_async: turn exception-raising functions into Result producers.

Both decorators route every call through the runners in ``klaw_std.result.run``,
so a decorated function never raises an ``Exception``:

- ``@safe`` returns ``run(...)``: ``Ok(value)`` or ``Err(mk_err(exc))``;
- ``@safe_async`` returns ``run_async(...)``: a ``PendingResult`` that can be
  awaited directly or chained with combinators.

``mk_err`` decides how a raised exception is classified. The default keeps
the exception itself, which ``err()`` classifies as expected (or as
unexpected for a ``ResultError``). Returning ``unexpected_error(...)`` from
``mk_err`` marks the failure as internal. A raising ``mk_err`` produces an
unexpected Err of kind PREDICATE_EXCEPTION.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar, overload

import wrapt

from klaw_std.result.pending import PendingResult
from klaw_std.result.result import Result
from klaw_std.result.run import run, run_async

__all__ = ['safe', 'safe_async']

P = ParamSpec('P')
T = TypeVar('T')
E = TypeVar('E')


def _keep_exception(exc: Exception) -> Exception:
    return exc


@overload
def safe(func: Callable[P, T]) -> Callable[P, Result[T, Exception]]: ...


@overload
def safe(*, mk_err: Callable[[Exception], E]) -> Callable[[Callable[P, T]], Callable[P, Result[T, E]]]: ...


def safe(
    func: Callable[P, T] | None = None,
    *,
    mk_err: Callable[[Exception], Any] | None = None,
) -> Any:
    """Capture a function's outcome as a ``Result``.

    Can be used with or without arguments:
        @safe
        def parse(text: str) -> int: ...

        @safe(mk_err=lambda e: f'bad input: {e}')
        def parse(text: str) -> int: ...

    Args:
        func: The function to wrap (when used without parentheses).
        mk_err: Maps a raised exception to the error value. Defaults to the
            exception itself.

    Returns:
        A wrapped function returning ``Result[T, E]`` instead of ``T``.

    Example:
        ```python
        @safe
        def divide(a: int, b: int) -> float:
            return a / b

        divide(10, 2)  # Ok { 5.0 }
        divide(10, 0)  # Err { ZeroDivisionError: division by zero }
        ```
    """
    to_err = mk_err if mk_err is not None else _keep_exception

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        return run(lambda: wrapped(*args, **kwargs), to_err)

    if func is not None:
        return wrapper(func)
    return wrapper


@overload
def safe_async(func: Callable[P, Awaitable[T]]) -> Callable[P, PendingResult[T, Exception]]: ...


@overload
def safe_async(
    *, mk_err: Callable[[Exception], E]
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, PendingResult[T, E]]]: ...


def safe_async(
    func: Callable[P, Awaitable[T]] | None = None,
    *,
    mk_err: Callable[[Exception], Any] | None = None,
) -> Any:
    """Capture a coroutine function's outcome as a ``PendingResult``.

    Calling the decorated function returns a ``PendingResult`` right away.
    The coroutine runs inside it, so combinators can be chained before the
    single ``await``.

    Example:
        ```python
        @safe_async
        async def fetch(url: str) -> str:
            return await http_get(url)

        length = await fetch(url).map(len).unwrap_or(0)
        ```
    """
    to_err = mk_err if mk_err is not None else _keep_exception

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., Awaitable[T]],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> PendingResult[T, Any]:
        return run_async(lambda: wrapped(*args, **kwargs), to_err)

    if func is not None:
        return wrapper(func)
    return wrapper
