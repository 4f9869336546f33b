"""Runners that capture exception-raising code as Results."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from klaw_std._internal.awaitable import MaybeAwaitable, resolve
from klaw_std.errors import ResultErrorKind
from klaw_std.result.checked import unexpected_error
from klaw_std.result.pending import PendingResult, pending_result
from klaw_std.result.result import Err, Result, err, ok

__all__ = ['run', 'run_async', 'run_pending_result', 'run_result']

T = TypeVar('T')
E = TypeVar('E')


def _map_exception(mk_err: Callable[[Exception], E], exc: Exception) -> Err[Any, E]:
    try:
        return err(mk_err(exc))
    except Exception as e:  # noqa: BLE001
        msg = 'run callback `mk_err` raised an exception'
        return Err(unexpected_error(msg, ResultErrorKind.PREDICATE_EXCEPTION, e))


def run(action: Callable[[], T], mk_err: Callable[[Exception], E]) -> Result[T, E]:
    """Call ``action`` and capture its outcome.

    Args:
        action: Zero-argument function that may raise.
        mk_err: Maps a raised exception to an expected error value.

    Returns:
        ``Ok(action())``, or ``Err(mk_err(exc))`` if ``action`` raised. If
        ``mk_err`` itself raises, an unexpected Err (PREDICATE_EXCEPTION).

    Example:
        ```python
        result = run(lambda: int(text), lambda e: f'not a number: {text}')
        ```
    """
    try:
        return ok(action())
    except Exception as e:  # noqa: BLE001
        return _map_exception(mk_err, e)


def run_async(action: Callable[[], Awaitable[T]], mk_err: Callable[[Exception], E]) -> PendingResult[T, E]:
    """Async version of ``run``: await ``action()`` and capture its outcome as a PendingResult."""

    async def _run() -> Result[T, E]:
        try:
            value = await action()
        except Exception as e:  # noqa: BLE001
            return _map_exception(mk_err, e)
        return ok(value)

    return pending_result(_run)


def run_result(get_result: Callable[[], Result[T, E]]) -> Result[T, E]:
    """Call a Result-returning function, turning a raised exception into an unexpected Err.

    The unexpected error has kind UNEXPECTED and the exception as reason.
    """
    try:
        return get_result()
    except Exception as e:  # noqa: BLE001
        return Err(unexpected_error('run_result callback raised an exception', ResultErrorKind.UNEXPECTED, e))


def run_pending_result(get_result: Callable[[], MaybeAwaitable[Result[T, E]]]) -> PendingResult[T, E]:
    """Like ``run_result``, for a function returning a Result or an awaitable of one."""

    async def _run() -> Result[T, E]:
        try:
            return await resolve(get_result())
        except Exception as e:  # noqa: BLE001
            msg = 'run_pending_result callback raised an exception'
            return Err(unexpected_error(msg, ResultErrorKind.UNEXPECTED, e))

    return pending_result(_run)
