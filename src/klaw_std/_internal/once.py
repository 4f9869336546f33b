"""Async once-cell backing the pending containers.

A pending container owns exactly one ``Once`` and calls ``start()`` on it at
construction. Under a running asyncio loop the initializer is scheduled as a
background task right away; otherwise (no loop, or a non-asyncio backend) it
runs on the first ``get()``. Either way it runs at most once, and every later
``get()`` (concurrent or not) observes the stored value. The lock is an
``anyio.Lock``, so the cell works under any event loop anyio supports.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

import anyio

__all__ = ['Once']

T = TypeVar('T')

# Strong references to scheduled initializers until they finish.
_background_tasks: set[asyncio.Task[Any]] = set()


class Once(Generic[T]):
    """A value computed by an async initializer at most once.

    The initializer is a zero-argument callable returning an awaitable. It is
    invoked by ``start()`` (when an asyncio loop is running) or by the first
    call to ``get()``, whichever comes first.

    Examples:
        >>> async def compute() -> int:
        ...     return 42
        >>> cell = Once(compute)
        >>> cell.is_set()
        False
        >>> await cell.get()
        42
        >>> await cell.get()  # initializer is not called again
        42
    """

    __slots__ = ('_init', '_is_set', '_lock', '_started', '_value')

    def __init__(self, init: Callable[[], Awaitable[T]] | None = None) -> None:
        self._lock = anyio.Lock()
        self._init = init
        self._value: T | None = None
        self._is_set = False
        self._started = False

    @classmethod
    def resolved(cls, value: T) -> Once[T]:
        """Create a cell that already holds ``value``."""
        cell: Once[T] = cls()
        cell._value = value
        cell._is_set = True
        return cell

    def is_set(self) -> bool:
        """Check if the value has been computed."""
        return self._is_set

    def peek(self) -> T | None:
        """Get the value if computed, otherwise None (non-blocking)."""
        return self._value if self._is_set else None

    def start(self) -> bool:
        """Begin running the initializer in the background.

        Only possible from inside a running asyncio loop. Without one the cell
        stays lazy and the initializer runs on the first ``get()``.

        Returns:
            True if a background task was scheduled by this call.
        """
        if self._is_set or self._started or self._init is None:
            return False
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False

        self._started = True
        task = loop.create_task(self._prime())
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        return True

    async def _prime(self) -> None:
        try:
            await self.get()
        except Exception:  # noqa: BLE001
            # The cell stays unset; the next get() reruns the initializer and raises to its caller.
            return

    async def get(self) -> T:
        """Get the value, running the initializer on first use.

        Concurrent callers wait on the lock; only one of them runs the
        initializer.
        """
        if self._is_set:
            return self._value  # type: ignore[return-value]

        async with self._lock:
            if not self._is_set:
                init = self._init
                if init is None:
                    msg = 'Once cell has neither a value nor an initializer'
                    raise RuntimeError(msg)
                self._value = await init()
                self._is_set = True
                self._init = None
            return self._value  # type: ignore[return-value]
