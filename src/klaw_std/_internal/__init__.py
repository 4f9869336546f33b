"""Internal helpers shared by the containers. Not part of the public API."""

from klaw_std._internal.awaitable import MaybeAwaitable, is_awaitable, resolve
from klaw_std._internal.once import Once
from klaw_std._internal.stringify import stringify

__all__ = ['MaybeAwaitable', 'Once', 'is_awaitable', 'resolve', 'stringify']
