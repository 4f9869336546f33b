"""Decorators for capturing exceptions as Results."""

from klaw_std.decorators.safe import safe, safe_async

__all__ = ['safe', 'safe_async']
