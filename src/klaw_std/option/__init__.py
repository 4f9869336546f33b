"""Option and PendingOption."""

from klaw_std.option.option import Nothing, NothingType, Option, Some, is_option, none, some
from klaw_std.option.pending import PendingOption, is_pending_option, pending_option

__all__ = [
    'Nothing',
    'NothingType',
    'Option',
    'PendingOption',
    'Some',
    'is_option',
    'is_pending_option',
    'none',
    'pending_option',
    'some',
]
