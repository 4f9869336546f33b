"""Result, CheckedError, PendingResult and runners."""

from klaw_std.result.checked import (
    CheckedError,
    Expected,
    Unexpected,
    checked_error,
    expected_error,
    is_checked_error,
    unexpected_error,
)
from klaw_std.result.pending import (
    PendingResult,
    is_pending_result,
    pending_err,
    pending_ok,
    pending_result,
)
from klaw_std.result.result import Err, Ok, Result, err, is_result, ok
from klaw_std.result.run import run, run_async, run_pending_result, run_result

__all__ = [
    'CheckedError',
    'Err',
    'Expected',
    'Ok',
    'PendingResult',
    'Result',
    'Unexpected',
    'checked_error',
    'err',
    'expected_error',
    'is_checked_error',
    'is_pending_result',
    'is_result',
    'ok',
    'pending_err',
    'pending_ok',
    'pending_result',
    'run',
    'run_async',
    'run_pending_result',
    'run_result',
]
