"""klaw-std: Option and Result types with async counterparts.

Example:
    ```python
    from klaw_std import err, none, ok, pending_result, some

    some(2).and_(some(3))                    # Some { 3 }
    none().map(lambda x: x + 1)              # None
    ok(1).and_then(lambda x: ok(x + 1))      # Ok { 2 }
    err('e').unwrap_or(0)                    # 0

    async def load() -> Result[int, str]: ...

    await pending_result(load()).map(str)    # never raises
    ```
"""

from klaw_std._config import StdConfig, get_config, init
from klaw_std._logging import configure_logging, get_logger
from klaw_std.decorators import safe, safe_async
from klaw_std.errors import (
    AnyError,
    OptionError,
    OptionErrorKind,
    ResultError,
    ResultErrorKind,
    is_result_error,
)
from klaw_std.option import (
    Nothing,
    NothingType,
    Option,
    PendingOption,
    Some,
    is_option,
    is_pending_option,
    none,
    pending_option,
    some,
)
from klaw_std.result import (
    CheckedError,
    Err,
    Expected,
    Ok,
    PendingResult,
    Result,
    Unexpected,
    err,
    expected_error,
    is_checked_error,
    is_pending_result,
    is_result,
    ok,
    pending_err,
    pending_ok,
    pending_result,
    run,
    run_async,
    run_pending_result,
    run_result,
    unexpected_error,
)

__all__ = [
    'AnyError',
    'CheckedError',
    'Err',
    'Expected',
    'Nothing',
    'NothingType',
    'Ok',
    'Option',
    'OptionError',
    'OptionErrorKind',
    'PendingOption',
    'PendingResult',
    'Result',
    'ResultError',
    'ResultErrorKind',
    'Some',
    'StdConfig',
    'Unexpected',
    'configure_logging',
    'err',
    'expected_error',
    'get_config',
    'get_logger',
    'init',
    'is_checked_error',
    'is_option',
    'is_pending_option',
    'is_pending_result',
    'is_result',
    'is_result_error',
    'none',
    'ok',
    'pending_err',
    'pending_ok',
    'pending_option',
    'pending_result',
    'run',
    'run_async',
    'run_pending_result',
    'run_result',
    'safe',
    'safe_async',
    'some',
    'unexpected_error',
]

__version__ = '0.1.0'
