"""Package configuration: StdConfig and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_std._logging import configure_logging

__all__ = [
    'StdConfig',
    'get_config',
    'init',
]

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off'})


@dataclass(frozen=True)
class StdConfig:
    """Configuration for klaw-std.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
        json_logs: Render logs as JSON (True) or for the console (False).
        log_absorbed: Emit a debug event whenever a silent-tier method or a
            pending wrapper discards a callback exception.
    """

    log_level: str | None = None
    json_logs: bool = True
    log_absorbed: bool = False


# Set by init(); get_config() falls back to environment-derived defaults.
_config: StdConfig | None = None


def _detect_bool(name: str, default: bool) -> bool:  # noqa: FBT001
    raw = os.environ.get(name, '').strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    logging.warning("Unknown %s value '%s', defaulting to %s", name, raw, default)
    return default


def _detect_log_level() -> str | None:
    raw = os.environ.get('KLAW_STD_LOG_LEVEL', '').strip().upper()
    if not raw:
        return None
    if raw not in logging.getLevelNamesMapping():
        logging.warning("Unknown KLAW_STD_LOG_LEVEL value '%s', ignoring", raw)
        return None
    return raw


def _from_environment() -> StdConfig:
    return StdConfig(
        log_level=_detect_log_level(),
        json_logs=_detect_bool('KLAW_STD_JSON_LOGS', default=True),
        log_absorbed=_detect_bool('KLAW_STD_LOG_ABSORBED', default=False),
    )


def init(
    log_level: str | None = None,
    json_logs: bool | None = None,  # noqa: FBT001
    log_absorbed: bool | None = None,  # noqa: FBT001
) -> StdConfig:
    """Initialize klaw-std with the given configuration.

    Arguments left as None are taken from the environment
    (``KLAW_STD_LOG_LEVEL``, ``KLAW_STD_JSON_LOGS``, ``KLAW_STD_LOG_ABSORBED``).

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave logging alone.
        json_logs: Render logs as JSON.
        log_absorbed: Log callback exceptions discarded by silent-tier methods.

    Returns:
        The StdConfig that was set.

    Example:
        ```python
        from klaw_std import init

        init(log_level='DEBUG', json_logs=False, log_absorbed=True)
        ```
    """
    global _config  # noqa: PLW0603

    detected = _from_environment()
    _config = StdConfig(
        log_level=log_level if log_level is not None else detected.log_level,
        json_logs=json_logs if json_logs is not None else detected.json_logs,
        log_absorbed=log_absorbed if log_absorbed is not None else detected.log_absorbed,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level, json_output=_config.json_logs)

    return _config


def get_config() -> StdConfig:
    """Get the current configuration.

    Returns the config set by ``init()``, or the environment-derived defaults
    if ``init()`` has not been called.
    """
    if _config is None:
        return _from_environment()
    return _config


def reset() -> None:
    """Forget the config set by ``init()``. Used by tests."""
    global _config  # noqa: PLW0603
    _config = None
