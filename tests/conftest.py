"""Shared fixtures for klaw-std tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from klaw_std import _config
from klaw_std._logging import clear_log_hooks

if TYPE_CHECKING:
    from collections.abc import Generator

ENV_VARS = ('KLAW_STD_LOG_LEVEL', 'KLAW_STD_JSON_LOGS', 'KLAW_STD_LOG_ABSORBED')


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Start every test from an uninitialized config and a clean environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    _config.reset()
    clear_log_hooks()
    yield
    _config.reset()
    clear_log_hooks()
