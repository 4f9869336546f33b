"""Tests for logging configuration, hooks and absorbed-exception events."""

from __future__ import annotations

from typing import Any

from klaw_std import err, init, none, ok, pending_option, some
from klaw_std._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    log_absorbed,
    remove_log_hook,
)

from tests.strategies import Boom, aboom, boom


def _absorbed(received: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [e for e in received if e.get('event') == 'callback_exception_absorbed']


class TestLogHooks:
    """Tests for logging hooks functionality."""

    def test_hook_receives_log_events(self) -> None:
        """Registered hooks receive log entry dicts."""
        received: list[dict[str, Any]] = []

        configure_logging(level='DEBUG', json_output=True)
        add_log_hook(received.append)

        get_logger('test').info('Test message', extra_field='extra_value')

        test_entries = [e for e in received if e.get('event') == 'Test message']
        assert len(test_entries) == 1
        assert test_entries[0]['extra_field'] == 'extra_value'

    def test_remove_and_clear_hooks(self) -> None:
        calls: list[str] = []

        def hook1(event_dict: dict[str, Any]) -> None:
            calls.append('hook1')

        def hook2(event_dict: dict[str, Any]) -> None:
            calls.append('hook2')

        configure_logging(level='DEBUG', json_output=False)
        add_log_hook(hook1)
        add_log_hook(hook2)

        logger = get_logger('test')
        logger.info('First')
        assert calls == ['hook1', 'hook2']

        remove_log_hook(hook1)
        logger.info('Second')
        assert calls == ['hook1', 'hook2', 'hook2']

        clear_log_hooks()
        logger.info('Third')
        assert len(calls) == 3

    def test_hook_exception_does_not_break_logging(self) -> None:
        """Exceptions in hooks don't prevent logging or other hooks."""
        calls: list[str] = []

        def bad_hook(event_dict: dict[str, Any]) -> None:
            raise RuntimeError('Hook failed')

        configure_logging(level='DEBUG', json_output=True)
        add_log_hook(bad_hook)
        add_log_hook(lambda event_dict: calls.append('good'))

        get_logger('test').info('Test')

        assert calls == ['good']


class TestAbsorbedExceptions:
    """Silent-tier methods report discarded callback exceptions when enabled."""

    def test_disabled_by_default(self) -> None:
        received: list[dict[str, Any]] = []
        configure_logging(level='DEBUG')
        add_log_hook(received.append)

        assert some(1).map(boom) == none()

        assert _absorbed(received) == []

    def test_option_transform(self) -> None:
        received: list[dict[str, Any]] = []
        init(log_level='DEBUG', log_absorbed=True)
        add_log_hook(received.append)

        assert some(1).map(boom) == none()

        events = _absorbed(received)
        assert len(events) == 1
        assert events[0]['operation'] == 'Option.map'
        assert events[0]['exc_type'] == 'Boom'
        assert events[0]['exc_message'] == 'boom'

    def test_result_observer(self) -> None:
        received: list[dict[str, Any]] = []
        init(log_level='DEBUG', log_absorbed=True)
        add_log_hook(received.append)

        assert ok(1).inspect(boom) == ok(1)
        assert err('e').inspect_err(boom) == err('e')

        assert [e['operation'] for e in _absorbed(received)] == ['Ok.inspect', 'Err.inspect_err']

    def test_result_callback_errors_are_not_absorbed(self) -> None:
        """A Result keeps the exception in the Err, so nothing is logged."""
        received: list[dict[str, Any]] = []
        init(log_level='DEBUG', log_absorbed=True)
        add_log_hook(received.append)

        assert ok(1).map(boom).is_err()

        assert _absorbed(received) == []

    async def test_pending_option_rejection(self) -> None:
        received: list[dict[str, Any]] = []
        init(log_level='DEBUG', log_absorbed=True)
        add_log_hook(received.append)

        assert await pending_option(aboom()) == none()

        events = _absorbed(received)
        assert events[0]['operation'] == 'PendingOption'
        assert events[0]['exc_type'] == 'Boom'

    def test_log_absorbed_direct(self) -> None:
        received: list[dict[str, Any]] = []
        init(log_level='DEBUG', log_absorbed=True)
        add_log_hook(received.append)

        log_absorbed('custom.operation', Boom('direct'))

        assert _absorbed(received)[0]['exc_message'] == 'direct'
