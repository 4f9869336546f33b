"""Tests for internal helpers: stringify, awaitable normalization and the once-cell."""

import anyio
import pytest
from klaw_std._internal import Once, is_awaitable, resolve, stringify

from tests.strategies import resolved


class TestStringify:
    """Tests for stringify()."""

    def test_scalars(self):
        assert stringify(None) == 'None'
        assert stringify(True) == 'True'
        assert stringify(42) == '42'
        assert stringify(1.5) == '1.5'

    def test_strings(self):
        assert stringify('hello') == 'hello'
        assert stringify('hello', quote_string=True) == "'hello'"

    def test_exception(self):
        assert stringify(ValueError('bad')) == 'ValueError: bad'

    def test_functions(self):
        def named():
            pass

        assert stringify(named) == '[Function: named]'
        assert stringify(lambda: None) == '[Function: anonymous]'
        assert stringify(len) == '[Function: len]'

    def test_containers_are_json(self):
        assert stringify({'a': [1, 2]}) == '{"a":[1,2]}'
        assert stringify((1, 'a')) == '[1,"a"]'

    def test_custom_str(self):
        class Point:
            def __str__(self) -> str:
                return 'Point(1, 2)'

        assert stringify(Point()) == 'Point(1, 2)'

    def test_unencodable_falls_back_to_repr(self):
        class Opaque:
            def __repr__(self) -> str:
                return '<opaque>'

        assert stringify(Opaque()) == '<opaque>'

    async def test_awaitable(self):
        coro = resolved(1)
        assert stringify(coro) == 'awaitable'
        await coro


class TestAwaitable:
    """Tests for is_awaitable() and resolve()."""

    async def test_is_awaitable(self):
        coro = resolved(1)
        assert is_awaitable(coro)
        assert not is_awaitable(1)
        await coro

    async def test_resolve(self):
        assert await resolve(1) == 1
        assert await resolve(resolved(2)) == 2


class TestOnce:
    """Tests for the Once cell."""

    async def test_runs_initializer_once(self):
        calls: list[int] = []

        async def init():
            calls.append(1)
            return 42

        cell = Once(init)
        assert not cell.is_set()
        assert cell.peek() is None
        assert await cell.get() == 42
        assert await cell.get() == 42
        assert calls == [1]
        assert cell.is_set()
        assert cell.peek() == 42

    async def test_initializer_not_called_before_get(self):
        calls: list[int] = []

        async def init():
            calls.append(1)
            return 1

        Once(init)
        assert calls == []

    async def test_resolved(self):
        cell = Once.resolved('ready')
        assert cell.is_set()
        assert await cell.get() == 'ready'

    async def test_concurrent_get(self):
        calls: list[int] = []
        values: list[int] = []

        async def init():
            calls.append(1)
            await anyio.sleep(0.01)
            return 7

        cell = Once(init)

        async def getter():
            values.append(await cell.get())

        async with anyio.create_task_group() as tg:
            for _ in range(4):
                tg.start_soon(getter)

        assert calls == [1]
        assert values == [7, 7, 7, 7]

    async def test_failed_initializer_can_retry(self):
        attempts: list[int] = []

        async def init():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError('first attempt')
            return 'ok'

        cell = Once(init)
        with pytest.raises(RuntimeError):
            await cell.get()
        assert not cell.is_set()
        assert await cell.get() == 'ok'

    async def test_empty_cell_raises(self):
        with pytest.raises(RuntimeError):
            await Once().get()

    async def test_start_runs_initializer_in_background(self):
        calls: list[int] = []

        async def init():
            calls.append(1)
            return 'early'

        cell = Once(init)
        assert cell.start()
        assert not cell.start()
        for _ in range(5):
            await anyio.sleep(0)
        assert calls == [1]
        assert cell.peek() == 'early'
        assert await cell.get() == 'early'
        assert calls == [1]

    def test_start_without_running_loop_stays_lazy(self):
        async def init():
            return 1

        cell = Once(init)
        assert not cell.start()
        assert not cell.is_set()

    async def test_start_on_resolved_cell_is_noop(self):
        assert not Once.resolved(1).start()

    async def test_failed_background_start_retries_on_get(self):
        attempts: list[int] = []

        async def init():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError('first attempt')
            return 'ok'

        cell = Once(init)
        cell.start()
        for _ in range(5):
            await anyio.sleep(0)
        assert attempts == [1]
        assert not cell.is_set()
        assert await cell.get() == 'ok'
