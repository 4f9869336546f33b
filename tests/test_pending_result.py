"""Tests for PendingResult."""

import anyio
import pytest
from klaw_std import (
    Expected,
    PendingResult,
    ResultError,
    ResultErrorKind,
    err,
    is_pending_option,
    is_pending_result,
    none,
    ok,
    pending_err,
    pending_ok,
    pending_result,
    some,
    unexpected_error,
)

from tests.strategies import Boom, aboom, boom, resolved


def _unexpected_kind(result):
    return result.unwrap_err().unexpected.kind


class TestPendingResultCreation:
    """Tests for pending_result(), pending_ok() and pending_err()."""

    async def test_from_result(self):
        assert await pending_result(ok(1)) == ok(1)
        assert await pending_result(err('e')) == err('e')

    async def test_from_coroutine(self):
        assert await pending_result(resolved(ok(2))) == ok(2)

    async def test_from_pending_result(self):
        source = pending_result(ok(3))
        copy = pending_result(source)
        assert copy is not source
        assert await copy == ok(3)

    async def test_from_factories(self):
        async def factory():
            return ok(5)

        assert await pending_result(lambda: ok(4)) == ok(4)
        assert await pending_result(factory) == ok(5)

    async def test_raising_factory_is_rejection(self):
        result = await pending_result(boom)
        assert _unexpected_kind(result) is ResultErrorKind.REJECTION_DURING_PENDING
        assert isinstance(result.unwrap_err().unexpected.reason, Boom)

    async def test_rejected_source_is_rejection(self):
        result = await pending_result(aboom())
        assert _unexpected_kind(result) is ResultErrorKind.REJECTION_DURING_PENDING
        assert isinstance(result.unwrap_err().unexpected.reason, Boom)

    async def test_non_result_source_is_rejection(self):
        result = await pending_result(resolved(42))
        assert _unexpected_kind(result) is ResultErrorKind.REJECTION_DURING_PENDING
        assert isinstance(result.unwrap_err().unexpected.reason, TypeError)

    async def test_pending_ok(self):
        assert await pending_ok(1) == ok(1)
        assert await pending_ok(resolved(2)) == ok(2)
        assert _unexpected_kind(await pending_ok(aboom())) is ResultErrorKind.REJECTION_DURING_PENDING

    async def test_pending_err(self):
        assert await pending_err('e') == err('e')
        assert await pending_err(resolved('e')) == err('e')
        result = await pending_err(ResultError('boom', ResultErrorKind.UNEXPECTED))
        assert result.unwrap_err().is_unexpected()

    async def test_cancellation_propagates(self):
        release = anyio.Event()

        async def slow():
            await release.wait()
            return ok(1)

        pending = pending_result(slow())
        with anyio.move_on_after(0.01) as scope:
            await pending
        assert scope.cancelled_caught

        release.set()
        assert await pending == ok(1)

    def test_is_pending_result(self):
        assert is_pending_result(pending_result(ok(1)))
        assert not is_pending_result(ok(1))
        assert isinstance(ok(1).to_pending(), PendingResult)

    def test_str(self):
        assert str(pending_result(ok(1))) == 'PendingResult { ... }'


class TestPendingResultMemo:
    """The source is awaited at most once."""

    async def test_source_awaited_once(self):
        calls: list[int] = []

        async def source():
            calls.append(1)
            return ok(len(calls))

        pending = pending_result(source())
        assert await pending == ok(1)
        assert await pending == ok(1)
        assert calls == [1]

    async def test_concurrent_awaits_share_result(self):
        calls: list[int] = []
        results = []

        async def source():
            calls.append(1)
            await anyio.sleep(0.01)
            return ok('shared')

        pending = pending_result(source())

        async def waiter():
            results.append(await pending)

        async with anyio.create_task_group() as tg:
            for _ in range(5):
                tg.start_soon(waiter)

        assert calls == [1]
        assert results == [ok('shared')] * 5

    async def test_chain_runs_without_await(self):
        seen: list[int] = []
        pending_ok(1).map(lambda x: x + 1).inspect(seen.append)
        for _ in range(10):
            await anyio.sleep(0)
        assert seen == [2]


class TestPendingResultCombinators:
    """Tests for combinators returning a new PendingResult."""

    async def test_map(self):
        async def double(x):
            return x * 2

        assert await pending_ok(2).map(lambda x: x + 1) == ok(3)
        assert await pending_ok(2).map(double) == ok(4)
        assert await pending_err('e').map(double) == err('e')

    async def test_map_raising_callback(self):
        assert _unexpected_kind(await pending_ok(1).map(boom)) is ResultErrorKind.PREDICATE_EXCEPTION

    async def test_map_rejected_callback(self):
        assert _unexpected_kind(await pending_ok(1).map(aboom)) is ResultErrorKind.REJECTION_DURING_PENDING

    async def test_map_err(self):
        async def upper(e):
            return e.upper()

        assert await pending_err('e').map_err(upper) == err('E')
        assert await pending_ok(1).map_err(upper) == ok(1)
        assert _unexpected_kind(await pending_err('e').map_err(boom)) is ResultErrorKind.PREDICATE_EXCEPTION

    async def test_map_err_skips_unexpected(self):
        checked = unexpected_error('boom')
        result = await pending_err(checked).map_err(boom)
        assert result.unwrap_err() is checked

    async def test_and_then(self):
        async def parse(x):
            return ok(int(x)) if x.isdigit() else err('not a number')

        assert await pending_ok('12').and_then(parse) == ok(12)
        assert await pending_ok('ab').and_then(parse) == err('not a number')
        assert await pending_err('e').and_then(parse) == err('e')
        assert _unexpected_kind(await pending_ok('1').and_then(boom)) is ResultErrorKind.PREDICATE_EXCEPTION

    async def test_and_or(self):
        assert await pending_ok(1).and_(resolved(ok(2))) == ok(2)
        assert await pending_err('e').and_(ok(2)) == err('e')
        assert await pending_err('e').or_(resolved(ok(2))) == ok(2)
        assert await pending_ok(1).or_(ok(2)) == ok(1)

    async def test_and_with_rejected_operand(self):
        result = await pending_ok(1).and_(aboom())
        assert _unexpected_kind(result) is ResultErrorKind.REJECTION_DURING_PENDING

    async def test_or_else(self):
        assert await pending_err('e').or_else(lambda e: resolved(ok(len(e.expected)))) == ok(1)
        assert await pending_ok(1).or_else(boom) == ok(1)
        assert _unexpected_kind(await pending_err('e').or_else(boom)) is ResultErrorKind.PREDICATE_EXCEPTION

    async def test_map_all(self):
        assert await pending_err('e').map_all(lambda r: ok(0)) == ok(0)
        assert _unexpected_kind(await pending_ok(1).map_all(boom)) is ResultErrorKind.PREDICATE_EXCEPTION

    async def test_inspect(self):
        seen: list[object] = []

        async def record(x):
            seen.append(x)

        assert await pending_ok(1).inspect(record) == ok(1)
        assert await pending_err('e').inspect_err(record) == err('e')
        assert seen == [1, Expected('e')]
        assert await pending_ok(1).inspect(aboom) == ok(1)
        assert await pending_err('e').inspect_err(boom) == err('e')

    async def test_flatten(self):
        assert await pending_ok(ok(1)).flatten() == ok(1)
        assert await pending_ok(resolved(err('e'))).flatten() == err('e')
        assert await pending_ok(pending_ok(2)).flatten() == ok(2)
        assert await pending_err('e').flatten() == err('e')
        assert _unexpected_kind(await pending_ok(1).flatten()) is ResultErrorKind.FLATTEN_ON_NON_RESULT

    async def test_zip(self):
        assert await pending_ok(1).zip(resolved(ok('a'))) == ok((1, 'a'))
        assert await pending_err('left').zip(err('right')) == err('left')
        assert await pending_ok(1).zip(err('right')) == err('right')

    async def test_zip_with_rejected_operand(self):
        result = await pending_ok(1).zip(aboom())
        assert _unexpected_kind(result) is ResultErrorKind.REJECTION_DURING_PENDING
        reason = result.unwrap_err().unexpected.reason
        assert isinstance(reason, Boom)
        assert str(reason) == 'boom'

    async def test_zip_with_rejected_self(self):
        result = await pending_result(aboom()).zip(ok(1))
        assert isinstance(result.unwrap_err().unexpected.reason, Boom)

    async def test_clone_deep_copies(self):
        data = [1]
        cloned = await pending_ok(data).clone()
        assert cloned == ok([1])
        assert cloned.value is not data

    async def test_chain_never_raises(self):
        result = await pending_ok(10).map(lambda x: x * 2).and_then(aboom).map(lambda x: x + 1)
        assert _unexpected_kind(result) is ResultErrorKind.REJECTION_DURING_PENDING


class TestPendingResultTerminals:
    """Tests for terminal coroutines and conversions."""

    async def test_match(self):
        async def on_ok(x):
            return f'ok {x}'

        assert await pending_ok(1).match(on_ok, lambda e: 'err') == 'ok 1'
        assert await pending_err('e').match(on_ok, lambda e: f'err {e.expected}') == 'err e'

    async def test_match_raising_branch(self):
        with pytest.raises(ResultError) as exc_info:
            await pending_ok(1).match(aboom, lambda e: 'err')
        assert exc_info.value.kind is ResultErrorKind.PREDICATE_EXCEPTION

    async def test_check_and_try(self):
        assert await pending_ok(1).check() == (True, 1)
        assert await pending_err('e').check() == (False, Expected('e'))
        assert await pending_ok(1).try_() == (True, None, 1)
        assert await pending_err('e').try_() == (False, Expected('e'), None)

    async def test_unwrap_or(self):
        assert await pending_ok(1).unwrap_or(0) == 1
        assert await pending_err('e').unwrap_or(0) == 0

    async def test_ok_and_err_return_pending_options(self):
        assert is_pending_option(pending_ok(1).ok())
        assert await pending_ok(1).ok() == some(1)
        assert await pending_err('e').ok() == none()
        assert await pending_err('e').err() == some('e')
        assert await pending_ok(1).err() == none()

    async def test_async_iteration(self):
        assert [x async for x in pending_ok(1)] == [1]
        assert [x async for x in pending_err('e')] == []
