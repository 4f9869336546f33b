"""Tests for decorators: @safe and @safe_async."""

import anyio
from klaw_std import (
    Err,
    Ok,
    PendingResult,
    ResultError,
    ResultErrorKind,
    err,
    is_pending_result,
    ok,
    safe,
    safe_async,
    unexpected_error,
)


class TestSafeDecorator:
    """Tests for @safe decorator."""

    def test_safe_returns_ok_on_success(self):
        """@safe wraps successful return in Ok."""

        @safe
        def divide(a: int, b: int) -> float:
            return a / b

        assert divide(10, 2) == Ok(5.0)

    def test_safe_returns_err_on_exception(self):
        """@safe catches the exception as an expected error."""

        @safe
        def divide(a: int, b: int) -> float:
            return a / b

        result = divide(10, 0)
        assert isinstance(result, Err)
        assert isinstance(result.error.expected, ZeroDivisionError)

    def test_safe_with_mk_err(self):
        """@safe(mk_err=...) maps the exception to an expected error value."""

        @safe(mk_err=lambda e: f'not a number: {e.args[0]}')
        def parse(text: str) -> int:
            if not text.isdigit():
                raise ValueError(text)
            return int(text)

        assert parse('12') == Ok(12)
        assert parse('ab').unwrap_err().expected == 'not a number: ab'

    def test_safe_mk_err_can_mark_unexpected(self):
        @safe(mk_err=lambda e: unexpected_error('config is corrupt', ResultErrorKind.UNEXPECTED, e))
        def load() -> dict:
            raise KeyError('section')

        checked = load().unwrap_err()
        assert checked.is_unexpected()
        assert isinstance(checked.unexpected.reason, KeyError)

    def test_safe_raising_mk_err(self):
        def bad_mapper(e: Exception) -> str:
            raise RuntimeError('mapper broke')

        @safe(mk_err=bad_mapper)
        def fails() -> int:
            raise ValueError('original')

        checked = fails().unwrap_err()
        assert checked.unexpected.kind is ResultErrorKind.PREDICATE_EXCEPTION

    def test_safe_classifies_result_error_as_unexpected(self):
        @safe
        def fails() -> int:
            raise ResultError('broken invariant', ResultErrorKind.UNEXPECTED)

        assert fails().unwrap_err().is_unexpected()

    def test_safe_preserves_function_name(self):
        """@safe preserves function metadata."""

        @safe
        def my_function():
            pass

        assert my_function.__name__ == 'my_function'

    def test_safe_with_kwargs(self):
        """@safe works with keyword arguments."""

        @safe
        def greet(name: str, greeting: str = 'Hello') -> str:
            return f'{greeting}, {name}!'

        assert greet('World') == Ok('Hello, World!')
        assert greet(name='Python', greeting='Hi') == Ok('Hi, Python!')

    def test_safe_on_method(self):
        class Parser:
            def __init__(self, base: int) -> None:
                self.base = base

            @safe
            def parse(self, text: str) -> int:
                return int(text, self.base)

        assert Parser(16).parse('ff') == Ok(255)
        assert Parser(10).parse('ff').is_err()


class TestSafeAsyncDecorator:
    """Tests for @safe_async decorator."""

    async def test_safe_async_returns_pending_result(self):
        @safe_async
        async def fetch(x: int) -> int:
            return x * 2

        pending = fetch(5)
        assert is_pending_result(pending)
        assert isinstance(pending, PendingResult)
        assert await pending == Ok(10)

    async def test_safe_async_returns_err_on_exception(self):
        @safe_async
        async def fetch() -> int:
            raise ConnectionError('unreachable')

        result = await fetch()
        assert isinstance(result.unwrap_err().expected, ConnectionError)

    async def test_safe_async_with_mk_err(self):
        @safe_async(mk_err=lambda e: type(e).__name__)
        async def fetch() -> int:
            await anyio.sleep(0)
            raise TimeoutError('slow')

        assert (await fetch()).unwrap_err().expected == 'TimeoutError'

    async def test_safe_async_preserves_function_name(self):
        @safe_async
        async def my_coroutine():
            pass

        assert my_coroutine.__name__ == 'my_coroutine'

    async def test_safe_async_chains_combinators(self):
        @safe_async
        async def load(text: str) -> str:
            return text

        assert await load('hello').map(len).unwrap_or(0) == 5
        assert await load('hello').and_then(lambda s: err('too short') if len(s) < 10 else ok(s)).unwrap_or('') == ''

    async def test_safe_async_on_method(self):
        class Client:
            def __init__(self, prefix: str) -> None:
                self.prefix = prefix

            @safe_async
            async def get(self, path: str) -> str:
                return self.prefix + path

        assert await Client('https://x').get('/a') == Ok('https://x/a')
