"""Hypothesis strategies and failing callbacks for klaw-std tests."""

from typing import TypeVar

from hypothesis import strategies as st
from klaw_std import err, none, ok, some

T = TypeVar('T')

# -----------------------------------------------------------------------------
# Basic value strategies
# -----------------------------------------------------------------------------

integers = st.integers()
texts = st.text(min_size=0, max_size=50)
values = st.one_of(st.none(), st.booleans(), integers, texts)

# -----------------------------------------------------------------------------
# Container strategies
# -----------------------------------------------------------------------------

somes = values.map(some)
nones = st.builds(none)
options = st.one_of(somes, nones)

oks = values.map(ok)
errs = texts.map(err)
results = st.one_of(oks, errs)

# -----------------------------------------------------------------------------
# Failing callbacks
# -----------------------------------------------------------------------------


class Boom(Exception):
    """Raised by the failing callbacks below."""


def boom(*_: object) -> object:
    """Sync callback that always raises ``Boom('boom')``."""
    raise Boom('boom')


async def aboom(*_: object) -> object:
    """Async callback that always raises ``Boom('boom')``."""
    raise Boom('boom')


async def resolved(value: T) -> T:
    """Coroutine returning ``value``."""
    return value
