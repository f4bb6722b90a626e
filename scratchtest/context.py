"""
Current-test context.

Holds the label of the test that is executing right now so that report
lines can be attributed without passing the name around. The value is
stored in a ContextVar: asyncio tasks see a copy of their creator's value,
plain worker threads start from the default (no test).
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_current_test: ContextVar[Optional[str]] = ContextVar("scratchtest_current_test", default=None)


def get_current_test() -> Optional[str]:
    """Return the label of the running test, or None outside a test body."""
    return _current_test.get()


def set_current_test(name: Optional[str]) -> None:
    _current_test.set(name or None)


def clear_current_test() -> None:
    _current_test.set(None)


@contextmanager
def current_test(name: str) -> Iterator[str]:
    """
    Mark `name` as the running test for the duration of the block.

    The previous value is restored on exit, even if the block raises.
    """
    token = _current_test.set(name)
    try:
        yield name
    finally:
        _current_test.reset(token)
