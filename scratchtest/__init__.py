"""
scratchtest: an in-process test harness for ad-hoc scripts.

    from scratchtest import TestCase, test, expect, run

    class Checks(TestCase):
        @test
        async def arithmetic(self):
            expect(1 + 1).to_be(2)

    if __name__ == "__main__":
        run(Checks)

Keep the `run(...)` call under the `__main__` guard so the `scratchtest`
command can import the script and run its cases itself.
"""

from .context import clear_current_test, current_test, get_current_test, set_current_test
from .discovery import Test, TestCase, discover_tests, make_header, test
from .gate import Gate, TimedOut, expectation, wait, wait_all
from .models import Outcome, Tally
from .registry import Registry
from .reporting import (
    EqualTo,
    Expectation,
    ToBe,
    UnwrapError,
    assert_,
    assert_equal,
    assert_not_none,
    expect,
    fail,
    get_console,
    get_tally,
    set_console,
    unwrap,
)
from .suite import Suite, run

__version__ = "0.1.0"

__all__ = [
    "clear_current_test",
    "current_test",
    "get_current_test",
    "set_current_test",
    "Test",
    "TestCase",
    "discover_tests",
    "make_header",
    "test",
    "Gate",
    "TimedOut",
    "expectation",
    "wait",
    "wait_all",
    "Outcome",
    "Tally",
    "Registry",
    "EqualTo",
    "Expectation",
    "ToBe",
    "UnwrapError",
    "assert_",
    "assert_equal",
    "assert_not_none",
    "expect",
    "fail",
    "get_console",
    "get_tally",
    "set_console",
    "unwrap",
    "Suite",
    "run",
]
