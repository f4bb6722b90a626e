"""
Shared test fixtures for the scratchtest test suite.
"""

import io

import pytest
from rich.console import Console

from scratchtest.context import clear_current_test
from scratchtest.reporting import get_tally, set_console


def make_console(buffer: io.StringIO) -> Console:
    return Console(
        file=buffer,
        force_terminal=False,
        color_system=None,
        width=200,
        highlight=False,
        soft_wrap=True,
    )


class Output:
    """Captured report console."""

    def __init__(self):
        self.buffer = io.StringIO()
        self.console = make_console(self.buffer)

    @property
    def text(self) -> str:
        return self.buffer.getvalue()

    @property
    def lines(self) -> list:
        return self.text.splitlines()


@pytest.fixture
def output():
    """Route report lines into a buffer for the duration of a test.

    Usage:
        def test_something(output):
            assert_(True, line=1)
            assert output.lines == ["1 ✅ Unknown test name"]
    """
    captured = Output()
    previous = set_console(captured.console)
    get_tally().reset()
    clear_current_test()
    yield captured
    clear_current_test()
    set_console(previous)
