"""
Expectation and assertion primitives.

Every call prints exactly one line and never raises:

    <line> ✅ <test name>
    <line> ❌ <test name> — <description>

The test name comes from the current-test context unless passed in
explicitly; the line defaults to the caller's source line.
"""

import sys
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from rich.console import Console
from rich.text import Text

from .context import get_current_test
from .models import Outcome, Tally

T = TypeVar("T")

UNKNOWN_TEST_NAME = "Unknown test name"

_console = Console(highlight=False, soft_wrap=True)
_tally = Tally()


class UnwrapError(Exception):
    """Raised by unwrap() when the value is missing."""
    pass


def get_console() -> Console:
    """Get the console report lines are printed to."""
    return _console


def set_console(console: Console) -> Console:
    """Install a new report console and return the previous one."""
    global _console
    previous = _console
    _console = console
    return previous


def get_tally() -> Tally:
    """Get the process-wide pass/fail counter."""
    return _tally


def _caller_line(depth: int = 2) -> int:
    return sys._getframe(depth).f_lineno


def format_report(
    outcome: Outcome,
    test_name: Optional[str],
    description: str = "",
    line: Union[int, str] = "",
) -> Text:
    """Build a report line without printing it."""
    name = test_name or UNKNOWN_TEST_NAME
    text = Text(f"{line} ")
    text.append(outcome.marker)
    text.append(" ")
    text.append(name, style="bold")
    if description:
        text.append(f" — {description}", style="green" if outcome is Outcome.PASSED else "red")
    return text


def _report(
    outcome: Outcome,
    test_name: Optional[str],
    description: str,
    line: Union[int, str],
) -> None:
    name = test_name if test_name is not None else get_current_test()
    _console.print(format_report(outcome, name, description, line), soft_wrap=True)
    _tally.record(outcome)


def assert_(
    condition: bool,
    description: str = "",
    *,
    line: Union[int, str, None] = None,
    test_name: Optional[str] = None,
) -> bool:
    """Report a pass when `condition` is truthy, a fail otherwise."""
    if line is None:
        line = _caller_line()
    passed = bool(condition)
    _report(Outcome.PASSED if passed else Outcome.FAILED, test_name, description, line)
    return passed


def assert_equal(
    lhs: Any,
    rhs: Any,
    description: str = "",
    *,
    line: Union[int, str, None] = None,
    test_name: Optional[str] = None,
) -> bool:
    """
    Report whether `lhs == rhs`.

    On a mismatch with no description the line reads "<lhs> != <rhs>".
    """
    if line is None:
        line = _caller_line()
    equal = lhs == rhs
    if not equal and not description:
        description = f"{lhs} != {rhs}"
    return assert_(equal, description, line=line, test_name=test_name)


def assert_not_none(
    value: Any,
    description: str = "",
    *,
    line: Union[int, str, None] = None,
    test_name: Optional[str] = None,
) -> bool:
    if line is None:
        line = _caller_line()
    return assert_(value is not None, description, line=line, test_name=test_name)


def fail(
    message: str = "",
    description: str = "",
    *,
    line: Union[int, str, None] = None,
    test_name: Optional[str] = None,
) -> None:
    """Unconditionally report a failure carrying `message`."""
    if line is None:
        line = _caller_line()
    text = f"{message} ({description})" if message and description else (message or description)
    _report(Outcome.FAILED, test_name, text, line)


def unwrap(value: Optional[T]) -> T:
    """Return `value`, raising UnwrapError if it is None."""
    if value is None:
        raise UnwrapError("Unable to unwrap value")
    return value


@dataclass(frozen=True)
class EqualTo(Generic[T]):
    """Tagged form of an equality expectation: expect(x).to_be(EqualTo(y))."""
    value: T


class ToBe:
    """Namespace for tagged expectations, e.g. ToBe.equal_to(3)."""

    @staticmethod
    def equal_to(value: T) -> EqualTo[T]:
        return EqualTo(value)


class Expectation(Generic[T]):
    """Matcher bound to a value, returned by expect()."""

    def __init__(self, value: T):
        self.value = value

    def __repr__(self) -> str:
        return f"Expectation({self.value!r})"

    def to_be(
        self,
        expected: Union[T, EqualTo[T]],
        description: str = "",
        *,
        line: Union[int, str, None] = None,
        test_name: Optional[str] = None,
    ) -> bool:
        if line is None:
            line = _caller_line()
        if isinstance(expected, EqualTo):
            expected = expected.value
        return assert_equal(self.value, expected, description, line=line, test_name=test_name)

    def to_equal(
        self,
        expected: T,
        *,
        line: Union[int, str, None] = None,
        test_name: Optional[str] = None,
    ) -> bool:
        if line is None:
            line = _caller_line()
        return assert_equal(self.value, expected, line=line, test_name=test_name)

    def not_to_be(
        self,
        expected: Optional[T],
        *,
        line: Union[int, str, None] = None,
        test_name: Optional[str] = None,
    ) -> bool:
        if line is None:
            line = _caller_line()
        return assert_(self.value != expected, line=line, test_name=test_name)


def expect(value: T) -> Expectation[T]:
    """Start an expectation: expect(actual).to_be(expected)."""
    return Expectation(value)
