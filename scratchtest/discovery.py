"""
Test declaration and discovery.

A test case is a TestCase subclass whose tests are methods marked with
@test:

    class MathCase(TestCase):
        @test
        async def addition(self):
            expect(1 + 1).to_be(2)

Each declared test is stored on the instance under a backing attribute
prefixed with "_" (here "_addition"), and that storage name is the label
the test is reported under.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

TestFunc = Callable[[], Union[Awaitable[None], None]]
TestEntry = Tuple[str, TestFunc]

STORAGE_PREFIX = "_"


@dataclass
class BoundTest:
    """A declared test bound to one case instance."""
    __test__ = False

    label: str
    func: TestFunc
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __call__(self):
        return self.func()


class Test:
    """
    Descriptor produced by @test.

    Binding happens once per case instance, when the instance is created;
    attribute access on the instance returns the bound test.
    """
    __test__ = False

    def __init__(self, func: Callable[..., Any]):
        self.func = func
        self.name: Optional[str] = getattr(func, "__name__", None)
        self.__doc__ = getattr(func, "__doc__", None)

    def __set_name__(self, owner, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"Test({self.label!r})"

    @property
    def label(self) -> str:
        return f"{STORAGE_PREFIX}{self.name}"

    def bind(self, instance) -> BoundTest:
        func = self.func
        if hasattr(func, "__get__"):
            func = func.__get__(instance, type(instance))
        return BoundTest(label=self.label, func=func)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        bound = instance.__dict__.get(self.label)
        if bound is None:
            bound = self.bind(instance)
        return bound


def test(func: Callable[..., Any]) -> Test:
    """Declare a method as a test of its TestCase."""
    return Test(func)


test.__test__ = False


def make_header(case_name: str) -> str:
    """Section title printed before a case runs; also its registry key."""
    title = f"Running: {case_name}"
    return f"{title}\n{'-' * len(title)}"


def declared_tests(cls: type) -> Dict[str, Test]:
    """
    Collect the Test descriptors of a class in declaration order.

    Base class tests come first; a subclass redefining a test keeps the
    base position but replaces the body.
    """
    found: Dict[str, Test] = {}
    for klass in reversed(cls.__mro__):
        for value in vars(klass).values():
            if isinstance(value, Test):
                found[value.label] = value
    return found


def reflect_tests(instance) -> List[TestEntry]:
    """Read the bound tests stored on an instance, in storage order."""
    entries = []
    for name, value in vars(instance).items():
        if name.startswith(STORAGE_PREFIX) and isinstance(value, BoundTest):
            entries.append((name, value))
    return entries


class TestCase:
    """
    Base class for a group of related tests.

    Subclasses must be constructible without arguments when registered
    through a factory. Override tests() to list tests explicitly instead
    of using @test.
    """
    __test__ = False

    def __new__(cls, *args, **kwargs):
        instance = super().__new__(cls)
        for label, declared in declared_tests(cls).items():
            instance.__dict__[label] = declared.bind(instance)
        return instance

    @property
    def case_name(self) -> str:
        return type(self).__name__

    @property
    def header(self) -> str:
        return make_header(self.case_name)

    def tests(self) -> List[TestEntry]:
        return reflect_tests(self)

    def setup(self, suite) -> None:
        """Register this case into `suite`."""
        suite.add_case(self)


def discover_tests(case) -> List[TestEntry]:
    """
    Return the ordered (label, callable) pairs of a case.

    Cases that are not TestCase instances fall back to scanning their
    stored attributes for bound tests.
    """
    if isinstance(case, TestCase):
        entries = list(case.tests())
    else:
        entries = reflect_tests(case)
    logger.debug("Discovered %d test(s) on %s", len(entries), type(case).__name__)
    return entries
