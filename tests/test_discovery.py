"""
Tests for test declaration and discovery.
"""

import asyncio

from scratchtest.discovery import (
    BoundTest,
    Test,
    TestCase,
    declared_tests,
    discover_tests,
    make_header,
    test,
)


class ThreeTests(TestCase):

    @test
    async def my_test(self):
        pass

    @test
    async def test2(self):
        return "two"

    def helper(self):
        return "not a test"

    @test
    async def test3(self):
        return self.helper()


class Extended(ThreeTests):

    @test
    async def test2(self):
        return "overridden"

    @test
    async def test4(self):
        pass


class Explicit(TestCase):

    def tests(self):
        return [("first", self.first), ("second", lambda: None)]

    async def first(self):
        pass


class Renamed(TestCase):
    case_name = "CustomName"


class TestDeclaration:

    def test_decorator_returns_descriptor(self):
        assert isinstance(vars(ThreeTests)["test2"], Test)
        assert ThreeTests.test2.label == "_test2"

    def test_instance_stores_bound_tests_under_prefixed_names(self):
        case = ThreeTests()
        assert isinstance(vars(case)["_test2"], BoundTest)
        assert "test2" not in vars(case)

    def test_attribute_access_returns_bound_test(self):
        case = ThreeTests()
        assert case.test2 is vars(case)["_test2"]
        assert asyncio.run(case.test2()) == "two"

    def test_each_instance_gets_its_own_binding(self):
        first, second = ThreeTests(), ThreeTests()
        assert first._test2 is not second._test2
        assert first._test2.id != second._test2.id

    def test_declared_tests_in_order(self):
        assert list(declared_tests(ThreeTests)) == ["_my_test", "_test2", "_test3"]

    def test_subclass_override_keeps_position(self):
        assert list(declared_tests(Extended)) == ["_my_test", "_test2", "_test3", "_test4"]


class TestDiscoverTests:

    def test_labels_keep_prefix_in_declaration_order(self):
        labels = [label for label, _ in discover_tests(ThreeTests())]
        assert labels == ["_my_test", "_test2", "_test3"]

    def test_discovered_callables_are_bound(self):
        tests = dict(discover_tests(ThreeTests()))
        assert asyncio.run(tests["_test3"]()) == "not a test"

    def test_inherited_and_overridden(self):
        tests = discover_tests(Extended())
        assert [label for label, _ in tests] == ["_my_test", "_test2", "_test3", "_test4"]
        assert asyncio.run(dict(tests)["_test2"]()) == "overridden"

    def test_explicit_list(self):
        labels = [label for label, _ in discover_tests(Explicit())]
        assert labels == ["first", "second"]

    def test_case_without_tests(self):
        assert discover_tests(Renamed()) == []

    def test_plain_object_is_scanned(self):
        class Holder:
            pass

        holder = Holder()
        holder._manual = BoundTest(label="_manual", func=lambda: None)
        holder._other = "ignored"
        assert [label for label, _ in discover_tests(holder)] == ["_manual"]

    def test_result_is_a_materialized_list(self):
        case = ThreeTests()
        tests = discover_tests(case)
        assert isinstance(tests, list)
        assert [label for label, _ in tests] == [label for label, _ in discover_tests(case)]


class TestHeader:

    def test_header_format(self):
        assert make_header("MyTest") == "Running: MyTest\n---------------"

    def test_dashes_match_title_length(self):
        title, dashes = ThreeTests().header.split("\n")
        assert title == "Running: ThreeTests"
        assert dashes == "-" * len(title)

    def test_case_name_override(self):
        assert Renamed().header.startswith("Running: CustomName\n")
