"""
Demonstration cases, run with `scratchtest --demo`.

Both cases contain a deliberate failure (1 != 2) so the output shows
passing and failing lines side by side.
"""

import threading

from .context import get_current_test
from .discovery import TestCase, test
from .gate import expectation
from .reporting import assert_, expect, get_console


def _in_background(work):
    threading.Thread(target=work, daemon=True).start()


class MyTest(TestCase):

    @test
    async def my_test(self):
        pass

    @test
    async def test2(self):
        expect(await self.get_int()).to_be(0)
        expect(get_current_test()).to_be("_test2")
        expect(1).to_be(2)

    @test
    async def test3(self):
        expect(get_current_test()).to_be("_test3")
        assert_(True)

        gate = expectation("wait for background thread to complete")

        def work():
            # Reported as "Unknown test name": the thread has no current test.
            assert_(True)
            gate.fulfill()

        _in_background(work)
        gate.wait(timeout=1)

    async def get_int(self) -> int:
        return 0


class MyTest_2(TestCase):

    @test
    async def my_test(self):
        pass

    @test
    async def test2(self):
        await self.async_function()
        expect(get_current_test()).to_be("_test2")
        expect(1).to_be(2)

    @test
    async def test3(self):
        expect(get_current_test()).to_be("_test3")
        await self.async_function()
        assert_(True)

        gate = expectation("wait for background thread to complete")

        def work():
            assert_(True)
            gate.fulfill()

        _in_background(work)
        await gate.wait_async(timeout=1)

    async def async_function(self):
        get_console().print("Async function called")


DEMO_CASES = [MyTest, MyTest_2]
