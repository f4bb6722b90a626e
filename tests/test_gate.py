"""
Tests for fulfill/wait gates.
"""

import asyncio
import threading
import time

import pytest

from scratchtest.gate import Gate, TimedOut, expectation, wait, wait_all


def fulfill_later(gate: Gate, delay: float) -> threading.Timer:
    timer = threading.Timer(delay, gate.fulfill)
    timer.start()
    return timer


class TestGate:

    def test_starts_unfulfilled(self):
        gate = expectation("job done")
        assert gate.description == "job done"
        assert not gate.is_fulfilled

    def test_fulfill_is_idempotent(self):
        gate = Gate("job")
        gate.fulfill()
        gate.fulfill()
        assert gate.is_fulfilled

    def test_wait_returns_when_already_fulfilled(self):
        gate = Gate("job")
        gate.fulfill()
        gate.wait(timeout=1)

    def test_zero_timeout_checks_the_flag(self):
        gate = Gate("job")
        gate.fulfill()
        gate.wait(timeout=0)
        with pytest.raises(TimedOut):
            Gate("other").wait(timeout=0)

    def test_fulfilled_from_another_thread(self):
        gate = Gate("background callback")
        timer = fulfill_later(gate, 0.1)
        started = time.monotonic()
        gate.wait(timeout=1)
        assert time.monotonic() - started < 1
        timer.join()

    def test_times_out_with_description(self):
        gate = Gate("never happens")
        started = time.monotonic()
        with pytest.raises(TimedOut) as excinfo:
            wait(gate, timeout=0.3)
        assert time.monotonic() - started >= 0.25
        assert excinfo.value.description == "never happens"
        assert "never happens" in str(excinfo.value)

    def test_wait_async(self):
        gate = Gate("async")
        timer = fulfill_later(gate, 0.05)
        asyncio.run(gate.wait_async(timeout=1))
        timer.join()

    def test_wait_async_times_out(self):
        with pytest.raises(TimedOut):
            asyncio.run(Gate("async").wait_async(timeout=0.1))


class TestWaitAll:

    def test_all_fulfilled(self):
        first, second = Gate("first"), Gate("second")
        first.fulfill()
        timer = fulfill_later(second, 0.1)
        wait_all([first, second], timeout=1)
        timer.join()

    def test_one_missing_times_out(self):
        first, second = Gate("first"), Gate("second")
        first.fulfill()
        with pytest.raises(TimedOut) as excinfo:
            wait_all([first, second], timeout=0.2)
        assert excinfo.value.description == "Test timed out"
        assert excinfo.value.pending == ["second"]

    def test_shares_one_deadline(self):
        gates = [Gate("a"), Gate("b"), Gate("c")]
        started = time.monotonic()
        with pytest.raises(TimedOut):
            wait_all(gates, timeout=0.3)
        assert time.monotonic() - started < 0.9

    def test_fulfill_after_deadline_still_times_out(self):
        class LateEvent(threading.Event):
            """Times out, then gets set right after the deadline."""

            def wait(self, timeout=None):
                self.set()
                return False

        early, late = Gate("early"), Gate("late")
        early.fulfill()
        late._event = LateEvent()
        with pytest.raises(TimedOut) as excinfo:
            wait_all([early, late], timeout=0.1)
        assert late.is_fulfilled
        assert excinfo.value.pending == ["late"]

    def test_empty_list_returns(self):
        wait_all([], timeout=0)
