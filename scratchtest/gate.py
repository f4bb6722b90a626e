"""
Fulfill/wait gates for work that completes on another thread.

Usage:
    gate = expectation("background job finished")
    threading.Thread(target=lambda: (do_work(), gate.fulfill())).start()
    gate.wait(timeout=1)       # raises TimedOut if the job never finishes
"""

import asyncio
import logging
import threading
import time
from typing import Iterable, List

logger = logging.getLogger(__name__)


class TimedOut(Exception):
    """Raised when a gate is not fulfilled before its timeout."""

    def __init__(self, description: str, pending: List[str] | None = None):
        self.description = description
        self.pending = list(pending or [])
        message = f"Timed out: {description}"
        if self.pending:
            message += f" (pending: {', '.join(self.pending)})"
        super().__init__(message)


class Gate:
    """
    A one-shot flag that a test body can block on.

    fulfill() may be called from any thread, any number of times; once
    fulfilled the gate stays fulfilled.
    """

    def __init__(self, description: str):
        self.description = description
        self._event = threading.Event()

    def __repr__(self) -> str:
        state = "fulfilled" if self.is_fulfilled else "pending"
        return f"Gate({self.description!r}, {state})"

    @property
    def is_fulfilled(self) -> bool:
        return self._event.is_set()

    def fulfill(self) -> None:
        self._event.set()

    def wait(self, timeout: float) -> None:
        """
        Block until fulfilled.

        Raises:
            TimedOut: if `timeout` seconds pass first
        """
        if not self._event.wait(max(timeout, 0)):
            logger.debug("Gate %r timed out after %ss", self.description, timeout)
            raise TimedOut(self.description)

    async def wait_async(self, timeout: float) -> None:
        """Like wait(), but suspends the calling task instead of the event loop."""
        loop = asyncio.get_running_loop()
        fulfilled = await loop.run_in_executor(None, self._event.wait, max(timeout, 0))
        if not fulfilled:
            logger.debug("Gate %r timed out after %ss", self.description, timeout)
            raise TimedOut(self.description)


def expectation(description: str) -> Gate:
    """Create a new unfulfilled gate."""
    return Gate(description)


def wait(gate: Gate, timeout: float) -> None:
    gate.wait(timeout)


def wait_all(gates: Iterable[Gate], timeout: float) -> None:
    """
    Block until every gate is fulfilled.

    All gates share a single deadline. Raises one TimedOut listing the
    gates that were still pending when it passed.
    """
    gates = list(gates)
    deadline = time.monotonic() + max(timeout, 0)
    for gate in gates:
        remaining = max(deadline - time.monotonic(), 0)
        if not gate._event.wait(remaining):
            # The deadline has passed; a late fulfill does not rescue the wait.
            pending = [g.description for g in gates if g is gate or not g.is_fulfilled]
            logger.debug("wait_all timed out after %ss, pending: %s", timeout, pending)
            raise TimedOut("Test timed out", pending)
