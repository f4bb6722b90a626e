"""
Suite orchestration.

A Suite collects case runners and executes them once each, in
registration order, on a private event loop:

    suite = Suite()
    suite.add(MyCase)
    suite.add(OtherCase)
    suite.run()       # blocks until every case has run

Tests inside a case run one after another, never concurrently, so the
current-test context always names the test that is executing. A test that
raises is reported as a failure and the next test runs.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from rich.console import Console
from rich.text import Text

from .context import clear_current_test, set_current_test
from .discovery import TestEntry, discover_tests, make_header
from .registry import CaseRunner, Registry
from .reporting import fail, get_console, set_console

logger = logging.getLogger(__name__)


def _raise_line(exc: BaseException) -> Union[int, str]:
    """Source line of the innermost frame that raised `exc`."""
    line: Union[int, str] = ""
    tb = exc.__traceback__
    while tb is not None:
        line = tb.tb_lineno
        tb = tb.tb_next
    return line


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _driver_cancelled() -> bool:
    """True when the task running the suite itself was asked to cancel."""
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


async def run_tests(tests: List[TestEntry]) -> None:
    """
    Run (label, callable) pairs in order.

    The current-test context is set to each label while its body runs and
    cleared afterwards, whether the body passed or raised. A CancelledError
    coming out of a test body (an awaited task that was cancelled) is a
    failure of that test; only cancellation of the running task propagates.
    """
    for label, func in tests:
        set_current_test(label)
        try:
            result = func()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError as e:
            if _driver_cancelled():
                raise
            logger.debug("Test %s was cancelled", label, exc_info=True)
            fail(_describe(e), line=_raise_line(e), test_name=label)
        except Exception as e:
            logger.debug("Test %s raised", label, exc_info=True)
            fail(_describe(e), line=_raise_line(e), test_name=label)
        finally:
            clear_current_test()


def _close_loop(loop: asyncio.AbstractEventLoop) -> None:
    try:
        leftovers = [t for t in asyncio.all_tasks(loop) if not t.done()]
        for task in leftovers:
            task.cancel()
        if leftovers:
            loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.run_until_complete(loop.shutdown_default_executor())
    finally:
        loop.close()


class Suite:
    """
    An explicit, single-process collection of test cases.

    Lifecycle is build (add/register), run, discard. Cases that already
    ran are skipped by later calls to run(); cases registered since are
    executed.
    """

    # Incremented whenever any suite starts executing cases.
    runs_started = 0

    def __init__(self, console: Optional[Console] = None):
        self.registry = Registry()
        self._console = console
        self._executed: Dict[str, CaseRunner] = {}
        self._outstanding = 0

    @property
    def console(self) -> Console:
        return self._console or get_console()

    @property
    def outstanding(self) -> int:
        """Cases left in the current run."""
        return self._outstanding

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, header: str, runner: CaseRunner) -> None:
        """Insert or replace the runner for `header`."""
        self.registry.register(header, runner)

    def add(self, factory: Callable[[], Any]) -> Any:
        """Build a case with `factory` (usually the case class) and register it."""
        case = factory()
        self.add_case(case)
        return case

    def add_case(self, case: Any) -> None:
        header = getattr(case, "header", None) or make_header(type(case).__name__)
        self.register(header, self.case_runner(case))

    def case_runner(self, case: Any) -> CaseRunner:
        """Discover the tests of `case` now and return a coroutine function running them."""
        tests = discover_tests(case)

        async def run_case() -> None:
            await run_tests(tests)

        return run_case

    def pending(self) -> List[Tuple[str, CaseRunner]]:
        """Registry entries not executed yet, in registration order."""
        return [
            (header, runner)
            for header, runner in self.registry.entries()
            if self._executed.get(header) is not runner
        ]

    # =========================================================================
    # Execution
    # =========================================================================

    def run(self) -> None:
        """
        Execute every pending case and block until the last one finishes.

        Must not be called from a thread with a running event loop; use
        run_async() there.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError("Suite.run() called from a running event loop; await run_async() instead")

        pending = self.pending()
        if not pending:
            return

        loop = asyncio.new_event_loop()
        self._outstanding = len(pending)
        try:
            driver = loop.create_task(self._drive(pending, loop.stop))
            loop.run_forever()
            if driver.done():
                driver.result()
        finally:
            _close_loop(loop)

    async def run_async(self) -> None:
        """Execute every pending case on the caller's event loop."""
        pending = self.pending()
        if not pending:
            return
        self._outstanding = len(pending)
        await self._drive(pending, lambda: None)

    async def _drive(self, pending: List[Tuple[str, CaseRunner]], on_drained: Callable[[], None]) -> None:
        Suite.runs_started += 1
        # Report lines from test bodies go to the suite's console too.
        previous = set_console(self._console) if self._console is not None else None
        try:
            for header, runner in pending:
                try:
                    await self._run_case(header, runner)
                finally:
                    self._executed[header] = runner
                    self._outstanding -= 1
                    if self._outstanding == 0:
                        on_drained()
        finally:
            if previous is not None:
                set_console(previous)
            # Interrupted before draining; still release run().
            if self._outstanding:
                self._outstanding = 0
                on_drained()

    async def _run_case(self, header: str, runner: CaseRunner) -> None:
        title = header.partition("\n")[0]
        logger.debug("Starting %s", title)
        self.console.print(Text(header, style="bold"), soft_wrap=True)
        try:
            await runner()
        except asyncio.CancelledError as e:
            if _driver_cancelled():
                raise
            logger.debug("Case runner for %s was cancelled", title, exc_info=True)
            fail(_describe(e), line=_raise_line(e))
        except Exception as e:
            logger.debug("Case runner for %s raised", title, exc_info=True)
            fail(_describe(e), line=_raise_line(e))
        self.console.print()
        logger.debug("Finished %s", title)


def run(*factories: Callable[[], Any], console: Optional[Console] = None) -> Suite:
    """Build a suite from case factories, run it, and return it."""
    suite = Suite(console=console)
    for factory in factories:
        suite.add(factory)
    suite.run()
    return suite
