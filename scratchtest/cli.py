"""
Command-line interface for scratchtest.

Usage:
    scratchtest checks.py             # Run every TestCase defined in checks.py
    scratchtest pkg.checks other.py   # Several targets, run in order
    scratchtest --demo                # Run the bundled demonstration cases
    scratchtest -v checks.py          # With debug logging

Scripts are imported under their own module name, not "__main__", so a
guarded `run(...)` call at the bottom of a script does not fire. Scripts
that run their cases unguarded on import are not run a second time.
"""

import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import List

import click
from rich.logging import RichHandler

from .discovery import TestCase
from .reporting import get_console, get_tally
from .suite import Suite

logger = logging.getLogger(__name__)


def load_target(target: str) -> ModuleType:
    """Import a script path or a dotted module name."""
    path = Path(target)
    if path.suffix == ".py":
        if not path.exists():
            raise click.BadParameter(f"No such file: {target}", param_hint="TARGET")
        name = f"scratchtest_target_{path.stem}"
        spec = importlib.util.spec_from_file_location(name, path.resolve())
        if spec is None or spec.loader is None:
            raise click.BadParameter(f"Cannot import {target}", param_hint="TARGET")
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        # Let the script import its siblings.
        parent = str(path.resolve().parent)
        if parent not in sys.path:
            sys.path.insert(0, parent)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(name, None)
            raise click.BadParameter(f"Error while loading {target}: {type(e).__name__}: {e}", param_hint="TARGET")
        return module

    try:
        return importlib.import_module(target)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import {target}: {e}", param_hint="TARGET")
    except Exception as e:
        raise click.BadParameter(f"Error while loading {target}: {type(e).__name__}: {e}", param_hint="TARGET")


def cases_in(module: ModuleType) -> List[type]:
    """TestCase subclasses defined in `module`, in definition order."""
    return [
        obj for obj in vars(module).values()
        if isinstance(obj, type)
        and issubclass(obj, TestCase)
        and obj is not TestCase
        and obj.__module__ == module.__name__
    ]


def suite_for(module: ModuleType, ran_on_import: bool = False) -> Suite:
    """
    Use the module's own `suite` if it defines one, else collect its cases.

    A script that already ran its cases while being imported (a bare
    `run(...)` call without an `if __name__ == "__main__":` guard) gets an
    empty suite so nothing runs twice.
    """
    existing = getattr(module, "suite", None)
    if isinstance(existing, Suite):
        return existing

    suite = Suite()
    if ran_on_import:
        logger.debug("%s ran its own cases on import; not collecting them again", module.__name__)
        return suite
    for case in cases_in(module):
        suite.add(case)
    return suite


def configure_logging(verbose: bool) -> None:
    """Send this package's log records to a rich handler."""
    package_logger = logging.getLogger("scratchtest")
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_summary() -> None:
    tally = get_tally()
    get_console().print(
        f"[bold]SUMMARY:[/bold] "
        f"[green]{tally.passed} passed[/green], "
        f"[red]{tally.failed} failed[/red]"
    )


@click.command()
@click.argument("targets", nargs=-1)
@click.option("--demo", is_flag=True, help="Run the bundled demonstration cases")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.option("--summary/--no-summary", default=True, help="Print a pass/fail summary line")
def main(targets: tuple, demo: bool, verbose: bool, summary: bool):
    """Run in-process test cases from scripts or modules."""
    configure_logging(verbose)

    if not targets and not demo:
        raise click.UsageError("No targets given. Pass script paths or module names, or --demo")

    suites: List[Suite] = []
    if demo:
        from .demo import DEMO_CASES
        demo_suite = Suite()
        for case in DEMO_CASES:
            demo_suite.add(case)
        suites.append(demo_suite)

    # Scripts may report while they are imported; count those lines too.
    tally = get_tally()
    tally.reset()

    for target in targets:
        runs_before = Suite.runs_started
        module = load_target(target)
        ran_on_import = Suite.runs_started != runs_before
        suite = suite_for(module, ran_on_import)
        if not len(suite.registry) and not ran_on_import:
            get_console().print(f"[yellow]No test cases found in {target}[/yellow]")
        suites.append(suite)

    for suite in suites:
        logger.debug("Running %d case(s)", len(suite.pending()))
        suite.run()

    if summary:
        print_summary()

    sys.exit(1 if tally.failed > 0 else 0)


if __name__ == "__main__":
    main()
