"""
Data models for test reporting.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum


class Outcome(Enum):
    PASSED = "passed"
    FAILED = "failed"

    @property
    def marker(self) -> str:
        return "✅" if self is Outcome.PASSED else "❌"


@dataclass
class Tally:
    """Running count of report lines printed during a process."""
    passed: int = 0
    failed: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def total(self) -> int:
        return self.passed + self.failed

    def record(self, outcome: Outcome) -> None:
        # Reports can arrive from worker threads.
        with self._lock:
            if outcome is Outcome.PASSED:
                self.passed += 1
            else:
                self.failed += 1

    def reset(self) -> None:
        with self._lock:
            self.passed = 0
            self.failed = 0
