"""
Ordered registry of case runners, keyed by case header.
"""

import logging
from typing import Awaitable, Callable, Dict, Iterator, List, Tuple

logger = logging.getLogger(__name__)

CaseRunner = Callable[[], Awaitable[None]]


class Registry:
    """
    Header -> runner mapping that iterates in insertion order.

    Registering an existing header replaces its runner in place; there is
    no removal.
    """

    def __init__(self):
        self._entries: Dict[str, CaseRunner] = {}

    def register(self, header: str, runner: CaseRunner) -> None:
        if header in self._entries:
            logger.debug("Replacing registered case %r", header.partition("\n")[0])
        self._entries[header] = runner

    def size(self) -> int:
        return len(self._entries)

    def entries(self) -> List[Tuple[str, CaseRunner]]:
        return list(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, header: object) -> bool:
        return header in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
