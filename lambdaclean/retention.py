"""
Sliding-window retention: keep the newest N versions, delete the rest.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, Iterator, List, Optional


class Action(Enum):
    KEEP = "keep"
    DELETE = "delete"


@dataclass(frozen=True)
class RetentionDecision:
    """Verdict for one version of one function."""
    function: str
    version: str
    action: Action


@dataclass(frozen=True)
class DeleteTask:
    """A pending deletion handed to the worker pool."""
    function: str
    version: str


class RetentionWindow:
    """
    FIFO buffer of the most recently seen versions of one function.

    Versions must be pushed oldest first. Whenever the buffer holds more
    than ``keep`` versions the oldest is evicted and comes back as a
    DELETE decision; whatever is left at the end is kept.
    """

    def __init__(self, function: str, keep: int):
        if keep < 0:
            raise ValueError(f"keep must be >= 0, got {keep}")
        self.function = function
        self.keep = keep
        self._buffer: Deque[str] = deque()

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, version: str) -> Optional[RetentionDecision]:
        """Add the next version; return the evicted DELETE decision, if any."""
        self._buffer.append(version)
        if len(self._buffer) > self.keep:
            evicted = self._buffer.popleft()
            return RetentionDecision(self.function, evicted, Action.DELETE)
        return None

    def drain(self) -> List[RetentionDecision]:
        """Return the buffered versions as KEEP decisions, oldest first."""
        kept = [RetentionDecision(self.function, v, Action.KEEP) for v in self._buffer]
        self._buffer.clear()
        return kept


def classify(function: str, versions: Iterable[str], keep: int) -> Iterator[RetentionDecision]:
    """
    Classify an ascending version sequence.

    DELETE decisions are yielded as soon as a version falls out of the
    window, KEEP decisions after the input is exhausted.
    """
    window = RetentionWindow(function, keep)
    for version in versions:
        decision = window.push(version)
        if decision is not None:
            yield decision
    yield from window.drain()
