"""DeferredQueue - FIFO queue of side effects run outside dispatch."""
from __future__ import annotations

import logging
from collections import deque

from typed_fsm.types import SideEffect

logger = logging.getLogger(__name__)


class DeferredQueue:
    """Holds zero-argument callables until the host flushes them.

    ``schedule`` never runs anything, so work handed over during a
    transition always runs after that transition has returned.  Its bound
    ``schedule`` method is a valid ``scheduler`` for StateMachine; several
    machines sharing one queue get a single FIFO order across all of them.
    """

    def __init__(self) -> None:
        self._pending: deque[SideEffect] = deque()

    def schedule(self, fn: SideEffect) -> None:
        """Queue ``fn`` to run on a later flush."""
        self._pending.append(fn)

    def pending(self) -> int:
        """Return the number of callables waiting to run."""
        return len(self._pending)

    def flush(self) -> int:
        """Run the callables queued when the flush began, oldest first.

        Work scheduled while flushing waits for the next flush.  If a
        callable raises, the exception propagates and the ones behind it
        stay queued.  Returns the number of callables run.
        """
        count = len(self._pending)
        for _ in range(count):
            fn = self._pending.popleft()
            fn()
        if count:
            logger.debug("flushed %d side effects, %d pending", count, len(self._pending))
        return count

    def drain(self) -> int:
        """Flush repeatedly until nothing is queued. Returns the total run."""
        total = 0
        while self._pending:
            total += self.flush()
        return total

    def clear(self) -> None:
        self._pending.clear()
