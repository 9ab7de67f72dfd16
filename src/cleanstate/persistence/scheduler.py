#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/persistence/scheduler.py
"""Deferred-call schedulers used for debouncing.

A scheduler runs a callback once after a delay and returns a handle whose
``cancel()`` prevents the call if it has not happened yet.

- :class:`AsyncioScheduler` defers onto an asyncio event loop, the
  cooperative scheduler of an interactive session.
- :class:`ManualScheduler` keeps a virtual clock that only moves when
  :meth:`ManualScheduler.advance` is called. The CLI and the test suite use
  it to drive debouncing deterministically.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol

from cleanstate.exceptions import ValidationError


class Cancellable(Protocol):
    """Handle returned by :meth:`Scheduler.call_later`."""

    def cancel(self) -> None:
        """Prevent the scheduled callback from running."""
        ...


class Scheduler(ABC):
    """Interface for running a callback after a delay."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        """Schedule ``callback`` to run once after ``delay`` seconds.

        Parameters
        ----------
        delay : float
            Delay in seconds
        callback : callable
            Zero-argument function to run

        Returns
        -------
        Cancellable
            Handle that cancels the call

        """


class AsyncioScheduler(Scheduler):
    """Schedule callbacks on an asyncio event loop.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop or None, default = None
        Loop to use. When None, the currently running loop is used.

    Raises
    ------
    ValidationError
        If no loop is given and none is running

    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Initialize the scheduler, binding it to an event loop."""
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise ValidationError(
                    "AsyncioScheduler needs a running event loop; pass a loop or use ManualScheduler",
                    parameter_name="loop",
                    original_error=e,
                ) from e
        self.loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class _ManualHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler with a virtual clock.

    Examples
    --------
    >>> scheduler = ManualScheduler()
    >>> calls = []
    >>> handle = scheduler.call_later(1.0, lambda: calls.append("ran"))
    >>> scheduler.advance(0.5)
    >>> calls
    []
    >>> scheduler.advance(0.5)
    >>> calls
    ['ran']

    """

    def __init__(self) -> None:
        """Initialize the clock at zero with nothing scheduled."""
        self.now = 0.0
        self._queue: list[tuple[float, int, _ManualHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet cancelled callbacks."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due.

        Callbacks run in due order. Callbacks scheduled while advancing run
        too if they fall due before the new time.
        """
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                handle.callback()
        self.now = target

    def run_all(self) -> None:
        """Advance the clock until nothing is scheduled."""
        while self._queue:
            self.advance(max(self._queue[0][0] - self.now, 0.0))


__all__ = ["Cancellable", "Scheduler", "AsyncioScheduler", "ManualScheduler"]
