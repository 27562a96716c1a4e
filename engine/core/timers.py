"""
Cooperative timers driven by the game loop.

Nothing here sleeps or spawns threads. The owner calls update(dt) once per
frame; due callbacks run inline on the caller's thread.

Usage:
    timers = TimerScheduler()
    handle = timers.schedule(2.0, advance, group=session_token)

    # each frame
    timers.update(dt)

    # on session teardown
    timers.cancel_group(session_token)
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)


class TimerHandle:
    """
    A scheduled callback.

    A handle either fires exactly once or is cancelled; once one of the two
    has happened the other becomes a no-op.
    """

    __slots__ = ("due", "callback", "group", "_fired", "_cancelled")

    def __init__(self, due: float, callback: Callable[[], Any], group: Hashable | None):
        self.due = due
        self.callback = callback
        self.group = group
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        return not (self._fired or self._cancelled)

    def cancel(self) -> bool:
        """Cancel the timer. Returns False if it already fired or was cancelled."""
        if not self.pending:
            return False
        self._cancelled = True
        return True

    def __repr__(self) -> str:
        state = "fired" if self._fired else "cancelled" if self._cancelled else "pending"
        return f"TimerHandle(due={self.due:.3f}, group={self.group!r}, {state})"


class TimerScheduler:
    """
    Delayed callbacks on a virtual clock advanced by update(dt).

    Timers due in the same update fire in due-time order, ties broken by
    scheduling order. A timer scheduled while an update is running fires
    on a later update even when its delay is zero.
    """

    def __init__(self):
        self._now: float = 0.0
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()
        self._updating = False
        # Due handles taken out of the heap by the running update
        self._batch: list[TimerHandle] = []

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    def schedule(
        self,
        delay: float,
        callback: Callable[[], Any],
        group: Hashable | None = None,
    ) -> TimerHandle:
        """
        Schedule a callback.

        Args:
            delay: Seconds from now; negative values are treated as zero
            callback: Zero-argument callable
            group: Optional key used by cancel_group()

        Returns:
            Handle that can cancel this timer
        """
        handle = TimerHandle(self._now + max(delay, 0.0), callback, group)
        heapq.heappush(self._heap, (handle.due, next(self._counter), handle))
        return handle

    def update(self, dt: float) -> int:
        """
        Advance the clock and run every timer that became due.

        Returns:
            Number of callbacks that ran
        """
        if self._updating:
            logger.warning("TimerScheduler.update() called re-entrantly; ignored")
            return 0

        self._now += max(dt, 0.0)

        # Take the due set up front so timers added by callbacks wait a frame
        due: list[TimerHandle] = []
        while self._heap and self._heap[0][0] <= self._now:
            due.append(heapq.heappop(self._heap)[2])
        self._batch = due

        fired = 0
        self._updating = True
        try:
            for handle in due:
                # An earlier callback in this batch may have cancelled it
                if not handle.pending:
                    continue
                handle._fired = True
                fired += 1
                handle.callback()
        finally:
            self._updating = False
            self._batch = []
            # A raising callback leaves the rest of the batch for the next update
            for handle in due:
                if handle.pending:
                    heapq.heappush(self._heap, (handle.due, next(self._counter), handle))

        return fired

    def cancel_group(self, group: Hashable) -> int:
        """Cancel every pending timer in a group. Returns how many were cancelled."""
        cancelled = 0
        for handle in self._handles():
            if handle.group == group and handle.cancel():
                cancelled += 1
        if cancelled:
            self._prune()
            logger.debug("Cancelled %d timer(s) for group %r", cancelled, group)
        return cancelled

    def pending(self, group: Hashable | None = None) -> int:
        """Count pending timers, optionally only those in one group."""
        return sum(
            1 for h in self._handles()
            if h.pending and (group is None or h.group == group)
        )

    def clear(self) -> None:
        """Cancel everything."""
        for handle in self._handles():
            handle.cancel()
        self._heap.clear()

    def _handles(self) -> list[TimerHandle]:
        return [entry[2] for entry in self._heap] + self._batch

    def _prune(self) -> None:
        self._heap = [entry for entry in self._heap if entry[2].pending]
        heapq.heapify(self._heap)
