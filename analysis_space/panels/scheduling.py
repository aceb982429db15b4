"""
Schedulers
==========

Injectable deferred-callback sources for the phase controller.

MODES:
======
1. ManualScheduler: virtual time, advanced explicitly (deterministic tests)
2. AsyncioScheduler: real time on an asyncio event loop
3. ImmediateScheduler: no event loop; the callback runs inside call_later

default_scheduler() picks AsyncioScheduler when called on a running loop
and ImmediateScheduler otherwise, so synchronous hosts never need a loop.

GUARANTEES:
===========
- A cancelled call never runs
- ManualScheduler runs due calls in (due time, scheduling order)
- Nothing ever blocks waiting for a timer
"""

from __future__ import annotations
from typing import Callable, List, Optional, Protocol, Tuple
import asyncio
import heapq
import itertools
import logging

LOGGER = logging.getLogger(__name__)

Callback = Callable[[], None]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay in seconds."""

    def call_later(self, delay: float, callback: Callback) -> Cancellable: ...


# =============================================================================
# VIRTUAL TIME
# =============================================================================

class ScheduledCall:
    """Handle returned by ManualScheduler.call_later."""

    def __init__(self, due: float, callback: Callback):
        self.due = due
        self._callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def _run(self) -> None:
        if not self._cancelled:
            self._callback()


class ManualScheduler:
    """
    Scheduler driven by advance(); time only moves when told to.

    Callbacks scheduled while advancing run in the same advance() call if
    they fall due before its target time.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._heap: List[Tuple[float, int, ScheduledCall]] = []
        self._sequence = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, call in self._heap if not call.cancelled)

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall:
        call = ScheduledCall(self._now + max(0.0, delay), callback)
        heapq.heappush(self._heap, (call.due, next(self._sequence), call))
        return call

    def advance(self, seconds: float) -> int:
        """Move virtual time forward; returns how many callbacks ran."""
        target = self._now + seconds
        ran = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, call = heapq.heappop(self._heap)
            self._now = max(self._now, due)
            if call.cancelled:
                continue
            try:
                call._run()
            except Exception:
                LOGGER.exception("Scheduled callback failed")
            ran += 1
        self._now = target
        return ran

    def run_all(self) -> int:
        """Run everything pending, however far in the future."""
        ran = 0
        while self._heap:
            ran += self.advance(max(0.0, self._heap[0][0] - self._now))
        return ran


# =============================================================================
# REAL TIME
# =============================================================================

class AsyncioScheduler:
    """
    Defers callbacks with loop.call_later on an asyncio event loop.

    Without an explicit loop, call_later needs a running one and raises
    RuntimeError otherwise.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


# =============================================================================
# NO EVENT LOOP
# =============================================================================

class CompletedCall:
    """Handle for a callback that already ran; cancelling it does nothing."""

    def cancel(self) -> None:
        pass


class ImmediateScheduler:
    """Runs every callback synchronously, ignoring the delay."""

    def call_later(self, delay: float, callback: Callback) -> CompletedCall:
        callback()
        return CompletedCall()


def default_scheduler() -> Scheduler:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        LOGGER.debug("No running event loop; panel settles run immediately")
        return ImmediateScheduler()
    return AsyncioScheduler()
