"""
Timer scheduling for tick-driven motion.

The executor owns a Scheduler instead of relying on ambient global timers.
Every started timer returns a TimerHandle; ``cancel_all()`` tears down all
outstanding timers at shutdown.

Two implementations:

* ``ManualScheduler`` -- synthetic clock, advanced explicitly.  Deterministic,
  used by tests and offline rendering::

      sched = ManualScheduler()
      sched.call_every(0.016, tick)
      sched.advance(1.0)   # fires tick ~62 times

* ``AsyncioScheduler`` -- real time on an asyncio event loop.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle:
    """Cancellation handle for one scheduled timer."""

    __slots__ = ("timer_id", "interval", "callback", "cancelled", "_native")

    def __init__(self, timer_id: int, interval: Optional[float], callback: Callback):
        self.timer_id = timer_id
        self.interval = interval  # None for one-shot timers
        self.callback = callback
        self.cancelled = False
        self._native = None

    @property
    def periodic(self) -> bool:
        return self.interval is not None

    def __repr__(self) -> str:
        kind = f"every {self.interval:.3f}s" if self.periodic else "once"
        return f"<TimerHandle #{self.timer_id} {kind}{' cancelled' if self.cancelled else ''}>"


class Scheduler:
    """Base class: bookkeeping of live handles; subclasses arm real timers."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._active: dict[int, TimerHandle] = {}

    # -- clock -----------------------------------------------------------

    def now(self) -> float:
        """Current time in seconds."""
        raise NotImplementedError

    # -- timers ----------------------------------------------------------

    def call_every(self, interval: float, callback: Callback) -> TimerHandle:
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        handle = TimerHandle(next(self._ids), interval, callback)
        self._active[handle.timer_id] = handle
        self._arm(handle, interval)
        return handle

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle(next(self._ids), None, callback)
        self._active[handle.timer_id] = handle
        self._arm(handle, max(0.0, delay))
        return handle

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        if handle is None or handle.cancelled:
            return
        handle.cancelled = True
        self._active.pop(handle.timer_id, None)
        self._disarm(handle)

    def cancel_all(self) -> int:
        """Cancel every outstanding timer. Returns how many were cancelled."""
        handles = list(self._active.values())
        for handle in handles:
            self.cancel(handle)
        if handles:
            logger.info("Cancelled %d outstanding timers", len(handles))
        return len(handles)

    @property
    def active_count(self) -> int:
        return len(self._active)

    # -- subclass hooks --------------------------------------------------

    def _arm(self, handle: TimerHandle, delay: float) -> None:
        raise NotImplementedError

    def _disarm(self, handle: TimerHandle) -> None:
        pass

    def _fire(self, handle: TimerHandle) -> None:
        """Run a timer callback. A raising callback is logged and its timer cancelled."""
        if handle.cancelled:
            return
        if not handle.periodic:
            self._active.pop(handle.timer_id, None)
            handle.cancelled = True
        try:
            handle.callback()
        except Exception:
            logger.exception("Timer callback %r failed; cancelling timer", handle)
            self.cancel(handle)


class ManualScheduler(Scheduler):
    """Scheduler on a synthetic clock, advanced by ``advance()``."""

    def __init__(self, start: float = 0.0):
        super().__init__()
        self._now = float(start)
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._order = itertools.count()

    def now(self) -> float:
        return self._now

    def _arm(self, handle: TimerHandle, delay: float) -> None:
        heapq.heappush(self._queue, (self._now + delay, next(self._order), handle))

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in time order.

        Returns the number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative amount: {seconds}")
        return self.advance_to(self._now + seconds)

    def advance_to(self, target: float) -> int:
        """Move the clock to the absolute time *target*, firing due timers."""
        if target < self._now:
            raise ValueError(f"Cannot move the clock back from {self._now} to {target}")
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            self._fire(handle)
            fired += 1
            if handle.periodic and not handle.cancelled:
                heapq.heappush(self._queue, (due + handle.interval, next(self._order), handle))
        self._now = target
        return fired

    def run_until_idle(self, max_time: float = 600.0) -> float:
        """Advance until no timers remain or *max_time* seconds have passed.

        Returns the simulated time that elapsed.
        """
        started = self._now
        deadline = started + max_time
        while self.active_count:
            next_due = self.next_due()
            if next_due is None or next_due > deadline:
                break
            self.advance_to(max(next_due, self._now))
        return self._now - started

    def next_due(self) -> Optional[float]:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
        return self._queue[0][0] if self._queue else None


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop's ``call_later``."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        super().__init__()
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def _arm(self, handle: TimerHandle, delay: float) -> None:
        handle._native = self._loop.call_later(delay, self._on_native, handle)

    def _disarm(self, handle: TimerHandle) -> None:
        if handle._native is not None:
            handle._native.cancel()
            handle._native = None

    def _on_native(self, handle: TimerHandle) -> None:
        self._fire(handle)
        if handle.periodic and not handle.cancelled:
            self._arm(handle, handle.interval)
