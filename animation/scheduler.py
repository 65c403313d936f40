"""
Host schedulers — timers measured in milliseconds.

Two implementations share one interface:

  VirtualScheduler  deterministic clock advanced by hand; drives tests, the
                    SVG snapshot and the offline video timeline.
  AsyncioScheduler  real time on the running asyncio event loop; drives the
                    live WebSocket stream.

Both run every callback on a single timeline, in due-time order, so draw
calls are never interleaved.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, Protocol

Callback = Callable[[], None]


class TimerHandle:
    """Cancellation handle returned by call_later / call_every."""

    def __init__(self) -> None:
        self.cancelled = False
        self._on_cancel: Callable[[], None] | None = None

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()


class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle: ...

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle: ...


# ── Virtual clock ─────────────────────────────────────────────────────────────

class VirtualScheduler:
    """
    Deterministic scheduler with a manually advanced millisecond clock.

    Timers due at the same instant fire in the order they were scheduled.
    A repeating timer fires first one full period after it is created.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = start_ms
        self._queue: list[tuple[float, int, TimerHandle, Callback, float | None]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h, _, _ in self._queue if not h.cancelled)

    def _push(self, due: float, handle: TimerHandle, callback: Callback, period: float | None) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback, period))

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        self._push(self._now + max(delay_ms, 0.0), handle, callback, None)
        return handle

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        if period_ms <= 0:
            raise ValueError(f"period must be positive, got {period_ms}")
        handle = TimerHandle()
        self._push(self._now + period_ms, handle, callback, period_ms)
        return handle

    def _fire_next(self, until: float | None) -> bool:
        while self._queue:
            due, _, handle, callback, period = self._queue[0]
            if until is not None and due > until:
                return False
            heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            if period is not None:
                # Re-arm before running so the callback can cancel its own timer.
                self._push(due + period, handle, callback, period)
            callback()
            return True
        return False

    def advance(self, ms: float) -> None:
        """Move the clock forward by `ms`, firing every timer that falls due."""
        target = self._now + ms
        while self._fire_next(target):
            pass
        self._now = target

    def run_until_idle(self, max_ms: float = 3_600_000) -> float:
        """
        Fire timers until none remain. Returns the clock time afterwards.

        Raises:
            RuntimeError: If timers are still pending after `max_ms` of virtual time,
                          e.g. a repeating timer that is never cancelled.
        """
        limit = self._now + max_ms
        while self._fire_next(limit):
            pass
        if self.pending:
            raise RuntimeError(f"Scheduler still has {self.pending} pending timer(s) after {max_ms} ms")
        return self._now


# ── asyncio event loop ────────────────────────────────────────────────────────

class AsyncioScheduler:
    """Real-time scheduler backed by loop.call_later on the running event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()
        self._t0 = self._loop.time()

    def now(self) -> float:
        return (self._loop.time() - self._t0) * 1000.0

    def call_later(self, delay_ms: float, callback: Callback) -> TimerHandle:
        handle = TimerHandle()
        timer = self._loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)
        handle._on_cancel = timer.cancel
        return handle

    def call_every(self, period_ms: float, callback: Callback) -> TimerHandle:
        if period_ms <= 0:
            raise ValueError(f"period must be positive, got {period_ms}")
        handle = TimerHandle()
        period_s = period_ms / 1000.0
        next_due = self._loop.time() + period_s
        current: list[asyncio.TimerHandle] = []

        def _tick() -> None:
            nonlocal next_due
            # Schedule against the ideal due time so the period does not drift.
            next_due += period_s
            current[0] = self._loop.call_at(next_due, _tick)
            callback()

        current.append(self._loop.call_at(next_due, _tick))
        handle._on_cancel = lambda: current[0].cancel()
        return handle
