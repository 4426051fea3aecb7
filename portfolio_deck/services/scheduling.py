"""scheduling.py

Recurring timers for the live stream. Both schedulers are cooperative and
single-threaded:

* ``PollingScheduler`` fires due callbacks whenever ``poll()`` is called.
  The Streamlit page polls on every auto-refresh rerun; tests drive it with
  a fake clock.
* ``AsyncioScheduler`` chains ``loop.call_at`` on a running event loop.

Either way a timer fires once per elapsed interval, in order, and a
cancelled ``TimerHandle`` never fires again.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

from portfolio_deck.logger import get_logger, log_warn

logger = get_logger(__name__)

Tick = Callable[[], None]


class TimerHandle:
    """Cancellation handle for one recurring timer (idempotent cancel)."""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None) -> None:
        self._cancelled = False
        self._on_cancel = on_cancel

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()


def _check_interval(interval: float) -> None:
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")


@dataclass
class _PolledTimer:
    interval: float
    fn: Tick
    next_due: float
    handle: TimerHandle


class PollingScheduler:
    """Fires due timers when polled.

    By default every elapsed interval fires, so a page that was not rerun for
    a while replays the whole backlog on its next poll. ``max_catch_up``
    bounds that work: once a timer has fired that many times in one poll the
    rest of its backlog is skipped and the next call is one interval away.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_catch_up: Optional[int] = None,
    ) -> None:
        if max_catch_up is not None and max_catch_up < 1:
            raise ValueError(f"max_catch_up must be at least 1, got {max_catch_up}")
        self._clock = clock
        self._timers: list[_PolledTimer] = []
        self.max_catch_up = max_catch_up

    def call_every(self, interval: float, fn: Tick) -> TimerHandle:
        _check_interval(interval)
        handle = TimerHandle(on_cancel=lambda: self._drop(timer))
        timer = _PolledTimer(interval, fn, self._clock() + interval, handle)
        self._timers.append(timer)
        return handle

    def poll(self) -> int:
        """Fire every elapsed interval; returns the number of calls made."""
        now = self._clock()
        fired = 0
        for timer in list(self._timers):
            runs = 0
            while not timer.handle.cancelled and timer.next_due <= now:
                if self.max_catch_up is not None and runs >= self.max_catch_up:
                    skipped = int((now - timer.next_due) // timer.interval) + 1
                    timer.next_due += skipped * timer.interval
                    log_warn(logger, "Skipped overdue ticks", skipped=skipped, interval=timer.interval)
                    break
                timer.next_due += timer.interval
                timer.fn()
                runs += 1
            fired += runs
        return fired

    @property
    def active_timers(self) -> int:
        return len(self._timers)

    def _drop(self, timer: _PolledTimer) -> None:
        if timer in self._timers:
            self._timers.remove(timer)


class AsyncioScheduler:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_every(self, interval: float, fn: Tick) -> TimerHandle:
        _check_interval(interval)
        loop = self._loop or asyncio.get_running_loop()
        start = loop.time()
        state = {"n": 1, "pending": None}

        def _fire() -> None:
            if handle.cancelled:
                return
            fn()
            if not handle.cancelled:
                state["n"] += 1
                # anchor on the start time so ticks do not drift
                state["pending"] = loop.call_at(start + state["n"] * interval, _fire)

        def _cancel() -> None:
            if state["pending"] is not None:
                state["pending"].cancel()

        handle = TimerHandle(on_cancel=_cancel)
        state["pending"] = loop.call_at(start + interval, _fire)
        return handle
