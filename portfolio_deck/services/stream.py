"""stream.py

The **live portfolio stream**: owns the recurring tick and fans out one
consistent snapshot per tick to every subscriber.

Lifecycle
---------
``IDLE`` → ``seed()`` + first subscriber → ``RUNNING`` (tick 0 is emitted at
once from the seed, then one tick per interval) → last subscriber detaches →
``STOPPED``. A fetch failure reported through ``fail()`` moves the stream to
``UNAVAILABLE``; subscribers get an explicit notice instead of a snapshot.

A stopped or unavailable stream only runs again after the caller hands it a
fresh seed; it never resumes from stale prices.

Each tick is computed synchronously from the previous tick's positions, and
positions and balance in a snapshot always come from the same price sample.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Protocol

from portfolio_deck.logger import get_logger, log_debug, log_error, log_info, log_warn

from .formatting import PortfolioView, format_snapshot
from .model import LiveSnapshot, Position
from .quotes import QuoteSimulator
from .scheduling import TimerHandle
from .valuation import build_snapshot

logger = get_logger(__name__)

SnapshotCallback = Callable[[LiveSnapshot], None]
UnavailableCallback = Callable[[str], None]


class Scheduler(Protocol):
    def call_every(self, interval: float, fn: Callable[[], None]) -> TimerHandle:
        ...


class StreamState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    UNAVAILABLE = "unavailable"


# -----------------------------------------------------------------------------
# Broadcaster
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Subscriber:
    on_snapshot: SnapshotCallback
    on_unavailable: Optional[UnavailableCallback] = None


class Broadcaster:
    """Ordered set of subscribers; delivers in subscription order.

    A subscriber that raises is logged and skipped so the others still
    receive the tick.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def add(self, subscriber: Subscriber) -> None:
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)

    def remove(self, subscriber: Subscriber) -> bool:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)
            return True
        return False

    def deliver(self, subscriber: Subscriber, snapshot: LiveSnapshot) -> None:
        try:
            subscriber.on_snapshot(snapshot)
        except Exception as exc:
            log_error(logger, "Subscriber failed on snapshot", tick=snapshot.tick, error=repr(exc))

    def notify_unavailable(self, subscriber: Subscriber, reason: str) -> None:
        if subscriber.on_unavailable is None:
            return
        try:
            subscriber.on_unavailable(reason)
        except Exception as exc:
            log_error(logger, "Subscriber failed on unavailable notice", error=repr(exc))

    def clear(self) -> None:
        self._subscribers.clear()

    def publish(self, snapshot: LiveSnapshot) -> None:
        # copy: a callback may unsubscribe itself mid-delivery
        for subscriber in list(self._subscribers):
            if subscriber in self._subscribers:
                self.deliver(subscriber, snapshot)

    def signal_unavailable(self, reason: str) -> None:
        for subscriber in list(self._subscribers):
            self.notify_unavailable(subscriber, reason)


class Subscription:
    """Handle returned by ``subscribe``; usable as a context manager."""

    def __init__(self, stream: "LivePortfolioStream", subscriber: Subscriber) -> None:
        self._stream = stream
        self._subscriber = subscriber
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._stream._detach(self._subscriber)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


# -----------------------------------------------------------------------------
# Stream
# -----------------------------------------------------------------------------

class LivePortfolioStream:
    def __init__(self, simulator: QuoteSimulator, scheduler: Scheduler, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._simulator = simulator
        self._scheduler = scheduler
        self.interval = interval

        self._broadcaster = Broadcaster()
        self._timer: Optional[TimerHandle] = None
        self._positions: Optional[tuple[Position, ...]] = None
        self._latest: Optional[LiveSnapshot] = None
        self._tick = 0
        self._state = StreamState.IDLE
        self._reason: Optional[str] = None

    # ---- read-only views ---------------------------------------------
    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def latest(self) -> Optional[LiveSnapshot]:
        return self._latest

    @property
    def tick_count(self) -> int:
        """Ticks computed since the last seed (tick 0 excluded)."""
        return self._tick

    @property
    def subscriber_count(self) -> int:
        return len(self._broadcaster)

    @property
    def reason(self) -> Optional[str]:
        """Why the stream is unavailable, if it is."""
        return self._reason

    @property
    def is_ticking(self) -> bool:
        return self._timer is not None

    # ---- inbound -----------------------------------------------------
    def seed(self, positions: Iterable[Position]) -> None:
        """(Re-)initialize from a fresh position set.

        Starts at once when subscribers are already waiting.
        """
        seed = tuple(positions)
        if not seed:
            raise ValueError("Cannot seed the live stream with an empty position set")
        tickers = [p.ticker for p in seed]
        duplicates = sorted({t for t in tickers if tickers.count(t) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tickers in seed: {', '.join(duplicates)}")

        self._release_timer()
        self._positions = seed
        self._latest = None
        self._tick = 0
        self._reason = None
        self._state = StreamState.IDLE
        log_info(logger, "Live stream seeded", positions=len(seed), tickers=tickers)

        if len(self._broadcaster):
            self._start()

    def fail(self, reason: str) -> None:
        """Record that no seed is available (e.g. the fetch failed)."""
        self._release_timer()
        self._positions = None
        self._latest = None
        self._reason = reason
        self._state = StreamState.UNAVAILABLE
        log_warn(logger, "Live stream unavailable", reason=reason)
        self._broadcaster.signal_unavailable(reason)

    # ---- subscriptions -----------------------------------------------
    def subscribe(
        self,
        on_snapshot: SnapshotCallback,
        on_unavailable: Optional[UnavailableCallback] = None,
    ) -> Subscription:
        subscriber = Subscriber(on_snapshot, on_unavailable)
        self._broadcaster.add(subscriber)
        subscription = Subscription(self, subscriber)

        if self._state is StreamState.UNAVAILABLE:
            self._broadcaster.notify_unavailable(subscriber, self._reason or "unavailable")
        elif self._state is StreamState.RUNNING and self._latest is not None:
            # late subscriber: replay the current tick, no recomputation
            self._broadcaster.deliver(subscriber, self._latest)
        elif self._state is StreamState.IDLE and self._positions is not None:
            self._start()
        return subscription

    def close(self) -> None:
        """Drop every subscriber and release the timer."""
        self._broadcaster.clear()
        if self._state is StreamState.RUNNING:
            self._stop()

    # ---- internals ---------------------------------------------------
    def _detach(self, subscriber: Subscriber) -> None:
        if not self._broadcaster.remove(subscriber):
            return
        if not len(self._broadcaster) and self._state is StreamState.RUNNING:
            self._stop()

    def _start(self) -> None:
        if self._positions is None:
            raise RuntimeError("Live stream cannot start without a seed")
        self._state = StreamState.RUNNING
        self._latest = build_snapshot(self._positions, tick=0)
        # timer first: a subscriber may detach while tick 0 is delivered
        self._timer = self._scheduler.call_every(self.interval, self._on_tick)
        log_info(logger, "Live stream started", interval=self.interval, subscribers=len(self._broadcaster))
        self._broadcaster.publish(self._latest)

    def _stop(self) -> None:
        self._release_timer()
        self._state = StreamState.STOPPED
        log_info(logger, "Live stream stopped", ticks=self._tick)

    def _release_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_tick(self) -> None:
        if self._state is not StreamState.RUNNING or self._positions is None:
            return
        positions = self._simulator.next_prices(self._positions)
        snapshot = build_snapshot(positions, tick=self._tick + 1)
        self._positions = positions
        self._tick = snapshot.tick
        self._latest = snapshot
        log_debug(logger, "Tick computed", tick=snapshot.tick, net_value=snapshot.balance.net_value)
        self._broadcaster.publish(snapshot)


def present(on_view: Callable[[PortfolioView], None], reporting_currency: str) -> SnapshotCallback:
    """Adapt a view callback so it can subscribe to the numeric stream."""

    def _on_snapshot(snapshot: LiveSnapshot) -> None:
        on_view(format_snapshot(snapshot, reporting_currency))

    return _on_snapshot
