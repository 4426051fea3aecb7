"""session.py

Glue between the live stream and one view consumer (a dashboard session).

``LiveSession`` loads the seed through the fetch collaborator, subscribes a
formatted-view callback and keeps the latest ``PortfolioView`` around for the
page to draw. A failed fetch puts the stream in its unavailable state and the
session exposes the reason instead of stale numbers.
"""

from __future__ import annotations

from typing import Callable, Optional

from portfolio_deck.config import settings
from portfolio_deck.logger import get_logger, log_info

from .api import PortfolioUnavailableError, load_seed
from .formatting import (
    BalanceView,
    PortfolioView,
    changed_rows,
    format_snapshot,
    placeholder_balance_view,
)
from .model import Position
from .quotes import QuoteSimulator, SystemRandomSource
from .scheduling import PollingScheduler
from .stream import LivePortfolioStream, Subscription, present
from .valuation import build_snapshot

logger = get_logger(__name__)

SeedLoader = Callable[[], tuple[Position, ...]]


class LiveSession:
    def __init__(
        self,
        *,
        loader: SeedLoader = load_seed,
        scheduler: Optional[PollingScheduler] = None,
        simulator: Optional[QuoteSimulator] = None,
        interval: Optional[float] = None,
        reporting_currency: Optional[str] = None,
    ) -> None:
        cfg = settings()
        self.scheduler = scheduler or PollingScheduler(max_catch_up=cfg["MAX_CATCH_UP_TICKS"])
        simulator = simulator or QuoteSimulator(
            SystemRandomSource(cfg["RANDOM_SEED"]),
            max_delta=cfg["MAX_PRICE_DELTA"],
            price_floor=cfg["PRICE_FLOOR"],
        )
        if interval is None:
            interval = cfg["TICK_INTERVAL_MS"] / 1000
        self.reporting_currency = reporting_currency or cfg["REPORTING_CURRENCY"]
        self.stream = LivePortfolioStream(simulator, self.scheduler, interval)

        self._loader = loader
        self._subscription: Optional[Subscription] = None
        self.view: Optional[PortfolioView] = None
        self.previous_view: Optional[PortfolioView] = None
        self.unavailable_reason: Optional[str] = None

    # ---- state -------------------------------------------------------
    @property
    def connected(self) -> bool:
        return self._subscription is not None and self._subscription.active

    @property
    def is_loading(self) -> bool:
        return self.view is None and self.unavailable_reason is None

    @property
    def balance_view(self) -> BalanceView:
        return self.view.balance if self.view is not None else placeholder_balance_view()

    def changed_tickers(self) -> list[str]:
        if self.view is None:
            return []
        return changed_rows(self.previous_view, self.view)

    # ---- lifecycle ---------------------------------------------------
    def start(self) -> None:
        """Subscribe, then fetch the seed (tick 0 is delivered at once)."""
        self.connect()
        self.load()

    def load(self) -> bool:
        """Fetch a fresh seed into the stream.

        While paused the session is not subscribed, so it records the
        outcome itself: the unavailable reason on failure, the tick-0 view of
        the new seed on success.
        """
        try:
            seed = self._loader()
        except PortfolioUnavailableError as exc:
            self.stream.fail(str(exc))
            self._on_unavailable(str(exc))
            return False
        self.unavailable_reason = None
        self.stream.seed(seed)
        if not self.connected:
            self.previous_view = None
            self.view = format_snapshot(build_snapshot(seed, tick=0), self.reporting_currency)
        return True

    def connect(self) -> None:
        if self.connected:
            return
        self._subscription = self.stream.subscribe(
            present(self._on_view, self.reporting_currency),
            self._on_unavailable,
        )

    def pause(self) -> None:
        """Detach; with no other subscribers the stream stops ticking."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
            log_info(logger, "Live session paused", tick=self.view.tick if self.view else None)

    def resume(self) -> bool:
        """Re-fetch a fresh seed and reattach; stale prices are not resumed."""
        self.connect()
        return self.load()

    def refresh(self) -> int:
        """Run every tick that fell due since the last call."""
        return self.scheduler.poll()

    # ---- callbacks ---------------------------------------------------
    def _on_view(self, view: PortfolioView) -> None:
        self.previous_view = self.view
        self.view = view
        self.unavailable_reason = None

    def _on_unavailable(self, reason: str) -> None:
        self.previous_view = None
        self.view = None
        self.unavailable_reason = reason
