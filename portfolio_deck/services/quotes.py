"""quotes.py

Quote simulator: produces the next tick's prices by a bounded random walk.

Randomness is injected through a tiny ``RandomSource`` protocol so tests can
script the exact deltas drawn on each tick.
"""

from __future__ import annotations

import random
from typing import Iterable, Protocol

from .model import Position

DEFAULT_MAX_DELTA = 0.10
DEFAULT_PRICE_FLOOR = 0.01


class RandomSource(Protocol):
    def next_in_range(self, low: float, high: float) -> float:
        """Return a uniform draw from ``[low, high]``."""
        ...


class SystemRandomSource:
    """``random.Random`` behind the ``RandomSource`` protocol.

    Passing a ``seed`` makes a run reproducible.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def next_in_range(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)


class QuoteSimulator:
    def __init__(
        self,
        random_source: RandomSource,
        max_delta: float = DEFAULT_MAX_DELTA,
        price_floor: float = DEFAULT_PRICE_FLOOR,
    ) -> None:
        if not 0 <= max_delta < 1:
            raise ValueError(f"max_delta must be in [0, 1), got {max_delta}")
        if price_floor <= 0:
            raise ValueError(f"price_floor must be positive, got {price_floor}")
        self._random = random_source
        self.max_delta = max_delta
        self.price_floor = price_floor

    def next_price(self, price: float) -> float:
        delta = self._random.next_in_range(-self.max_delta, self.max_delta)
        return max(self.price_floor, price * (1.0 + delta))

    def next_prices(self, positions: Iterable[Position]) -> tuple[Position, ...]:
        """One independent delta per position; returns new records in order."""
        return tuple(p.with_price(self.next_price(p.price)) for p in positions)
