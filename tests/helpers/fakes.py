from __future__ import annotations

from typing import Iterable

from portfolio_deck.services.model import Instrument, Position


class ScriptedRandomSource:
    """Returns the given deltas in order (cycling), ignoring the range."""

    def __init__(self, deltas: Iterable[float]) -> None:
        self._deltas = list(deltas)
        self._i = 0
        self.calls: list[tuple[float, float]] = []

    def next_in_range(self, low: float, high: float) -> float:
        self.calls.append((low, high))
        value = self._deltas[self._i % len(self._deltas)]
        self._i += 1
        return value


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_position(
    ticker: str = "AAPL",
    *,
    quantity: float = 10,
    average_price: float = 150,
    cost: float | None = None,
    price: float = 160,
    currency: str = "USD",
) -> Position:
    return Position(
        instrument=Instrument(
            ticker=ticker,
            name=f"{ticker} Inc.",
            exchange="NASDAQ",
            currency=currency,
            last_traded_price=price,
        ),
        quantity=quantity,
        average_price=average_price,
        cost=quantity * average_price if cost is None else cost,
    )


def portfolio_json(wrapped: bool = True) -> dict:
    body = {
        "balance": {"netValue": 0, "pnl": 0, "pnlPercentage": 0},
        "positions": [
            {
                "instrument": {
                    "ticker": "AAPL",
                    "name": "Apple Inc.",
                    "exchange": "NASDAQ",
                    "currency": "USD",
                    "lastTradedPrice": 160,
                },
                "quantity": 10,
                "averagePrice": 150,
                "cost": 1500,
                "marketValue": 999,
                "pnl": 999,
                "pnlPercentage": 99,
            },
            {
                "instrument": {
                    "ticker": "SAP",
                    "name": "SAP SE",
                    "exchange": "XETRA",
                    "currency": "EUR",
                    "lastTradedPrice": 110,
                },
                "quantity": 5,
                "averagePrice": 120,
                "cost": 600,
                "marketValue": 550,
                "pnl": -50,
                "pnlPercentage": -8.33,
            },
        ],
    }
    return {"portfolio": body} if wrapped else body
