"""model.py

Pydantic **domain models** shared across the live pipeline and the UI.

Two families live here:

* *Wire* models (``*Payload``) mirror the JSON delivered by the portfolio
  endpoint. They accept the camelCase keys of the payload as well as the
  snake_case field names.
* *Domain* records (``Instrument``, ``Position``, ``LiveSnapshot`` …) are
  **frozen**: every tick builds brand-new records, so a snapshot handed to a
  subscriber can never be changed behind its back.

Derived figures (market value, P&L, P&L %) are *not* stored on
``Position``; they only exist on ``ValuatedPosition`` / ``Balance``, which
are recomputed from scratch each tick.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from datetime import datetime, timezone

# Third-party
from pydantic import BaseModel, ConfigDict, Field

# -----------------------------------------------------------------------------
# Wire models (as delivered by the portfolio endpoint)
# -----------------------------------------------------------------------------

class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class InstrumentPayload(_Payload):
    """Instrument block nested inside each position."""

    ticker: str
    name: str
    exchange: str
    currency: str                                                  # ISO code, e.g. "USD"
    last_traded_price: float = Field(..., alias="lastTradedPrice", gt=0)


class PositionPayload(_Payload):
    """Position row; the derived fields are a server-side cache."""

    instrument: InstrumentPayload
    quantity: float
    average_price: float = Field(..., alias="averagePrice")
    cost: float
    market_value: float = Field(0.0, alias="marketValue")
    pnl: float = 0.0
    pnl_percentage: float = Field(0.0, alias="pnlPercentage")


class BalancePayload(_Payload):
    net_value: float = Field(..., alias="netValue")
    pnl: float
    pnl_percentage: float = Field(..., alias="pnlPercentage")


class PortfolioPayload(_Payload):
    """Top-level portfolio: balance header + ordered positions."""

    balance: BalancePayload
    positions: list[PositionPayload]


class PortfolioResponse(_Payload):
    portfolio: PortfolioPayload


# -----------------------------------------------------------------------------
# Domain records (immutable, rebuilt every tick)
# -----------------------------------------------------------------------------

class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class Instrument(_Record):
    """Identity fields plus the only field that moves between ticks."""

    ticker: str
    name: str
    exchange: str = ""
    currency: str = "USD"
    last_traded_price: float = Field(..., gt=0)

    def with_price(self, price: float) -> "Instrument":
        return Instrument(
            ticker=self.ticker,
            name=self.name,
            exchange=self.exchange,
            currency=self.currency,
            last_traded_price=price,
        )


class Position(_Record):
    """A holding: constant quantity & cost, live price via ``instrument``."""

    instrument: Instrument
    quantity: float
    average_price: float
    cost: float                 # quantity × average price at acquisition

    @property
    def ticker(self) -> str:
        return self.instrument.ticker

    @property
    def price(self) -> float:
        return self.instrument.last_traded_price

    def with_price(self, price: float) -> "Position":
        """Return a *new* position whose instrument trades at ``price``."""
        return Position(
            instrument=self.instrument.with_price(price),
            quantity=self.quantity,
            average_price=self.average_price,
            cost=self.cost,
        )

    @classmethod
    def from_payload(cls, payload: PositionPayload) -> "Position":
        """Keep the seed fields only; cached derived figures are dropped."""
        inst = payload.instrument
        return cls(
            instrument=Instrument(
                ticker=inst.ticker,
                name=inst.name,
                exchange=inst.exchange,
                currency=inst.currency,
                last_traded_price=inst.last_traded_price,
            ),
            quantity=payload.quantity,
            average_price=payload.average_price,
            cost=payload.cost,
        )


class Valuation(_Record):
    market_value: float
    pnl: float
    pnl_percentage: float


class ValuatedPosition(_Record):
    """Position + its freshly computed valuation for one tick."""

    ticker: str
    name: str
    exchange: str
    currency: str
    quantity: float
    average_price: float
    cost: float
    last_traded_price: float
    market_value: float
    pnl: float
    pnl_percentage: float


class Balance(_Record):
    """Portfolio aggregate; always derived from one tick's positions."""

    net_value: float
    pnl: float
    pnl_percentage: float
    total_cost: float = 0.0


class LiveSnapshot(_Record):
    """Everything a subscriber sees for one tick."""

    tick: int
    positions: tuple[ValuatedPosition, ...]
    balance: Balance
    emitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# -----------------------------------------------------------------------------
# Seed extraction
# -----------------------------------------------------------------------------

def seed_from_payload(portfolio: PortfolioPayload) -> tuple[Position, ...]:
    """Turn a fetched portfolio into the tick-0 seed (display order kept).

    The delivered balance and cached per-position figures are ignored; they
    are recomputed on every tick.
    """
    if not portfolio.positions:
        raise ValueError("Portfolio has no positions to seed the live stream")

    seen: set[str] = set()
    for p in portfolio.positions:
        if p.instrument.ticker in seen:
            raise ValueError(f"Duplicate ticker in portfolio: {p.instrument.ticker}")
        seen.add(p.instrument.ticker)

    return tuple(Position.from_payload(p) for p in portfolio.positions)
