"""formatting.py

Turns valuation numbers into display-ready text for the dashboard.

Kept apart from ``valuation`` so display rules can change without touching
the math. Nothing in here raises on odd input: an unknown currency code
falls back to a ``$`` prefix, and a non-finite number renders as the
placeholder dash.

Examples
--------
>>> format_signed_currency(100, "USD")
'+$100.00'
>>> format_percentage(-2.5)
'-2.50%'
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .model import Balance, LiveSnapshot, ValuatedPosition

PLACEHOLDER = "–"
FALLBACK_SYMBOL = "$"

_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "KRW": "₩",
    "TRY": "₺",
    "AUD": "A$",
    "CAD": "CA$",
    "HKD": "HK$",
    "NZD": "NZ$",
    "SGD": "S$",
}


class PnlClass(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


# -----------------------------------------------------------------------------
# View models
# -----------------------------------------------------------------------------

class _View(BaseModel):
    model_config = ConfigDict(frozen=True)


class PositionView(_View):
    ticker: str
    name: str
    quantity_text: str
    price_text: str
    market_value_text: str
    pnl_text: str
    pnl_percentage_text: str
    pnl_class: PnlClass

    @property
    def row_key(self) -> tuple[str, str, str]:
        """Identity used to decide whether a table row really changed."""
        return (self.ticker, self.market_value_text, self.pnl_text)


class BalanceView(_View):
    net_value_text: str
    pnl_text: str
    pnl_percentage_text: str
    pnl_class: PnlClass


class PortfolioView(_View):
    tick: int
    emitted_at: datetime
    balance: BalanceView
    positions: tuple[PositionView, ...]


# -----------------------------------------------------------------------------
# Number helpers
# -----------------------------------------------------------------------------

def currency_symbol(code: Optional[str]) -> Optional[str]:
    """Symbol for ``code``; the code itself if unknown but well formed.

    Returns ``None`` for anything that is not a three-letter code.
    """
    if not isinstance(code, str):
        return None
    code = code.strip().upper()
    if len(code) != 3 or not code.isalpha():
        return None
    return _SYMBOLS.get(code, code)


def _prefix(code: Optional[str]) -> str:
    symbol = currency_symbol(code) or FALLBACK_SYMBOL
    # bare ISO codes read better with a gap: "CHF 12.00"
    return f"{symbol} " if symbol.isalpha() and len(symbol) == 3 else symbol


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False


def format_currency(amount: float, code: Optional[str]) -> str:
    """``1234.5, "USD"`` → ``"$1,234.50"`` (two decimals, grouped)."""
    if not _finite(amount):
        return PLACEHOLDER
    sign = "-" if amount < 0 else ""
    return f"{sign}{_prefix(code)}{abs(amount):,.2f}"


def format_signed_currency(amount: float, code: Optional[str]) -> str:
    """Like ``format_currency`` but always sign-prefixed (``+$5.00``)."""
    if not _finite(amount):
        return PLACEHOLDER
    sign = "-" if amount < 0 else "+"
    return f"{sign}{_prefix(code)}{abs(amount):,.2f}"


def format_percentage(pct: float) -> str:
    """``6.666…`` → ``"+6.67%"``; input is already in percent units."""
    if not _finite(pct):
        return PLACEHOLDER
    sign = "-" if pct < 0 else "+"
    return f"{sign}{abs(pct):,.2f}%"


def pnl_class(pnl: float) -> PnlClass:
    if not _finite(pnl):
        return PnlClass.NEUTRAL  # renders as PLACEHOLDER, which carries no sign
    return PnlClass.POSITIVE if pnl >= 0 else PnlClass.NEGATIVE


def pnl_class_from_text(text: str) -> PnlClass:
    """Classify from an already formatted P&L string (legacy UI path)."""
    if "-" in text:
        return PnlClass.NEGATIVE
    if "+" in text:
        return PnlClass.POSITIVE
    return PnlClass.NEUTRAL


# -----------------------------------------------------------------------------
# View builders
# -----------------------------------------------------------------------------

def format_position(position: ValuatedPosition, currency_code: Optional[str] = None) -> PositionView:
    code = currency_code or position.currency
    return PositionView(
        ticker=position.ticker,
        name=position.name,
        quantity_text=f"Qty: {position.quantity:.2f}",
        price_text=f"Price: {format_currency(position.last_traded_price, code)}",
        market_value_text=format_currency(position.market_value, code),
        pnl_text=format_signed_currency(position.pnl, code),
        pnl_percentage_text=format_percentage(position.pnl_percentage),
        pnl_class=pnl_class(position.pnl),
    )


def format_balance(balance: Balance, reporting_currency: str) -> BalanceView:
    return BalanceView(
        net_value_text=format_currency(balance.net_value, reporting_currency),
        pnl_text=format_signed_currency(balance.pnl, reporting_currency),
        pnl_percentage_text=format_percentage(balance.pnl_percentage),
        pnl_class=pnl_class(balance.pnl),
    )


def placeholder_balance_view() -> BalanceView:
    """Header shown while loading or when the portfolio is unavailable."""
    return BalanceView(
        net_value_text=PLACEHOLDER,
        pnl_text=PLACEHOLDER,
        pnl_percentage_text=PLACEHOLDER,
        pnl_class=PnlClass.NEUTRAL,
    )


def format_snapshot(snapshot: LiveSnapshot, reporting_currency: str) -> PortfolioView:
    return PortfolioView(
        tick=snapshot.tick,
        emitted_at=snapshot.emitted_at,
        balance=format_balance(snapshot.balance, reporting_currency),
        positions=tuple(format_position(p) for p in snapshot.positions),
    )


def changed_rows(previous: Optional[PortfolioView], current: PortfolioView) -> list[str]:
    """Tickers whose row text differs from ``previous`` (all if none)."""
    if previous is None:
        return [p.ticker for p in current.positions]
    before = {p.ticker: p.row_key for p in previous.positions}
    return [p.ticker for p in current.positions if before.get(p.ticker) != p.row_key]
