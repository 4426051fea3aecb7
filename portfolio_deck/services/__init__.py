"""Public service API."""
from .api import PortfolioUnavailableError, fetch_portfolio, load_seed
from .formatting import (
    BalanceView,
    PnlClass,
    PortfolioView,
    PositionView,
    format_balance,
    format_position,
    format_snapshot,
)
from .model import Balance, Instrument, LiveSnapshot, Position, ValuatedPosition
from .quotes import QuoteSimulator, SystemRandomSource
from .scheduling import AsyncioScheduler, PollingScheduler
from .session import LiveSession
from .stream import LivePortfolioStream, StreamState, present
from .valuation import aggregate, build_snapshot, valuate

__all__ = [
    "fetch_portfolio",
    "load_seed",
    "PortfolioUnavailableError",
    "Balance",
    "Instrument",
    "LiveSnapshot",
    "Position",
    "ValuatedPosition",
    "BalanceView",
    "PnlClass",
    "PortfolioView",
    "PositionView",
    "format_balance",
    "format_position",
    "format_snapshot",
    "QuoteSimulator",
    "SystemRandomSource",
    "AsyncioScheduler",
    "PollingScheduler",
    "LiveSession",
    "LivePortfolioStream",
    "StreamState",
    "present",
    "aggregate",
    "build_snapshot",
    "valuate",
]
