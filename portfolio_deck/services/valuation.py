"""valuation.py

Pure valuation math: per-position figures and the portfolio aggregate.

No I/O and no formatting here; the formatter consumes these numbers.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .model import Balance, LiveSnapshot, Position, Valuation, ValuatedPosition


def _pnl_pct(pnl: float, cost: float) -> float:
    # zero (or negative) cost reports 0 %, never NaN / inf
    return pnl * 100.0 / cost if cost > 0 else 0.0


def valuate(position: Position) -> Valuation:
    market_value = position.quantity * position.price
    pnl = market_value - position.cost
    return Valuation(
        market_value=market_value,
        pnl=pnl,
        pnl_percentage=_pnl_pct(pnl, position.cost),
    )


def valuate_position(position: Position) -> ValuatedPosition:
    v = valuate(position)
    inst = position.instrument
    return ValuatedPosition(
        ticker=inst.ticker,
        name=inst.name,
        exchange=inst.exchange,
        currency=inst.currency,
        quantity=position.quantity,
        average_price=position.average_price,
        cost=position.cost,
        last_traded_price=inst.last_traded_price,
        market_value=v.market_value,
        pnl=v.pnl,
        pnl_percentage=v.pnl_percentage,
    )


def aggregate(positions: Iterable[Position | ValuatedPosition]) -> Balance:
    """Cost-weighted portfolio balance.

    ``pnl_percentage`` is total P&L over total cost, not the mean of the
    per-position percentages.
    """
    net_value = pnl = total_cost = 0.0
    for p in positions:
        if isinstance(p, Position):
            v = valuate(p)
            market_value, position_pnl = v.market_value, v.pnl
        else:
            market_value, position_pnl = p.market_value, p.pnl
        net_value += market_value
        pnl += position_pnl
        total_cost += p.cost

    return Balance(
        net_value=net_value,
        pnl=pnl,
        pnl_percentage=_pnl_pct(pnl, total_cost),
        total_cost=total_cost,
    )


def build_snapshot(positions: Sequence[Position], tick: int) -> LiveSnapshot:
    """Valuate positions and balance from the *same* price sample."""
    valuated = tuple(valuate_position(p) for p in positions)
    return LiveSnapshot(tick=tick, positions=valuated, balance=aggregate(valuated))
