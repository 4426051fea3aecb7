"""_helpers.py

Utility helpers shared by the Streamlit pages.

The module groups three kinds of helpers:

1. **Session helpers** – `get_live_session` keeps one `LiveSession` per
   browser session in ``st.session_state`` so the stream survives reruns.
2. **Formatting / DataFrame helpers** – timestamps in the local time-zone
   and `positions_frame`, which turns a `PortfolioView` into the table shown
   on the Portfolio page.
3. **Metric helpers** – `show_balance_header` prints the balance as three
   ``st.metric`` widgets coloured by P&L class.
"""

from __future__ import annotations
from pathlib import Path

# Third-party -----------------------------------------------------------------
import os
from datetime import datetime, timezone
from dotenv import load_dotenv
from zoneinfo import ZoneInfo  # Python 3.9+
import pandas as pd
import streamlit as st

# Project ---------------------------------------------------------------------
from portfolio_deck.services.formatting import PLACEHOLDER, BalanceView, PortfolioView
from portfolio_deck.services.session import LiveSession
from ._colors import _METRIC_DELTA, _PNL_LIGHT

load_dotenv(Path(__file__).parent.parent.parent / ".env")

_SESSION_KEY = "live_session"

# -----------------------------------------------------------------------------
# 1) Session helpers
# -----------------------------------------------------------------------------

def get_live_session() -> LiveSession:
    """Return this browser session's `LiveSession`, starting it on first use."""
    if _SESSION_KEY not in st.session_state:
        live = LiveSession()
        live.start()
        st.session_state[_SESSION_KEY] = live
    return st.session_state[_SESSION_KEY]


# -----------------------------------------------------------------------------
# 2) Formatting helpers
# -----------------------------------------------------------------------------

LOCAL_TZ_str = os.getenv("LOCAL_TZ", "UTC")  # e.g. "Europe/Berlin"
LOCAL_TZ = ZoneInfo(LOCAL_TZ_str)   # ← now a tzinfo
TS_FMT = "%d/%m %H:%M:%S"  # Timestamp format for human-readable dates

POSITION_COLUMNS = ["Ticker", "Name", "Quantity", "Price", "Value", "P&L", "P&L %"]


def convert_to_local_time(ts: int | float | datetime, fmt: str = TS_FMT) -> str:
    """
    Convert a UTC timestamp (seconds or ms) or datetime to the local time zone.

    Naive datetimes are assumed to be UTC; anything else renders as the
    placeholder dash.
    """
    # 1) If it's numeric, auto-scale ms → s
    if isinstance(ts, (int, float)):
        # If it's improbably large for seconds, assume ms
        if ts > 1e11:
            ts = ts / 1000.0
        ts = datetime.fromtimestamp(ts, tz=timezone.utc)
        # 2) If naive datetime, assume UTC
    elif isinstance(ts, datetime):
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
    else:
        return PLACEHOLDER

    # 3) Convert to local tz and format
    return ts.astimezone(LOCAL_TZ).strftime(fmt)


def positions_frame(view: PortfolioView | None) -> pd.DataFrame:
    """One text row per position, in display order."""
    if view is None or not view.positions:
        return pd.DataFrame(columns=POSITION_COLUMNS)
    rows = [
        {
            "Ticker": p.ticker,
            "Name": p.name,
            "Quantity": p.quantity_text.removeprefix("Qty: "),
            "Price": p.price_text.removeprefix("Price: "),
            "Value": p.market_value_text,
            "P&L": p.pnl_text,
            "P&L %": p.pnl_percentage_text,
        }
        for p in view.positions
    ]
    return pd.DataFrame(rows, columns=POSITION_COLUMNS)

# -----------------------------------------------------------------------------
# 3) Streamlit metric helpers
# -----------------------------------------------------------------------------

def show_balance_header(balance: BalanceView, currency: str) -> None:
    """Print net value / P&L / P&L % as three st.metric widgets."""
    key = balance.pnl_class.value
    light = _PNL_LIGHT[key]
    delta_color = _METRIC_DELTA[key]
    # st.metric colours the delta by its leading sign; placeholders have none
    delta = balance.pnl_text if balance.pnl_text != PLACEHOLDER else None

    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric(f"Total Portfolio Value ({currency})", balance.net_value_text)
    with c2:
        st.metric(f"{light} P&L", balance.pnl_text, delta, delta_color=delta_color)
    with c3:
        pct_delta = balance.pnl_percentage_text if delta else None
        st.metric(f"{light} P&L %", balance.pnl_percentage_text, pct_delta, delta_color=delta_color)
