"""portfolio.py

Streamlit page that visualises the **live portfolio**.

Main features
-------------
* Header with total portfolio value, P&L and P&L % in the reporting
  currency, coloured green / red by P&L sign.
* Donut pie chart of market value per position; slices below 1 % are
  grouped into *Other* so the legend stays readable.
* Positions table; rows that moved on the latest tick are highlighted, the
  rest are dimmed.
* Sidebar controls to pause live prices (detaches the subscription so the
  stream stops) and to reload the portfolio from the endpoint.
"""

# Standard library -------------------------------------------------------------
from __future__ import annotations

# Third‑party ------------------------------------------------------------------
import pandas as pd
import plotly.express as px
import streamlit as st

# First‑party / project --------------------------------------------------------
from portfolio_deck.services.formatting import placeholder_balance_view
from ._colors import _row_style
from ._helpers import convert_to_local_time, get_live_session, positions_frame, show_balance_header

# -----------------------------------------------------------------------------
# Page renderer
# -----------------------------------------------------------------------------

def _value_pie(live) -> None:
    snapshot = live.stream.latest
    if snapshot is None:
        return
    df = pd.DataFrame(
        [{"ticker": p.ticker, "value": p.market_value} for p in snapshot.positions]
    )
    total = df["value"].sum()
    if total <= 0:
        return
    df["share"] = df["value"] / total

    lim_min_share = 0.01  # threshold = 1 %
    pie_df = df.loc[df["share"] >= lim_min_share, ["ticker", "value"]].reset_index(drop=True)
    other = df.loc[df["share"] < lim_min_share, "value"].sum()
    if other > 0:
        pie_df.loc[len(pie_df)] = {"ticker": "Other", "value": other}

    fig = px.pie(pie_df, names="ticker", values="value", hole=0.4)
    fig.update_layout(
        autosize=True,
        height=450,
        margin=dict(t=40, b=40, l=40, r=40),
    )
    st.plotly_chart(fig, use_container_width=True)


def render() -> None:  # noqa: D401 – imperative mood is fine
    """Entry‑point for Streamlit – draw the **Portfolio** page.

    Workflow
    --------
    1. Fetch (once per session) and subscribe through ``get_live_session``.
    2. Apply the sidebar controls (pause / reload).
    3. Run every tick that fell due since the last rerun.
    4. Draw header, pie chart and table from the latest view.
    """

    st.title("Portfolio")
    live = get_live_session()

    # ------------------------------------------------------------------
    # 1) Sidebar – live controls
    # ------------------------------------------------------------------
    st.sidebar.header("Live prices")
    paused = st.sidebar.toggle("Pause live prices", value=False, key="paused")
    if paused and live.connected:
        live.pause()
    elif not paused and not live.connected:
        live.resume()

    if st.sidebar.button("Reload portfolio"):
        live.load()

    live.refresh()

    # ------------------------------------------------------------------
    # 2) Unavailable / loading states
    # ------------------------------------------------------------------
    if live.unavailable_reason is not None:
        show_balance_header(placeholder_balance_view(), live.reporting_currency)
        st.error(f"Portfolio unavailable: {live.unavailable_reason}")
        return
    if live.is_loading or live.view is None:
        show_balance_header(placeholder_balance_view(), live.reporting_currency)
        st.info("Loading portfolio…")
        return

    view = live.view
    show_balance_header(view.balance, live.reporting_currency)
    st.caption(
        f"Tick {view.tick} · {'paused' if paused else 'live'} · "
        f"priced {convert_to_local_time(view.emitted_at)}"
    )

    # ------------------------------------------------------------------
    # 3) Pie chart & positions table
    # ------------------------------------------------------------------
    _value_pie(live)

    df_disp = positions_frame(view)
    changed = set(live.changed_tickers())
    styled = df_disp.style.apply(_row_style, axis=1, changed=changed)

    # Dynamic height: ~35 px per row, but cap at 800 px for usability.
    height_calc = min(35 * (1 + len(df_disp)) + 5, 800)
    st.dataframe(styled, hide_index=True, use_container_width=True, height=height_calc)
