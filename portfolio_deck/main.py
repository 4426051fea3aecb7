"""main.py

Streamlit **entry-point** for the live portfolio dashboard.

Responsibilities
----------------
* Define global page layout (wide view, expanded sidebar, title).
* Route to the page selected in the sidebar (defaults to *Portfolio*).
* Trigger an **auto-refresh** every tick interval so each rerun drains the
  ticks that fell due and the numbers stay live without manual reloads.

Run with ``streamlit run portfolio_deck/main.py``.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Third-party imports
# -----------------------------------------------------------------------------
import os
from pathlib import Path
from dotenv import load_dotenv
from datetime import datetime, timezone

import streamlit as st
from streamlit_autorefresh import st_autorefresh

from portfolio_deck import APP_ICON, APP_NAME, VERSION

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
load_dotenv(Path(__file__).parent.parent / ".env")
APP_TITLE = os.getenv("APP_TITLE", "")
LOCAL_TZ_str = os.getenv("LOCAL_TZ", "UTC")  # e.g. "Europe/Berlin"

# -----------------------------------------------------------------------------
# 0) Global page configuration – must run before any Streamlit call
# -----------------------------------------------------------------------------
st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded",
)

# -----------------------------------------------------------------------------
# Local imports (after Streamlit initialisation)
# -----------------------------------------------------------------------------
from portfolio_deck.config import settings
from portfolio_deck._pages import registry
from portfolio_deck._pages._helpers import TS_FMT, convert_to_local_time

# -----------------------------------------------------------------------------
# 1) Sidebar – navigation
# -----------------------------------------------------------------------------
if APP_TITLE != "":
    st.sidebar.title(APP_TITLE)

pages = list(registry)
initial_page = st.query_params.get("page", pages[0])
page = st.sidebar.radio(
    "Navigate",
    pages,
    index=pages.index(initial_page) if initial_page in pages else 0,
    key="sidebar_page",
)

# -----------------------------------------------------------------------------
# 2) Auto-refresh – one rerun per tick interval
# -----------------------------------------------------------------------------
st_autorefresh(interval=settings()["TICK_INTERVAL_MS"], key="refresh")

# -----------------------------------------------------------------------------
# 3) Routing
# -----------------------------------------------------------------------------
registry[page]()

st.sidebar.markdown("---")
st.sidebar.caption(f"{APP_NAME} v{VERSION}")
local_time = convert_to_local_time(datetime.now(timezone.utc), TS_FMT)
st.sidebar.metric(
    label="🕒 Last refresh:",
    value=local_time,
    delta=LOCAL_TZ_str,
    delta_color="off",
)
