"""_colors.py

Colour utilities for the **Positions** dataframe and the balance header.

The module provides:
* Emoji *P&L lights* (`_PNL_LIGHT`) shown next to the header figures.
* A base background palette (`_BG0`) mapping P&L class → colour.
* Functions to:
  - Darken a colour so rows that did not move this tick sit back and the
    ones that did stand out (`_color_interp`).
  - Pick an appropriate foreground (text) colour for legibility
    (`contrast_text_color`).
  - Generate a list of CSS style strings for the Streamlit Styler
    (`_row_style`).
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Collection, List

# Third-party
import pandas as pd

# First-party
from portfolio_deck.services.formatting import PnlClass, pnl_class_from_text

# -----------------------------------------------------------------------------
# PUBLIC CONSTANTS – P&L class → emoji / colour
# -----------------------------------------------------------------------------
_PNL_LIGHT: dict[str, str] = {
    PnlClass.POSITIVE.value: "🟢",
    PnlClass.NEGATIVE.value: "🔴",
    PnlClass.NEUTRAL.value: "⚪",
}

# Base background colour per P&L class (freshest shade).
_BG0: dict[str, str] = {
    PnlClass.POSITIVE.value: "#00dd0b",  # green
    PnlClass.NEGATIVE.value: "#ff5555",  # red
}

# Streamlit delta colours for st.metric
_METRIC_DELTA: dict[str, str] = {
    PnlClass.POSITIVE.value: "normal",
    PnlClass.NEGATIVE.value: "normal",
    PnlClass.NEUTRAL.value: "off",
}

# -----------------------------------------------------------------------------
# Helper functions (internal)
# -----------------------------------------------------------------------------

def _color_interp(c0: str, t: float) -> str:  # noqa: D401 – short desc ok
    """Return a **darkened** version of *c0* by blending with black.

    ``t`` runs from 0 (original colour) to 1 (black); the blend is done per
    RGB channel: ``out = round(channel * (1-t))``.
    """
    r0, g0, b0 = int(c0[1:3], 16), int(c0[3:5], 16), int(c0[5:7], 16)
    r = round(r0 * (1 - t))
    g = round(g0 * (1 - t))
    b = round(b0 * (1 - t))
    return f"#{r:02x}{g:02x}{b:02x}"


def contrast_text_color(bg_hex: str) -> str:  # noqa: D401
    """Pick black or white text for best contrast on *bg_hex*.

    Uses the YIQ perceptual luminance formula and returns **black** if the
    background is light, **white** otherwise.
    """
    h = bg_hex.lstrip("#")
    if len(h) == 3:  # allow shorthand e.g. #fff
        h = "".join(ch * 2 for ch in h)
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    yiq = (r * 299 + g * 587 + b * 114) / 1000
    return "#000000" if yiq >= 128 else "#ffffff"

# -----------------------------------------------------------------------------
# Main styling hook used by dataframe.style.apply
# -----------------------------------------------------------------------------

def _row_style(
    row: pd.Series,
    *,
    changed: Collection[str] = (),
    fade: float = 0.6,
) -> List[str]:
    """Return a list of CSS style strings for the given *row*.

    The colour comes from the sign of the formatted ``P&L`` cell. Rows whose
    ticker is in *changed* get the full shade; the rest are darkened by
    *fade*. Rows without a sign (placeholders) keep the default style.
    """
    key = pnl_class_from_text(str(row.get("P&L", ""))).value
    bg = _BG0.get(key, "")
    if not bg:
        return [""] * len(row)

    if row.get("Ticker") not in changed:
        bg = _color_interp(bg, fade)

    fg = contrast_text_color(bg)
    style = f"background-color:{bg};color:{fg}"
    return [style] * len(row)  # same style for all cells in the row
