from datetime import datetime, timezone

import pandas as pd

from portfolio_deck._pages._colors import _BG0, _color_interp, _row_style, contrast_text_color
from portfolio_deck._pages._helpers import POSITION_COLUMNS, convert_to_local_time, positions_frame
from portfolio_deck.services.formatting import PLACEHOLDER, format_snapshot
from portfolio_deck.services.valuation import build_snapshot


def test_positions_frame_keeps_display_order(two_positions):
    view = format_snapshot(build_snapshot(two_positions, 0), "USD")
    df = positions_frame(view)

    assert list(df.columns) == POSITION_COLUMNS
    assert df["Ticker"].tolist() == ["AAPL", "TSLA"]
    assert df.loc[0, "Quantity"] == "10.00"
    assert df.loc[0, "Price"] == "$160.00"
    assert df.loc[1, "P&L"] == "-$200.00"


def test_positions_frame_empty_without_view():
    df = positions_frame(None)
    assert df.empty
    assert list(df.columns) == POSITION_COLUMNS


def test_row_style_follows_pnl_sign_and_dims_unchanged_rows():
    row = pd.Series({"Ticker": "AAPL", "P&L": "+$100.00"})

    fresh = _row_style(row, changed={"AAPL"})
    dimmed = _row_style(row, changed=set())

    assert fresh[0].startswith(f"background-color:{_BG0['positive']}")
    assert dimmed[0].startswith(f"background-color:{_color_interp(_BG0['positive'], 0.6)}")
    assert len(fresh) == 2


def test_row_style_negative_and_placeholder():
    neg = _row_style(pd.Series({"Ticker": "X", "P&L": "-$1.00"}), changed={"X"})
    assert _BG0["negative"] in neg[0]
    blank = _row_style(pd.Series({"Ticker": "X", "P&L": PLACEHOLDER}))
    assert blank == ["", ""]


def test_contrast_text_color():
    assert contrast_text_color("#ffffff") == "#000000"
    assert contrast_text_color("#000") == "#ffffff"


def test_convert_to_local_time_handles_ms_and_naive():
    dt = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert convert_to_local_time(dt.timestamp() * 1000, "%Y") == "2024"
    assert convert_to_local_time(dt.replace(tzinfo=None), "%Y") == "2024"
    assert convert_to_local_time("nope") == PLACEHOLDER
