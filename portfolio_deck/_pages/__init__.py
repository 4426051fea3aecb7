"""Registry of Streamlit pages so main.py can route dynamically."""
from typing import Callable

from . import portfolio

Page = Callable[[], None]

registry: dict[str, Page] = {
    "Portfolio": portfolio.render,
}

__all__ = ["registry"]
