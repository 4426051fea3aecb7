"""api.py

Thin synchronous REST wrapper around the portfolio endpoint.

* Centralises the **URL** + **timeout** handling so pages can simply call
  ``fetch_portfolio()`` / ``load_seed()``.
* Accepts both payload shapes seen in the wild: ``{"portfolio": {...}}`` and
  a bare portfolio object.
* Every failure (transport, HTTP status, JSON, schema) surfaces as a single
  ``PortfolioUnavailableError``; retry policy, if any, belongs to the caller.
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Standard library & 3rd-party imports
# -----------------------------------------------------------------------------
import requests
from pydantic import ValidationError

# Project settings helper – returns a dict of env-based config values
from portfolio_deck.config import settings
from portfolio_deck.logger import get_logger, log_error, log_info

from .model import PortfolioPayload, PortfolioResponse, Position, seed_from_payload

logger = get_logger(__name__)


class PortfolioUnavailableError(RuntimeError):
    """The initial portfolio could not be fetched or decoded."""


# -----------------------------------------------------------------------------
# Internal convenience helpers (prefixed with underscore)
# -----------------------------------------------------------------------------

def _get(url: str):
    """Perform a **GET** request to *url*.

    Raises ``requests.exceptions.HTTPError`` on non-2xx responses so the
    caller can handle it explicitly.
    """
    r = requests.get(url, timeout=settings()["REQUEST_TIMEOUT"])
    r.raise_for_status()
    return r.json()


def _decode(raw) -> PortfolioPayload:
    if isinstance(raw, dict) and "portfolio" in raw:
        return PortfolioResponse.model_validate(raw).portfolio
    if isinstance(raw, dict):
        return PortfolioPayload.model_validate(raw)
    raise TypeError(f"Unexpected portfolio payload type: {type(raw)}")

# -----------------------------------------------------------------------------
# Public API helpers
# -----------------------------------------------------------------------------

def fetch_portfolio(url: str | None = None) -> PortfolioPayload:
    """Fetch and decode the portfolio once; no retries."""
    url = url or settings()["API_URL"]
    try:
        portfolio = _decode(_get(url))
    except (requests.RequestException, ValueError, TypeError, ValidationError) as exc:
        # requests' JSONDecodeError is a ValueError too
        log_error(logger, "Portfolio fetch failed", url=url, error=repr(exc))
        raise PortfolioUnavailableError(f"Could not load portfolio: {exc}") from exc

    log_info(logger, "Portfolio fetched", url=url, positions=len(portfolio.positions))
    return portfolio


def load_seed(url: str | None = None) -> tuple[Position, ...]:
    """Fetch the portfolio and turn it into the live stream seed."""
    portfolio = fetch_portfolio(url)
    try:
        return seed_from_payload(portfolio)
    except ValueError as exc:
        log_error(logger, "Portfolio cannot seed the live stream", error=str(exc))
        raise PortfolioUnavailableError(str(exc)) from exc
