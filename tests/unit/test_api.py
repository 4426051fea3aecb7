import pytest
import requests

from portfolio_deck.services import api
from portfolio_deck.services.api import PortfolioUnavailableError, fetch_portfolio, load_seed
from tests.helpers.fakes import portfolio_json


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self._payload = payload
        self.status_code = status
        self._bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


@pytest.fixture
def serve(monkeypatch):
    seen = {}

    def _serve(response=None, exc=None):
        def fake_get(url, timeout):
            seen["url"], seen["timeout"] = url, timeout
            if exc is not None:
                raise exc
            return response

        monkeypatch.setattr(api.requests, "get", fake_get)
        return seen

    return _serve


@pytest.mark.parametrize("wrapped", [True, False])
def test_fetch_accepts_both_payload_shapes(serve, wrapped):
    serve(FakeResponse(portfolio_json(wrapped=wrapped)))
    portfolio = fetch_portfolio("http://test/portfolio")
    assert [p.instrument.ticker for p in portfolio.positions] == ["AAPL", "SAP"]


def test_fetch_uses_configured_timeout(serve):
    seen = serve(FakeResponse(portfolio_json()))
    fetch_portfolio("http://test/portfolio")
    assert seen["url"] == "http://test/portfolio"
    assert seen["timeout"] > 0


def test_load_seed_returns_positions(serve):
    serve(FakeResponse(portfolio_json()))
    seed = load_seed("http://test/portfolio")
    assert [p.ticker for p in seed] == ["AAPL", "SAP"]
    assert seed[0].price == 160


@pytest.mark.parametrize(
    "kwargs",
    [
        {"exc": requests.ConnectionError("refused")},
        {"exc": requests.Timeout("slow")},
        {"response": FakeResponse(status=500)},
        {"response": FakeResponse(bad_json=True)},
        {"response": FakeResponse(["not", "a", "portfolio"])},
        {"response": FakeResponse({"portfolio": {"positions": []}})},
    ],
)
def test_every_failure_becomes_unavailable(serve, kwargs):
    serve(**kwargs)
    with pytest.raises(PortfolioUnavailableError) as info:
        fetch_portfolio("http://test/portfolio")
    assert info.value.__cause__ is not None


def test_empty_portfolio_cannot_seed(serve):
    body = portfolio_json()
    body["portfolio"]["positions"] = []
    serve(FakeResponse(body))
    with pytest.raises(PortfolioUnavailableError, match="no positions"):
        load_seed("http://test/portfolio")
