import pytest

from portfolio_deck.config import settings


@pytest.fixture
def fresh_settings():
    settings.cache_clear()
    yield settings
    settings.cache_clear()


def test_catch_up_cap_is_unbounded_by_default(monkeypatch, fresh_settings):
    monkeypatch.delenv("MAX_CATCH_UP_TICKS", raising=False)
    assert fresh_settings()["MAX_CATCH_UP_TICKS"] is None


def test_catch_up_cap_reads_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("MAX_CATCH_UP_TICKS", "60")
    assert fresh_settings()["MAX_CATCH_UP_TICKS"] == 60
