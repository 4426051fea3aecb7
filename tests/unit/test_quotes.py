import pytest

from portfolio_deck.services.quotes import QuoteSimulator, SystemRandomSource
from tests.helpers.fakes import ScriptedRandomSource, make_position


def test_next_prices_applies_scripted_deltas_in_order(two_positions):
    sim = QuoteSimulator(ScriptedRandomSource([0.05, -0.10]))
    out = sim.next_prices(two_positions)

    assert [p.ticker for p in out] == ["AAPL", "TSLA"]
    assert out[0].price == pytest.approx(168.0)
    assert out[1].price == pytest.approx(180.0)


def test_draws_are_bounded_by_max_delta(two_positions):
    source = ScriptedRandomSource([0.0])
    QuoteSimulator(source, max_delta=0.10).next_prices(two_positions)
    assert source.calls == [(-0.10, 0.10), (-0.10, 0.10)]


def test_inputs_are_not_mutated(two_positions):
    before = [p.price for p in two_positions]
    out = QuoteSimulator(ScriptedRandomSource([0.1])).next_prices(two_positions)

    assert [p.price for p in two_positions] == before
    assert all(a is not b for a, b in zip(out, two_positions))
    # constant fields carried over
    assert out[0].quantity == two_positions[0].quantity
    assert out[0].cost == two_positions[0].cost


@pytest.mark.parametrize("price", [0.01, 0.011, 0.5, 3.0])
@pytest.mark.parametrize("delta", [-0.10, -0.05, 0.0, 0.10])
def test_price_never_drops_below_floor(price, delta):
    sim = QuoteSimulator(ScriptedRandomSource([delta]))
    (out,) = sim.next_prices([make_position(price=price)])
    assert out.price >= 0.01


def test_floor_clamps_collapsing_price():
    sim = QuoteSimulator(ScriptedRandomSource([-0.10]), price_floor=0.01)
    (out,) = sim.next_prices([make_position(price=0.01)])
    assert out.price == 0.01


def test_seeded_source_is_reproducible(two_positions):
    a = QuoteSimulator(SystemRandomSource(seed=7))
    b = QuoteSimulator(SystemRandomSource(seed=7))

    pa, pb = two_positions, two_positions
    for _ in range(5):
        pa, pb = a.next_prices(pa), b.next_prices(pb)
    assert [p.price for p in pa] == [p.price for p in pb]


def test_system_source_stays_in_range():
    source = SystemRandomSource(seed=1)
    draws = [source.next_in_range(-0.1, 0.1) for _ in range(200)]
    assert all(-0.1 <= d <= 0.1 for d in draws)


@pytest.mark.parametrize("kwargs", [{"max_delta": -0.1}, {"max_delta": 1.0}, {"price_floor": 0}])
def test_rejects_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        QuoteSimulator(ScriptedRandomSource([0.0]), **kwargs)
