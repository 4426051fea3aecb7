import os
import random

import pytest

from tests.helpers.fakes import FakeClock, make_position


@pytest.fixture(autouse=True)
def _seed_everything():
    random.seed(0)
    os.environ.setdefault("PYTHONHASHSEED", "0")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def aapl():
    return make_position("AAPL", quantity=10, average_price=150, cost=1500, price=160)


@pytest.fixture
def two_positions():
    return (
        make_position("AAPL", quantity=10, average_price=150, price=160),
        make_position("TSLA", quantity=4, average_price=250, price=200),
    )
