import numpy as np
import pytest

from lotto_engine.config import LOTTERIES


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def lottery_6_45():
    return LOTTERIES["lottery_6_45"]


@pytest.fixture
def lottery_4_20():
    return LOTTERIES["lottery_4_20"]


@pytest.fixture
def lottery_12_24():
    return LOTTERIES["lottery_12_24"]


@pytest.fixture
def lottery_5_36_1():
    return LOTTERIES["lottery_5_36_1"]


@pytest.fixture
def lottery_7_49():
    return LOTTERIES["lottery_7_49"]
