import dataclasses

import pytest

from lotto_engine.config import LOTTERIES, get_lottery
from lotto_engine.errors import UnsupportedOperation, ValidationResult
from lotto_engine.strategies import strategies_for_lottery
from lotto_engine.types import Field, Lottery, PoolPercent, Ticket


def test_catalogue_ids():
    assert set(LOTTERIES) == {
        "lottery_8_1", "lottery_4_20", "lottery_12_24",
        "lottery_5_36_1", "lottery_6_45", "lottery_7_49",
    }
    with pytest.raises(UnsupportedOperation):
        get_lottery("6_49")


def test_variant_tables(lottery_4_20):
    assert lottery_4_20.get_prize_table() == lottery_4_20.get_prize_table("fixed")
    assert isinstance(lottery_4_20.get_prize_table("pool_percentage").rows[1].prize, PoolPercent)
    assert lottery_4_20.get_variant("pool_percentage").average_pool == 4_000_000
    with pytest.raises(UnsupportedOperation):
        lottery_4_20.get_variant("weekly")


def test_field_numbers():
    assert list(Field(2, 4).numbers()) == [1, 2, 3, 4]


def test_ticket_fields():
    assert Ticket((1, 2)).fields() == [(1, 2)]
    assert Ticket((1, 2), (3,)).fields() == [(1, 2), (3,)]


def test_validation_result():
    result = ValidationResult()
    assert result
    result.add("bad")
    assert not result
    assert result.errors == ["bad"]


def test_strategy_support_comes_from_the_catalogue():
    assert "available_strategies" not in {f.name for f in dataclasses.fields(Lottery)}
    assert [s.id for s in strategies_for_lottery("lottery_12_24")] == []
    assert [s.id for s in strategies_for_lottery("lottery_4_20")] == ["max_coverage"]
