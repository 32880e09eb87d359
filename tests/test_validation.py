import math

from lotto_engine.types import Ticket
from lotto_engine.validation import (
    are_in_range,
    are_unique,
    is_valid_budget,
    is_valid_lottery_id,
    is_valid_strategy_id,
    is_valid_ticket_count,
    validate_ticket,
)


def test_are_unique_and_in_range():
    assert are_unique([1, 2, 3])
    assert not are_unique([1, 2, 2])
    assert are_in_range([1, 45], 1, 45)
    assert not are_in_range([0, 5], 1, 45)


def test_validate_ticket(lottery_5_36_1):
    assert validate_ticket(Ticket((1, 2, 3, 4, 5), (3,)), lottery_5_36_1) == (True, "OK")

    ok, reason = validate_ticket(Ticket((1, 2, 3, 4, 5)), lottery_5_36_1)
    assert not ok and "fields" in reason

    ok, reason = validate_ticket(Ticket((1, 2, 3, 4, 5), (5,)), lottery_5_36_1)
    assert not ok and "Field 2" in reason

    ok, reason = validate_ticket(Ticket((1, 1, 3, 4, 5), (1,)), lottery_5_36_1)
    assert not ok and "duplicate" in reason

    ok, _ = validate_ticket(Ticket((1, 2, 3, 4), (1,)), lottery_5_36_1)
    assert not ok


def test_budget_and_ticket_count():
    assert is_valid_budget(500)
    assert not is_valid_budget(0)
    assert not is_valid_budget(2_000_000)
    assert not is_valid_budget(math.inf)
    assert is_valid_ticket_count(1)
    assert is_valid_ticket_count(10_000)
    assert not is_valid_ticket_count(10_001)
    assert not is_valid_ticket_count(2.5)
    assert not is_valid_ticket_count(True)


def test_ids():
    assert is_valid_lottery_id("lottery_6_45")
    assert not is_valid_lottery_id("6_49")
    assert is_valid_strategy_id("key_wheel")
    assert not is_valid_strategy_id("guaranteed_win")
