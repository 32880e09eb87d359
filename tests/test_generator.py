from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from lotto_engine.errors import UnsupportedOperation
from lotto_engine.generator import TicketGenerator, execute_strategy, submit_generation
from lotto_engine.strategies import calculate_ticket_count, parse_numbers
from lotto_engine.validation import validate_ticket


def assert_valid(tickets, lottery):
    for ticket in tickets:
        ok, reason = validate_ticket(ticket, lottery)
        assert ok, reason
        assert list(ticket.field1) == sorted(ticket.field1)


def test_random_tickets_are_valid(lottery_5_36_1, rng):
    tickets = TicketGenerator(lottery_5_36_1, rng=rng).random(30)
    assert len(tickets) == 30
    assert_valid(tickets, lottery_5_36_1)


def test_same_seed_same_tickets(lottery_6_45):
    first = TicketGenerator(lottery_6_45, seed=123).random(10)
    second = TicketGenerator(lottery_6_45, seed=123).random(10)
    assert first == second


def test_full_wheel(lottery_6_45, rng):
    tickets = TicketGenerator(lottery_6_45, rng=rng).full_wheel([1, 2, 3, 4, 5, 6, 7])
    assert len(tickets) == 7
    assert len({t.field1 for t in tickets}) == 7
    assert_valid(tickets, lottery_6_45)


def test_full_wheel_limit_and_too_few_numbers(lottery_6_45, rng):
    generator = TicketGenerator(lottery_6_45, rng=rng)
    assert len(generator.full_wheel(range(1, 10), limit=5)) == 5
    assert generator.full_wheel([1, 2, 3]) == []


def test_key_wheel_exhaustive(lottery_6_45, rng):
    tickets = TicketGenerator(lottery_6_45, rng=rng).key_wheel([1, 2, 3, 4])
    assert len(tickets) == 820
    assert all({1, 2, 3, 4} <= set(t.field1) for t in tickets)
    assert len({t.field1 for t in tickets}) == 820


def test_key_wheel_sampled_is_bounded(lottery_6_45, rng):
    tickets = TicketGenerator(lottery_6_45, rng=rng).key_wheel([7])
    assert len(tickets) == 1000
    assert len({t.field1 for t in tickets}) == 1000
    assert all(7 in t.field1 for t in tickets)
    assert_valid(tickets, lottery_6_45)


def test_key_wheel_too_many_keys(lottery_6_45, rng):
    tickets = TicketGenerator(lottery_6_45, rng=rng).key_wheel([1, 2, 3, 4, 5, 6, 7, 8])
    assert len(tickets) == 1
    assert tickets[0].field1 == (1, 2, 3, 4, 5, 6)


def test_diverse_avoids_repeats(lottery_6_45, rng):
    tickets = TicketGenerator(lottery_6_45, rng=rng).diverse(20, candidates_per_ticket=10)
    assert len(tickets) == 20
    assert len({t.field1 for t in tickets}) == 20
    assert_valid(tickets, lottery_6_45)


def test_two_field_wheel_has_second_field(lottery_5_36_1, rng):
    tickets = TicketGenerator(lottery_5_36_1, rng=rng).full_wheel([1, 2, 3, 4, 5, 6])
    assert len(tickets) == 6
    assert all(t.field2 is not None and len(t.field2) == 1 for t in tickets)


def test_unknown_mode_raises(lottery_6_45, rng):
    with pytest.raises(UnsupportedOperation):
        TicketGenerator(lottery_6_45, rng=rng).generate("lucky")


def test_execute_strategy_full_wheel(lottery_6_45, rng):
    result = execute_strategy("full_wheel", lottery_6_45, {"wheelnumbers": "1 2 3 4 5 6 7 8"}, 100, rng=rng)
    assert result.validation
    assert result.ticket_count == 28
    assert result.total_cost == 2800
    assert result.coverage.total == 8145060
    assert result.metadata["planned_ticket_count"] == 28


def test_execute_strategy_explicit_count(lottery_6_45, rng):
    result = execute_strategy("min_risk", lottery_6_45, {"ticketCount": 5}, 100, rng=rng)
    assert result.ticket_count == 5
    assert result.metadata["planned_ticket_count"] == 56


def test_execute_strategy_invalid_params(lottery_6_45, rng):
    result = execute_strategy("min_risk", lottery_6_45, {"guaranteedWinningTickets": 0}, 100, rng=rng)
    assert not result.validation
    assert result.tickets == []
    assert result.ticket_count == 0


def test_execute_strategy_unsupported_lottery(lottery_12_24, rng):
    with pytest.raises(UnsupportedOperation):
        execute_strategy("min_risk", lottery_12_24, {}, 100, rng=rng)


def test_execute_strategy_is_reproducible(lottery_7_49):
    params = {"ticketCount": 8}
    first = execute_strategy("max_coverage", lottery_7_49, params, 50, rng=np.random.default_rng(5))
    second = execute_strategy("max_coverage", lottery_7_49, params, 50, rng=np.random.default_rng(5))
    assert first.tickets == second.tickets


def test_submit_generation(lottery_6_45):
    with ThreadPoolExecutor(max_workers=2) as executor:
        future = submit_generation(executor, "key_wheel", lottery_6_45, {"keyNumbers": "1 2 3 4 5"}, 100, seed=1)
        result = future.result()
    assert result.ticket_count == 40


@pytest.mark.parametrize("numbers", ["1 2 3 4 5 6", "1 2 3 4 5 6 7 8 9", "3 9 12 18 21 27 30 33 36 40 44"])
def test_full_wheel_size_matches_planner(lottery_6_45, rng, numbers):
    params = {"wheelnumbers": numbers}
    planned = calculate_ticket_count("full_wheel", lottery_6_45, params)
    tickets = TicketGenerator(lottery_6_45, rng=rng).full_wheel(parse_numbers(numbers))
    assert len(tickets) == planned
