import pytest

from lotto_engine.comparison import (
    HIGH_INVESTMENT,
    MANY_TICKETS,
    PricingContext,
    analyze_strategy,
    best_strategy,
    calculate_efficiency,
    calculate_risk_level,
    compare_multiple,
    compare_two,
    strategy_expected_value,
)
from lotto_engine.expected_value import calculate_ev
from lotto_engine.types import StrategyResult


@pytest.fixture
def pricing(lottery_6_45):
    return PricingContext(prize_table=lottery_6_45.get_prize_table(), superprice=250_000_000)


SMALL_PARAMS = {
    "min_risk": {"ticketCount": 3},
    "max_coverage": {"ticketCount": 3},
    "full_wheel": {"wheelnumbers": "1 2 3 4 5 6 7"},
    "key_wheel": {"keyNumbers": "1 2 3 4 5"},
    "risk_strategy": {"ticketCount": 2},
}


def test_strategy_expected_value(lottery_6_45, pricing, rng):
    ev = calculate_ev(lottery_6_45, 250_000_000, pricing.prize_table, 100).expected_value
    empty = StrategyResult(tickets=[], ticket_count=0, total_cost=0)
    assert strategy_expected_value(empty, lottery_6_45, pricing, 100) == 0
    three = StrategyResult(tickets=[], ticket_count=3, total_cost=300)
    assert strategy_expected_value(three, lottery_6_45, pricing, 100) == pytest.approx(3 * ev)


def test_risk_level():
    assert calculate_risk_level("min_risk") == 2
    assert calculate_risk_level("full_wheel") == 6
    assert calculate_risk_level("unknown") == 5


def test_efficiency_without_tickets():
    assert calculate_efficiency(StrategyResult(tickets=[], ticket_count=0, total_cost=0)) == 0


def test_compare_two_prefers_fewer_tickets_for_negative_ev(lottery_6_45, pricing, rng):
    comparison = compare_two("min_risk", "risk_strategy", lottery_6_45, SMALL_PARAMS, pricing, 100, rng=rng)
    assert comparison.better == 2
    assert comparison.ev_difference < 0


def test_compare_multiple_pairs(lottery_6_45, pricing, rng):
    comparisons = compare_multiple(lottery_6_45, ["min_risk", "full_wheel", "risk_strategy"],
                                   SMALL_PARAMS, pricing, 100, rng=rng)
    assert [(c.strategy1, c.strategy2) for c in comparisons] == [
        ("min_risk", "full_wheel"),
        ("min_risk", "risk_strategy"),
        ("full_wheel", "risk_strategy"),
    ]


def test_best_strategy(lottery_6_45, pricing, rng):
    best = best_strategy(lottery_6_45, SMALL_PARAMS, pricing, 100, rng=rng)
    assert best.metadata["strategy"] == "risk_strategy"
    assert best.ticket_count == 2


def test_best_strategy_skips_invalid(lottery_6_45, pricing, rng):
    params = dict(SMALL_PARAMS, risk_strategy={"riskLevel": 500})
    best = best_strategy(lottery_6_45, params, pricing, 100, rng=rng)
    assert best.metadata["strategy"] in ("min_risk", "max_coverage")


def test_best_strategy_without_supported_strategies(lottery_12_24, rng):
    pricing = PricingContext(prize_table=lottery_12_24.get_prize_table(), superprice=1e8)
    assert best_strategy(lottery_12_24, {}, pricing, 300, rng=rng) is None


def test_analyze_strategy_warnings(lottery_6_45, rng):
    analysis = analyze_strategy("key_wheel", lottery_6_45, {"keyNumbers": "1 2 3 4"}, 100, rng=rng)
    assert analysis.result.ticket_count == 820
    assert HIGH_INVESTMENT in analysis.warnings
    assert MANY_TICKETS in analysis.warnings
