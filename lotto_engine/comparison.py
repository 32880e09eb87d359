import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import FULL_WHEEL, KEY_WHEEL, MAX_COVERAGE, MIN_RISK, RISK_STRATEGY
from .errors import UnsupportedOperation
from .expected_value import calculate_ev
from .generator import execute_strategy
from .strategies import strategies_for_lottery
from .types import Lottery, PrizeTable, StrategyParams, StrategyResult

logger = logging.getLogger(__name__)

RISK_LEVELS = {
    MIN_RISK: 2,
    MAX_COVERAGE: 4,
    FULL_WHEEL: 6,
    KEY_WHEEL: 5,
    RISK_STRATEGY: 5,
}
DEFAULT_RISK_LEVEL = 5

HIGH_EFFICIENCY = "high_efficiency"
EXCELLENT_COVERAGE = "excellent_coverage"
HIGH_INVESTMENT = "high_investment"
MANY_TICKETS = "many_tickets"
HIGH_RISK = "high_risk"


@dataclass(frozen=True)
class StrategyComparison:
    strategy1: str
    strategy2: str
    ev_difference: float
    coverage_difference: float
    better: int  # 1, 2 or 0 for a tie


@dataclass
class StrategyAnalysis:
    result: StrategyResult
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class PricingContext:
    """Prize inputs needed to value a ticket set."""
    prize_table: PrizeTable
    superprice: float
    secondary_prize: Optional[float] = None
    pool_amount: float = 0


def strategy_expected_value(result: StrategyResult, lottery: Lottery, pricing: PricingContext,
                            ticket_cost: float) -> float:
    """Expected net return of the whole ticket set for one draw."""
    if result.ticket_count == 0:
        return 0.0
    ev = calculate_ev(lottery, pricing.superprice, pricing.prize_table, ticket_cost,
                      pricing.secondary_prize, pricing.pool_amount)
    return result.ticket_count * ev.expected_value


def calculate_efficiency(result: StrategyResult) -> float:
    """Coverage fraction per thousand units spent."""
    if result.ticket_count == 0 or result.coverage is None or result.total_cost <= 0:
        return 0.0
    return max(0.0, (result.coverage.percent / 100) / (result.total_cost / 1000))


def calculate_risk_level(strategy_id: str) -> int:
    """Risk on a 0-10 scale."""
    return RISK_LEVELS.get(strategy_id, DEFAULT_RISK_LEVEL)


def _coverage_percent(result: StrategyResult) -> float:
    return result.coverage.percent if result.coverage is not None else 0.0


def compare_two(strategy1_id: str, strategy2_id: str, lottery: Lottery,
                params: Dict[str, StrategyParams], pricing: PricingContext,
                ticket_cost: float, rng: Optional[np.random.Generator] = None) -> StrategyComparison:
    result1 = execute_strategy(strategy1_id, lottery, params.get(strategy1_id, {}), ticket_cost, rng=rng)
    result2 = execute_strategy(strategy2_id, lottery, params.get(strategy2_id, {}), ticket_cost, rng=rng)

    ev1 = strategy_expected_value(result1, lottery, pricing, ticket_cost)
    ev2 = strategy_expected_value(result2, lottery, pricing, ticket_cost)

    better = 0
    if ev1 > ev2:
        better = 1
    elif ev2 > ev1:
        better = 2

    return StrategyComparison(
        strategy1=strategy1_id,
        strategy2=strategy2_id,
        ev_difference=ev1 - ev2,
        coverage_difference=_coverage_percent(result1) - _coverage_percent(result2),
        better=better,
    )


def compare_multiple(lottery: Lottery, strategy_ids: Sequence[str],
                     params: Dict[str, StrategyParams], pricing: PricingContext,
                     ticket_cost: float, rng: Optional[np.random.Generator] = None) -> List[StrategyComparison]:
    """Every unordered pair of ``strategy_ids``, in input order."""
    comparisons = []
    for i in range(len(strategy_ids)):
        for j in range(i + 1, len(strategy_ids)):
            comparisons.append(compare_two(strategy_ids[i], strategy_ids[j], lottery,
                                           params, pricing, ticket_cost, rng=rng))
    return comparisons


def best_strategy(lottery: Lottery, params: Dict[str, StrategyParams], pricing: PricingContext,
                  ticket_cost: float, rng: Optional[np.random.Generator] = None) -> Optional[StrategyResult]:
    """The supported strategy with the highest ticket-set EV, or None.

    Strategies that are unsupported, fail validation or produce no tickets
    are skipped.
    """
    best = None
    best_ev = float("-inf")
    for strategy in strategies_for_lottery(lottery.id):
        try:
            result = execute_strategy(strategy.id, lottery, params.get(strategy.id, {}),
                                      ticket_cost, rng=rng)
        except UnsupportedOperation as e:
            logger.warning("Skipping %s: %s", strategy.id, e)
            continue
        if not result.validation or result.ticket_count == 0:
            continue

        ev = strategy_expected_value(result, lottery, pricing, ticket_cost)
        if ev > best_ev:
            best_ev = ev
            best = result

    if best is not None:
        logger.info("Best strategy for %s: %s (EV %.2f)", lottery.id, best.metadata["strategy"], best_ev)
    return best


def analyze_strategy(strategy_id: str, lottery: Lottery, params: StrategyParams,
                     ticket_cost: float, rng: Optional[np.random.Generator] = None) -> StrategyAnalysis:
    """Run a strategy and attach recommendation and warning codes."""
    result = execute_strategy(strategy_id, lottery, params, ticket_cost, rng=rng)
    analysis = StrategyAnalysis(result=result)

    if calculate_efficiency(result) > 0.5:
        analysis.recommendations.append(HIGH_EFFICIENCY)
    if result.coverage is not None and result.coverage.percent > 80:
        analysis.recommendations.append(EXCELLENT_COVERAGE)

    if result.total_cost > 10000:
        analysis.warnings.append(HIGH_INVESTMENT)
    if result.ticket_count > 100:
        analysis.warnings.append(MANY_TICKETS)
    if calculate_risk_level(strategy_id) > 7:
        analysis.warnings.append(HIGH_RISK)

    return analysis
