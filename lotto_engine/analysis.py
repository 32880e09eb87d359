"""Derived views over a prize table: per-category returns, risk and profitability."""
import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .config import DRAWS_PER_YEAR, RISK_THRESHOLDS
from .prizes import category_probabilities, match_patterns, pattern_probability, prize_lookup, resolve_table
from .probability import odds_format
from .types import Lottery, PrizeTable

logger = logging.getLogger(__name__)

PLAY_REGULARLY = "play_regularly"
PLAY_OCCASIONALLY = "play_occasionally"
AVOID = "avoid"


@dataclass(frozen=True)
class MatchCategoryAnalysis:
    matches: tuple
    probability: float
    odds: float
    prize: float
    expected_return: float
    weight: float


@dataclass(frozen=True)
class RiskAssessment:
    win_probability: float
    loss_probability: float
    expected_value: float
    risk_score: float
    risk_level: str
    var95: float


@dataclass(frozen=True)
class ComparisonResult:
    ev_difference: float
    better: int
    ev_ratio: float


@dataclass(frozen=True)
class ProfitabilityAnalysis:
    is_profitable: bool
    recommendation: str
    draws_to_break_even: Optional[int] = None
    annual_profit: Optional[float] = None


def analyze_prize_categories(lottery: Lottery, prize_table: PrizeTable, superprice: float,
                             secondary_prize: Optional[float] = None, pool_amount: float = 0,
                             ticket_cost: float = 0) -> List[MatchCategoryAnalysis]:
    """One entry per prize row; ``weight`` is the return relative to the best row."""
    probabilities = category_probabilities(lottery, prize_table)
    values = resolve_table(lottery, prize_table, superprice, secondary_prize,
                           pool_amount, ticket_cost)
    returns = [p * v if v > 0 else 0.0 for p, v in zip(probabilities, values)]
    max_return = max(returns, default=0.0)

    analysis = []
    for row, probability, value, expected_return in zip(prize_table.rows, probabilities, values, returns):
        analysis.append(MatchCategoryAnalysis(
            matches=row.matches,
            probability=probability,
            odds=odds_format(probability),
            prize=value,
            expected_return=expected_return,
            weight=expected_return / max_return if max_return > 0 else 0.0,
        ))
    return analysis


def risk_level_for(risk_score: float) -> str:
    if risk_score < RISK_THRESHOLDS["low"]:
        return "low"
    if risk_score < RISK_THRESHOLDS["medium"]:
        return "medium"
    return "high"


def assess_risk(lottery: Lottery, prize_table: PrizeTable, superprice: float, ticket_cost: float,
                secondary_prize: Optional[float] = None, pool_amount: float = 0) -> RiskAssessment:
    """Risk profile of a single ticket from the exact outcome distribution.

    ``risk_score`` is the standard deviation of the net return divided by the
    ticket cost. ``var95`` is the size of the 5th-percentile net return.
    """
    prizes = prize_lookup(lottery, prize_table, superprice, secondary_prize,
                          pool_amount, ticket_cost)
    patterns = match_patterns(lottery)
    probabilities = np.array([pattern_probability(lottery, p) for p in patterns], dtype=float)
    net_returns = np.array([prizes[p] - ticket_cost for p in patterns], dtype=float)

    win_probability = float(sum(prob for p, prob in zip(patterns, probabilities) if prizes[p] > 0))
    expected_value = float(np.dot(probabilities, net_returns))
    std_dev = float(np.sqrt(np.dot(probabilities, (net_returns - expected_value) ** 2)))
    risk_score = std_dev / ticket_cost if ticket_cost > 0 else 0.0

    order = np.argsort(net_returns)
    cumulative = np.cumsum(probabilities[order])
    cutoff = min(int(np.searchsorted(cumulative, 0.05)), len(order) - 1)
    var95 = abs(float(net_returns[order][cutoff]))

    return RiskAssessment(
        win_probability=win_probability,
        loss_probability=1 - win_probability,
        expected_value=expected_value,
        risk_score=risk_score,
        risk_level=risk_level_for(risk_score),
        var95=var95,
    )


def compare_ev(ev1: float, ev2: float) -> ComparisonResult:
    """``better`` is 1 or -1 when the gap exceeds 0.01, else 0."""
    difference = ev1 - ev2
    if ev2 != 0:
        ratio = ev1 / ev2
    else:
        ratio = float("inf") if ev1 > ev2 else 1.0

    better = 0
    if difference > 0.01:
        better = 1
    elif difference < -0.01:
        better = -1
    return ComparisonResult(ev_difference=difference, better=better, ev_ratio=ratio)


def analyze_profitability(ev: float, ticket_cost: float) -> ProfitabilityAnalysis:
    if ev > 0:
        return ProfitabilityAnalysis(
            is_profitable=True,
            recommendation=PLAY_REGULARLY,
            draws_to_break_even=1,
            annual_profit=ev * DRAWS_PER_YEAR,
        )
    loss = abs(ev)
    return ProfitabilityAnalysis(
        is_profitable=False,
        recommendation=AVOID if loss > ticket_cost * 0.5 else PLAY_OCCASIONALLY,
    )


def strategy_effectiveness(coverage: float, cost_per_combination: float, ev: float) -> float:
    """Score 0-100: 40% coverage, 30% cost efficiency, 30% expected profit."""
    coverage_score = min(coverage / 100, 1)
    efficiency_score = min(1 / (cost_per_combination + 1), 1)
    profit_score = max(min(ev / 1000, 1), 0)
    return (0.4 * coverage_score + 0.3 * efficiency_score + 0.3 * profit_score) * 100
