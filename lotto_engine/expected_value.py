import logging
import math
from typing import Dict, List, Optional

from .probability import odds_format
from .prizes import category_probabilities, resolve_table
from .types import EVCalculation, Lottery, PrizeTable

logger = logging.getLogger(__name__)


def calculate_ev(lottery: Lottery, superprice: float, prize_table: PrizeTable,
                 ticket_cost: float, secondary_prize: Optional[float] = None,
                 pool_amount: float = 0) -> EVCalculation:
    """Expected value of one ticket: sum(prize * probability) - ticket cost.

    Rows that resolve to a non-positive prize or have zero probability add
    nothing. A non-positive ticket cost yields an all-zero result.
    """
    if ticket_cost <= 0:
        return EVCalculation(expected_value=0.0, ev_percent=0.0, is_profitable=False)

    probabilities = category_probabilities(lottery, prize_table)
    values = resolve_table(lottery, prize_table, superprice, secondary_prize,
                           pool_amount, ticket_cost)

    expected_return = 0.0
    jackpot_probability = 0.0
    other_return = 0.0
    for row, probability, value in zip(prize_table.rows, probabilities, values):
        if row.is_jackpot:
            jackpot_probability += probability
        if value <= 0 or probability <= 0:
            continue
        expected_return += value * probability
        if not row.is_jackpot:
            other_return += value * probability

    expected_value = expected_return - ticket_cost
    is_profitable = expected_value > 0

    if jackpot_probability > 0:
        break_even_superprice = max(0.0, (ticket_cost - other_return) / jackpot_probability)
    else:
        break_even_superprice = math.inf

    return EVCalculation(
        expected_value=expected_value,
        ev_percent=expected_value / ticket_cost * 100,
        is_profitable=is_profitable,
        draws_to_break_even=1 if is_profitable else None,
        break_even_superprice=break_even_superprice,
    )


def prize_table_breakdown(lottery: Lottery, prize_table: PrizeTable, superprice: float,
                          ticket_cost: float, secondary_prize: Optional[float] = None,
                          pool_amount: float = 0) -> List[Dict]:
    """Per-row probability, odds, resolved prize and expected return."""
    probabilities = category_probabilities(lottery, prize_table)
    values = resolve_table(lottery, prize_table, superprice, secondary_prize,
                           pool_amount, ticket_cost)
    breakdown = []
    for row, probability, value in zip(prize_table.rows, probabilities, values):
        breakdown.append({
            "matches": row.matches,
            "probability": probability,
            "odds": odds_format(probability),
            "prize": value,
            "is_jackpot": row.is_jackpot,
            "expected_return": probability * value if value > 0 else 0.0,
        })
    return breakdown
