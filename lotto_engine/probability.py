import math
from typing import Dict, Mapping

from .combinatorics import binomial
from .types import Lottery


def probability_of_match(t: int, n: int, drawn: int, m: int) -> float:
    """Hypergeometric probability of matching exactly ``m`` numbers.

    The player picks ``n`` numbers, the draw takes ``drawn`` numbers out of a
    pool of ``t``:

        P(m) = C(n, m) * C(t - n, drawn - m) / C(t, drawn)
    """
    if m < 0 or m > n or m > drawn or n > t or drawn > t:
        return 0.0
    denominator = binomial(t, drawn)
    if denominator == 0:
        return 0.0
    return binomial(n, m) * binomial(t - n, drawn - m) / denominator


def cumulative_probability(t: int, n: int, drawn: int, m: int) -> float:
    """P(X >= m)."""
    return sum(probability_of_match(t, n, drawn, k)
               for k in range(max(m, 0), min(n, drawn) + 1))


def probability_distribution(t: int, n: int, drawn: int) -> Dict[int, float]:
    """Map every attainable match count to its probability."""
    return {m: probability_of_match(t, n, drawn, m) for m in range(min(n, drawn) + 1)}


def total_combinations(from_: int, count: int) -> int:
    return binomial(from_, count)


def two_field_combinations(from1: int, count1: int, from2: int, count2: int) -> int:
    return binomial(from1, count1) * binomial(from2, count2)


def lottery_combinations(lottery: Lottery) -> int:
    """Number of distinct tickets for the lottery across all of its fields."""
    total = 1
    for field in lottery.fields:
        total *= binomial(field.from_, field.count)
    return total


def odds(probability: float) -> float:
    """Expected number of tries per win; inf when the event is impossible."""
    if probability <= 0:
        return math.inf
    return 1 / probability


def odds_format(probability: float) -> float:
    """Denominator of the "1 in X" form."""
    if probability <= 0:
        return math.inf
    return round(1 / probability)


def multi_ticket_probability(single_ticket_probability: float, ticket_count: int) -> float:
    """Chance of at least one win over independent tickets: 1 - (1 - p)^count.

    Tickets sharing numbers are not independent, so this over-estimates for
    overlapping sets.
    """
    return 1 - (1 - single_ticket_probability) ** ticket_count


def tickets_for_probability(single_ticket_probability: float,
                            target_probability: float) -> float:
    """Tickets needed to reach ``target_probability`` of at least one win."""
    if single_ticket_probability <= 0 or target_probability >= 1:
        return math.inf
    if single_ticket_probability >= 1:
        return 1
    if target_probability <= 0:
        return 0
    return math.ceil(math.log(1 - target_probability) / math.log(1 - single_ticket_probability))


def expected_value_per_ticket(prizes_by_matches: Mapping[int, float], ticket_cost: float,
                              t: int, n: int, drawn: int) -> float:
    """Single-field EV from a plain ``{matches: prize}`` mapping."""
    ev = sum(prize * probability_of_match(t, n, drawn, m)
             for m, prize in prizes_by_matches.items())
    return ev - ticket_cost
