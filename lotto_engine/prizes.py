"""Prize resolution: symmetric match normalization, table lookup and payout.

Two symmetry classes exist:

* swap symmetry -- a two-field lottery whose fields share ``(from, count)``
  pays ``[a, b]`` like ``[b, a]``; patterns normalize to ``[min, max]``.
* complement symmetry -- a single-field lottery flagged
  ``complement_symmetric`` pays ``m`` matches like ``count - m``; patterns
  normalize to ``max(m, count - m)``.

Table rows may list fewer match counts than the lottery has fields. The
missing trailing fields are wildcards.
"""
import enum
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from .combinatorics import cartesian_product
from .config import POOL_REVENUE_FACTOR
from .probability import probability_of_match
from .types import Fixed, Lottery, PoolPercent, Prize, PrizeRow, PrizeTable, Secondary

logger = logging.getLogger(__name__)


class Symmetry(enum.Enum):
    NONE = "none"
    SWAP = "swap"
    COMPLEMENT = "complement"


def symmetry_of(lottery: Lottery) -> Symmetry:
    if lottery.field_count == 2 and lottery.fields[0] == lottery.fields[1]:
        return Symmetry.SWAP
    if lottery.complement_symmetric and lottery.field_count == 1:
        return Symmetry.COMPLEMENT
    return Symmetry.NONE


def normalize_matches(matches: Sequence[int], lottery: Lottery) -> Tuple[int, ...]:
    """Canonical form of a match pattern for table lookup."""
    matches = tuple(matches)
    symmetry = symmetry_of(lottery)
    if symmetry is Symmetry.SWAP and len(matches) == 2:
        a, b = matches
        return (a, b) if a <= b else (b, a)
    if symmetry is Symmetry.COMPLEMENT and len(matches) == 1:
        m = matches[0]
        return (max(m, lottery.fields[0].count - m),)
    return matches


def equivalent_patterns(matches: Sequence[int], lottery: Lottery) -> Tuple[Tuple[int, ...], ...]:
    """Distinct patterns paying like ``matches``; empty when there are none."""
    matches = tuple(matches)
    symmetry = symmetry_of(lottery)
    if symmetry is Symmetry.SWAP and len(matches) == 2 and matches[0] != matches[1]:
        low, high = sorted(matches)
        return ((low, high), (high, low))
    if symmetry is Symmetry.COMPLEMENT and len(matches) == 1:
        m = matches[0]
        other = lottery.fields[0].count - m
        if other != m:
            return ((max(m, other),), (min(m, other),))
    return ()


def is_symmetric_match(matches: Sequence[int], lottery: Lottery) -> bool:
    """True when ``matches`` is not already in canonical form."""
    return normalize_matches(matches, lottery) != tuple(matches)


def symmetric_label(matches: Sequence[int], lottery: Lottery) -> Tuple[str, ...]:
    """Labels of every pattern paying like ``matches``, e.g. ``("3+4", "4+3")``."""
    patterns = equivalent_patterns(matches, lottery) or (tuple(matches),)
    return tuple("+".join(str(m) for m in p) for p in patterns)


def _row_applies(row_key: Tuple[int, ...], query: Tuple[int, ...]) -> bool:
    return len(row_key) <= len(query) and query[:len(row_key)] == row_key


def find_prize_index(prize_table: PrizeTable, matches: Sequence[int],
                     lottery: Lottery) -> Optional[int]:
    query = normalize_matches(matches, lottery)
    for index, row in enumerate(prize_table.rows):
        if _row_applies(normalize_matches(row.matches, lottery), query):
            return index
    return None


def find_prize_row(prize_table: PrizeTable, matches: Sequence[int],
                   lottery: Lottery) -> Optional[PrizeRow]:
    """First row whose normalized pattern equals the normalized query."""
    index = find_prize_index(prize_table, matches, lottery)
    return None if index is None else prize_table.rows[index]


def find_prize(prize_table: PrizeTable, matches: Sequence[int], lottery: Lottery) -> Optional[Prize]:
    row = find_prize_row(prize_table, matches, lottery)
    return None if row is None else row.prize


def _field_probability(lottery: Lottery, index: int, m: int) -> float:
    field = lottery.fields[index]
    return probability_of_match(field.from_, field.count, field.count, m)


def row_probability(lottery: Lottery, row: PrizeRow) -> float:
    """Probability of landing in ``row``'s category, symmetric twins included."""
    matches = row.matches
    if len(matches) == 0 or len(matches) > lottery.field_count:
        return 0.0

    symmetry = symmetry_of(lottery)
    if symmetry is Symmetry.COMPLEMENT and len(matches) == 1:
        m = matches[0]
        complement = lottery.fields[0].count - m
        probability = _field_probability(lottery, 0, m)
        if complement != m:
            probability += _field_probability(lottery, 0, complement)
        return probability

    if symmetry is Symmetry.SWAP and len(matches) == 2:
        a, b = matches
        probability = _field_probability(lottery, 0, a) * _field_probability(lottery, 1, b)
        if a != b:
            probability += _field_probability(lottery, 0, b) * _field_probability(lottery, 1, a)
        return probability

    probability = 1.0
    for index, m in enumerate(matches):
        probability *= _field_probability(lottery, index, m)
    return probability


def match_patterns(lottery: Lottery) -> List[Tuple[int, ...]]:
    """Every attainable full match pattern of the lottery."""
    return [tuple(p) for p in cartesian_product([range(f.count + 1) for f in lottery.fields])]


def pattern_probability(lottery: Lottery, pattern: Sequence[int]) -> float:
    probability = 1.0
    for index, m in enumerate(pattern):
        probability *= _field_probability(lottery, index, m)
    return probability


def category_probabilities(lottery: Lottery, prize_table: PrizeTable) -> List[float]:
    """Probability per row that a draw is scored by that row.

    Every full pattern is assigned to the first row it matches, so rows that
    are shadowed by an earlier equivalent row get no mass. For tables without
    shadowed rows this equals ``row_probability`` for each row.
    """
    probabilities = [0.0] * len(prize_table.rows)
    for pattern in match_patterns(lottery):
        index = find_prize_index(prize_table, pattern, lottery)
        if index is not None:
            probabilities[index] += pattern_probability(lottery, pattern)
    return probabilities


def estimated_tickets_sold(pool_amount: float, ticket_cost: float) -> float:
    """Tickets sold in a draw, inferred from the prize pool.

    The pool is roughly half of gross revenue, hence ``POOL_REVENUE_FACTOR``.
    """
    if ticket_cost <= 0 or pool_amount <= 0:
        return 0.0
    return pool_amount / ticket_cost * POOL_REVENUE_FACTOR


def resolve_prize_value(row: PrizeRow, superprice: float,
                        secondary_prize: Optional[float] = None,
                        pool_amount: float = 0, ticket_cost: float = 0,
                        category_probability: float = 0) -> float:
    """Numeric payout of ``row`` for one winning ticket.

    Priority: jackpot prize, secondary marker, fixed amount, share of pool.
    A pool share is split among the expected co-winners of the category;
    with no expected winners the undivided category total is paid.
    """
    prize = row.prize
    if row.is_jackpot:
        return superprice
    if isinstance(prize, Secondary):
        return secondary_prize or 0
    if isinstance(prize, Fixed):
        return prize.amount
    if isinstance(prize, PoolPercent):
        if not pool_amount or pool_amount <= 0:
            return 0
        category_total = prize.percent / 100 * pool_amount
        expected_winners = estimated_tickets_sold(pool_amount, ticket_cost) * category_probability
        if expected_winners <= 0:
            return math.floor(category_total)
        return math.floor(category_total / expected_winners)
    raise TypeError(f"Unknown prize type: {prize!r}")


def resolve_table(lottery: Lottery, prize_table: PrizeTable, superprice: float,
                  secondary_prize: Optional[float] = None, pool_amount: float = 0,
                  ticket_cost: float = 0) -> List[float]:
    """Payout per row, aligned with ``prize_table.rows``."""
    probabilities = category_probabilities(lottery, prize_table)
    return [
        resolve_prize_value(row, superprice, secondary_prize, pool_amount,
                            ticket_cost, probability)
        for row, probability in zip(prize_table.rows, probabilities)
    ]


def prize_for_matches(lottery: Lottery, prize_table: PrizeTable, matches: Sequence[int],
                      superprice: float, secondary_prize: Optional[float] = None,
                      pool_amount: float = 0, ticket_cost: float = 0) -> float:
    """Payout for a concrete match pattern, 0 when no row applies."""
    index = find_prize_index(prize_table, matches, lottery)
    if index is None:
        return 0
    probability = category_probabilities(lottery, prize_table)[index]
    return resolve_prize_value(prize_table.rows[index], superprice, secondary_prize,
                               pool_amount, ticket_cost, probability)


def is_winning_combination(lottery: Lottery, prize_table: PrizeTable,
                           matches: Sequence[int]) -> bool:
    return find_prize_index(prize_table, matches, lottery) is not None


def prize_category(matches: Sequence[int], lottery: Lottery) -> str:
    """Histogram key of a pattern, e.g. ``"3+4"``."""
    return "+".join(str(m) for m in normalize_matches(matches, lottery))


def is_valid_matches(lottery: Lottery, matches: Sequence[int]) -> bool:
    if len(matches) != lottery.field_count:
        return False
    return all(0 <= m <= field.count for m, field in zip(matches, lottery.fields))


def prizes_for_matches(lottery: Lottery, prize_table: PrizeTable,
                       matches_list: Sequence[Sequence[int]], superprice: float,
                       secondary_prize: Optional[float] = None, pool_amount: float = 0,
                       ticket_cost: float = 0) -> List[float]:
    """Batch ``prize_for_matches``; invalid patterns pay 0."""
    values = resolve_table(lottery, prize_table, superprice, secondary_prize,
                           pool_amount, ticket_cost)
    results = []
    for matches in matches_list:
        if not is_valid_matches(lottery, matches):
            results.append(0)
            continue
        index = find_prize_index(prize_table, matches, lottery)
        results.append(0 if index is None else values[index])
    return results


def prize_lookup(lottery: Lottery, prize_table: PrizeTable, superprice: float,
                 secondary_prize: Optional[float] = None, pool_amount: float = 0,
                 ticket_cost: float = 0) -> Dict[Tuple[int, ...], float]:
    """Payout for every attainable pattern, for fast repeated scoring."""
    values = resolve_table(lottery, prize_table, superprice, secondary_prize,
                           pool_amount, ticket_cost)
    lookup = {}
    for pattern in match_patterns(lottery):
        index = find_prize_index(prize_table, pattern, lottery)
        lookup[pattern] = 0 if index is None else values[index]
    return lookup
