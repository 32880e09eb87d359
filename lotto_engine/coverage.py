import itertools
import logging
import math
from typing import Dict, Sequence, Set, Tuple

import numpy as np

from .combinatorics import binomial
from .types import CoverageResult, Ticket

logger = logging.getLogger(__name__)


def combinations_covered(from_: int, count: int, must_match: int) -> int:
    """Draws that give exactly ``must_match`` hits against one fixed ticket."""
    if must_match < 0 or must_match > count:
        return 0
    return binomial(count, must_match) * binomial(from_ - count, count - must_match)


def estimate_coverage(tickets: Sequence[Ticket], from_: int, selected_count: int) -> CoverageResult:
    """Approximate unique-combination coverage of a ticket set.

    Uses total * (1 - (1 - 1/total)^tickets), which treats tickets as
    independent uniform picks and ignores their actual overlap.
    """
    total = binomial(from_, selected_count)
    ticket_count = len(tickets)
    if total == 0:
        return CoverageResult(covered=0, total=0, percent=0.0, unique=0, duplicates=ticket_count)

    covered = round(total * (1 - (1 - 1 / total) ** ticket_count))
    return CoverageResult(
        covered=covered,
        total=total,
        percent=covered / total * 100,
        unique=covered,
        duplicates=ticket_count - covered,
    )


def tickets_for_guarantee(from_: int, selected_count: int, guaranteed_matches: int) -> float:
    """Covering-design lower bound on tickets for ``guaranteed_matches`` hits.

    Returns inf when the request is infeasible.
    """
    if guaranteed_matches < 0 or guaranteed_matches > selected_count:
        return math.inf
    if guaranteed_matches == selected_count:
        return binomial(from_, selected_count)

    other_numbers = from_ - selected_count
    numbers_needed = selected_count - guaranteed_matches
    if numbers_needed > other_numbers:
        return math.inf
    return binomial(other_numbers, numbers_needed)


def coverage_efficiency(covered: int, ticket_count: int, ticket_cost: float) -> float:
    """Combinations covered per unit of money spent."""
    total_cost = ticket_count * ticket_cost
    if total_cost == 0:
        return 0.0
    return covered / total_cost


def ticket_overlap(numbers1: Sequence[int], numbers2: Sequence[int]) -> int:
    return len(set(numbers1) & set(numbers2))


def average_ticket_overlap(tickets: Sequence[Sequence[int]]) -> float:
    if len(tickets) < 2:
        return 0.0
    overlaps = [ticket_overlap(a, b) for a, b in itertools.combinations(tickets, 2)]
    return float(np.mean(overlaps))


def number_frequency(tickets: Sequence[Sequence[int]]) -> Dict[int, int]:
    frequency = {}
    for numbers in tickets:
        for n in numbers:
            frequency[n] = frequency.get(n, 0) + 1
    return frequency


def check_complete_coverage(selected_numbers: Sequence[int], target_match_size: int) -> bool:
    """Whether ``target_match_size`` is a feasible subset size of ``selected_numbers``.

    A pure range check: every ``k``-subset of the selection exists exactly
    when ``0 <= k <= len(selected_numbers)``.
    """
    return 0 <= target_match_size <= len(selected_numbers)


def wins_against_draw(tickets: Sequence[Ticket], drawn_numbers: Sequence[int],
                      win_threshold: int) -> int:
    """Tickets whose first field hits at least ``win_threshold`` drawn numbers."""
    drawn = set(drawn_numbers)
    return sum(1 for t in tickets if len(drawn.intersection(t.field1)) >= win_threshold)


def coverage_diversity(tickets: Sequence[Sequence[int]], total_numbers: int) -> float:
    """How evenly numbers are spread across tickets, 0 to 1 (1 = uniform).

    Chi-square distance of per-number frequency from the uniform expectation,
    normalized by the empirical bound ``2 * total_numbers``.
    """
    if len(tickets) == 0 or total_numbers <= 0:
        return 0.0

    counts = np.zeros(total_numbers)
    for numbers in tickets:
        for n in numbers:
            if 1 <= n <= total_numbers:
                counts[n - 1] += 1

    expected = len(tickets) * len(tickets[0]) / total_numbers
    chi_square = float(np.sum((counts - expected) ** 2) / (expected or 1))
    return max(0.0, 1 - chi_square / (2 * total_numbers))


def ticket_pairs(numbers: Sequence[int]) -> Set[Tuple[int, int]]:
    return set(itertools.combinations(sorted(numbers), 2))


def pair_coverage(tickets: Sequence[Sequence[int]]) -> int:
    """Distinct number pairs appearing together on at least one ticket."""
    covered = set()
    for numbers in tickets:
        covered |= ticket_pairs(numbers)
    return len(covered)
