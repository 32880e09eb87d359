import logging
from concurrent.futures import Executor, Future
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .combinatorics import (
    binomial,
    combination_at,
    iter_combinations,
    make_rng,
    unique,
    unique_random_numbers,
)
from .config import (
    FULL_WHEEL,
    GENERATOR_CONFIG,
    KEY_WHEEL,
    MAX_COVERAGE,
    MIN_RISK,
    RISK_STRATEGY,
)
from .coverage import estimate_coverage, ticket_pairs
from .errors import UnsupportedOperation
from .strategies import (
    TICKET_COUNT_KEY,
    calculate_ticket_count,
    fill_defaults,
    get_strategy,
    parse_numbers,
    validate_strategy_params,
)
from .types import Field, Lottery, StrategyParams, StrategyResult, Ticket

logger = logging.getLogger(__name__)

RANDOM = "random"
DIVERSE = "diverse"
MODES = (RANDOM, DIVERSE, FULL_WHEEL, KEY_WHEEL)


class TicketGenerator:
    """Materialize tickets for a lottery.

    Every ticket field holds distinct, sorted numbers inside the field's
    range. Random tickets are drawn independently, so a set may contain
    duplicates.
    """

    def __init__(self, lottery: Lottery, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        self.lottery = lottery
        self.rng = rng if rng is not None else make_rng(seed)

    @property
    def main_field(self) -> Field:
        return self.lottery.fields[0]

    def _random_numbers(self, field: Field) -> Tuple[int, ...]:
        return tuple(sorted(unique_random_numbers(1, field.from_, field.count, self.rng)))

    def _second_field(self) -> Optional[Tuple[int, ...]]:
        if self.lottery.field_count < 2:
            return None
        return self._random_numbers(self.lottery.fields[1])

    def _ticket(self, main_numbers: Sequence[int]) -> Ticket:
        return Ticket(field1=tuple(sorted(main_numbers)), field2=self._second_field())

    def random_ticket(self) -> Ticket:
        return self._ticket(self._random_numbers(self.main_field))

    def random(self, count: int) -> List[Ticket]:
        """``count`` independently drawn tickets."""
        return [self.random_ticket() for _ in range(max(0, count))]

    def _pool(self, numbers: Sequence[int]) -> List[int]:
        return [n for n in unique(numbers) if 1 <= n <= self.main_field.from_]

    def full_wheel(self, numbers: Sequence[int], limit: Optional[int] = None) -> List[Ticket]:
        """Every ``count``-subset of ``numbers`` (the first ``limit`` if given)."""
        pool = self._pool(numbers)
        selection_count = self.main_field.count
        if len(pool) < selection_count:
            return []

        total = binomial(len(pool), selection_count)
        logger.info("Full wheel over %d numbers: %d combinations", len(pool), total)
        tickets = []
        for combo in iter_combinations(pool, selection_count):
            if limit is not None and len(tickets) >= limit:
                break
            tickets.append(self._ticket(combo))
        return tickets

    def key_wheel(self, key_numbers: Sequence[int],
                  max_tickets: Optional[int] = None) -> List[Ticket]:
        """Key numbers on every ticket, remaining slots from the rest of the field.

        When the wheel is larger than ``max_tickets`` a random subset of its
        combinations is drawn without replacement, in wheel order.
        """
        keys = self._pool(key_numbers)
        selection_count = self.main_field.count
        if max_tickets is None:
            max_tickets = GENERATOR_CONFIG["key_wheel_max_tickets"]

        if len(keys) > selection_count:
            return [self._ticket(keys[:selection_count])]

        needed = selection_count - len(keys)
        key_set = set(keys)
        available = [n for n in self.main_field.numbers() if n not in key_set]
        if len(available) < needed:
            return []

        total = binomial(len(available), needed)
        if total <= max_tickets:
            combos = iter_combinations(available, needed)
        else:
            logger.warning("Key wheel has %d combinations; sampling %d of them", total, max_tickets)
            indices = np.sort(self.rng.choice(total, size=max_tickets, replace=False))
            combos = (combination_at(available, needed, int(i)) for i in indices)

        return [self._ticket(keys + list(extra)) for extra in combos]

    def _score_ticket(self, numbers: Tuple[int, ...], covered_pairs: set, covered_numbers: set) -> float:
        new_pairs = len(ticket_pairs(numbers) - covered_pairs)
        new_numbers = sum(1 for n in numbers if n not in covered_numbers)
        return 1.0 * new_pairs + 0.2 * new_numbers

    def diverse(self, count: int, candidates_per_ticket: Optional[int] = None) -> List[Ticket]:
        """Greedy tickets that add the most uncovered pairs and numbers.

        Each ticket is the best of ``candidates_per_ticket`` random candidates;
        exact repeats are skipped while an alternative exists.
        """
        if candidates_per_ticket is None:
            candidates_per_ticket = GENERATOR_CONFIG["diverse_candidates"]

        covered_pairs = set()
        covered_numbers = set()
        seen = set()
        tickets = []
        for _ in range(max(0, count)):
            best = None
            best_score = -1.0
            for _ in range(candidates_per_ticket):
                candidate = self._random_numbers(self.main_field)
                if candidate in seen:
                    continue
                score = self._score_ticket(candidate, covered_pairs, covered_numbers)
                if score > best_score:
                    best = candidate
                    best_score = score

            if best is None:
                best = self._random_numbers(self.main_field)

            covered_pairs |= ticket_pairs(best)
            covered_numbers.update(best)
            seen.add(best)
            tickets.append(self._ticket(best))
        return tickets

    def generate(self, mode: str, count: Optional[int] = None,
                 numbers: Sequence[int] = (), key_numbers: Sequence[int] = ()) -> List[Ticket]:
        if mode == RANDOM:
            return self.random(count or 0)
        if mode == DIVERSE:
            return self.diverse(count or 0)
        if mode == FULL_WHEEL:
            return self.full_wheel(numbers, limit=count)
        if mode == KEY_WHEEL:
            return self.key_wheel(key_numbers, max_tickets=count)
        raise UnsupportedOperation(f"Unknown generation mode: {mode}")


def _planned_count(planned: int) -> int:
    limit = GENERATOR_CONFIG["max_planned_tickets"]
    if planned > limit:
        logger.warning("Planned ticket count %d capped at %d", planned, limit)
        return limit
    return planned


def execute_strategy(strategy_id: str, lottery: Lottery, params: StrategyParams,
                     ticket_cost: float, rng: Optional[np.random.Generator] = None,
                     seed: Optional[int] = None) -> StrategyResult:
    """Plan and generate the tickets of a strategy.

    Invalid parameters give an empty result carrying the validation errors.
    Unknown or unsupported strategies raise UnsupportedOperation.
    """
    strategy = get_strategy(strategy_id)
    filled = fill_defaults(strategy, params)

    validation = validate_strategy_params(strategy_id, filled)
    if not validation:
        logger.warning("Invalid parameters for %s: %s", strategy_id, "; ".join(validation.errors))
        return StrategyResult(
            tickets=[],
            ticket_count=0,
            total_cost=0,
            metadata={"strategy": strategy_id, "parameters": filled},
            validation=validation,
        )

    if lottery.id not in strategy.supported_lotteries:
        raise UnsupportedOperation(f"Strategy {strategy_id} not supported for lottery {lottery.id}")

    planned = calculate_ticket_count(strategy_id, lottery, filled, ticket_cost)
    explicit = filled.get(TICKET_COUNT_KEY)
    generator = TicketGenerator(lottery, rng=rng, seed=seed)
    upper = lottery.fields[0].from_

    if strategy_id in (MIN_RISK, RISK_STRATEGY):
        tickets = generator.random(explicit or _planned_count(planned))
    elif strategy_id == MAX_COVERAGE:
        tickets = generator.diverse(explicit or _planned_count(planned))
    elif strategy_id == FULL_WHEEL:
        tickets = generator.full_wheel(parse_numbers(filled["wheelnumbers"], upper), limit=explicit)
    else:
        tickets = generator.key_wheel(parse_numbers(filled["keyNumbers"], upper), max_tickets=explicit)

    field = lottery.fields[0]
    logger.info("Strategy %s generated %d tickets for %s (planned %d)",
                strategy_id, len(tickets), lottery.id, planned)

    return StrategyResult(
        tickets=tickets,
        ticket_count=len(tickets),
        total_cost=len(tickets) * ticket_cost,
        coverage=estimate_coverage(tickets, field.from_, field.count),
        metadata={
            "strategy": strategy_id,
            "parameters": filled,
            "planned_ticket_count": planned,
            "generated_at": datetime.now(),
        },
        validation=validation,
    )


def submit_generation(executor: Executor, strategy_id: str, lottery: Lottery,
                      params: StrategyParams, ticket_cost: float,
                      seed: Optional[int] = None) -> "Future[StrategyResult]":
    """Run ``execute_strategy`` on ``executor`` and return its future."""
    return executor.submit(execute_strategy, strategy_id, lottery, params, ticket_cost, None, seed)
