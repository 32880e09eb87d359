"""Strategy catalogue and ticket-count planner.

Each strategy answers "how many tickets do I need?" for a lottery and a set
of user parameters. Counts are lower bounds; callers may pass an explicit
``ticketCount`` to the generator instead.
"""
import logging
import math
import re
from typing import Dict, List, Optional

from .combinatorics import binomial, unique
from .config import (
    DEFAULT_TICKET_WIN_PROBABILITY,
    FULL_WHEEL,
    KEY_WHEEL,
    MAX_COVERAGE,
    MIN_RISK,
    MIN_RISK_SAFETY_FACTOR,
    RISK_STRATEGY,
    TICKET_WIN_PROBABILITY,
)
from .errors import UnsupportedOperation, ValidationResult
from .probability import lottery_combinations
from .types import Lottery, Strategy, StrategyParameter, StrategyParams

logger = logging.getLogger(__name__)

TICKET_COUNT_KEY = "ticketCount"

_MAIN_LOTTERIES = ("lottery_6_45", "lottery_7_49", "lottery_5_36_1", "lottery_8_1")

STRATEGIES: Dict[str, Strategy] = {
    MIN_RISK: Strategy(
        id=MIN_RISK,
        name="Guaranteed minimum wins",
        description="Tickets needed so that at least N of them are expected to win",
        supported_lotteries=_MAIN_LOTTERIES,
        parameters=(
            StrategyParameter(
                key="guaranteedWinningTickets",
                label="Minimum winning tickets",
                type="number",
                default=1,
                min=1,
                max=20,
                description="How many tickets should win at least",
            ),
        ),
    ),
    MAX_COVERAGE: Strategy(
        id=MAX_COVERAGE,
        name="Maximum coverage",
        description="Cover the largest share of distinct number combinations",
        supported_lotteries=("lottery_4_20",) + _MAIN_LOTTERIES,
        parameters=(
            StrategyParameter(
                key="targetCoverage",
                label="Target coverage (%)",
                type="range",
                default=50,
                min=1,
                max=99,
                step=1,
                description="Share of all combinations to cover (exponential scale)",
            ),
        ),
    ),
    FULL_WHEEL: Strategy(
        id=FULL_WHEEL,
        name="Full wheel",
        description="Every combination of the chosen numbers",
        supported_lotteries=_MAIN_LOTTERIES,
        parameters=(
            StrategyParameter(
                key="wheelnumbers",
                label="Wheel numbers (comma or space separated)",
                type="text",
                default="1 2 3 4 5 6 7 8 9 10",
                description="Example: 5 10 15 20 25 30",
            ),
        ),
    ),
    KEY_WHEEL: Strategy(
        id=KEY_WHEEL,
        name="Key-number wheel",
        description="Key numbers on every ticket, combined with the rest of the field",
        supported_lotteries=_MAIN_LOTTERIES,
        parameters=(
            StrategyParameter(
                key="keyNumbers",
                label="Key numbers (comma or space separated)",
                type="text",
                default="1 2 3 4",
                description="These numbers appear on every generated ticket",
            ),
        ),
    ),
    RISK_STRATEGY: Strategy(
        id=RISK_STRATEGY,
        name="Controlled risk",
        description="Logarithmic scale: lower risk means more tickets",
        supported_lotteries=_MAIN_LOTTERIES,
        parameters=(
            StrategyParameter(
                key="riskLevel",
                label="Risk (%)",
                type="range",
                default=50,
                min=1,
                max=99,
                description="Risk of winning nothing",
            ),
        ),
    ),
}


def get_strategy(strategy_id: str) -> Strategy:
    try:
        return STRATEGIES[strategy_id]
    except KeyError:
        raise UnsupportedOperation(f"Strategy not found: {strategy_id}") from None


def strategies_for_lottery(lottery_id: str) -> List[Strategy]:
    return [s for s in STRATEGIES.values() if lottery_id in s.supported_lotteries]


def is_supported(strategy_id: str, lottery: Lottery) -> bool:
    strategy = STRATEGIES.get(strategy_id)
    return strategy is not None and lottery.id in strategy.supported_lotteries


def fill_defaults(strategy: Strategy, params: StrategyParams) -> StrategyParams:
    filled = dict(params)
    for param in strategy.parameters:
        if filled.get(param.key) is None and param.default is not None:
            filled[param.key] = param.default
    return filled


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_strategy_params(strategy_id: str, params: StrategyParams) -> ValidationResult:
    """Check ``params`` against the strategy schema. Never raises."""
    result = ValidationResult()
    strategy = STRATEGIES.get(strategy_id)
    if strategy is None:
        result.add(f"Strategy not found: {strategy_id}")
        return result

    for param in strategy.parameters:
        value = params.get(param.key)
        if value is None:
            if param.default is None:
                result.add(f"Missing parameter: {param.key}")
            continue

        if param.type in ("number", "range"):
            if not _is_number(value):
                result.add(f"{param.key} must be a number")
                continue
            if param.min is not None and value < param.min:
                result.add(f"{param.key} must be >= {param.min}")
            if param.max is not None and value > param.max:
                result.add(f"{param.key} must be <= {param.max}")
        elif param.type == "text":
            if not isinstance(value, str):
                result.add(f"{param.key} must be a string")

    ticket_count = params.get(TICKET_COUNT_KEY)
    if ticket_count is not None:
        if not isinstance(ticket_count, int) or isinstance(ticket_count, bool) or ticket_count < 1:
            result.add(f"{TICKET_COUNT_KEY} must be a positive integer")

    return result


def parse_numbers(text: str, upper: Optional[int] = None) -> List[int]:
    """Positive integers from a comma/space separated string.

    Duplicates and values above ``upper`` are dropped; order is kept.
    """
    numbers = []
    for token in re.split(r"[,\s]+", text or ""):
        if token.isdigit():
            n = int(token)
            if n > 0 and (upper is None or n <= upper):
                numbers.append(n)
    return unique(numbers)


def win_probability_for_ticket(lottery: Lottery) -> float:
    return TICKET_WIN_PROBABILITY.get(lottery.id, DEFAULT_TICKET_WIN_PROBABILITY)


def coverage_ticket_count(total_combinations: int, fraction: float) -> int:
    """Tickets for ``fraction`` expected coverage: ceil(-total * ln(1 - f))."""
    if fraction <= 0:
        return 1
    if fraction >= 0.99:
        return total_combinations
    tickets = math.ceil(-total_combinations * math.log(1 - fraction))
    return min(tickets, total_combinations)


def risk_to_coverage(risk: float) -> float:
    """Map risk of winning nothing (%) to a coverage target (%), at most 90."""
    risk = min(99, max(1, risk))
    safety = math.log(101 - risk) / math.log(100)
    return min(90.0, safety * 90)


def calculate_ticket_count(strategy_id: str, lottery: Lottery, params: StrategyParams,
                           ticket_cost: float = 0) -> int:
    """Required ticket count for ``strategy_id``.

    Raises UnsupportedOperation for an unknown strategy id.
    """
    field = lottery.fields[0]
    selection_count = field.count

    if strategy_id == MIN_RISK:
        guaranteed = params.get("guaranteedWinningTickets") or 1
        return math.ceil(guaranteed / win_probability_for_ticket(lottery) * MIN_RISK_SAFETY_FACTOR)

    if strategy_id == MAX_COVERAGE:
        coverage = params.get("targetCoverage") or 50
        return coverage_ticket_count(lottery_combinations(lottery), coverage / 100)

    if strategy_id == FULL_WHEEL:
        numbers = parse_numbers(params.get("wheelnumbers") or "", upper=field.from_)
        if len(numbers) < selection_count:
            return 0
        return binomial(len(numbers), selection_count)

    if strategy_id == KEY_WHEEL:
        key_count = len(parse_numbers(params.get("keyNumbers") or "", upper=field.from_))
        if key_count > selection_count:
            return 1
        remaining_pool = field.from_ - key_count
        needed = selection_count - key_count
        if remaining_pool < needed:
            return 0
        return binomial(remaining_pool, needed)

    if strategy_id == RISK_STRATEGY:
        risk = params.get("riskLevel") or 50
        target = risk_to_coverage(risk)
        return coverage_ticket_count(lottery_combinations(lottery), target / 100)

    raise UnsupportedOperation(f"Unknown strategy: {strategy_id}")
