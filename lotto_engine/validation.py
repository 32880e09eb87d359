import math
from typing import Sequence, Tuple

from .config import GENERATOR_CONFIG, LOTTERIES
from .strategies import STRATEGIES
from .types import Lottery, Ticket


def are_unique(numbers: Sequence[int]) -> bool:
    return len(set(numbers)) == len(numbers)


def are_in_range(numbers: Sequence[int], low: int, high: int) -> bool:
    return all(low <= n <= high for n in numbers)


def validate_ticket(ticket: Ticket, lottery: Lottery) -> Tuple[bool, str]:
    """Check a ticket against the lottery's fields.

    Returns (is_valid, reason).
    """
    fields = ticket.fields()
    if len(fields) != lottery.field_count:
        return False, f"Expected {lottery.field_count} fields, got {len(fields)}"

    for index, (numbers, field) in enumerate(zip(fields, lottery.fields), start=1):
        if len(numbers) != field.count:
            return False, f"Field {index}: expected {field.count} numbers, got {len(numbers)}"
        if not are_in_range(numbers, 1, field.from_):
            return False, f"Field {index}: numbers must be between 1 and {field.from_}"
        if not are_unique(numbers):
            return False, f"Field {index}: duplicate numbers"

    return True, "OK"


def is_valid_budget(budget: float) -> bool:
    return math.isfinite(budget) and 0 < budget <= GENERATOR_CONFIG["max_budget"]


def is_valid_ticket_count(count) -> bool:
    if not isinstance(count, int) or isinstance(count, bool):
        return False
    return 1 <= count <= GENERATOR_CONFIG["max_ticket_count"]


def is_valid_lottery_id(lottery_id: str) -> bool:
    return lottery_id in LOTTERIES


def is_valid_strategy_id(strategy_id: str) -> bool:
    return strategy_id in STRATEGIES
