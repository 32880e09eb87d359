"""Value objects shared by every part of the engine.

All entities are created per request and carry no behaviour beyond small
accessors. Prize markers are a tagged union (``Fixed``, ``Jackpot``,
``Secondary``, ``PoolPercent``) resolved by ``prizes.resolve_prize_value``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .errors import UnsupportedOperation, ValidationResult

JACKPOT_NOTE = "Jackpot"


@dataclass(frozen=True)
class Field:
    """Choose ``count`` distinct integers from ``[1, from_]``."""
    count: int
    from_: int

    def numbers(self) -> range:
        return range(1, self.from_ + 1)


@dataclass(frozen=True)
class Fixed:
    amount: float


@dataclass(frozen=True)
class Jackpot:
    pass


@dataclass(frozen=True)
class Secondary:
    pass


@dataclass(frozen=True)
class PoolPercent:
    percent: float


Prize = Union[Fixed, Jackpot, Secondary, PoolPercent]


@dataclass(frozen=True)
class PrizeRow:
    """One prize category.

    ``matches`` may be shorter than the lottery's field count; the missing
    trailing fields then match any count. ``note`` is a display label only.
    """
    matches: Tuple[int, ...]
    prize: Prize
    note: Optional[str] = None

    @property
    def is_jackpot(self) -> bool:
        return isinstance(self.prize, Jackpot)


@dataclass(frozen=True)
class PrizeTable:
    rows: Tuple[PrizeRow, ...]
    currency: str = "RUB"

    def __iter__(self) -> Iterator[PrizeRow]:
        return iter(self.rows)

    def __len__(self):
        return len(self.rows)


@dataclass(frozen=True)
class LotteryVariant:
    type: str  # "fixed" or "pool_percentage"
    label: str
    prize_table: PrizeTable
    average_pool: Optional[float] = None


@dataclass(frozen=True)
class Lottery:
    id: str
    name: str
    fields: Tuple[Field, ...]
    default_ticket_cost: float
    default_superprice: float
    prize_table: Optional[PrizeTable] = None
    variants: Tuple[LotteryVariant, ...] = ()
    has_secondary_prize: bool = False
    default_secondary_prize: Optional[float] = None
    complement_symmetric: bool = False

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def get_variant(self, variant: str) -> LotteryVariant:
        for v in self.variants:
            if v.type == variant:
                return v
        raise UnsupportedOperation(f"Lottery {self.id} has no variant '{variant}'")

    def get_prize_table(self, variant: Optional[str] = None) -> PrizeTable:
        """Return the lottery's prize table, or the table of ``variant``."""
        if variant is not None:
            return self.get_variant(variant).prize_table
        if self.prize_table is not None:
            return self.prize_table
        if self.variants:
            return self.variants[0].prize_table
        raise UnsupportedOperation(f"Lottery {self.id} has no prize table")


@dataclass(frozen=True)
class Ticket:
    field1: Tuple[int, ...]
    field2: Optional[Tuple[int, ...]] = None

    def fields(self) -> List[Tuple[int, ...]]:
        if self.field2 is None:
            return [self.field1]
        return [self.field1, self.field2]


# A draw has the same shape as a ticket.
DrawResult = Ticket


@dataclass(frozen=True)
class MatchResult:
    ticket_index: int
    field1_matches: int
    field2_matches: Optional[int]
    prize_won: float
    prize_category: str


@dataclass(frozen=True)
class SimulationRound:
    round_number: int
    draw: DrawResult
    matches: Tuple[MatchResult, ...]
    total_prize_this_round: float
    bankroll: float


@dataclass(frozen=True)
class SimulationStatistics:
    total_investment: float
    total_won: float
    net_return: float
    roi: float
    zero_win_rounds: int
    zero_win_percent: float
    avg_prize_per_round: float
    max_prize_in_round: float
    min_non_zero_prize: float
    prize_distribution: Dict[str, int]

    @classmethod
    def empty(cls) -> "SimulationStatistics":
        return cls(0, 0, 0, 0.0, 0, 0.0, 0.0, 0, 0, {})


@dataclass(frozen=True)
class SimulationResult:
    lottery_id: str
    tickets: Tuple[Ticket, ...]
    ticket_cost: float
    rounds_count: int
    rounds: Tuple[SimulationRound, ...]
    statistics: SimulationStatistics
    cancelled: bool = False


@dataclass(frozen=True)
class EVCalculation:
    expected_value: float
    ev_percent: float
    is_profitable: bool
    draws_to_break_even: Optional[int] = None
    break_even_superprice: Optional[float] = None


@dataclass(frozen=True)
class StrategyParameter:
    key: str
    label: str
    type: str  # "number", "range" or "text"
    default: Any
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    description: str = ""


@dataclass(frozen=True)
class Strategy:
    id: str
    name: str
    description: str
    supported_lotteries: Tuple[str, ...]
    parameters: Tuple[StrategyParameter, ...]


StrategyParams = Dict[str, Any]


@dataclass(frozen=True)
class CoverageResult:
    covered: int
    total: int
    percent: float
    unique: int
    duplicates: int


@dataclass
class StrategyResult:
    tickets: List[Ticket]
    ticket_count: int
    total_cost: float
    coverage: Optional[CoverageResult] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    validation: ValidationResult = field(default_factory=ValidationResult)
