from pathlib import Path

from .errors import UnsupportedOperation
from .types import (
    JACKPOT_NOTE,
    Field,
    Fixed,
    Jackpot,
    Lottery,
    LotteryVariant,
    PoolPercent,
    PrizeRow,
    PrizeTable,
    Secondary,
)

# File Paths
PROJECT_ROOT = Path(__file__).parent.parent.absolute()
LOGS_DIR = PROJECT_ROOT / "logs"

# Strategy ids
MIN_RISK = "min_risk"
MAX_COVERAGE = "max_coverage"
FULL_WHEEL = "full_wheel"
KEY_WHEEL = "key_wheel"
RISK_STRATEGY = "risk_strategy"

# Lottery Rules
LOTTERY_8_PLUS_1 = Lottery(
    id="lottery_8_1",
    name="8 + 1",
    fields=(Field(8, 20), Field(1, 4)),
    default_ticket_cost=300,
    default_superprice=5_000_000,
    prize_table=PrizeTable((
        PrizeRow((8, 1), Jackpot()),
        PrizeRow((8, 0), Fixed(300_000)),
        PrizeRow((7, 1), Fixed(75_000)),
        PrizeRow((7, 0), Fixed(15_000)),
        PrizeRow((6, 1), Fixed(3_000)),
        PrizeRow((6, 0), Fixed(1_500)),
        PrizeRow((5, 1), Fixed(900)),
        PrizeRow((5, 0), Fixed(600)),
        PrizeRow((4, 1), Fixed(300)),
    )),
)

LOTTERY_4_FROM_20 = Lottery(
    id="lottery_4_20",
    name="4 / 20",
    fields=(Field(4, 20), Field(4, 20)),
    default_ticket_cost=400,
    default_superprice=50_000_000,
    variants=(
        LotteryVariant(
            type="fixed",
            label="Fixed prizes",
            prize_table=PrizeTable((
                PrizeRow((4, 4), Jackpot()),
                PrizeRow((3, 4), Fixed(100_000)),
                PrizeRow((2, 4), Fixed(10_000)),
                PrizeRow((1, 4), Fixed(2_000)),
                PrizeRow((0, 4), Fixed(4_000)),
                PrizeRow((3, 3), Fixed(3_000)),
                PrizeRow((2, 3), Fixed(1_000)),
                PrizeRow((1, 3), Fixed(500)),
                PrizeRow((0, 3), Fixed(450)),
                PrizeRow((2, 2), Fixed(300)),
                PrizeRow((1, 2), Fixed(100)),
                PrizeRow((0, 2), Fixed(100)),
            )),
        ),
        LotteryVariant(
            type="pool_percentage",
            label="Share of prize pool",
            prize_table=PrizeTable((
                PrizeRow((4, 4), PoolPercent(30), note=JACKPOT_NOTE),
                PrizeRow((3, 4), PoolPercent(3.12)),
                PrizeRow((2, 4), PoolPercent(1.5)),
                PrizeRow((1, 4), PoolPercent(1.9)),
                PrizeRow((0, 4), PoolPercent(1.8)),
                PrizeRow((3, 3), PoolPercent(0.8)),
                PrizeRow((2, 3), PoolPercent(6.38)),
                PrizeRow((1, 3), PoolPercent(8.5)),
                PrizeRow((0, 3), PoolPercent(10.5)),
                PrizeRow((2, 2), PoolPercent(10.5)),
                PrizeRow((1, 2), Fixed(400)),
                PrizeRow((0, 2), PoolPercent(25)),
            )),
            average_pool=4_000_000,
        ),
    ),
)

# 0 matches pays like 12: complement symmetry
LOTTERY_12_FROM_24 = Lottery(
    id="lottery_12_24",
    name="12 / 24",
    fields=(Field(12, 24),),
    default_ticket_cost=300,
    default_superprice=100_000_000,
    prize_table=PrizeTable((
        PrizeRow((12,), Jackpot()),
        PrizeRow((11,), Fixed(30_000)),
        PrizeRow((10,), Fixed(3_000)),
        PrizeRow((9,), Fixed(600)),
        PrizeRow((8,), Fixed(150)),
    )),
    complement_symmetric=True,
)

LOTTERY_5_FROM_36_PLUS_1 = Lottery(
    id="lottery_5_36_1",
    name="5 / 36 + 1",
    fields=(Field(5, 36), Field(1, 4)),
    default_ticket_cost=100,
    default_superprice=500_000_000,
    has_secondary_prize=True,
    default_secondary_prize=100_000_000,
    prize_table=PrizeTable((
        PrizeRow((5, 1), Jackpot()),
        PrizeRow((5, 0), Secondary()),
        PrizeRow((4,), Fixed(7_500)),
        PrizeRow((3,), Fixed(750)),
        PrizeRow((2,), Fixed(75)),
    )),
)

LOTTERY_6_FROM_45 = Lottery(
    id="lottery_6_45",
    name="6 / 45",
    fields=(Field(6, 45),),
    default_ticket_cost=100,
    default_superprice=250_000_000,
    prize_table=PrizeTable((
        PrizeRow((6,), Jackpot()),
        PrizeRow((5,), Fixed(100_000)),
        PrizeRow((4,), Fixed(2_800)),
        PrizeRow((3,), Fixed(1_400)),
    )),
)

LOTTERY_7_FROM_49 = Lottery(
    id="lottery_7_49",
    name="7 / 49",
    fields=(Field(7, 49),),
    default_ticket_cost=50,
    default_superprice=300_000_000,
    prize_table=PrizeTable((
        PrizeRow((7,), Jackpot()),
        PrizeRow((6,), Fixed(120_000)),
        PrizeRow((5,), Fixed(2_400)),
        PrizeRow((4,), Fixed(280)),
        PrizeRow((3,), Fixed(120)),
        PrizeRow((2,), Fixed(40)),
    )),
)

LOTTERIES = {
    lottery.id: lottery
    for lottery in (
        LOTTERY_8_PLUS_1,
        LOTTERY_4_FROM_20,
        LOTTERY_12_FROM_24,
        LOTTERY_5_FROM_36_PLUS_1,
        LOTTERY_6_FROM_45,
        LOTTERY_7_FROM_49,
    )
}


def get_lottery(lottery_id: str) -> Lottery:
    try:
        return LOTTERIES[lottery_id]
    except KeyError:
        raise UnsupportedOperation(f"Unknown lottery: {lottery_id}") from None


# Rough chance that a single ticket wins anything, used by the min-risk planner
TICKET_WIN_PROBABILITY = {
    "lottery_8_1": 0.08,
    "lottery_6_45": 0.027,
    "lottery_7_49": 0.022,
    "lottery_5_36_1": 0.018,
    "lottery_4_20": 0.03,
}
DEFAULT_TICKET_WIN_PROBABILITY = 0.05
MIN_RISK_SAFETY_FACTOR = 1.5

# The advertised pool is ~50% of ticket revenue
POOL_REVENUE_FACTOR = 2

Z_SCORES = {
    0.90: 1.645,
    0.95: 1.96,
    0.99: 2.576,
}
DEFAULT_Z_SCORE = 1.96

DRAWS_PER_YEAR = 52

GENERATOR_CONFIG = {
    "max_planned_tickets": 10_000,  # planned (not explicit) counts are capped here
    "key_wheel_max_tickets": 1_000,
    "diverse_candidates": 50,
    "max_ticket_count": 10_000,
    "max_budget": 1_000_000,
}

SIMULATION_CONFIG = {
    "rounds": 100,
    "max_rounds": 100_000,
}

# Risk thresholds on stdDev / ticket cost
RISK_THRESHOLDS = {
    "low": 0.5,
    "medium": 1.5,
}
