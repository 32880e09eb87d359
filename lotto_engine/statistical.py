"""Descriptive statistics for simulation output and arbitrary samples.

Standard deviation uses the population variance. Empty inputs return zeros.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .config import DEFAULT_Z_SCORE, Z_SCORES
from .types import SimulationRound, SimulationStatistics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BasicStats:
    min: float
    max: float
    mean: float
    median: float
    std_dev: float
    sum: float
    count: int


def z_for(confidence_level: float) -> float:
    """z-score for 0.90 / 0.95 / 0.99, 1.96 for anything else."""
    for level, z in Z_SCORES.items():
        if math.isclose(level, confidence_level):
            return z
    return DEFAULT_Z_SCORE


def basic_stats(values: Sequence[float]) -> BasicStats:
    if len(values) == 0:
        return BasicStats(0, 0, 0.0, 0.0, 0.0, 0, 0)
    arr = np.asarray(values, dtype=float)
    return BasicStats(
        min=float(arr.min()),
        max=float(arr.max()),
        mean=float(arr.mean()),
        median=float(np.median(arr)),
        std_dev=float(arr.std()),
        sum=float(arr.sum()),
        count=len(arr),
    )


def percentile(values: Sequence[float], pct: float) -> float:
    """Linear interpolation between order statistics; ``pct`` in 0-100."""
    if len(values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype=float), pct))


def confidence_interval(values: Sequence[float],
                        confidence_level: float = 0.95) -> Tuple[float, float]:
    """Normal-approximation interval for the mean."""
    if len(values) == 0:
        return (0.0, 0.0)
    stats = basic_stats(values)
    margin = z_for(confidence_level) * stats.std_dev / math.sqrt(stats.count)
    return (stats.mean - margin, stats.mean + margin)


def variance(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.var(np.asarray(values, dtype=float)))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """stdDev / mean as a percentage; 0 for a zero mean."""
    stats = basic_stats(values)
    if stats.count == 0 or stats.mean == 0:
        return 0.0
    return stats.std_dev / stats.mean * 100


def find_outliers(values: Sequence[float]) -> List[float]:
    """Values outside [Q1 - 1.5 IQR, Q3 + 1.5 IQR]; needs at least 4 values."""
    if len(values) < 4:
        return []
    q1 = percentile(values, 25)
    q3 = percentile(values, 75)
    iqr = q3 - q1
    lower = q1 - 1.5 * iqr
    upper = q3 + 1.5 * iqr
    return [v for v in values if v < lower or v > upper]


def z_score(value: float, values: Sequence[float]) -> float:
    stats = basic_stats(values)
    if stats.count == 0 or stats.std_dev == 0:
        return 0.0
    return (value - stats.mean) / stats.std_dev


def sample_size_needed(std_dev: float, margin: float, confidence_level: float = 0.95) -> float:
    """ceil((z * stdDev / margin)^2); inf for a non-positive margin."""
    if margin <= 0:
        return math.inf
    return math.ceil((z_for(confidence_level) * std_dev / margin) ** 2)


def _standardized_moment(values: Sequence[float], order: int) -> float:
    arr = np.asarray(values, dtype=float)
    std = arr.std()
    if std == 0:
        return 0.0
    return float(np.mean(((arr - arr.mean()) / std) ** order))


def skewness(values: Sequence[float]) -> float:
    """Third standardized moment; 0 for fewer than 3 values."""
    if len(values) < 3:
        return 0.0
    return _standardized_moment(values, 3)


def kurtosis(values: Sequence[float]) -> float:
    """Excess kurtosis (fourth standardized moment - 3); 0 for fewer than 4 values."""
    if len(values) < 4:
        return 0.0
    if np.asarray(values, dtype=float).std() == 0:
        return 0.0
    return _standardized_moment(values, 4) - 3


def simulation_statistics(rounds: Sequence[SimulationRound],
                          ticket_cost: float) -> SimulationStatistics:
    """Aggregate a simulation's rounds."""
    if len(rounds) == 0:
        return SimulationStatistics.empty()

    ticket_count = len(rounds[0].matches)
    total_investment = ticket_cost * ticket_count * len(rounds)
    prizes = np.array([r.total_prize_this_round for r in rounds], dtype=float)
    total_won = float(prizes.sum())
    net_return = total_won - total_investment
    roi = net_return / total_investment * 100 if total_investment else 0.0

    zero_win_rounds = int(np.count_nonzero(prizes == 0))
    non_zero = prizes[prizes > 0]

    prize_distribution = {}
    for r in rounds:
        for match in r.matches:
            if match.prize_won > 0:
                key = match.prize_category
                prize_distribution[key] = prize_distribution.get(key, 0) + 1

    return SimulationStatistics(
        total_investment=total_investment,
        total_won=total_won,
        net_return=net_return,
        roi=roi,
        zero_win_rounds=zero_win_rounds,
        zero_win_percent=zero_win_rounds / len(rounds) * 100,
        avg_prize_per_round=total_won / len(rounds),
        max_prize_in_round=float(prizes.max()),
        min_non_zero_prize=float(non_zero.min()) if len(non_zero) else 0,
        prize_distribution=prize_distribution,
    )
