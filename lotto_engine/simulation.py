import enum
import logging
import threading
from concurrent.futures import Executor, Future
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .combinatorics import make_rng, unique_random_numbers
from .prizes import prize_category, prize_lookup
from .statistical import simulation_statistics
from .types import (
    DrawResult,
    Lottery,
    MatchResult,
    PrizeTable,
    SimulationResult,
    SimulationRound,
    SimulationStatistics,
    Ticket,
)

logger = logging.getLogger(__name__)


class SimulationState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def draw_numbers(lottery: Lottery, rng: np.random.Generator) -> DrawResult:
    """One uniform draw per field, without replacement."""
    fields = [tuple(sorted(unique_random_numbers(1, f.from_, f.count, rng))) for f in lottery.fields]
    return DrawResult(field1=fields[0], field2=fields[1] if len(fields) > 1 else None)


def count_matches(ticket: Ticket, draw: DrawResult) -> List[int]:
    """Hits per field; fields missing on either side are skipped."""
    matches = []
    for ticket_field, draw_field in zip(ticket.fields(), draw.fields()):
        matches.append(len(set(ticket_field).intersection(draw_field)))
    return matches


class Simulator:
    """Monte-Carlo replay of many draws against a fixed ticket set."""

    def __init__(self, lottery: Lottery, prize_table: PrizeTable, superprice: float,
                 ticket_cost: float, secondary_prize: Optional[float] = None,
                 pool_amount: float = 0, rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        self.lottery = lottery
        self.prize_table = prize_table
        self.superprice = superprice
        self.ticket_cost = ticket_cost
        self.secondary_prize = secondary_prize
        self.pool_amount = pool_amount
        self.rng = rng if rng is not None else make_rng(seed)
        self.state = SimulationState.IDLE

    def run(self, tickets: Sequence[Ticket], rounds_count: int,
            cancel_event: Optional[threading.Event] = None) -> SimulationResult:
        """Simulate ``rounds_count`` draws.

        With no rounds or no tickets nothing is drawn and statistics are zero.
        Setting ``cancel_event`` stops the run before the next round; the
        rounds completed so far are returned with ``cancelled=True``.
        """
        tickets = tuple(tickets)
        self.state = SimulationState.RUNNING

        if rounds_count <= 0 or len(tickets) == 0:
            self.state = SimulationState.COMPLETED
            return SimulationResult(
                lottery_id=self.lottery.id,
                tickets=tickets,
                ticket_cost=self.ticket_cost,
                rounds_count=max(0, rounds_count),
                rounds=(),
                statistics=SimulationStatistics.empty(),
            )

        logger.info("Starting simulation: %d rounds x %d tickets (%s)",
                    rounds_count, len(tickets), self.lottery.id)

        prizes = prize_lookup(self.lottery, self.prize_table, self.superprice,
                              self.secondary_prize, self.pool_amount, self.ticket_cost)
        round_cost = self.ticket_cost * len(tickets)
        rounds = []
        bankroll = 0
        cancelled = False

        for round_number in range(1, rounds_count + 1):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.warning("Simulation cancelled after %d of %d rounds",
                               round_number - 1, rounds_count)
                break

            draw = draw_numbers(self.lottery, self.rng)
            match_results = []
            total_prize = 0
            for index, ticket in enumerate(tickets):
                match_results.append(self._evaluate_ticket(index, ticket, draw, prizes))
                total_prize += match_results[-1].prize_won

            bankroll += total_prize - round_cost
            rounds.append(SimulationRound(
                round_number=round_number,
                draw=draw,
                matches=tuple(match_results),
                total_prize_this_round=total_prize,
                bankroll=bankroll,
            ))

        statistics = simulation_statistics(rounds, self.ticket_cost)
        self.state = SimulationState.CANCELLED if cancelled else SimulationState.COMPLETED

        result = SimulationResult(
            lottery_id=self.lottery.id,
            tickets=tickets,
            ticket_cost=self.ticket_cost,
            rounds_count=rounds_count,
            rounds=tuple(rounds),
            statistics=statistics,
            cancelled=cancelled,
        )
        self._generate_report(result)
        return result

    def _evaluate_ticket(self, index: int, ticket: Ticket, draw: DrawResult,
                         prizes: Dict) -> MatchResult:
        matches = count_matches(ticket, draw)
        return MatchResult(
            ticket_index=index,
            field1_matches=matches[0] if matches else 0,
            field2_matches=matches[1] if len(matches) > 1 else None,
            prize_won=prizes.get(tuple(matches), 0),
            prize_category=prize_category(matches, self.lottery),
        )

    def _generate_report(self, result: SimulationResult) -> None:
        """Log a one-line summary of the run."""
        df = rounds_frame(result)
        if df.empty:
            logger.warning("No rounds to report.")
            return
        stats = result.statistics
        logger.info(
            "Simulation complete | Rounds: %d | Invested: %.2f | Won: %.2f | Net: %.2f | "
            "ROI: %.2f%% | Zero-win rounds: %.1f%% | Final bankroll: %.2f",
            len(df), stats.total_investment, stats.total_won, stats.net_return,
            stats.roi, stats.zero_win_percent, df["bankroll"].iloc[-1],
        )


def run_simulation(lottery: Lottery, tickets: Sequence[Ticket], rounds_count: int,
                   prize_table: PrizeTable, superprice: float, ticket_cost: float,
                   secondary_prize: Optional[float] = None, pool_amount: float = 0,
                   rng: Optional[np.random.Generator] = None, seed: Optional[int] = None,
                   cancel_event: Optional[threading.Event] = None) -> SimulationResult:
    simulator = Simulator(lottery, prize_table, superprice, ticket_cost,
                          secondary_prize=secondary_prize, pool_amount=pool_amount,
                          rng=rng, seed=seed)
    return simulator.run(tickets, rounds_count, cancel_event=cancel_event)


def submit_simulation(executor: Executor, lottery: Lottery, tickets: Sequence[Ticket],
                      rounds_count: int, prize_table: PrizeTable, superprice: float,
                      ticket_cost: float, secondary_prize: Optional[float] = None,
                      pool_amount: float = 0, seed: Optional[int] = None,
                      cancel_event: Optional[threading.Event] = None) -> "Future[SimulationResult]":
    """Run a simulation on ``executor``; cancel it through ``cancel_event``."""
    return executor.submit(
        run_simulation, lottery, tickets, rounds_count, prize_table, superprice,
        ticket_cost, secondary_prize, pool_amount, None, seed, cancel_event,
    )


def rounds_frame(result: SimulationResult) -> pd.DataFrame:
    """One row per round: prize, winning tickets, net and bankroll."""
    round_cost = result.ticket_cost * len(result.tickets)
    df = pd.DataFrame(
        [
            {
                "round": r.round_number,
                "prize": r.total_prize_this_round,
                "winning_tickets": sum(1 for m in r.matches if m.prize_won > 0),
                "net": r.total_prize_this_round - round_cost,
                "bankroll": r.bankroll,
            }
            for r in result.rounds
        ],
        columns=["round", "prize", "winning_tickets", "net", "bankroll"],
    )
    return df


def bankroll_summary(result: SimulationResult) -> Dict[str, float]:
    """Final, peak and lowest bankroll plus the largest peak-to-trough drop."""
    df = rounds_frame(result)
    if df.empty:
        return {"final": 0.0, "peak": 0.0, "trough": 0.0, "max_drawdown": 0.0}
    bankroll = df["bankroll"].astype(float)
    # Starting position of 0 counts as a peak
    running_peak = bankroll.cummax().clip(lower=0)
    return {
        "final": float(bankroll.iloc[-1]),
        "peak": float(bankroll.max()),
        "trough": float(bankroll.min()),
        "max_drawdown": float((running_peak - bankroll).max()),
    }


def round_outcome_buckets(result: SimulationResult) -> Dict[str, int]:
    """Rounds grouped by prize relative to the cost of one round."""
    buckets = {"zero": 0, "under_half": 0, "around_cost": 0, "x2_10": 0, "x10_100": 0, "x100_plus": 0}
    round_cost = result.ticket_cost * len(result.tickets)
    for r in result.rounds:
        prize = r.total_prize_this_round
        if prize == 0:
            buckets["zero"] += 1
        elif prize < round_cost * 0.5:
            buckets["under_half"] += 1
        elif prize < round_cost * 2:
            buckets["around_cost"] += 1
        elif prize < round_cost * 10:
            buckets["x2_10"] += 1
        elif prize < round_cost * 100:
            buckets["x10_100"] += 1
        else:
            buckets["x100_plus"] += 1
    return buckets
