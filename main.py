import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor

from lotto_engine.analysis import analyze_profitability, assess_risk
from lotto_engine.config import LOGS_DIR, LOTTERIES, SIMULATION_CONFIG, get_lottery
from lotto_engine.expected_value import calculate_ev, prize_table_breakdown
from lotto_engine.generator import execute_strategy
from lotto_engine.simulation import bankroll_summary, round_outcome_buckets, submit_simulation
from lotto_engine.strategies import TICKET_COUNT_KEY, calculate_ticket_count, get_strategy, strategies_for_lottery

logger = logging.getLogger(__name__)


def setup_logging():
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(LOGS_DIR / "lotto_engine.log"),
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_params(pairs):
    """key=value pairs; numeric values are converted."""
    params = {}
    for pair in pairs or []:
        key, _, value = pair.partition("=")
        try:
            params[key] = int(value)
        except ValueError:
            try:
                params[key] = float(value)
            except ValueError:
                params[key] = value
    return params


def pricing_args(args, lottery):
    ticket_cost = args.ticket_cost if args.ticket_cost is not None else lottery.default_ticket_cost
    superprice = args.superprice if args.superprice is not None else lottery.default_superprice
    secondary = args.secondary_prize
    if secondary is None and lottery.has_secondary_prize:
        secondary = lottery.default_secondary_prize
    pool = args.pool
    if pool is None and args.variant:
        pool = lottery.get_variant(args.variant).average_pool or 0
    return ticket_cost, superprice, secondary, pool or 0


def cmd_list(args):
    for lottery in LOTTERIES.values():
        fields = " + ".join(f"{f.count}/{f.from_}" for f in lottery.fields)
        strategies = ", ".join(s.id for s in strategies_for_lottery(lottery.id))
        print(f"{lottery.id:<16} {lottery.name:<10} {fields:<12} strategies: {strategies or '-'}")


def cmd_ev(args):
    lottery = get_lottery(args.lottery)
    prize_table = lottery.get_prize_table(args.variant)
    ticket_cost, superprice, secondary, pool = pricing_args(args, lottery)

    ev = calculate_ev(lottery, superprice, prize_table, ticket_cost, secondary, pool)
    risk = assess_risk(lottery, prize_table, superprice, ticket_cost, secondary, pool)
    profitability = analyze_profitability(ev.expected_value, ticket_cost)

    print(f"\n=== {lottery.name} ===")
    for row in prize_table_breakdown(lottery, prize_table, superprice, ticket_cost, secondary, pool):
        print(f"{'+'.join(map(str, row['matches'])):<8} 1 in {row['odds']:<14,.0f} "
              f"prize {row['prize']:<14,.0f} return {row['expected_return']:.4f}")
    print(f"\nEV: {ev.expected_value:.2f} ({ev.ev_percent:.2f}%) | Profitable: {ev.is_profitable}")
    print(f"Break-even superprice: {ev.break_even_superprice:,.0f}")
    print(f"Win probability: {risk.win_probability:.4f} | Risk: {risk.risk_level} "
          f"(score {risk.risk_score:.2f}) | VaR95: {risk.var95:.2f}")
    print(f"Recommendation: {profitability.recommendation}")


def cmd_plan(args):
    lottery = get_lottery(args.lottery)
    ticket_cost = args.ticket_cost if args.ticket_cost is not None else lottery.default_ticket_cost
    params = parse_params(args.param)
    strategy = get_strategy(args.strategy)

    count = calculate_ticket_count(strategy.id, lottery, params, ticket_cost)
    print(f"{strategy.name}: {count:,} tickets, cost {count * ticket_cost:,.0f}")

    if args.generate:
        result = execute_strategy(strategy.id, lottery, params, ticket_cost, seed=args.seed)
        if not result.validation:
            print("Invalid parameters: " + "; ".join(result.validation.errors))
            return
        for ticket in result.tickets[:args.show]:
            print(ticket.field1, ticket.field2 if ticket.field2 is not None else "")
        print(f"Generated {result.ticket_count} tickets | Coverage {result.coverage.percent:.4f}%")


def cmd_simulate(args):
    lottery = get_lottery(args.lottery)
    prize_table = lottery.get_prize_table(args.variant)
    ticket_cost, superprice, secondary, pool = pricing_args(args, lottery)
    rounds = min(args.rounds, SIMULATION_CONFIG["max_rounds"])

    params = parse_params(args.param)
    params.setdefault(TICKET_COUNT_KEY, args.tickets)
    generated = execute_strategy(args.strategy, lottery, params, ticket_cost, seed=args.seed)
    if not generated.validation:
        print("Invalid parameters: " + "; ".join(generated.validation.errors))
        return

    with ThreadPoolExecutor(max_workers=1) as executor:
        future = submit_simulation(executor, lottery, generated.tickets, rounds, prize_table,
                                   superprice, ticket_cost, secondary, pool, seed=args.seed)
        result = future.result()

    stats = result.statistics
    print(f"\n=== Simulation: {lottery.name}, {len(result.tickets)} tickets x {rounds} rounds ===")
    print(f"Invested: {stats.total_investment:,.0f} | Won: {stats.total_won:,.0f} | ROI: {stats.roi:.2f}%")
    print(f"Zero-win rounds: {stats.zero_win_percent:.1f}% | Max prize: {stats.max_prize_in_round:,.0f}")
    print(f"Bankroll: {bankroll_summary(result)}")
    print(f"Outcomes: {round_outcome_buckets(result)}")


def add_pricing_options(parser):
    parser.add_argument("--variant", default=None, help="Prize table variant (fixed, pool_percentage)")
    parser.add_argument("--ticket-cost", type=float, default=None, help="Ticket cost")
    parser.add_argument("--superprice", type=float, default=None, help="Jackpot amount")
    parser.add_argument("--secondary-prize", type=float, default=None, help="Secondary jackpot amount")
    parser.add_argument("--pool", type=float, default=None, help="Prize pool for pool-percentage tables")


def main():
    parser = argparse.ArgumentParser(description="Lottery mathematics and simulation engine")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List lotteries and their strategies")

    ev_parser = sub.add_parser("ev", help="Expected value and risk of one ticket")
    ev_parser.add_argument("lottery", help="Lottery id")
    add_pricing_options(ev_parser)

    plan_parser = sub.add_parser("plan", help="Ticket count for a strategy")
    plan_parser.add_argument("lottery", help="Lottery id")
    plan_parser.add_argument("strategy", help="Strategy id")
    plan_parser.add_argument("--param", action="append", help="Strategy parameter as key=value")
    plan_parser.add_argument("--ticket-cost", type=float, default=None, help="Ticket cost")
    plan_parser.add_argument("--generate", action="store_true", help="Also generate the tickets")
    plan_parser.add_argument("--show", type=int, default=10, help="Tickets to print")
    plan_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    sim_parser = sub.add_parser("simulate", help="Monte-Carlo simulation of a ticket set")
    sim_parser.add_argument("lottery", help="Lottery id")
    sim_parser.add_argument("--strategy", default="min_risk", help="Strategy used to generate tickets")
    sim_parser.add_argument("--param", action="append", help="Strategy parameter as key=value")
    sim_parser.add_argument("--tickets", type=int, default=10, help="Tickets per round")
    sim_parser.add_argument("--rounds", type=int, default=SIMULATION_CONFIG["rounds"], help="Draws to simulate")
    sim_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    add_pricing_options(sim_parser)

    args = parser.parse_args()
    setup_logging()

    commands = {
        "list": cmd_list,
        "ev": cmd_ev,
        "plan": cmd_plan,
        "simulate": cmd_simulate,
    }

    try:
        commands[args.command](args)
    except Exception as e:
        logger.error(f"Fatal error: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

# python3 main.py ev lottery_6_45 --superprice 100000000
# python3 main.py plan lottery_7_49 full_wheel --param "wheelnumbers=1 2 3 4 5 6 7 8 9" --generate
# python3 main.py simulate lottery_5_36_1 --tickets 20 --rounds 1000 --seed 42
