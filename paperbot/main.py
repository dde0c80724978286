"""
Paperbot
========
Command-line entry point for running paper-trading bots against the
simulated quote source.

Usage:
    # Ten ticks on a virtual clock, then print the summary
    python -m paperbot.main --symbol APP --method price_comparison --ticks 10

    # Run on the scheduler until Ctrl+C
    python -m paperbot.main --symbol APP --symbol XYZ --live

    # Trend-flip auto trading alongside the bots
    python -m paperbot.main --symbol APP --ticks 30 --auto-trade

    # With debug logging
    python -m paperbot.main --ticks 20 --debug
"""

import sys
import signal
import logging
import argparse
import random
import time
from typing import List, Optional

from .core.config import Config
from .core.logging_config import setup_logging
from .data.quote_source import SimulatedQuoteSource, now_ms
from .execution.auto_trader import AutoTradeSettings, TrendFlipTrader
from .execution.paper_ledger import PaperLedger
from .jobs.bot_runner import BotRunner
from .jobs.scheduler import JobScheduler
from .strategies.confirmed_recovery import RecoveryMode
from .strategies.settings import BotSettings, InvestmentType, TradingMethod
from .utils.formatting import format_currency


logger = logging.getLogger("paperbot.main")


class VirtualClock:
    """Clock that moves forward only when advanced; used for offline runs"""

    def __init__(self, start_ms: int, step_ms: int):
        self.now = start_ms
        self.step_ms = step_ms

    def __call__(self) -> int:
        return self.now

    def advance(self) -> None:
        self.now += self.step_ms


def build_ledger(config: Config, symbols: List[str], settings: BotSettings, clock) -> PaperLedger:
    ledger = PaperLedger(starting_cash=config.ledger.starting_cash, clock=clock)
    for symbol in symbols:
        ledger.create_bot(f"{symbol} {settings.trading_method.value}", symbol, settings)
    return ledger


def build_auto_trader(config: Config, args: argparse.Namespace, ledger: PaperLedger) -> Optional[TrendFlipTrader]:
    if not (args.auto_trade or config.engine.auto_trade):
        return None
    settings = AutoTradeSettings(
        enabled=True,
        max_investment_per_trade=config.ledger.max_investment_per_trade,
        investment_type=InvestmentType.from_string(config.ledger.investment_type),
    )
    logger.info(f"Trend-flip auto trading enabled for {', '.join(args.symbol)}")
    return TrendFlipTrader(ledger, settings, args.symbol)


def print_summary(ledger: PaperLedger, prices: dict) -> None:
    value = ledger.portfolio_value(prices)
    stats = ledger.get_statistics()

    logger.info("=" * 60)
    logger.info("PAPER TRADING SUMMARY")
    logger.info(f"Trades: {stats['total_trades']}  Win rate: {stats['win_rate']:.1f}%")
    logger.info(f"Realized P&L: {format_currency(stats['total_profit'])}")
    logger.info(f"Cash: {format_currency(value['cash'])}  Holdings: {format_currency(value['holdings_value'])}")
    logger.info(f"Total: {format_currency(value['total_value'])} ({value['profit_loss_pct']:+.2f}%)")
    for bot in ledger.bots.values():
        held = bot.current_position.shares if bot.current_position else 0
        logger.info(
            f"  {bot.name}: trades={bot.stats.total_trades} "
            f"profit={format_currency(bot.stats.total_profit)} holding={held}"
        )
    logger.info("=" * 60)


def run_offline(config: Config, args: argparse.Namespace, settings: BotSettings, mode: RecoveryMode) -> PaperLedger:
    clock = VirtualClock(now_ms(), config.engine.tick_seconds * 1000)
    source = SimulatedQuoteSource(seed=args.seed, clock=clock)
    ledger = build_ledger(config, args.symbol, settings, clock)
    runner = BotRunner(
        ledger,
        source,
        recovery_mode=mode,
        rng=random.Random(args.seed),
        clock=clock,
        auto_trader=build_auto_trader(config, args, ledger),
    )

    for _ in range(args.ticks):
        for bot_id, decision in runner.run_tick().items():
            logger.debug(f"{ledger.bots[bot_id].name}: {decision}")
        clock.advance()

    prices = {s: source.get_current_price(s) for s in args.symbol}
    print_summary(ledger, prices)
    return ledger


def run_live(config: Config, args: argparse.Namespace, settings: BotSettings, mode: RecoveryMode) -> None:
    source = SimulatedQuoteSource(seed=args.seed)
    ledger = build_ledger(config, args.symbol, settings, now_ms)
    runner = BotRunner(
        ledger,
        source,
        JobScheduler(),
        recovery_mode=mode,
        rng=random.Random(args.seed),
        auto_trader=build_auto_trader(config, args, ledger),
    )

    running = True

    def _shutdown(signum, frame):
        nonlocal running
        logger.info(f"Received signal {signum}")
        running = False

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    runner.start(config.engine.tick_seconds)
    logger.info("Paperbot is running. Press Ctrl+C to stop.")

    try:
        while running:
            time.sleep(1)
    finally:
        runner.stop()
        print_summary(ledger, {s: source.get_current_price(s) for s in args.symbol})


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Paper-trading bots on simulated quotes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--symbol", action="append", help="Symbol to trade (repeatable)")
    parser.add_argument(
        "--method",
        default=TradingMethod.TREND_REVERSAL.value,
        choices=[m.value for m in TradingMethod],
        help="Trading method for every bot",
    )
    parser.add_argument("--chart-period", default="5min", help="1sec, 5min, 1D, 1DSec or 5MinSec")
    parser.add_argument("--ticks", type=int, default=10, help="Ticks to run offline")
    parser.add_argument("--live", action="store_true", help="Run on the scheduler until stopped")
    parser.add_argument("--auto-trade", action="store_true", help="Also trade trend flips automatically")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--data-dir", type=str, default=None, help="Data/log directory")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    args.symbol = [s.upper() for s in (args.symbol or ["APP"])]

    config = Config.load(args.data_dir)
    if args.seed is None:
        args.seed = config.engine.random_seed

    setup_logging(
        log_dir=config.logs_dir,
        console_level=logging.DEBUG if args.debug else logging.INFO,
    )

    ok, issues = config.validate()
    if not ok:
        for issue in issues:
            logger.error(f"Config: {issue}")
        return 1

    logger.info(config.get_summary())

    settings = BotSettings.from_dict({
        "tradingMethod": args.method,
        "chartPeriod": args.chart_period,
        "maxInvestmentPerTrade": config.ledger.max_investment_per_trade,
        "investmentType": config.ledger.investment_type,
    })
    mode = RecoveryMode.from_string(config.engine.recovery_mode)

    try:
        if args.live:
            run_live(config, args, settings, mode)
        else:
            run_offline(config, args, settings, mode)
    except Exception as e:
        logger.exception(f"Paperbot crashed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
