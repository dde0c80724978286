"""
Bot Runner
==========
Evaluates every active bot on each tick.

Per bot:
1. Fetch the current price and the series for the bot's chart period
2. Skip the bot for this tick if the current price is not a positive finite
   number, or the series is too short or fails validation
3. Ask the dispatcher for a decision
4. Hand the decision to the ledger
5. If a confirmed-recovery check is pending, schedule a follow-up evaluation
   at its due time

When a trend-flip trader is attached, each of its symbols is evaluated after
the bots with the same fetch and validation rules.
"""

import logging
import random
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Tuple

from ..core.constants import DEFAULT_TICK_SECONDS
from ..core.logging_config import trade_logger
from ..data.models import ChartPeriod, PriceSeries, is_finite_price
from ..data.quote_source import QuoteSource, now_ms
from ..data.validators import validate_series
from ..execution.auto_trader import TrendFlipTrader
from ..execution.paper_ledger import BotTrade, PaperLedger
from ..strategies.bot_state import TradingBot
from ..strategies.confirmed_recovery import RecoveryMode
from ..strategies.decision import Decision
from ..strategies.dispatcher import decide
from .scheduler import JobScheduler


logger = logging.getLogger("paperbot.jobs.runner")

TICK_JOB_ID = "bot_tick"


def recovery_job_id(bot_id: str) -> str:
    return f"recovery_{bot_id}"


class BotRunner:
    """
    Drives the ledger's bots from a quote source.

    Usage:
        runner = BotRunner(ledger, SimulatedQuoteSource(seed=7), JobScheduler())
        runner.start(tick_seconds=60)
        ...
        runner.stop()

    ``run_tick()`` and ``process_bot()`` can also be called directly; ticks
    are serialized by an internal lock.
    """

    def __init__(
        self,
        ledger: PaperLedger,
        quote_source: QuoteSource,
        scheduler: Optional[JobScheduler] = None,
        recovery_mode: RecoveryMode = RecoveryMode.LIVE,
        rng: Optional[random.Random] = None,
        clock: Callable[[], int] = now_ms,
        auto_trader: Optional[TrendFlipTrader] = None,
    ):
        self.ledger = ledger
        self.quote_source = quote_source
        self.scheduler = scheduler
        self.recovery_mode = recovery_mode
        self.rng = rng
        self.clock = clock
        self.auto_trader = auto_trader

        self._lock = threading.RLock()
        self.ticks = 0

    def run_tick(self) -> Dict[str, Decision]:
        """Evaluate all active bots once; returns decisions by bot id"""
        with self._lock:
            self.ticks += 1
            decisions: Dict[str, Decision] = {}

            for bot in list(self.ledger.active_bots):
                decision = self.process_bot(bot.id)
                if decision is not None:
                    decisions[bot.id] = decision

            if self.auto_trader is not None:
                for symbol in self.auto_trader.symbols:
                    self.process_auto_trade(symbol)

            logger.debug(f"Tick {self.ticks}: {len(decisions)} bot(s) evaluated")
            return decisions

    def _fetch(self, label: str, symbol: str, chart_period: ChartPeriod) -> Optional[Tuple[float, PriceSeries]]:
        """Current price and validated series, or None to skip this tick"""
        interval, count = chart_period.series_request

        try:
            current_price = self.quote_source.get_current_price(symbol)
            raw = self.quote_source.get_historical_series(symbol, interval, count)
        except Exception as e:
            logger.error(f"Quote fetch failed for {label} ({symbol}): {e}", exc_info=True)
            return None

        if not is_finite_price(current_price) or current_price <= 0:
            logger.warning(f"Skipping {label}: invalid current price {current_price!r}")
            return None

        series = PriceSeries.from_samples(raw)
        if len(series) < 2:
            logger.debug(f"Skipping {label}: only {len(series)} sample(s)")
            return None

        validation = validate_series(series)
        if validation.has_errors:
            logger.warning(f"Skipping {label}: {validation.summary()}")
            return None

        return current_price, series

    def process_bot(self, bot_id: str) -> Optional[Decision]:
        """
        Evaluate one bot and apply the result.

        Returns:
            The decision, or None when the bot was skipped
        """
        with self._lock:
            bot = self.ledger.bots.get(bot_id)
            if bot is None or not bot.is_active or bot.is_automated:
                return None

            fetched = self._fetch(bot.name, bot.stock_symbol, bot.settings.chart_period)
            if fetched is None:
                return None
            current_price, series = fetched

            decision = decide(
                bot,
                series,
                current_price,
                now_ms=self.clock(),
                recovery_mode=self.recovery_mode,
                rng=self.rng,
            )
            trade_logger.log_decision(
                bot.name, bot.stock_symbol, decision.action.value, current_price, decision.reason
            )

            self.ledger.apply_decision(bot.id, decision, current_price)
            self._schedule_recovery_check(bot_id)

            return decision

    def process_auto_trade(self, symbol: str) -> Optional[BotTrade]:
        """Run the trend-flip trader for one symbol; returns the fill, if any"""
        if self.auto_trader is None:
            return None

        with self._lock:
            fetched = self._fetch(f"auto {symbol}", symbol, self.auto_trader.settings.chart_period)
            if fetched is None:
                return None
            current_price, series = fetched
            return self.auto_trader.evaluate(symbol, series, current_price)

    def _schedule_recovery_check(self, bot_id: str) -> None:
        if self.scheduler is None:
            return

        bot = self.ledger.bots.get(bot_id)
        if bot is None or bot.recovery is None or not bot.recovery.is_pending:
            return

        run_at = datetime.fromtimestamp(bot.recovery.check_due_at / 1000, tz=timezone.utc)
        self.scheduler.add_one_shot_job(
            recovery_job_id(bot_id),
            run_at,
            self.process_bot,
            name=f"Recovery check {bot.name}",
            args=(bot_id,),
        )

    def remove_bot(self, bot_id: str) -> TradingBot:
        """Remove a bot from the ledger and cancel its pending recovery check"""
        with self._lock:
            if self.scheduler is not None:
                self.scheduler.remove_job(recovery_job_id(bot_id))
            return self.ledger.remove_bot(bot_id)

    def start(self, tick_seconds: int = DEFAULT_TICK_SECONDS) -> None:
        """Schedule the recurring tick and start the scheduler"""
        if self.scheduler is None:
            self.scheduler = JobScheduler()
        self.scheduler.add_interval_job(TICK_JOB_ID, tick_seconds, self.run_tick, name="Bot tick")
        self.scheduler.start()
        logger.info(self.scheduler.get_status())

    def stop(self) -> None:
        if self.scheduler is not None:
            self.scheduler.stop()
