"""
Decision Dispatcher
===================
Single entry point producing one BUY/SELL/HOLD decision per bot per tick.

Order of evaluation:
1. Inactive bots hold
2. Dollar-drop overlay, when enabled and a position is open
3. The bot's trading method (buy path when flat, sell path when holding)
"""

import logging
import random
from typing import Dict, Optional, Type

from ..data.models import PriceSeries, SeriesLike
from ..risk.dollar_drop import DollarDropProtection
from .base_strategy import BaseStrategy
from .bot_state import TradingBot
from .confirmed_recovery import ConfirmedRecoveryStrategy, RecoveryMode
from .decision import Decision
from .momentum import PriceComparisonStrategy, SlopeAnalysisStrategy
from .settings import StrategyParams, TradingMethod
from .trend_reversal import (
    DirectionChangeBuyStrategy,
    DirectionChangeReferenceStrategy,
    TrendReversalStrategy,
)

logger = logging.getLogger("paperbot.strategies.dispatcher")


STRATEGY_REGISTRY: Dict[TradingMethod, Type[BaseStrategy]] = {
    TradingMethod.TREND_REVERSAL: TrendReversalStrategy,
    TradingMethod.DIRECTION_CHANGE_REFERENCE: DirectionChangeReferenceStrategy,
    TradingMethod.DIRECTION_CHANGE_BUY: DirectionChangeBuyStrategy,
    TradingMethod.PRICE_COMPARISON: PriceComparisonStrategy,
    TradingMethod.SLOPE_ANALYSIS: SlopeAnalysisStrategy,
    TradingMethod.CONFIRMED_RECOVERY: ConfirmedRecoveryStrategy,
}


def get_strategy(
    method: TradingMethod,
    params: Optional[StrategyParams] = None,
    recovery_mode: RecoveryMode = RecoveryMode.LIVE,
    rng: Optional[random.Random] = None,
) -> BaseStrategy:
    """Build the evaluator for ``method``; unknown methods get trend reversal"""
    strategy_cls = STRATEGY_REGISTRY.get(method, TrendReversalStrategy)
    if strategy_cls is ConfirmedRecoveryStrategy:
        return ConfirmedRecoveryStrategy(params, mode=recovery_mode, rng=rng)
    return strategy_cls(params)


def decide(
    bot: TradingBot,
    series: SeriesLike,
    current_price: float,
    now_ms: Optional[int] = None,
    recovery_mode: RecoveryMode = RecoveryMode.LIVE,
    rng: Optional[random.Random] = None,
) -> Decision:
    """
    Decide what ``bot`` should do at ``current_price``.

    Args:
        bot: Bot with its settings, position and pending recovery state
        series: Samples in ascending time order (list or PriceSeries)
        current_price: Latest quoted price
        now_ms: Evaluation time; defaults to the latest sample timestamp
        recovery_mode: LIVE runs the scheduled confirmation state machine,
            SIMULATED uses the random price proxy
        rng: Random source for SIMULATED mode

    Returns:
        Decision. The bot is never mutated; state changes ride on the
        decision's ``update_position`` / ``update_recovery`` /
        ``new_direction_change``.
    """
    if not isinstance(series, PriceSeries):
        series = PriceSeries(series)

    if not bot.is_active:
        return Decision.hold("Bot is inactive")

    if bot.settings.dollar_drop.enabled and bot.current_position is not None:
        overlay = DollarDropProtection(bot.settings.dollar_drop).evaluate(
            bot.current_position, current_price, series
        )
        if overlay.should_sell:
            return Decision.sell(
                overlay.reason,
                strategy="dollar_drop",
                update_position=overlay.update_position,
            )
        if overlay.update_position is not None:
            return Decision.hold(
                overlay.reason,
                strategy="dollar_drop",
                update_position=overlay.update_position,
            )

    strategy = get_strategy(
        bot.settings.trading_method,
        bot.settings.strategy,
        recovery_mode=recovery_mode,
        rng=rng,
    )
    decision = strategy.analyze(bot, series, current_price, now_ms)

    logger.debug(f"{bot.name} ({bot.stock_symbol}) @ {current_price:.2f}: {decision}")
    return decision
