"""
Unit Tests for the Decision Dispatcher (strategies/dispatcher.py)

Test Coverage:
    - Inactive bots always hold
    - Dollar-drop overlay preempting every trading method
    - Overlay tracking updates ending the tick
    - Strategy lookup per method
    - Determinism and plain-list input
"""

import random
import sys
from pathlib import Path

import pytest

# Add project root
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from paperbot.data.models import PriceSeries
from paperbot.strategies import (
    Action,
    BotSettings,
    ConfirmedRecoveryStrategy,
    Position,
    RecoveryMode,
    TradingBot,
    TradingMethod,
    TrendReversalStrategy,
)
from paperbot.strategies.dispatcher import STRATEGY_REGISTRY, decide, get_strategy

# ==================== Fixtures ====================


def make_bot(settings=None, position=None, active=True):
    return TradingBot(
        id="disp-1",
        name="Dispatch Bot",
        stock_symbol="APP",
        settings=settings or BotSettings(),
        is_active=active,
        current_position=position,
    )


@pytest.fixture
def rising():
    return PriceSeries.from_prices([9.8, 10, 10.5])


# ==================== Inactive Bots ====================


class TestInactiveBot:
    def test_inactive_bot_holds(self, rising):
        bot = make_bot(BotSettings.from_dict({"tradingMethod": "price_comparison"}), active=False)

        decision = decide(bot, rising, 10.5)

        assert decision.is_hold
        assert decision.reason == "Bot is inactive"

    def test_inactive_bot_with_position_skips_overlay(self, rising):
        settings = BotSettings.from_dict({"dollarDropEnabled": True, "sellAtBuyPriceEnabled": True})
        bot = make_bot(settings, Position(20.0, 10, 0), active=False)

        assert decide(bot, rising, 1.0).is_hold


# ==================== Method Dispatch ====================


class TestMethodDispatch:
    """Each tag reaches its evaluator"""

    def test_price_comparison_buys_on_rise(self, rising):
        bot = make_bot(BotSettings.from_dict({"tradingMethod": "price_comparison"}))

        decision = decide(bot, rising, 10.5)

        assert decision.action == Action.BUY
        assert decision.reason == "Current price 10.50 > previous price 10.00"
        assert decision.strategy == "price_comparison"

    def test_every_method_is_registered(self):
        assert set(STRATEGY_REGISTRY) == set(TradingMethod)

    def test_get_strategy_passes_recovery_options(self):
        rng = random.Random(3)
        strategy = get_strategy(TradingMethod.CONFIRMED_RECOVERY, None, RecoveryMode.SIMULATED, rng)

        assert isinstance(strategy, ConfirmedRecoveryStrategy)
        assert strategy.mode == RecoveryMode.SIMULATED
        assert strategy.rng is rng

    def test_get_strategy_default(self):
        assert isinstance(get_strategy(TradingMethod.TREND_REVERSAL), TrendReversalStrategy)

    def test_accepts_plain_list(self, rising):
        bot = make_bot(BotSettings.from_dict({"tradingMethod": "slope_analysis"}))
        assert decide(bot, list(rising), 10.5) == decide(bot, rising, 10.5)

    def test_same_inputs_same_decision(self):
        bot = make_bot(BotSettings.from_dict({"tradingMethod": "confirmed_recovery"}))
        series = PriceSeries.from_prices([10, 10.5, 10.2])

        first = decide(bot, series, 10.2, recovery_mode=RecoveryMode.SIMULATED, rng=random.Random(9))
        second = decide(bot, series, 10.2, recovery_mode=RecoveryMode.SIMULATED, rng=random.Random(9))

        assert first == second

    def test_empty_series_holds(self):
        for method in TradingMethod:
            bot = make_bot(BotSettings.from_dict({"tradingMethod": method.value}))
            assert decide(bot, [], 10.0, now_ms=0).is_hold


# ==================== Overlay ====================


class TestOverlay:
    """Dollar-drop protection runs before the method when holding"""

    @pytest.mark.parametrize("method", [m.value for m in TradingMethod])
    def test_sell_at_buy_price_for_every_method(self, method):
        settings = BotSettings.from_dict({
            "tradingMethod": method,
            "dollarDropEnabled": True,
            "sellAtBuyPriceEnabled": True,
        })
        bot = make_bot(settings, Position(buy_price=20.0, shares=10, timestamp=0))
        series = PriceSeries.from_prices([19.0, 19.5, 20.5, 19.99])

        decision = decide(bot, series, 19.99)

        assert decision.is_sell
        assert decision.strategy == "dollar_drop"
        assert decision.reason == "Price fell to/below buy price: 19.99 <= 20.00"

    def test_overlay_disabled_falls_through(self):
        settings = BotSettings.from_dict({
            "tradingMethod": "price_comparison",
            "sellAtBuyPriceEnabled": True,
        })
        bot = make_bot(settings, Position(buy_price=20.0, shares=10, timestamp=0))

        decision = decide(bot, PriceSeries.from_prices([19.0, 19.99]), 19.99)

        assert decision.is_hold
        assert decision.strategy == "price_comparison"

    def test_tracking_update_ends_the_tick(self):
        settings = BotSettings.from_dict({
            "tradingMethod": "price_comparison",
            "dollarDropEnabled": True,
            "consecutiveFallsEnabled": True,
        })
        position = Position(buy_price=10.0, shares=10, timestamp=0, price_history=[10.0, 11.0])
        bot = make_bot(settings, position)

        # price_comparison alone would sell on 11.00 -> 10.80
        decision = decide(bot, PriceSeries.from_prices([11.0, 10.8]), 10.8)

        assert decision.is_hold
        assert decision.strategy == "dollar_drop"
        assert decision.reason == "Consecutive live falls: 1/3"
        assert decision.update_position.price_history == (10.0, 11.0, 10.8)
        assert list(bot.current_position.price_history) == [10.0, 11.0]

    def test_overlay_not_met_consults_method(self):
        settings = BotSettings.from_dict({
            "tradingMethod": "price_comparison",
            "dollarDropEnabled": True,
            "sellAtBuyPriceEnabled": True,
        })
        bot = make_bot(settings, Position(buy_price=10.0, shares=10, timestamp=0))

        decision = decide(bot, PriceSeries.from_prices([11.0, 10.8]), 10.8)

        assert decision.is_sell
        assert decision.strategy == "price_comparison"

    def test_flat_bot_skips_overlay(self, rising):
        settings = BotSettings.from_dict({
            "tradingMethod": "price_comparison",
            "dollarDropEnabled": True,
            "sellAtBuyPriceEnabled": True,
        })

        assert decide(make_bot(settings), rising, 10.5).is_buy
