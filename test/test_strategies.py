"""
Unit Tests for the Trading Methods

Test Coverage:
    - trend_reversal buy/sell predicates and decisions
    - direction_change_reference reference-point buys and dollar-drop exits
    - direction_change_buy never re-buying a processed valley
    - price_comparison and slope_analysis two-sample decisions
    - Insufficient-data holds
"""

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
    DirectionChangeBuyStrategy,
    DirectionChangeReferenceParams,
    DirectionChangeReferenceStrategy,
    Position,
    PriceComparisonStrategy,
    SlopeAnalysisStrategy,
    TradingBot,
    TrendReversalStrategy,
)
from paperbot.strategies.momentum import last_interval_slope, should_buy_price_comparison
from paperbot.strategies.trend_reversal import (
    should_buy_direction_change_buy,
    should_buy_direction_change_reference,
    should_buy_trend_reversal,
    should_sell_direction_change_reference,
    should_sell_trend_reversal,
)

# ==================== Fixtures ====================


@pytest.fixture
def flat_bot():
    """Bot with no open position"""
    return TradingBot(id="bot-1", name="Test Bot", stock_symbol="APP")


@pytest.fixture
def holding_bot():
    """Bot holding 100 shares bought at 20.00"""
    return TradingBot(
        id="bot-2",
        name="Holding Bot",
        stock_symbol="APP",
        current_position=Position(buy_price=20.0, shares=100, timestamp=0),
    )


def series_of(*prices):
    return PriceSeries.from_prices(prices)


# ==================== Trend Reversal ====================


class TestTrendReversal:
    """Buy at valleys, sell at peaks"""

    def test_buy_when_last_point_is_valley(self, flat_bot):
        series = series_of(10, 9, 11, 8, 12)

        assert should_buy_trend_reversal(series)
        decision = TrendReversalStrategy().analyze(flat_bot, series, 12.0)

        assert decision.action == Action.BUY
        assert decision.reason == "Trend changed from DOWN to UP"
        assert decision.strategy == "trend_reversal"

    def test_hold_when_last_point_is_peak(self, flat_bot):
        decision = TrendReversalStrategy().analyze(flat_bot, series_of(10, 12, 11), 11.0)

        assert decision.is_hold
        assert decision.reason == "Waiting for upward trend reversal"

    def test_sell_when_last_point_is_peak(self, holding_bot):
        series = series_of(10, 12, 11)

        assert should_sell_trend_reversal(series)
        decision = TrendReversalStrategy().analyze(holding_bot, series, 11.0)

        assert decision.is_sell
        assert decision.reason == "Trend changed from UP to DOWN"

    def test_hold_position_while_trend_up(self, holding_bot):
        decision = TrendReversalStrategy().analyze(holding_bot, series_of(10, 9, 11), 11.0)

        assert decision.is_hold
        assert decision.reason == "Holding position, trend still up"

    @pytest.mark.parametrize("prices", [(), (10,), (10, 9)])
    def test_short_series_never_trades(self, prices):
        series = series_of(*prices)
        assert not should_buy_trend_reversal(series)
        assert not should_sell_trend_reversal(series)


# ==================== Direction Change Reference ====================


class TestDirectionChangeReference:
    """Buy above the last turning point, exit after a fixed dollar drop"""

    def test_buy_above_reference_point(self, flat_bot):
        series = series_of(10, 9, 9.5)

        decision = DirectionChangeReferenceStrategy().analyze(flat_bot, series, 9.6)

        assert decision.is_buy
        assert decision.reason == "Current price 9.60 > last direction change 9.00"
        assert decision.reference_point.index == 1

    def test_hold_at_or_below_reference_point(self, flat_bot):
        decision = DirectionChangeReferenceStrategy().analyze(flat_bot, series_of(10, 9, 9.5), 9.0)

        assert decision.is_hold
        assert decision.reason == "Current price 9.00 <= last direction change 9.00"
        assert decision.reference_point.price == 9.0

    def test_hold_without_reference_point(self, flat_bot):
        decision = DirectionChangeReferenceStrategy().analyze(flat_bot, series_of(1, 2, 3), 4.0)

        assert decision.is_hold
        assert decision.reason == "No direction change reference point found"

    def test_predicate_needs_three_samples(self):
        assert should_buy_direction_change_reference(series_of(10, 9), 20.0) == (False, None)

    def test_sell_after_threshold_drop(self, holding_bot):
        decision = DirectionChangeReferenceStrategy().analyze(holding_bot, series_of(20, 18, 15), 14.99)

        assert decision.is_sell
        assert decision.reason == "Price dropped 5.01 from buy price 20.00"

    def test_hold_below_threshold(self, holding_bot):
        decision = DirectionChangeReferenceStrategy().analyze(holding_bot, series_of(20, 18, 17), 17.0)

        assert decision.is_hold
        assert decision.reason == "Price drop 3.00 below threshold 5.00"

    def test_custom_threshold(self, holding_bot):
        strategy = DirectionChangeReferenceStrategy(DirectionChangeReferenceParams(dollar_drop_threshold=2.0))
        assert strategy.analyze(holding_bot, series_of(20, 18, 17), 17.0).is_sell

    def test_sell_predicate_without_position(self):
        assert should_sell_direction_change_reference(None, 1.0) == (False, "No current position")

    def test_exact_threshold_sells(self):
        position = Position(buy_price=20.0, shares=1, timestamp=0)
        should_sell, _ = should_sell_direction_change_reference(position, 15.0, 5.0)
        assert should_sell


# ==================== Direction Change Buy ====================


class TestDirectionChangeBuy:
    """Buys each valley at most once"""

    def test_processed_valley_is_skipped(self, flat_bot):
        series = series_of(10, 11, 12, 11, 12, 9, 10)
        flat_bot.last_processed_index = 5

        decision = DirectionChangeBuyStrategy().analyze(flat_bot, series, 10.0)

        assert decision.is_hold
        assert decision.reason == "Waiting for new direction change from DOWN to UP"
        assert decision.new_direction_change is None

    def test_newer_valley_buys(self, flat_bot):
        series = series_of(10, 11, 12, 11, 12, 9, 10, 8, 9)
        flat_bot.last_processed_index = 5

        decision = DirectionChangeBuyStrategy().analyze(flat_bot, series, 9.0)

        assert decision.is_buy
        assert decision.reason == "Direction changed from DOWN to UP at 8.00"
        assert decision.new_direction_change.index == 7

    def test_first_valley_buys_without_history(self):
        should_buy, point = should_buy_direction_change_buy(series_of(10, 9, 11), None)

        assert should_buy
        assert point.index == 1

    def test_peak_is_not_a_buy(self):
        assert should_buy_direction_change_buy(series_of(10, 12, 11)) == (False, None)

    def test_evaluation_does_not_touch_bot(self, flat_bot):
        DirectionChangeBuyStrategy().analyze(flat_bot, series_of(10, 9, 11), 11.0)
        assert flat_bot.last_processed_index is None

    def test_sells_like_trend_reversal(self, holding_bot):
        decision = DirectionChangeBuyStrategy().analyze(holding_bot, series_of(10, 12, 11), 11.0)

        assert decision.is_sell
        assert decision.strategy == "direction_change_buy"


# ==================== Momentum ====================


class TestPriceComparison:
    """Latest sample against the one before it"""

    def test_buy_on_rise(self, flat_bot):
        series = series_of(9.8, 10, 10.5)

        assert should_buy_price_comparison(series)
        decision = PriceComparisonStrategy().analyze(flat_bot, series, 10.5)

        assert decision.is_buy
        assert decision.reason == "Current price 10.50 > previous price 10.00"

    def test_hold_on_equal(self, flat_bot):
        decision = PriceComparisonStrategy().analyze(flat_bot, series_of(10, 10), 10.0)
        assert decision.reason == "Current price 10.00 <= previous price 10.00"

    def test_sell_on_fall(self, holding_bot):
        decision = PriceComparisonStrategy().analyze(holding_bot, series_of(10.5, 10), 10.0)

        assert decision.is_sell
        assert decision.reason == "Current price 10.00 < previous price 10.50"

    def test_hold_position_on_rise(self, holding_bot):
        decision = PriceComparisonStrategy().analyze(holding_bot, series_of(10, 10.5), 10.5)
        assert decision.reason == "Current price 10.50 >= previous price 10.00"

    def test_single_sample_holds(self, flat_bot):
        decision = PriceComparisonStrategy().analyze(flat_bot, series_of(10), 10.0)

        assert decision.is_hold
        assert decision.reason == "Insufficient data for price comparison"


class TestSlopeAnalysis:
    """Sign of the last interval's slope"""

    def test_slope_value(self):
        assert last_interval_slope(series_of(10, 10.5)) == pytest.approx(0.5)
        assert last_interval_slope(series_of(10)) == 0.0

    def test_buy_on_positive_slope(self, flat_bot):
        decision = SlopeAnalysisStrategy().analyze(flat_bot, series_of(10, 10.5), 10.5)

        assert decision.is_buy
        assert decision.reason == "Positive slope: +0.50 (10.00 → 10.50)"

    def test_hold_on_flat_slope(self, flat_bot):
        decision = SlopeAnalysisStrategy().analyze(flat_bot, series_of(10, 10), 10.0)
        assert decision.reason == "Negative/flat slope: 0.00"

    def test_sell_on_negative_slope(self, holding_bot):
        decision = SlopeAnalysisStrategy().analyze(holding_bot, series_of(10.5, 10), 10.0)

        assert decision.is_sell
        assert decision.reason == "Negative slope: -0.50 (10.50 → 10.00)"

    def test_hold_position_on_positive_slope(self, holding_bot):
        decision = SlopeAnalysisStrategy().analyze(holding_bot, series_of(10, 10.5), 10.5)
        assert decision.reason == "Positive/flat slope: 0.50"

    def test_single_sample_holds(self, holding_bot):
        decision = SlopeAnalysisStrategy().analyze(holding_bot, series_of(10), 10.0)
        assert decision.reason == "Insufficient data for slope analysis"


class TestSettingsDriveStrategy:
    def test_bot_settings_default_method(self, flat_bot):
        assert flat_bot.settings == BotSettings()
        assert flat_bot.settings.trading_method.value == "trend_reversal"
