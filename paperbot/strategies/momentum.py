"""
Momentum Strategies
===================
Two-sample methods comparing the latest sample with the one before it.
"""

from typing import Tuple

from ..data.models import SeriesLike
from .base_strategy import BaseStrategy
from .decision import Decision
from .settings import TradingMethod

MIN_SAMPLES = 2


def _last_two(series: SeriesLike) -> Tuple[float, float]:
    return series[-2].price, series[-1].price


def last_interval_slope(series: SeriesLike) -> float:
    """Price change over the last interval; 0 for short series"""
    if len(series) < MIN_SAMPLES:
        return 0.0
    previous, current = _last_two(series)
    return current - previous


def should_buy_price_comparison(series: SeriesLike) -> bool:
    if len(series) < MIN_SAMPLES:
        return False
    previous, current = _last_two(series)
    return current > previous


def should_sell_price_comparison(series: SeriesLike) -> bool:
    if len(series) < MIN_SAMPLES:
        return False
    previous, current = _last_two(series)
    return current < previous


def should_buy_slope_analysis(series: SeriesLike) -> bool:
    return len(series) >= MIN_SAMPLES and last_interval_slope(series) > 0


def should_sell_slope_analysis(series: SeriesLike) -> bool:
    return len(series) >= MIN_SAMPLES and last_interval_slope(series) < 0


def is_last_interval_downward(series: SeriesLike) -> bool:
    return len(series) >= MIN_SAMPLES and last_interval_slope(series) < 0


class PriceComparisonStrategy(BaseStrategy):
    """Buy on an up interval, sell on a down interval"""

    method = TradingMethod.PRICE_COMPARISON
    MIN_SAMPLES = MIN_SAMPLES

    def evaluate_buy(self, bot, series, current_price, now_ms) -> Decision:
        if not self.has_enough_data(series):
            return self._hold("Insufficient data for price comparison")
        previous, current = _last_two(series)
        if should_buy_price_comparison(series):
            return self._buy(f"Current price {current:.2f} > previous price {previous:.2f}")
        return self._hold(f"Current price {current:.2f} <= previous price {previous:.2f}")

    def evaluate_sell(self, bot, series, current_price, now_ms) -> Decision:
        if not self.has_enough_data(series):
            return self._hold("Insufficient data for price comparison")
        previous, current = _last_two(series)
        if should_sell_price_comparison(series):
            return self._sell(f"Current price {current:.2f} < previous price {previous:.2f}")
        return self._hold(f"Current price {current:.2f} >= previous price {previous:.2f}")


class SlopeAnalysisStrategy(BaseStrategy):
    """Price comparison expressed as the slope of the last interval"""

    method = TradingMethod.SLOPE_ANALYSIS
    MIN_SAMPLES = MIN_SAMPLES

    def evaluate_buy(self, bot, series, current_price, now_ms) -> Decision:
        if not self.has_enough_data(series):
            return self._hold("Insufficient data for slope analysis")
        previous, current = _last_two(series)
        slope = last_interval_slope(series)
        if should_buy_slope_analysis(series):
            return self._buy(f"Positive slope: +{slope:.2f} ({previous:.2f} → {current:.2f})")
        return self._hold(f"Negative/flat slope: {slope:.2f}")

    def evaluate_sell(self, bot, series, current_price, now_ms) -> Decision:
        if not self.has_enough_data(series):
            return self._hold("Insufficient data for slope analysis")
        previous, current = _last_two(series)
        slope = last_interval_slope(series)
        if should_sell_slope_analysis(series):
            return self._sell(f"Negative slope: {slope:.2f} ({previous:.2f} → {current:.2f})")
        return self._hold(f"Positive/flat slope: {slope:.2f}")
