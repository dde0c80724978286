"""
Unit Tests for Trend Estimation

Test Coverage:
    - Regression slope
    - Direction and strength buckets
    - Recent movement overriding the regression
    - Two-point movement check
"""

import sys
from pathlib import Path

import pytest

# Add project root
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from paperbot.analysis.trend import (
    TrendDirection,
    TrendStrength,
    calculate_slope,
    estimate_trend,
    last_interval_movement,
)
from paperbot.data.models import PriceSeries


class TestSlope:
    def test_linear_prices(self):
        assert calculate_slope([10, 11, 12, 13]) == pytest.approx(1.0)

    def test_falling_prices(self):
        assert calculate_slope([13, 12, 11, 10]) == pytest.approx(-1.0)

    def test_single_price_has_zero_slope(self):
        assert calculate_slope([10]) == 0.0


class TestEstimateTrend:
    """Tests for direction/percentage/strength"""

    def test_strong_uptrend(self):
        trend = estimate_trend(PriceSeries.from_prices([10, 11, 12, 13, 14]))

        assert trend.direction == TrendDirection.UP
        assert trend.strength == TrendStrength.STRONG
        assert trend.percentage == pytest.approx(40.0)

    def test_strong_downtrend(self):
        trend = estimate_trend(PriceSeries.from_prices([14, 13, 12, 11, 10]))

        assert trend.direction == TrendDirection.DOWN
        assert trend.strength == TrendStrength.STRONG
        assert trend.percentage == pytest.approx(-28.57)

    def test_flat_series_is_neutral_and_weak(self):
        trend = estimate_trend(PriceSeries.from_prices([10, 10, 10, 10]))

        assert trend.direction == TrendDirection.NEUTRAL
        assert trend.strength == TrendStrength.WEAK
        assert trend.percentage == pytest.approx(0.0)

    def test_recent_rise_wins_over_falling_regression(self):
        series = PriceSeries.from_prices([20, 19, 18, 17, 16, 15, 14, 12, 13, 14])
        assert estimate_trend(series).direction == TrendDirection.UP

    def test_window_is_last_ten_samples(self):
        prices = [100] * 5 + [10, 11, 12, 13, 14, 15, 16, 17, 18, 19]
        trend = estimate_trend(PriceSeries.from_prices(prices))
        assert trend.percentage == pytest.approx(90.0)

    @pytest.mark.parametrize("prices", [[], [10], [10, 11]])
    def test_short_series_is_neutral(self, prices):
        trend = estimate_trend(PriceSeries.from_prices(prices))

        assert trend.direction == TrendDirection.NEUTRAL
        assert trend.percentage == 0.0
        assert trend.strength == TrendStrength.WEAK

    def test_str_includes_direction_and_strength(self):
        text = str(estimate_trend(PriceSeries.from_prices([10, 11, 12, 13, 14])))
        assert text.startswith("UP +40.00%")
        assert "strong" in text


class TestLastIntervalMovement:
    """Tests for the cheap movement signal"""

    def test_up_over_three_periods(self):
        movement = last_interval_movement(PriceSeries.from_prices([10, 10, 10, 10.1]))

        assert movement.direction == TrendDirection.UP
        assert movement.percentage == pytest.approx(1.0)

    def test_down_over_three_periods(self):
        movement = last_interval_movement(PriceSeries.from_prices([10, 12, 11, 9.9]))

        assert movement.direction == TrendDirection.DOWN
        assert movement.percentage == pytest.approx(-1.0)

    def test_tiny_move_is_neutral(self):
        movement = last_interval_movement(PriceSeries.from_prices([10, 10.004]))
        assert movement.direction == TrendDirection.NEUTRAL

    def test_single_sample_is_neutral(self):
        movement = last_interval_movement(PriceSeries.from_prices([10]))

        assert movement.direction == TrendDirection.NEUTRAL
        assert movement.percentage == 0.0
