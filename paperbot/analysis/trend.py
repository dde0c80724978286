"""
Trend Estimation
================
Linear-regression trend/strength estimator and a cheap two-point movement
signal.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..core.constants import TrendThresholds
from ..data.models import SeriesLike


class TrendDirection(Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class TrendStrength(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


@dataclass(frozen=True)
class TrendEstimate:
    """Direction, reported percentage and strength bucket"""
    direction: TrendDirection
    percentage: float
    strength: TrendStrength

    def __str__(self) -> str:
        sign = "+" if self.percentage > 0 else ""
        return f"{self.direction.value.upper()} {sign}{self.percentage:.2f}% ({self.strength.value})"


@dataclass(frozen=True)
class PriceMovement:
    """Result of the two-point movement check"""
    direction: TrendDirection
    percentage: float


def _pct_change(first: float, last: float) -> float:
    if first == 0:
        return 0.0
    return (last - first) / first * 100


def calculate_slope(prices) -> float:
    """Ordinary least-squares slope of prices against their position"""
    y = np.asarray(prices, dtype=float)
    if len(y) < 2:
        return 0.0
    x = np.arange(len(y), dtype=float)
    slope, _intercept = np.polyfit(x, y, 1)
    return float(slope)


def estimate_trend(series: SeriesLike, sensitivity: float = 0.5) -> TrendEstimate:
    """
    Estimate trend direction and strength.

    Combines the OLS slope and percentage change over the last
    ``min(10, n)`` samples (all of them when ``n <= 5``) with the percentage
    change over the last three samples of that window. Recent movement wins
    ties: a recent rise reads as UP even against a falling regression.

    Args:
        series: Samples in ascending time order
        sensitivity: Scales the slope/percentage thresholds
            (``threshold = sensitivity * 0.05``)

    Returns:
        TrendEstimate; NEUTRAL/0/WEAK for fewer than 3 samples
    """
    if len(series) < 3:
        return TrendEstimate(TrendDirection.NEUTRAL, 0.0, TrendStrength.WEAK)

    window = min(len(series), TrendThresholds.REGRESSION_WINDOW)
    if len(series) <= TrendThresholds.SHORT_SERIES_LENGTH:
        window = len(series)

    prices = [s.price for s in series[-window:]]
    slope = calculate_slope(prices)
    percentage = _pct_change(prices[0], prices[-1])

    recent = prices[-min(TrendThresholds.RECENT_WINDOW, len(prices)):]
    recent_percentage = _pct_change(recent[0], recent[-1])

    threshold = sensitivity * TrendThresholds.SENSITIVITY_SCALE

    overall_up = slope > threshold and percentage > threshold
    overall_down = slope < -threshold and percentage < -threshold
    recent_up = recent_percentage > threshold
    recent_down = recent_percentage < -threshold

    if recent_up or (overall_up and not recent_down):
        direction = TrendDirection.UP
    elif recent_down or (overall_down and not recent_up):
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.NEUTRAL

    abs_pct = abs(percentage)
    abs_recent = abs(recent_percentage)
    abs_slope = abs(slope)

    if (abs_pct > TrendThresholds.STRONG_PERCENTAGE
            and abs_recent > TrendThresholds.STRONG_RECENT_PERCENTAGE) \
            or abs_slope > TrendThresholds.STRONG_SLOPE:
        strength = TrendStrength.STRONG
    elif (abs_pct > TrendThresholds.MODERATE_PERCENTAGE
            and abs_recent > TrendThresholds.MODERATE_RECENT_PERCENTAGE) \
            or abs_slope > TrendThresholds.MODERATE_SLOPE:
        strength = TrendStrength.MODERATE
    else:
        strength = TrendStrength.WEAK

    reported = recent_percentage if abs_recent > abs_pct else percentage

    return TrendEstimate(direction, round(reported, 2), strength)


def last_interval_movement(series: SeriesLike, periods: int = 3) -> PriceMovement:
    """
    Compare the sample ``periods`` back with the latest one.

    Moves beyond +/-0.05% count as UP/DOWN. Short series use as many periods
    as are available.
    """
    if len(series) < 2:
        return PriceMovement(TrendDirection.NEUTRAL, 0.0)

    actual_periods = min(periods, len(series) - 1)
    old_price = series[-actual_periods - 1].price
    current_price = series[-1].price
    percentage = _pct_change(old_price, current_price)

    direction = TrendDirection.NEUTRAL
    if percentage > TrendThresholds.MOVEMENT_THRESHOLD_PCT:
        direction = TrendDirection.UP
    elif percentage < -TrendThresholds.MOVEMENT_THRESHOLD_PCT:
        direction = TrendDirection.DOWN

    return PriceMovement(direction, round(percentage, 2))
