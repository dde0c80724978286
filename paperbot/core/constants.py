"""
Engine Constants
================
All magic numbers and default thresholds in one place.
"""

from dataclasses import dataclass
from typing import Final

# ============================================================================
# LEDGER DEFAULTS
# ============================================================================
DEFAULT_STARTING_CASH: Final[float] = 10_000.0  # USD
DEFAULT_MAX_INVESTMENT_PER_TRADE: Final[float] = 2_000.0  # USD per trade
DEFAULT_TICK_SECONDS: Final[int] = 60


# ============================================================================
# DETECTOR CONSTANTS
# ============================================================================

@dataclass(frozen=True)
class DetectorLimits:
    """Minimum sample counts and windows used by the pattern detectors"""

    MIN_DIRECTION_CHANGE_SAMPLES: int = 3
    MIN_POTENTIAL_LOSS_SAMPLES: int = 4
    MIN_POTENTIAL_PROFIT_POINTS: int = 3
    DEFAULT_MIN_BEAT_INTERVALS: int = 4
    POTENTIAL_PROFIT_EXCLUDED_BEATS: int = 2  # First + last beat


@dataclass(frozen=True)
class TrendThresholds:
    """Trend/strength estimator windows and buckets"""

    REGRESSION_WINDOW: int = 10  # Last N samples for OLS slope
    SHORT_SERIES_LENGTH: int = 5  # At or below this, use the whole series
    RECENT_WINDOW: int = 3  # "Very recent" window
    SENSITIVITY_SCALE: float = 0.05  # threshold = sensitivity * scale

    STRONG_PERCENTAGE: float = 1.0
    STRONG_RECENT_PERCENTAGE: float = 0.3
    STRONG_SLOPE: float = 0.3

    MODERATE_PERCENTAGE: float = 0.3
    MODERATE_RECENT_PERCENTAGE: float = 0.1
    MODERATE_SLOPE: float = 0.1

    MOVEMENT_THRESHOLD_PCT: float = 0.05  # last_interval_movement up/down band
    AUTO_TRADE_SENSITIVITY: float = 0.5  # Trend-flip auto-trader


# ============================================================================
# STRATEGY / OVERLAY DEFAULTS
# ============================================================================

@dataclass(frozen=True)
class StrategyDefaults:
    """Defaults for strategy-specific parameters"""

    DOLLAR_DROP_THRESHOLD: float = 5.0  # direction_change_reference sell trigger
    RECOVERY_FIRST_DELAY_SECONDS: int = 15
    RECOVERY_SECOND_DELAY_SECONDS: int = 30
    RECOVERY_JITTER_PCT: float = 0.01  # Simulated proxy: +/- 0.5%


@dataclass(frozen=True)
class OverlayDefaults:
    """Defaults for the dollar-drop protective overlay"""

    PROFIT_TAKING_PERCENTAGE: float = 10.0
    PROFIT_TAKING_DOLLAR_AMOUNT: float = 0.0  # 0 disables the dollar threshold
    DOLLAR_DROP_TRIGGER_AMOUNT: float = 0.10
    CONSECUTIVE_FALLS_COUNT: int = 3
    PRICE_HISTORY_CAP: int = 20


# ============================================================================
# LOG TAGS
# ============================================================================
TAG_DECISION: Final[str] = "DECISION"
TAG_TRADE: Final[str] = "TRADE"
