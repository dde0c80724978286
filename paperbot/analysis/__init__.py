# Paperbot Analysis Module
# ========================
# Pure pattern detectors over a price series

from .direction_changes import (
    PointKind,
    DirectionChangePoint,
    detect_direction_changes,
    last_direction_change,
)
from .beats import (
    BeatSequence,
    PotentialProfitSequence,
    detect_beats,
    trim_for_potential_profit,
)
from .potential_loss import PotentialLossSequence, detect_down_up_down
from .trend import (
    TrendDirection,
    TrendStrength,
    TrendEstimate,
    PriceMovement,
    calculate_slope,
    estimate_trend,
    last_interval_movement,
)

__all__ = [
    # Direction changes
    "PointKind",
    "DirectionChangePoint",
    "detect_direction_changes",
    "last_direction_change",
    # Beats
    "BeatSequence",
    "PotentialProfitSequence",
    "detect_beats",
    "trim_for_potential_profit",
    # Potential loss
    "PotentialLossSequence",
    "detect_down_up_down",
    # Trend
    "TrendDirection",
    "TrendStrength",
    "TrendEstimate",
    "PriceMovement",
    "calculate_slope",
    "estimate_trend",
    "last_interval_movement",
]
