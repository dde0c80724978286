"""
Direction-Change Detector
=========================
Extract local peaks and valleys from a price series.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..core.constants import DetectorLimits
from ..data.models import SeriesLike


class PointKind(Enum):
    """Kind of direction change"""
    PEAK = "peak"      # Uptrend turns down
    VALLEY = "valley"  # Downtrend turns up


@dataclass(frozen=True)
class DirectionChangePoint:
    """A local extremum in the series"""
    index: int
    timestamp: int
    price: float
    kind: PointKind

    @property
    def is_peak(self) -> bool:
        return self.kind == PointKind.PEAK

    @property
    def is_valley(self) -> bool:
        return self.kind == PointKind.VALLEY

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "timestamp": self.timestamp,
            "price": self.price,
            "kind": self.kind.value,
        }


def detect_direction_changes(series: SeriesLike) -> List[DirectionChangePoint]:
    """
    Find every strict local minimum (valley) and maximum (peak).

    A valley needs ``prev > cur < next``, a peak ``prev < cur > next``.
    Equal neighbours produce neither, so plateaus never emit a point.

    Args:
        series: Samples in ascending time order

    Returns:
        Points ordered by index; empty for fewer than 3 samples
    """
    if len(series) < DetectorLimits.MIN_DIRECTION_CHANGE_SAMPLES:
        return []

    points: List[DirectionChangePoint] = []

    for i in range(1, len(series) - 1):
        prev_price = series[i - 1].price
        price = series[i].price
        next_price = series[i + 1].price

        if prev_price > price < next_price:
            kind = PointKind.VALLEY
        elif prev_price < price > next_price:
            kind = PointKind.PEAK
        else:
            continue

        points.append(DirectionChangePoint(
            index=i,
            timestamp=series[i].timestamp,
            price=price,
            kind=kind,
        ))

    return points


def last_direction_change(series: SeriesLike) -> Optional[DirectionChangePoint]:
    """Most recent direction change point, or None"""
    points = detect_direction_changes(series)
    return points[-1] if points else None
