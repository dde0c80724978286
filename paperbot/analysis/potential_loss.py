"""
Potential-Loss Detector
=======================
Down-up-down false reversals: price falls, bounces for one interval, then
falls again. A trader buying the bounce would have lost the drop from the
reversal peak.
"""

from dataclasses import dataclass, field
from typing import List

from ..core.constants import DetectorLimits
from ..data.models import Sample, SeriesLike


@dataclass(frozen=True)
class PotentialLossSequence:
    """One down-up-down window"""
    id: str
    before_reversal_index: int
    reversal_index: int
    after_reversal_index: int
    before_reversal_time: int
    reversal_time: int
    after_reversal_time: int
    before_reversal_price: float
    reversal_price: float
    after_reversal_price: float
    dollar_loss: float
    percentage_change: float
    data_points: List[Sample] = field(default_factory=list)  # All 4 samples


def detect_down_up_down(series: SeriesLike) -> List[PotentialLossSequence]:
    """
    Scan with a 4-sample window at ``i-2, i-1, i, i+1``.

    Matches when ``p[i-1] < p[i-2]``, ``p[i] > p[i-1]`` and ``p[i+1] < p[i]``.
    Overlapping windows are each reported; nothing is merged or suppressed.

    Args:
        series: Samples in ascending time order

    Returns:
        Sequences ordered by reversal index; empty for fewer than 4 samples
    """
    if len(series) < DetectorLimits.MIN_POTENTIAL_LOSS_SAMPLES:
        return []

    sequences: List[PotentialLossSequence] = []

    for i in range(2, len(series) - 1):
        before_before = series[i - 2].price
        before = series[i - 1].price
        reversal = series[i].price
        after = series[i + 1].price

        if not (before < before_before and reversal > before and after < reversal):
            continue

        dollar_loss = reversal - after
        percentage = (dollar_loss / reversal) * 100 if reversal else 0.0

        sequences.append(PotentialLossSequence(
            id=f"loss-{i - 1}-{i}-{i + 1}",
            before_reversal_index=i - 1,
            reversal_index=i,
            after_reversal_index=i + 1,
            before_reversal_time=series[i - 1].timestamp,
            reversal_time=series[i].timestamp,
            after_reversal_time=series[i + 1].timestamp,
            before_reversal_price=before,
            reversal_price=reversal,
            after_reversal_price=after,
            dollar_loss=round(dollar_loss, 2),
            percentage_change=round(percentage, 2),
            data_points=[series[i - 2], series[i - 1], series[i], series[i + 1]],
        ))

    return sequences
