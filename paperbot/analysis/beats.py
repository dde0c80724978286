"""
Beat Sequences
==============
Runs of consecutive rising intervals ("beats") and the potential profit an
imperfect trader could have captured from them.

A beat sequence spans from the sample just before the first rising interval
(the pre-rise baseline) to the last sample of the run. The potential-profit
view drops the first and last sample of each sequence, since a trader will
realistically miss the exact entry and exit beats.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from ..core.constants import DetectorLimits
from ..data.models import Sample, SeriesLike


@dataclass(frozen=True)
class BeatSequence:
    """A maximal run of strictly positive slopes"""
    id: str
    start_index: int
    end_index: int
    start_time: int
    end_time: int
    start_price: float
    end_price: float
    dollar_gain: float
    percentage_change: float
    data_points: List[Sample] = field(default_factory=list)

    @property
    def intervals(self) -> int:
        """Number of rising intervals in the run"""
        return self.end_index - self.start_index


@dataclass(frozen=True)
class PotentialProfitSequence:
    """A beat sequence with its entry and exit beats excluded"""
    id: str
    original_sequence: BeatSequence
    start_index: int
    end_index: int
    start_time: int
    end_time: int
    start_price: float
    end_price: float
    dollar_gain: float
    percentage_change: float
    data_points: List[Sample] = field(default_factory=list)
    excluded_beats: int = DetectorLimits.POTENTIAL_PROFIT_EXCLUDED_BEATS


def _gain(start_price: float, end_price: float) -> tuple[float, float]:
    """(dollar gain, percentage change), both rounded to cents"""
    dollar_gain = end_price - start_price
    percentage = (dollar_gain / start_price) * 100 if start_price else 0.0
    return round(dollar_gain, 2), round(percentage, 2)


def _build_sequence(series: SeriesLike, start: int, end: int) -> BeatSequence:
    start_sample = series[start]
    end_sample = series[end]
    dollar_gain, percentage = _gain(start_sample.price, end_sample.price)

    return BeatSequence(
        id=f"beat-{start}-{end}",
        start_index=start,
        end_index=end,
        start_time=start_sample.timestamp,
        end_time=end_sample.timestamp,
        start_price=start_sample.price,
        end_price=end_sample.price,
        dollar_gain=dollar_gain,
        percentage_change=percentage,
        data_points=list(series[start:end + 1]),
    )


def detect_beats(
    series: SeriesLike,
    min_consecutive_intervals: int = DetectorLimits.DEFAULT_MIN_BEAT_INTERVALS,
) -> List[BeatSequence]:
    """
    Detect beat sequences in a single left-to-right pass.

    A zero slope breaks a run just like a negative one. A run still open at
    the last sample is flushed after the loop.

    Args:
        series: Samples in ascending time order
        min_consecutive_intervals: Minimum rising intervals per sequence

    Returns:
        Sequences ordered by start index; empty when the series has fewer
        than ``min_consecutive_intervals + 1`` samples
    """
    if len(series) < min_consecutive_intervals + 1:
        return []

    sequences: List[BeatSequence] = []
    run_start = -1
    run_length = 0

    for i in range(1, len(series)):
        slope = series[i].price - series[i - 1].price

        if slope > 0:
            if run_length == 0:
                run_start = i - 1
            run_length += 1
            continue

        if run_length >= min_consecutive_intervals and run_start >= 0:
            sequences.append(_build_sequence(series, run_start, i - 1))
        run_length = 0
        run_start = -1

    # Run reaching the end of the series
    if run_length >= min_consecutive_intervals and run_start >= 0:
        sequences.append(_build_sequence(series, run_start, len(series) - 1))

    return sequences


def trim_for_potential_profit(sequences: Sequence[BeatSequence]) -> List[PotentialProfitSequence]:
    """
    Strip the first and last sample from each beat sequence.

    Sequences with fewer than 3 samples are dropped rather than trimmed.
    """
    trimmed: List[PotentialProfitSequence] = []

    for sequence in sequences:
        if len(sequence.data_points) < DetectorLimits.MIN_POTENTIAL_PROFIT_POINTS:
            continue

        points = sequence.data_points[1:-1]
        start_sample = points[0]
        end_sample = points[-1]
        dollar_gain, percentage = _gain(start_sample.price, end_sample.price)

        trimmed.append(PotentialProfitSequence(
            id=f"potential-{sequence.id}",
            original_sequence=sequence,
            start_index=sequence.start_index + 1,
            end_index=sequence.end_index - 1,
            start_time=start_sample.timestamp,
            end_time=end_sample.timestamp,
            start_price=start_sample.price,
            end_price=end_sample.price,
            dollar_gain=dollar_gain,
            percentage_change=percentage,
            data_points=list(points),
        ))

    return trimmed
