"""
Price Series Models
===================
Timestamped price samples and the ordered series every detector consumes.

Detectors expect samples in ascending timestamp order and never sort on their
own. ``PriceSeries.from_samples`` is the single place that re-sorts, and is
what callers use to normalize quote-source output before evaluation.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union, overload

import pandas as pd


@dataclass(frozen=True)
class Sample:
    """One timestamped price observation"""
    timestamp: int  # ms since epoch
    price: float
    volume: int = 0
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "price": self.price,
            "volume": self.volume,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }


class PriceSeries(Sequence):
    """
    Immutable, ordered sequence of samples.

    Behaves like a read-only list of ``Sample`` (indexing, slicing, ``len``)
    and adds convenience accessors used throughout the detectors.

    Usage:
        series = PriceSeries.from_prices([10, 11, 12, 13, 9])
        series.prices      # [10.0, 11.0, 12.0, 13.0, 9.0]
        series.latest      # Sample(timestamp=..., price=9.0, ...)
    """

    __slots__ = ("_samples",)

    def __init__(self, samples: Iterable[Sample] = ()):
        self._samples: Tuple[Sample, ...] = tuple(samples)

    @overload
    def __getitem__(self, index: int) -> Sample: ...

    @overload
    def __getitem__(self, index: slice) -> "PriceSeries": ...

    def __getitem__(self, index: Union[int, slice]):
        if isinstance(index, slice):
            return PriceSeries(self._samples[index])
        return self._samples[index]

    def __len__(self) -> int:
        return len(self._samples)

    def __eq__(self, other) -> bool:
        if isinstance(other, PriceSeries):
            return self._samples == other._samples
        if isinstance(other, (list, tuple)):
            return list(self._samples) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._samples)

    def __repr__(self) -> str:
        return f"PriceSeries(n={len(self._samples)})"

    @property
    def prices(self) -> List[float]:
        return [s.price for s in self._samples]

    @property
    def timestamps(self) -> List[int]:
        return [s.timestamp for s in self._samples]

    @property
    def latest(self) -> Optional[Sample]:
        return self._samples[-1] if self._samples else None

    def append(self, sample: Sample) -> "PriceSeries":
        """Return a new series with ``sample`` appended"""
        return PriceSeries(self._samples + (sample,))

    def is_sorted(self) -> bool:
        return all(
            self._samples[i - 1].timestamp <= self._samples[i].timestamp
            for i in range(1, len(self._samples))
        )

    @classmethod
    def from_samples(cls, samples: Iterable[Sample], sort: bool = True) -> "PriceSeries":
        """Build a series from raw quote-source samples, sorting by timestamp"""
        samples = list(samples)
        if sort:
            samples.sort(key=lambda s: s.timestamp)
        return cls(samples)

    @classmethod
    def from_prices(
        cls,
        prices: Iterable[float],
        start_ms: int = 0,
        step_ms: int = 60_000,
        volume: int = 0,
    ) -> "PriceSeries":
        """Build an evenly spaced series from bare prices"""
        return cls(
            Sample(timestamp=start_ms + i * step_ms, price=float(p), volume=volume)
            for i, p in enumerate(prices)
        )

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, price_column: str = "price") -> "PriceSeries":
        """
        Build a series from an OHLCV DataFrame.

        Timestamps come from a ``timestamp`` column (ms) when present,
        otherwise from a DatetimeIndex. When ``price_column`` is missing the
        ``close`` column is used.
        """
        if price_column not in df.columns:
            price_column = "close"

        if "timestamp" in df.columns:
            timestamps = [int(t) for t in df["timestamp"]]
        else:
            index = pd.DatetimeIndex(df.index)
            timestamps = [int(t.value // 1_000_000) for t in index]

        def _optional(row, column: str) -> Optional[float]:
            if column not in df.columns or pd.isna(row[column]):
                return None
            return float(row[column])

        samples = []
        for ts, (_, row) in zip(timestamps, df.iterrows()):
            volume = row["volume"] if "volume" in df.columns else 0
            samples.append(Sample(
                timestamp=ts,
                price=float(row[price_column]),
                volume=0 if pd.isna(volume) else int(volume),
                open=_optional(row, "open"),
                high=_optional(row, "high"),
                low=_optional(row, "low"),
                close=_optional(row, "close"),
            ))
        return cls(samples)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame indexed by sample time"""
        df = pd.DataFrame([s.to_dict() for s in self._samples],
                          columns=["timestamp", "price", "volume", "open", "high", "low", "close"])
        df.index = pd.to_datetime(df["timestamp"], unit="ms")
        df.index.name = "time"
        return df


SeriesLike = Union[PriceSeries, Sequence]


class Interval(Enum):
    """Quote-source series granularity"""
    ONE_MIN = "1min"
    FIVE_MIN = "5min"
    FIFTEEN_MIN = "15min"
    THIRTY_MIN = "30min"
    FORTY_FIVE_MIN = "45min"
    ONE_HOUR = "1h"
    TWO_HOURS = "2h"
    FOUR_HOURS = "4h"
    ONE_DAY = "1day"
    ONE_WEEK = "1week"
    ONE_MONTH = "1month"

    @property
    def milliseconds(self) -> int:
        minutes = {
            "1min": 1, "5min": 5, "15min": 15, "30min": 30, "45min": 45,
            "1h": 60, "2h": 120, "4h": 240,
            "1day": 1440, "1week": 10_080, "1month": 43_200,
        }[self.value]
        return minutes * 60_000


class ChartPeriod(Enum):
    """Which series granularity a bot evaluates against"""
    ONE_SEC = "1sec"
    FIVE_MIN = "5min"
    ONE_DAY = "1D"
    ONE_DAY_SEC = "1DSec"
    FIVE_MIN_SEC = "5MinSec"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "ChartPeriod":
        """Parse a chart period, default to 5min for unknown values"""
        for period in cls:
            if value == period.value:
                return period
        return cls.FIVE_MIN

    @property
    def series_request(self) -> Tuple[Interval, int]:
        """(interval, sample count) to request from the quote source"""
        return {
            ChartPeriod.ONE_SEC: (Interval.ONE_MIN, 10),
            ChartPeriod.FIVE_MIN: (Interval.FIVE_MIN, 10),
            ChartPeriod.ONE_DAY: (Interval.ONE_MIN, 50),
            ChartPeriod.ONE_DAY_SEC: (Interval.ONE_MIN, 15),
            ChartPeriod.FIVE_MIN_SEC: (Interval.FIVE_MIN, 15),
        }[self]


def is_finite_price(value: float) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
