"""
Quote Sources
=============
Interface for the external quote provider plus a simulated implementation
used in paper mode and tests.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import numpy as np

from .models import Interval, Sample


logger = logging.getLogger("paperbot.data.quote_source")


def now_ms() -> int:
    """Current wall-clock time in ms since epoch"""
    return int(time.time() * 1000)


class QuoteSource(ABC):
    """
    Black-box quote provider.

    Implementations must return chronologically sortable samples; the tick
    runner sorts them before evaluation.
    """

    @abstractmethod
    def get_current_price(self, symbol: str) -> float:
        """Latest traded price for ``symbol``"""
        pass

    @abstractmethod
    def get_historical_series(self, symbol: str, interval: Interval, count: int) -> List[Sample]:
        """The last ``count`` samples of ``symbol`` at ``interval`` granularity"""
        pass


class SimulatedQuoteSource(QuoteSource):
    """
    Random-walk quote source for paper trading.

    Each symbol starts near its configured base price and drifts with small
    random moves. Seeded for reproducible runs.

    Usage:
        source = SimulatedQuoteSource({"APP": 55.0}, seed=7)
        price = source.get_current_price("APP")
        series = source.get_historical_series("APP", Interval.FIVE_MIN, 10)
    """

    def __init__(
        self,
        base_prices: Optional[Dict[str, float]] = None,
        seed: Optional[int] = None,
        step_pct: float = 0.005,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize simulated source.

        Args:
            base_prices: Symbol -> starting price
            seed: RNG seed
            step_pct: Max fractional move per step (0.005 = +/- 0.5%)
            clock: Callable returning current time in ms
        """
        self._rng = np.random.default_rng(seed)
        self._prices: Dict[str, float] = dict(base_prices or {})
        self.step_pct = step_pct
        self.clock = clock

    def _base_price(self, symbol: str) -> float:
        if symbol not in self._prices:
            # Unknown symbol: start somewhere between $45 and $65
            self._prices[symbol] = round(float(45 + self._rng.random() * 20), 2)
        return self._prices[symbol]

    def _step(self, price: float) -> float:
        change = (self._rng.random() - 0.5) * 2 * self.step_pct
        return max(round(price * (1 + change), 2), 0.01)

    def get_current_price(self, symbol: str) -> float:
        price = self._step(self._base_price(symbol))
        self._prices[symbol] = price
        return price

    def get_historical_series(self, symbol: str, interval: Interval, count: int) -> List[Sample]:
        if count <= 0:
            return []

        end = self.clock()
        step_ms = interval.milliseconds

        # Walk backwards from the current price so the series ends where the
        # live price currently sits
        prices = [self._base_price(symbol)]
        for _ in range(count - 1):
            prices.append(self._step(prices[-1]))
        prices.reverse()

        volumes = self._rng.integers(20_000, 120_000, size=count)
        samples = [
            Sample(
                timestamp=end - (count - 1 - i) * step_ms,
                price=prices[i],
                volume=int(volumes[i]),
            )
            for i in range(count)
        ]
        logger.debug("Simulated %d %s samples for %s", count, interval.value, symbol)
        return samples
