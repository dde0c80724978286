"""
Base Strategy
=============
Abstract base class for all trading methods.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..data.models import PriceSeries
from .bot_state import TradingBot
from .decision import Decision
from .settings import StrategyParams, TradingMethod


class BaseStrategy(ABC):
    """
    Abstract base class for trading methods.

    All strategies must implement:
    - evaluate_buy(): Decide whether a flat bot should open a position
    - evaluate_sell(): Decide whether a holding bot should close it

    ``analyze()`` branches on the bot's position. Evaluators are pure: they
    read the bot and the series and return a ``Decision``; any state change
    travels on the decision for the ledger to apply.
    """

    method: TradingMethod
    MIN_SAMPLES: int = 3

    def __init__(self, params: Optional[StrategyParams] = None):
        self.params = params

    @property
    def name(self) -> str:
        return self.method.value

    def has_enough_data(self, series: PriceSeries) -> bool:
        return len(series) >= self.MIN_SAMPLES

    def analyze(
        self,
        bot: TradingBot,
        series: PriceSeries,
        current_price: float,
        now_ms: Optional[int] = None,
    ) -> Decision:
        """
        Evaluate the bot for this tick.

        Args:
            bot: Bot being evaluated
            series: Samples in ascending time order
            current_price: Latest quoted price
            now_ms: Evaluation time; defaults to the latest sample timestamp

        Returns:
            Decision
        """
        if now_ms is None:
            now_ms = series.latest.timestamp if len(series) else 0

        if bot.current_position is None:
            return self.evaluate_buy(bot, series, current_price, now_ms)
        return self.evaluate_sell(bot, series, current_price, now_ms)

    @abstractmethod
    def evaluate_buy(
        self,
        bot: TradingBot,
        series: PriceSeries,
        current_price: float,
        now_ms: int,
    ) -> Decision:
        pass

    @abstractmethod
    def evaluate_sell(
        self,
        bot: TradingBot,
        series: PriceSeries,
        current_price: float,
        now_ms: int,
    ) -> Decision:
        pass

    def _buy(self, reason: str, **kwargs) -> Decision:
        return Decision.buy(reason, strategy=self.name, **kwargs)

    def _sell(self, reason: str, **kwargs) -> Decision:
        return Decision.sell(reason, strategy=self.name, **kwargs)

    def _hold(self, reason: str, **kwargs) -> Decision:
        return Decision.hold(reason, strategy=self.name, **kwargs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(params={self.params!r})"
