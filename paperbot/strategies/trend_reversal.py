"""
Direction-Change Strategies
===========================
Methods driven by the most recent peak/valley in the series.

- trend_reversal: buy at a valley, sell at a peak
- direction_change_reference: buy above the last turning point, sell after a
  fixed dollar drop from the buy price
- direction_change_buy: buy only at a valley not acted on before, sell like
  trend_reversal
"""

from typing import Optional, Tuple

from ..analysis.direction_changes import DirectionChangePoint, last_direction_change
from ..core.constants import StrategyDefaults
from ..data.models import PriceSeries, SeriesLike
from .base_strategy import BaseStrategy
from .bot_state import Position, TradingBot
from .decision import Decision
from .settings import DirectionChangeReferenceParams, TradingMethod

MIN_SAMPLES = 3


# ============================================================================
# Predicates
# ============================================================================

def should_buy_trend_reversal(series: SeriesLike) -> bool:
    """True when the last turning point is a valley"""
    if len(series) < MIN_SAMPLES:
        return False
    point = last_direction_change(series)
    return point is not None and point.is_valley


def should_sell_trend_reversal(series: SeriesLike) -> bool:
    """True when the last turning point is a peak"""
    if len(series) < MIN_SAMPLES:
        return False
    point = last_direction_change(series)
    return point is not None and point.is_peak


def should_buy_direction_change_reference(
    series: SeriesLike,
    current_price: float,
) -> Tuple[bool, Optional[DirectionChangePoint]]:
    """Buy when the current price is above the last turning point's price"""
    if len(series) < MIN_SAMPLES:
        return False, None
    point = last_direction_change(series)
    if point is None:
        return False, None
    return current_price > point.price, point


def should_sell_direction_change_reference(
    position: Optional[Position],
    current_price: float,
    threshold: float = StrategyDefaults.DOLLAR_DROP_THRESHOLD,
) -> Tuple[bool, str]:
    """Sell once the price has dropped ``threshold`` dollars below the buy price"""
    if position is None:
        return False, "No current position"

    drop = position.buy_price - current_price
    if drop >= threshold:
        return True, f"Price dropped {drop:.2f} from buy price {position.buy_price:.2f}"
    return False, f"Price drop {drop:.2f} below threshold {threshold:.2f}"


def should_buy_direction_change_buy(
    series: SeriesLike,
    last_processed_index: Optional[int] = None,
) -> Tuple[bool, Optional[DirectionChangePoint]]:
    """Buy at a valley whose index is past the last one acted on"""
    if len(series) < MIN_SAMPLES:
        return False, None
    point = last_direction_change(series)
    if point is None or not point.is_valley:
        return False, None
    if last_processed_index is not None and point.index <= last_processed_index:
        return False, None
    return True, point


# ============================================================================
# Strategies
# ============================================================================

class TrendReversalStrategy(BaseStrategy):
    """Buy when the trend turns up, sell when it turns down"""

    method = TradingMethod.TREND_REVERSAL

    def evaluate_buy(self, bot, series, current_price, now_ms) -> Decision:
        if should_buy_trend_reversal(series):
            return self._buy("Trend changed from DOWN to UP")
        return self._hold("Waiting for upward trend reversal")

    def evaluate_sell(self, bot, series, current_price, now_ms) -> Decision:
        if should_sell_trend_reversal(series):
            return self._sell("Trend changed from UP to DOWN")
        return self._hold("Holding position, trend still up")


class DirectionChangeReferenceStrategy(BaseStrategy):
    """Buy above the last turning point; exit on a fixed dollar drop"""

    method = TradingMethod.DIRECTION_CHANGE_REFERENCE

    @property
    def threshold(self) -> float:
        if isinstance(self.params, DirectionChangeReferenceParams):
            return self.params.dollar_drop_threshold
        return StrategyDefaults.DOLLAR_DROP_THRESHOLD

    def evaluate_buy(
        self,
        bot: TradingBot,
        series: PriceSeries,
        current_price: float,
        now_ms: int,
    ) -> Decision:
        should_buy, point = should_buy_direction_change_reference(series, current_price)
        if point is None:
            return self._hold("No direction change reference point found")
        if should_buy:
            return self._buy(
                f"Current price {current_price:.2f} > last direction change {point.price:.2f}",
                reference_point=point,
            )
        return self._hold(
            f"Current price {current_price:.2f} <= last direction change {point.price:.2f}",
            reference_point=point,
        )

    def evaluate_sell(
        self,
        bot: TradingBot,
        series: PriceSeries,
        current_price: float,
        now_ms: int,
    ) -> Decision:
        should_sell, reason = should_sell_direction_change_reference(
            bot.current_position, current_price, self.threshold
        )
        if should_sell:
            return self._sell(reason)
        return self._hold(reason)


class DirectionChangeBuyStrategy(TrendReversalStrategy):
    """Trend reversal that never buys the same valley twice"""

    method = TradingMethod.DIRECTION_CHANGE_BUY

    def evaluate_buy(self, bot, series, current_price, now_ms) -> Decision:
        should_buy, point = should_buy_direction_change_buy(series, bot.last_processed_index)
        if should_buy:
            return self._buy(
                f"Direction changed from DOWN to UP at {point.price:.2f}",
                new_direction_change=point,
            )
        return self._hold("Waiting for new direction change from DOWN to UP")
