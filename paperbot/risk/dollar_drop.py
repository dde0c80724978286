"""
Dollar-Drop Protection
======================
Protective sell overlay evaluated before a bot's trading method whenever the
bot holds a position.

Rules are checked in a fixed order and the first one that fires wins:

1. Profit taking: target reached (percentage or dollars) and the price just
   dropped by at least the trigger amount since the previous sample
2. Sell at buy price: price is back at or below the buy price
3. Consecutive falls: the last N live prices each fell

The overlay never touches the position. The consecutive-falls rule returns
its updated price history as a ``PositionUpdate``.
"""

from collections import deque
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import OverlayDefaults
from ..data.models import SeriesLike
from ..strategies.bot_state import Position, PositionUpdate, TradingBot
from ..strategies.settings import DollarDropSettings


@dataclass(frozen=True)
class OverlayResult:
    """Outcome of the overlay for one tick"""
    should_sell: bool
    reason: str
    update_position: Optional[PositionUpdate] = None

    @property
    def is_terminal(self) -> bool:
        """True when the dispatcher must return without consulting the strategy"""
        return self.should_sell or self.update_position is not None


NOT_MET = OverlayResult(False, "Dollar Drop conditions not met")


def count_trailing_falls(prices: Sequence[float]) -> int:
    """Number of strictly decreasing steps at the end of ``prices``"""
    falls = 0
    for i in range(len(prices) - 1, 0, -1):
        if prices[i] < prices[i - 1]:
            falls += 1
        else:
            break
    return falls


def evaluate_profit_taking(
    position: Position,
    settings: DollarDropSettings,
    current_price: float,
    series: SeriesLike,
) -> Optional[OverlayResult]:
    profit = position.unrealized_pnl(current_price)
    invested = position.invested
    profit_pct = profit / invested * 100 if invested > 0 else 0.0

    reached = profit_pct >= settings.profit_taking_percentage or (
        settings.profit_taking_dollar_amount > 0
        and profit >= settings.profit_taking_dollar_amount
    )
    if not reached or len(series) < 2:
        return None

    drop = series[-2].price - current_price
    if drop >= settings.dollar_drop_trigger_amount:
        return OverlayResult(
            True,
            f"Profit target reached ({profit_pct:.1f}%) and price dropped {drop:.2f}",
        )
    return None


def evaluate_sell_at_buy_price(
    position: Position,
    current_price: float,
) -> Optional[OverlayResult]:
    if current_price <= position.buy_price:
        return OverlayResult(
            True,
            f"Price fell to/below buy price: {current_price:.2f} <= {position.buy_price:.2f}",
        )
    return None


def evaluate_consecutive_falls(
    position: Position,
    settings: DollarDropSettings,
    current_price: float,
) -> OverlayResult:
    """Always returns a result: either a SELL or the updated tracking state"""
    history = deque(
        position.price_history or (position.buy_price,),
        maxlen=OverlayDefaults.PRICE_HISTORY_CAP,
    )
    history.append(current_price)

    falls = count_trailing_falls(history)
    threshold = settings.consecutive_falls_count

    if falls >= threshold:
        return OverlayResult(
            True,
            f"Price fell for {falls} consecutive live updates",
            PositionUpdate(price_history=(current_price,), consecutive_falls=0),
        )
    return OverlayResult(
        False,
        f"Consecutive live falls: {falls}/{threshold}",
        PositionUpdate(price_history=tuple(history), consecutive_falls=falls),
    )


class DollarDropProtection:
    """
    Overlay bound to one bot's settings.

    Usage:
        result = DollarDropProtection(bot.settings.dollar_drop).evaluate(
            bot.current_position, current_price, series
        )
        if result.should_sell:
            ...
    """

    def __init__(self, settings: DollarDropSettings):
        self.settings = settings

    def evaluate(
        self,
        position: Optional[Position],
        current_price: float,
        series: SeriesLike,
    ) -> OverlayResult:
        if position is None:
            return OverlayResult(False, "No current position")

        if self.settings.profit_taking_enabled:
            result = evaluate_profit_taking(position, self.settings, current_price, series)
            if result is not None:
                return result

        if self.settings.sell_at_buy_price_enabled:
            result = evaluate_sell_at_buy_price(position, current_price)
            if result is not None:
                return result

        if self.settings.consecutive_falls_enabled:
            return evaluate_consecutive_falls(position, self.settings, current_price)

        return NOT_MET


def should_sell_with_dollar_drop(
    bot: TradingBot,
    current_price: float,
    series: SeriesLike,
) -> OverlayResult:
    """Run the overlay for ``bot`` regardless of its enabled flag"""
    return DollarDropProtection(bot.settings.dollar_drop).evaluate(
        bot.current_position, current_price, series
    )
