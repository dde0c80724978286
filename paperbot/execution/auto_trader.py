"""
Trend-Flip Auto Trader
======================
Automated trading on trend direction changes, independent of the bots.

On every evaluation the trend of a symbol's series is estimated and compared
with the direction seen on the previous evaluation:

- DOWN -> UP: BUY, sized like any bot buy
- UP -> DOWN: SELL the held shares (capped per trade in shares mode)

Any other transition, including moves through NEUTRAL, does nothing. Fills go
through the ledger on a per-symbol automated account, so cash, stats and
trade history are shared with the bots.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..analysis.trend import TrendDirection, estimate_trend
from ..core.constants import DEFAULT_MAX_INVESTMENT_PER_TRADE, TrendThresholds
from ..data.models import ChartPeriod, SeriesLike
from ..strategies.bot_state import TradingBot
from ..strategies.decision import Decision
from ..strategies.settings import BotSettings, InvestmentType
from .paper_ledger import BotTrade, PaperLedger


logger = logging.getLogger("paperbot.execution.auto_trader")


@dataclass(frozen=True)
class AutoTradeSettings:
    """Global automated-trading switch and sizing"""
    enabled: bool = False
    max_investment_per_trade: float = DEFAULT_MAX_INVESTMENT_PER_TRADE
    investment_type: InvestmentType = InvestmentType.DOLLARS
    sensitivity: float = TrendThresholds.AUTO_TRADE_SENSITIVITY
    chart_period: ChartPeriod = ChartPeriod.ONE_DAY  # 1-minute intraday samples


class TrendFlipTrader:
    """
    Trades trend reversals for a set of symbols.

    Usage:
        trader = TrendFlipTrader(ledger, AutoTradeSettings(enabled=True), ["AAPL"])
        trade = trader.evaluate("AAPL", series, current_price=187.20)
    """

    def __init__(self, ledger: PaperLedger, settings: AutoTradeSettings, symbols: List[str]):
        self.ledger = ledger
        self.settings = settings
        self.symbols = [s.upper() for s in symbols]
        self.previous: Dict[str, TrendDirection] = {}

    def account_for(self, symbol: str) -> TradingBot:
        """Automated ledger account for a symbol, created on first use"""
        symbol = symbol.upper()
        account_id = f"auto_{symbol}"
        account = self.ledger.bots.get(account_id)
        if account is None:
            account = self.ledger.add_bot(TradingBot(
                id=account_id,
                name=f"Auto {symbol}",
                stock_symbol=symbol,
                settings=BotSettings(
                    max_investment_per_trade=self.settings.max_investment_per_trade,
                    investment_type=self.settings.investment_type,
                ),
                is_automated=True,
            ))
        return account

    def evaluate(self, symbol: str, series: SeriesLike, current_price: float) -> Optional[BotTrade]:
        """
        Record the symbol's trend and trade if it flipped.

        The direction is recorded even while automated trading is disabled,
        so enabling it never trades on a stale comparison.

        Returns:
            The fill, or None when nothing traded
        """
        symbol = symbol.upper()
        trend = estimate_trend(series, self.settings.sensitivity)
        previous = self.previous.get(symbol, TrendDirection.NEUTRAL)
        self.previous[symbol] = trend.direction

        if not self.settings.enabled or previous == trend.direction:
            return None

        logger.info(
            f"Trend direction changed from {previous.value} to {trend.direction.value} for {symbol}"
        )

        if previous == TrendDirection.DOWN and trend.direction == TrendDirection.UP:
            decision = Decision.buy(f"Trend changed from DOWN to UP ({trend})")
        elif previous == TrendDirection.UP and trend.direction == TrendDirection.DOWN:
            decision = Decision.sell(f"Trend changed from UP to DOWN ({trend})")
        else:
            return None

        return self.ledger.apply_decision(self.account_for(symbol).id, decision, current_price)
