"""
Paper Ledger
============
In-memory store for paper trading: cash, bots and trade history.

The ledger is the only owner of bot state. It turns dispatcher decisions into
simulated fills and applies the state deltas they carry:

1. BUY fills only when the bot is flat, SELL only when it holds a position
2. Position tracking updates (consecutive-falls history)
3. Direction-change bookkeeping (``last_processed_index``, monotonic)
4. Confirmed-recovery state (terminal states are cleared)
5. Per-bot stats: trade count, realized profit, win rate over sells
"""

import logging
import uuid
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from ..core.constants import DEFAULT_STARTING_CASH
from ..core.logging_config import trade_logger
from ..data.quote_source import now_ms
from ..risk.position_sizer import calculate_shares_to_buy, calculate_shares_to_sell
from ..strategies.bot_state import BotStats, Position, TradingBot
from ..strategies.decision import Decision
from ..strategies.settings import BotSettings


logger = logging.getLogger("paperbot.execution.ledger")


class LedgerError(Exception):
    """Raised for operations on bots the ledger does not know"""
    pass


@dataclass
class BotTrade:
    """Record of one simulated fill"""
    id: str
    bot_id: str
    bot_name: str
    symbol: str
    side: str  # "BUY" or "SELL"
    shares: int
    price: float
    total: float
    timestamp: int
    profit: float = 0.0  # realized, SELL only
    reason: str = ""


class PaperLedger:
    """
    Paper trading ledger.

    Usage:
        ledger = PaperLedger(starting_cash=10000)
        bot = ledger.create_bot("Dip buyer", "AAPL", BotSettings())

        trade = ledger.apply_decision(bot.id, decision, price=187.20)
        print(ledger.get_statistics())
    """

    def __init__(
        self,
        starting_cash: float = DEFAULT_STARTING_CASH,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize ledger.

        Args:
            starting_cash: Cash shared by all bots
            clock: Function returning the current time in ms
        """
        self.starting_cash = starting_cash
        self.cash = starting_cash
        self.clock = clock

        self.bots: Dict[str, TradingBot] = {}
        self.trades: List[BotTrade] = []

    # =========================================================================
    # Bot management
    # =========================================================================

    def add_bot(self, bot: TradingBot) -> TradingBot:
        if bot.id in self.bots:
            raise LedgerError(f"Bot already exists: {bot.id}")
        if not bot.created_at:
            bot.created_at = self.clock()
        self.bots[bot.id] = bot
        logger.info(
            f"Bot added: {bot.name} ({bot.stock_symbol}) "
            f"method={bot.settings.trading_method.value}"
        )
        return bot

    def create_bot(
        self,
        name: str,
        symbol: str,
        settings: Optional[BotSettings] = None,
        stock_name: str = "",
    ) -> TradingBot:
        """Create and register a bot with a fresh id"""
        bot = TradingBot(
            id=uuid.uuid4().hex[:12],
            name=name,
            stock_symbol=symbol.upper(),
            settings=settings or BotSettings(),
            stock_name=stock_name,
        )
        return self.add_bot(bot)

    def get_bot(self, bot_id: str) -> TradingBot:
        bot = self.bots.get(bot_id)
        if bot is None:
            raise LedgerError(f"Unknown bot: {bot_id}")
        return bot

    def toggle_bot(self, bot_id: str) -> bool:
        """Flip a bot's active flag; returns the new value"""
        bot = self.get_bot(bot_id)
        bot.is_active = not bot.is_active
        logger.info(f"Bot {bot.name} {'activated' if bot.is_active else 'paused'}")
        return bot.is_active

    def remove_bot(self, bot_id: str) -> TradingBot:
        bot = self.get_bot(bot_id)
        if bot.current_position is not None:
            logger.warning(
                f"Removing {bot.name} with an open position of "
                f"{bot.current_position.shares} {bot.stock_symbol}"
            )
        del self.bots[bot_id]
        return bot

    @property
    def active_bots(self) -> List[TradingBot]:
        """Bots the dispatcher evaluates; automated accounts are excluded"""
        return [b for b in self.bots.values() if b.is_active and not b.is_automated]

    # =========================================================================
    # Decisions
    # =========================================================================

    def apply_decision(self, bot_id: str, decision: Decision, price: float) -> Optional[BotTrade]:
        """
        Apply a dispatcher decision for one bot.

        Args:
            bot_id: Bot the decision was made for
            decision: Dispatcher output
            price: Fill price

        Returns:
            The simulated trade, or None when nothing was filled
        """
        bot = self.get_bot(bot_id)
        trade = None

        if decision.is_buy:
            if bot.current_position is None:
                trade = self._buy(bot, price, decision.reason)
                if trade is not None and decision.new_direction_change is not None:
                    self._advance_processed_index(bot, decision.new_direction_change.index)
            else:
                trade_logger.log_trade_skipped(bot.name, bot.stock_symbol, "BUY", "already holding")

        elif decision.is_sell:
            if bot.current_position is not None:
                trade = self._sell(bot, price, decision.reason)
            else:
                trade_logger.log_trade_skipped(bot.name, bot.stock_symbol, "SELL", "no position")

        if decision.update_position is not None and bot.current_position is not None:
            bot.current_position.apply_update(decision.update_position)

        if decision.update_recovery is not None:
            bot.recovery = None if decision.update_recovery.is_terminal else decision.update_recovery

        return trade

    def _advance_processed_index(self, bot: TradingBot, index: int) -> None:
        if bot.last_processed_index is None or index > bot.last_processed_index:
            bot.last_processed_index = index

    def _buy(self, bot: TradingBot, price: float, reason: str) -> Optional[BotTrade]:
        shares = calculate_shares_to_buy(
            bot.settings.max_investment_per_trade,
            bot.settings.investment_type,
            price,
            self.cash,
        )
        if shares <= 0:
            trade_logger.log_trade_skipped(bot.name, bot.stock_symbol, "BUY", "insufficient cash")
            return None

        total = shares * price
        self.cash -= total
        timestamp = self.clock()
        bot.current_position = Position(
            buy_price=price,
            shares=shares,
            timestamp=timestamp,
            last_price=price,
            price_history=[price],
        )
        return self._record(bot, "BUY", shares, price, timestamp, 0.0, reason)

    def _sell(self, bot: TradingBot, price: float, reason: str) -> BotTrade:
        position = bot.current_position
        shares = calculate_shares_to_sell(
            bot.settings.max_investment_per_trade,
            bot.settings.investment_type,
            position.shares,
        )
        profit = (price - position.buy_price) * shares
        self.cash += shares * price

        position.shares -= shares
        if position.shares <= 0:
            bot.current_position = None

        trade = self._record(bot, "SELL", shares, price, self.clock(), profit, reason)
        self._update_win_rate(bot)
        return trade

    def _record(
        self,
        bot: TradingBot,
        side: str,
        shares: int,
        price: float,
        timestamp: int,
        profit: float,
        reason: str,
    ) -> BotTrade:
        trade = BotTrade(
            id=uuid.uuid4().hex[:12],
            bot_id=bot.id,
            bot_name=bot.name,
            symbol=bot.stock_symbol,
            side=side,
            shares=shares,
            price=price,
            total=shares * price,
            timestamp=timestamp,
            profit=profit,
            reason=reason,
        )
        self.trades.append(trade)

        bot.stats.total_trades += 1
        bot.stats.total_profit += profit
        bot.stats.last_trade_at = timestamp

        trade_logger.log_trade(bot.name, bot.stock_symbol, side, shares, price, profit)
        return trade

    def _update_win_rate(self, bot: TradingBot) -> None:
        sells = [t for t in self.trades if t.bot_id == bot.id and t.side == "SELL"]
        if not sells:
            bot.stats.win_rate = 0.0
            return
        winners = sum(1 for t in sells if t.profit > 0)
        bot.stats.win_rate = winners / len(sells) * 100

    # =========================================================================
    # Reporting
    # =========================================================================

    def bot_trades(self, bot_id: str) -> List[BotTrade]:
        self.get_bot(bot_id)
        return [t for t in self.trades if t.bot_id == bot_id]

    def portfolio_value(self, prices: Dict[str, float]) -> Dict[str, float]:
        """
        Mark all open positions to market.

        Args:
            prices: symbol -> current price; missing symbols use the buy price

        Returns:
            Dict with cash, holdings, total value and P&L vs starting cash
        """
        holdings = 0.0
        for bot in self.bots.values():
            position = bot.current_position
            if position is None:
                continue
            holdings += position.shares * prices.get(bot.stock_symbol, position.buy_price)

        total = self.cash + holdings
        pnl = total - self.starting_cash
        return {
            "cash": self.cash,
            "holdings_value": holdings,
            "total_value": total,
            "profit_loss": pnl,
            "profit_loss_pct": pnl / self.starting_cash * 100 if self.starting_cash else 0.0,
        }

    def trades_frame(self) -> pd.DataFrame:
        """Trade history as a DataFrame indexed by fill time"""
        columns = list(BotTrade.__dataclass_fields__)
        if not self.trades:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame([asdict(t) for t in self.trades], columns=columns)
        df["time"] = pd.to_datetime(df["timestamp"], unit="ms")
        return df.set_index("time")

    def get_statistics(self) -> Dict[str, Any]:
        """Ledger-wide statistics"""
        sells = [t for t in self.trades if t.side == "SELL"]
        winners = sum(1 for t in sells if t.profit > 0)
        return {
            "bots": len(self.bots),
            "active_bots": len(self.active_bots),
            "total_trades": len(self.trades),
            "total_profit": sum(t.profit for t in sells),
            "win_rate": winners / len(sells) * 100 if sells else 0.0,
            "cash": self.cash,
        }

    def reset(self) -> None:
        """Reset cash, positions and history; bots are kept"""
        self.cash = self.starting_cash
        self.trades.clear()
        for bot in self.bots.values():
            bot.current_position = None
            bot.recovery = None
            bot.last_processed_index = None
            bot.stats = BotStats()
        logger.info("Ledger reset to initial state")
