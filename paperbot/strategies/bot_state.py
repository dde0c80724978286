"""
Bot State
=========
The bot record and the state fragments the engine reads: open position,
running stats and any in-flight confirmed-recovery check.

The decision engine never mutates these objects. It proposes
``PositionUpdate`` / ``RecoveryConfirmation`` deltas on its decisions and the
ledger applies them.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Iterable, Optional, Tuple

from ..core.constants import OverlayDefaults
from .settings import BotSettings


def _history(values: Iterable[float] = ()) -> Deque[float]:
    return deque(values, maxlen=OverlayDefaults.PRICE_HISTORY_CAP)


@dataclass(frozen=True)
class PositionUpdate:
    """Proposed changes to the open position's tracking fields"""
    price_history: Optional[Tuple[float, ...]] = None
    consecutive_falls: Optional[int] = None
    last_price: Optional[float] = None


@dataclass
class Position:
    """Open long position held by a bot"""
    buy_price: float
    shares: int
    timestamp: int
    consecutive_falls: int = 0
    last_price: Optional[float] = None
    price_history: Deque[float] = field(default_factory=_history)

    def __post_init__(self):
        if not isinstance(self.price_history, deque) or self.price_history.maxlen != OverlayDefaults.PRICE_HISTORY_CAP:
            self.price_history = _history(self.price_history)

    @property
    def invested(self) -> float:
        return self.buy_price * self.shares

    def unrealized_pnl(self, current_price: float) -> float:
        return (current_price - self.buy_price) * self.shares

    def apply_update(self, update: PositionUpdate) -> None:
        """Apply an engine-proposed update in place"""
        if update.price_history is not None:
            self.price_history = _history(update.price_history)
        if update.consecutive_falls is not None:
            self.consecutive_falls = update.consecutive_falls
        if update.last_price is not None:
            self.last_price = update.last_price


class RecoveryState(Enum):
    """Stages of the two-phase confirmed-recovery check"""
    AWAITING_FIRST_CONFIRMATION = "awaiting_first_confirmation"
    AWAITING_SECOND_CONFIRMATION = "awaiting_second_confirmation"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class RecoveryConfirmation:
    """
    An in-flight confirmed-recovery check.

    ``anchor_price`` is the price when the downward interval was seen;
    ``first_price`` is the price observed at the first check. The next
    observation is due at ``check_due_at`` (ms).
    """
    state: RecoveryState
    anchor_price: float
    started_at: int
    check_due_at: int
    first_price: Optional[float] = None

    @property
    def is_pending(self) -> bool:
        return self.state in (
            RecoveryState.AWAITING_FIRST_CONFIRMATION,
            RecoveryState.AWAITING_SECOND_CONFIRMATION,
        )

    @property
    def is_terminal(self) -> bool:
        return not self.is_pending


@dataclass
class BotStats:
    total_trades: int = 0
    total_profit: float = 0.0
    win_rate: float = 0.0  # % of SELL trades closed in profit
    last_trade_at: Optional[int] = None


@dataclass
class TradingBot:
    """A configured bot and its current state"""
    id: str
    name: str
    stock_symbol: str
    settings: BotSettings = field(default_factory=BotSettings)
    stock_name: str = ""
    is_active: bool = True
    created_at: int = 0
    last_processed_index: Optional[int] = None
    stats: BotStats = field(default_factory=BotStats)
    current_position: Optional[Position] = None
    recovery: Optional[RecoveryConfirmation] = None
    is_automated: bool = False  # Driven by the trend-flip trader, not the dispatcher

    @property
    def has_position(self) -> bool:
        return self.current_position is not None
