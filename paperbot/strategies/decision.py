"""
Trading Decisions
=================
The single action the dispatcher returns for a bot on each tick.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..analysis.direction_changes import DirectionChangePoint
from .bot_state import PositionUpdate, RecoveryConfirmation


class Action(Enum):
    """Type of trading action"""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class Decision:
    """
    Trading decision with its reason and any state deltas.

    Contains:
    - Action (BUY/SELL/HOLD)
    - Human-readable reason embedding the compared values
    - Reference / new direction-change point for the direction-change methods
    - Position and recovery deltas for the ledger to persist

    Usage:
        decision = Decision.buy(
            "Current price 10.50 > previous price 10.00",
            strategy="price_comparison",
        )
    """
    action: Action
    reason: str
    strategy: str = ""
    reference_point: Optional[DirectionChangePoint] = None
    new_direction_change: Optional[DirectionChangePoint] = None
    update_position: Optional[PositionUpdate] = None
    update_recovery: Optional[RecoveryConfirmation] = None

    @property
    def is_buy(self) -> bool:
        return self.action == Action.BUY

    @property
    def is_sell(self) -> bool:
        return self.action == Action.SELL

    @property
    def is_hold(self) -> bool:
        return self.action == Action.HOLD

    @classmethod
    def buy(cls, reason: str, **kwargs) -> "Decision":
        return cls(action=Action.BUY, reason=reason, **kwargs)

    @classmethod
    def sell(cls, reason: str, **kwargs) -> "Decision":
        return cls(action=Action.SELL, reason=reason, **kwargs)

    @classmethod
    def hold(cls, reason: str = "No setup", **kwargs) -> "Decision":
        """Create a HOLD decision"""
        return cls(action=Action.HOLD, reason=reason, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "action": self.action.value,
            "reason": self.reason,
            "strategy": self.strategy,
            "reference_point": self.reference_point.to_dict() if self.reference_point else None,
            "new_direction_change": (
                self.new_direction_change.to_dict() if self.new_direction_change else None
            ),
            "update_position": (
                {
                    "price_history": list(self.update_position.price_history)
                    if self.update_position.price_history is not None else None,
                    "consecutive_falls": self.update_position.consecutive_falls,
                    "last_price": self.update_position.last_price,
                }
                if self.update_position else None
            ),
            "update_recovery": (
                {
                    "state": self.update_recovery.state.value,
                    "anchor_price": self.update_recovery.anchor_price,
                    "first_price": self.update_recovery.first_price,
                    "check_due_at": self.update_recovery.check_due_at,
                }
                if self.update_recovery else None
            ),
        }

    def __str__(self) -> str:
        tag = f" [{self.strategy}]" if self.strategy else ""
        return f"{self.action.value}{tag}: {self.reason}"
