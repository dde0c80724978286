# Paperbot Strategies Module
# ==========================
# Trading methods, bot settings/state and the decisions they produce.
# The dispatcher lives in paperbot.strategies.dispatcher (it depends on the
# risk overlay, which in turn depends on the state types exported here).

from .settings import (
    TradingMethod,
    InvestmentType,
    TrendReversalParams,
    DirectionChangeReferenceParams,
    DirectionChangeBuyParams,
    PriceComparisonParams,
    SlopeAnalysisParams,
    ConfirmedRecoveryParams,
    StrategyParams,
    DollarDropSettings,
    BotSettings,
)
from .bot_state import (
    Position,
    PositionUpdate,
    RecoveryState,
    RecoveryConfirmation,
    BotStats,
    TradingBot,
)
from .decision import Action, Decision
from .base_strategy import BaseStrategy
from .trend_reversal import (
    TrendReversalStrategy,
    DirectionChangeReferenceStrategy,
    DirectionChangeBuyStrategy,
)
from .momentum import PriceComparisonStrategy, SlopeAnalysisStrategy
from .confirmed_recovery import ConfirmedRecoveryStrategy, RecoveryMode

__all__ = [
    # Settings
    "TradingMethod",
    "InvestmentType",
    "TrendReversalParams",
    "DirectionChangeReferenceParams",
    "DirectionChangeBuyParams",
    "PriceComparisonParams",
    "SlopeAnalysisParams",
    "ConfirmedRecoveryParams",
    "StrategyParams",
    "DollarDropSettings",
    "BotSettings",
    # State
    "Position",
    "PositionUpdate",
    "RecoveryState",
    "RecoveryConfirmation",
    "BotStats",
    "TradingBot",
    # Decisions
    "Action",
    "Decision",
    # Strategies
    "BaseStrategy",
    "TrendReversalStrategy",
    "DirectionChangeReferenceStrategy",
    "DirectionChangeBuyStrategy",
    "PriceComparisonStrategy",
    "SlopeAnalysisStrategy",
    "ConfirmedRecoveryStrategy",
    "RecoveryMode",
]
