# Paperbot Core Module
# ====================
# Central configuration, constants and logging

from .config import Config, EngineConfig, LedgerConfig, get_config
from .constants import (
    DetectorLimits,
    TrendThresholds,
    StrategyDefaults,
    OverlayDefaults,
    DEFAULT_STARTING_CASH,
    DEFAULT_MAX_INVESTMENT_PER_TRADE,
)
from .logging_config import setup_logging, get_logger, TradeLogger, trade_logger

__all__ = [
    "Config",
    "EngineConfig",
    "LedgerConfig",
    "get_config",
    "DetectorLimits",
    "TrendThresholds",
    "StrategyDefaults",
    "OverlayDefaults",
    "DEFAULT_STARTING_CASH",
    "DEFAULT_MAX_INVESTMENT_PER_TRADE",
    "setup_logging",
    "get_logger",
    "TradeLogger",
    "trade_logger",
]
