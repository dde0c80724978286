# Paperbot Execution Module
# =========================
# Simulated fills and bot state ownership

from .paper_ledger import PaperLedger, BotTrade, LedgerError
from .auto_trader import AutoTradeSettings, TrendFlipTrader

__all__ = [
    "PaperLedger",
    "BotTrade",
    "LedgerError",
    "AutoTradeSettings",
    "TrendFlipTrader",
]
