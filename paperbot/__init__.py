# Paperbot
# ========
# Paper-trading decision engine for rule-based stock bots

"""
PROJECT STRUCTURE
=================

paperbot/
├── __init__.py              # Package initialization
├── main.py                  # CLI entry point - offline ticks or scheduler loop
│
├── core/                    # Configuration and utilities
│   ├── config.py           # Environment-driven configuration
│   ├── constants.py        # Detector limits, thresholds, strategy defaults
│   └── logging_config.py   # Centralized logging setup
│
├── data/                    # Price data
│   ├── models.py           # Sample, PriceSeries, Interval, ChartPeriod
│   ├── validators.py       # Series validation before evaluation
│   └── quote_source.py     # Quote source interface + simulated source
│
├── analysis/                # Pure pattern detectors
│   ├── direction_changes.py # Peaks and valleys
│   ├── beats.py            # Rising runs and potential-profit trims
│   ├── potential_loss.py   # Down-up-down false reversals
│   └── trend.py            # Regression trend/strength, movement check
│
├── strategies/              # Trading methods
│   ├── settings.py         # Per-method settings (tagged union)
│   ├── bot_state.py        # Bot, position, stats, recovery state
│   ├── decision.py         # Decision classes (BUY, SELL, HOLD)
│   ├── base_strategy.py    # Abstract base class for all methods
│   ├── trend_reversal.py   # Direction-change methods
│   ├── momentum.py         # Price comparison, slope analysis
│   ├── confirmed_recovery.py # Two-step delayed confirmation
│   └── dispatcher.py       # decide(): overlay, then method
│
├── risk/                    # Risk management
│   ├── dollar_drop.py      # Protective sell overlay
│   └── position_sizer.py   # Share counts for buys and sells
│
├── execution/
│   ├── paper_ledger.py     # Cash, bots, simulated fills, stats
│   └── auto_trader.py      # Trend-flip automated trading
│
├── jobs/
│   ├── scheduler.py        # APScheduler setup
│   └── bot_runner.py       # Tick loop and recovery follow-ups
│
└── utils/
    └── formatting.py       # Currency/time/sequence display strings


USAGE
=====
    # Ten offline ticks with the default method
    python -m paperbot.main --symbol APP --ticks 10

    # Scheduler loop
    python -m paperbot.main --symbol APP --live --debug
"""

__version__ = "1.0.0"

from .core.config import Config
from .data.models import Sample, PriceSeries, ChartPeriod, Interval
from .strategies.settings import BotSettings, TradingMethod
from .strategies.bot_state import TradingBot, Position
from .strategies.decision import Action, Decision
from .strategies.dispatcher import decide
from .strategies.confirmed_recovery import RecoveryMode
from .execution.paper_ledger import PaperLedger, LedgerError

__all__ = [
    "Config",
    "Sample",
    "PriceSeries",
    "ChartPeriod",
    "Interval",
    "BotSettings",
    "TradingMethod",
    "TradingBot",
    "Position",
    "Action",
    "Decision",
    "decide",
    "RecoveryMode",
    "PaperLedger",
    "LedgerError",
]
