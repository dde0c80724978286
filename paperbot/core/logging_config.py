"""
Logging Configuration
=====================
Centralized logging setup for the paper-trading bots.
"""

import os
import sys
import logging
from pathlib import Path
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from .constants import TAG_DECISION, TAG_TRADE


# Default log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-24s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Log levels for different components
COMPONENT_LOG_LEVELS = {
    "paperbot": logging.INFO,
    "paperbot.core": logging.INFO,
    "paperbot.analysis": logging.INFO,
    "paperbot.strategies": logging.INFO,
    "paperbot.risk": logging.INFO,
    "paperbot.execution": logging.INFO,
    "paperbot.jobs": logging.INFO,
    "paperbot.data": logging.DEBUG,  # More verbose for data issues
}


class ColorFormatter(logging.Formatter):
    """Colored log formatter for console output"""

    COLORS = {
        logging.DEBUG: "\033[36m",     # Cyan
        logging.INFO: "\033[32m",      # Green
        logging.WARNING: "\033[33m",   # Yellow
        logging.ERROR: "\033[31m",     # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record):
        color = self.COLORS.get(record.levelno, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    log_dir: Optional[Path] = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> None:
    """
    Set up logging for the bots.

    Args:
        log_dir: Directory for log files
        console_level: Logging level for console output
        file_level: Logging level for file output
        max_bytes: Max size of each log file
        backup_count: Number of backup files to keep
    """
    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent / "paperbot_data" / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger("paperbot")
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers will filter

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    if sys.platform != "win32" or os.getenv("TERM"):
        console_handler.setFormatter(ColorFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    # Main log file (rotating by size)
    today = datetime.now().strftime("%Y-%m-%d")
    file_handler = RotatingFileHandler(
        log_dir / f"paperbot_{today}.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root_logger.addHandler(file_handler)

    # Decision/trade log (separate file for bot actions only)
    trade_handler = RotatingFileHandler(
        log_dir / f"trades_{today}.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    trade_handler.setLevel(logging.INFO)
    trade_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    trade_handler.addFilter(
        lambda record: TAG_TRADE in record.getMessage() or TAG_DECISION in record.getMessage()
    )

    trade_logger = logging.getLogger("paperbot.trades")
    trade_logger.addHandler(trade_handler)

    # Error log (separate file for errors only)
    error_handler = RotatingFileHandler(
        log_dir / f"errors_{today}.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root_logger.addHandler(error_handler)

    for component, level in COMPONENT_LOG_LEVELS.items():
        logging.getLogger(component).setLevel(level)

    # Suppress noisy third-party loggers
    for noisy_logger in ["apscheduler", "asyncio"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    root_logger.info("Logging initialized: %s", log_dir)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a component.

    Args:
        name: Component name (e.g., "risk", "execution", "strategies")

    Returns:
        Logger instance with proper hierarchy
    """
    if not name.startswith("paperbot"):
        name = f"paperbot.{name}"
    return logging.getLogger(name)


class TradeLogger:
    """
    Specialized logger for bot decisions and paper fills.

    Logs to both main log and separate trade log file.
    """

    def __init__(self):
        self.logger = get_logger("trades")

    def log_decision(self, bot_name: str, symbol: str, action: str, price: float, reason: str):
        """Log a dispatcher decision"""
        self.logger.info(
            "%s | %s | %s | %s @ %.2f | %s",
            TAG_DECISION, bot_name, symbol, action, price, reason
        )

    def log_trade(
        self,
        bot_name: str,
        symbol: str,
        side: str,
        shares: int,
        price: float,
        profit: float,
    ):
        """Log an executed paper trade"""
        profit_str = f"+{profit:.2f}" if profit >= 0 else f"{profit:.2f}"
        self.logger.info(
            "%s:%s | %s | %s %d @ %.2f | profit=%s",
            TAG_TRADE, side, bot_name, symbol, shares, price, profit_str
        )

    def log_trade_skipped(self, bot_name: str, symbol: str, side: str, reason: str):
        """Log a decision the ledger could not fill"""
        self.logger.warning(
            "%s:SKIPPED | %s | %s %s | %s",
            TAG_TRADE, bot_name, side, symbol, reason
        )


# Global trade logger instance
trade_logger = TradeLogger()
