"""
Central Configuration
=====================
Load all configuration from environment variables and .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

from .constants import (
    DEFAULT_STARTING_CASH,
    DEFAULT_MAX_INVESTMENT_PER_TRADE,
    DEFAULT_TICK_SECONDS,
)


# Load .env file from project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")

RECOVERY_MODES = ("LIVE", "SIMULATED")
INVESTMENT_TYPES = ("dollars", "shares")


@dataclass
class EngineConfig:
    """Decision engine and tick runner configuration"""
    tick_seconds: int = DEFAULT_TICK_SECONDS
    recovery_mode: str = "LIVE"  # LIVE or SIMULATED
    random_seed: Optional[int] = None
    auto_trade: bool = False  # Trend-flip automated trading

    @classmethod
    def from_env(cls) -> "EngineConfig":
        seed = os.getenv("PAPERBOT_RANDOM_SEED", "")
        return cls(
            tick_seconds=int(os.getenv("PAPERBOT_TICK_SECONDS", str(DEFAULT_TICK_SECONDS))),
            recovery_mode=os.getenv("PAPERBOT_RECOVERY_MODE", "LIVE").upper().strip(),
            random_seed=int(seed) if seed else None,
            auto_trade=os.getenv("PAPERBOT_AUTO_TRADE", "false").lower() == "true",
        )


@dataclass
class LedgerConfig:
    """Paper ledger configuration"""
    starting_cash: float = DEFAULT_STARTING_CASH
    max_investment_per_trade: float = DEFAULT_MAX_INVESTMENT_PER_TRADE
    investment_type: str = "dollars"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        return cls(
            starting_cash=float(os.getenv("PAPERBOT_STARTING_CASH", str(DEFAULT_STARTING_CASH))),
            max_investment_per_trade=float(
                os.getenv("PAPERBOT_MAX_INVESTMENT", str(DEFAULT_MAX_INVESTMENT_PER_TRADE))
            ),
            investment_type=os.getenv("PAPERBOT_INVESTMENT_TYPE", "dollars").lower().strip(),
        )


@dataclass
class Config:
    """
    Central configuration object.

    Usage:
        config = Config.load()
        print(config.ledger.starting_cash)
        print(config.engine.recovery_mode)
    """
    engine: EngineConfig = field(default_factory=EngineConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)

    # Paths
    project_root: Path = PROJECT_ROOT
    data_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "paperbot_data")
    logs_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "paperbot_data" / "logs")

    @classmethod
    def load(cls, data_dir: Optional[str] = None) -> "Config":
        """Load configuration from environment"""
        data_path = Path(data_dir) if data_dir else PROJECT_ROOT / "paperbot_data"

        config = cls(
            engine=EngineConfig.from_env(),
            ledger=LedgerConfig.from_env(),
            data_dir=data_path,
            logs_dir=data_path / "logs",
        )

        # Ensure directories exist
        config.data_dir.mkdir(parents=True, exist_ok=True)
        config.logs_dir.mkdir(parents=True, exist_ok=True)

        return config

    @property
    def is_simulated_recovery(self) -> bool:
        return self.engine.recovery_mode == "SIMULATED"

    def validate(self) -> tuple[bool, list[str]]:
        """Validate all configuration"""
        issues = []

        if self.engine.tick_seconds <= 0:
            issues.append("PAPERBOT_TICK_SECONDS must be positive")

        if self.engine.recovery_mode not in RECOVERY_MODES:
            issues.append(f"PAPERBOT_RECOVERY_MODE must be one of {', '.join(RECOVERY_MODES)}")

        if self.ledger.starting_cash <= 0:
            issues.append("PAPERBOT_STARTING_CASH must be positive")

        if self.ledger.max_investment_per_trade <= 0:
            issues.append("PAPERBOT_MAX_INVESTMENT must be positive")

        if self.ledger.investment_type not in INVESTMENT_TYPES:
            issues.append(f"PAPERBOT_INVESTMENT_TYPE must be one of {', '.join(INVESTMENT_TYPES)}")

        return len(issues) == 0, issues

    def get_summary(self) -> str:
        """Get configuration summary"""
        seed = self.engine.random_seed if self.engine.random_seed is not None else "-"
        return f"""
╔══════════════════════════════════════════════════════════════╗
║                  PAPERBOT CONFIGURATION                      ║
╠══════════════════════════════════════════════════════════════╣
║  Starting Cash:   ${self.ledger.starting_cash:>12,.2f}                         ║
║  Max / Trade:     {self.ledger.max_investment_per_trade:>13,.2f} {self.ledger.investment_type:<8}                ║
║  Tick Interval:   {self.engine.tick_seconds:>10}s                              ║
║  Recovery Mode:   {self.engine.recovery_mode:>10}                               ║
║  Random Seed:     {str(seed):>10}                               ║
║  Auto Trade:      {'ON' if self.engine.auto_trade else 'OFF':>10}                               ║
╠══════════════════════════════════════════════════════════════╣
║  Logs:            {str(self.logs_dir)[-40:]:<40}║
╚══════════════════════════════════════════════════════════════╝
"""


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global configuration instance"""
    global _config
    if _config is None:
        _config = Config.load()
    return _config
