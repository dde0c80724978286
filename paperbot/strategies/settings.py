"""
Bot Settings
============
Per-bot configuration: trading method parameters as a tagged union, sizing,
chart period and the dollar-drop overlay toggles.

The flat camelCase dictionary used by the bot configuration surface is
parsed by ``BotSettings.from_dict``; each trading method only carries the
parameters it actually uses.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union

from ..core.constants import (
    DEFAULT_MAX_INVESTMENT_PER_TRADE,
    OverlayDefaults,
    StrategyDefaults,
)
from ..data.models import ChartPeriod


class TradingMethod(Enum):
    """Strategy tag selecting the evaluator"""
    TREND_REVERSAL = "trend_reversal"
    DIRECTION_CHANGE_REFERENCE = "direction_change_reference"
    DIRECTION_CHANGE_BUY = "direction_change_buy"
    PRICE_COMPARISON = "price_comparison"
    SLOPE_ANALYSIS = "slope_analysis"
    CONFIRMED_RECOVERY = "confirmed_recovery"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "TradingMethod":
        """Parse method, default to TREND_REVERSAL for unknown or missing values"""
        if isinstance(value, str):
            value = value.lower().strip()
            for method in cls:
                if method.value == value:
                    return method
        return cls.TREND_REVERSAL


class InvestmentType(Enum):
    """Unit of ``max_investment_per_trade``"""
    DOLLARS = "dollars"
    SHARES = "shares"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "InvestmentType":
        if isinstance(value, str) and value.lower().strip() == "shares":
            return cls.SHARES
        return cls.DOLLARS


# ============================================================================
# Strategy parameter variants
# ============================================================================

@dataclass(frozen=True)
class TrendReversalParams:
    method: ClassVar[TradingMethod] = TradingMethod.TREND_REVERSAL


@dataclass(frozen=True)
class DirectionChangeReferenceParams:
    method: ClassVar[TradingMethod] = TradingMethod.DIRECTION_CHANGE_REFERENCE
    dollar_drop_threshold: float = StrategyDefaults.DOLLAR_DROP_THRESHOLD


@dataclass(frozen=True)
class DirectionChangeBuyParams:
    method: ClassVar[TradingMethod] = TradingMethod.DIRECTION_CHANGE_BUY


@dataclass(frozen=True)
class PriceComparisonParams:
    method: ClassVar[TradingMethod] = TradingMethod.PRICE_COMPARISON


@dataclass(frozen=True)
class SlopeAnalysisParams:
    method: ClassVar[TradingMethod] = TradingMethod.SLOPE_ANALYSIS


@dataclass(frozen=True)
class ConfirmedRecoveryParams:
    method: ClassVar[TradingMethod] = TradingMethod.CONFIRMED_RECOVERY
    first_delay_seconds: int = StrategyDefaults.RECOVERY_FIRST_DELAY_SECONDS
    second_delay_seconds: int = StrategyDefaults.RECOVERY_SECOND_DELAY_SECONDS


StrategyParams = Union[
    TrendReversalParams,
    DirectionChangeReferenceParams,
    DirectionChangeBuyParams,
    PriceComparisonParams,
    SlopeAnalysisParams,
    ConfirmedRecoveryParams,
]


# ============================================================================
# Overlay settings
# ============================================================================

@dataclass(frozen=True)
class DollarDropSettings:
    """Toggles and thresholds for the protective overlay"""
    enabled: bool = False

    # Profit taking with a dollar-drop trigger
    profit_taking_enabled: bool = False
    profit_taking_percentage: float = OverlayDefaults.PROFIT_TAKING_PERCENTAGE
    profit_taking_dollar_amount: float = OverlayDefaults.PROFIT_TAKING_DOLLAR_AMOUNT
    dollar_drop_trigger_amount: float = OverlayDefaults.DOLLAR_DROP_TRIGGER_AMOUNT

    # Sell when price falls back to the buy price
    sell_at_buy_price_enabled: bool = False

    # Sell after N consecutive live price falls
    consecutive_falls_enabled: bool = False
    consecutive_falls_count: int = OverlayDefaults.CONSECUTIVE_FALLS_COUNT


@dataclass(frozen=True)
class BotSettings:
    """
    Complete bot configuration.

    Usage:
        settings = BotSettings.from_dict({
            "tradingMethod": "direction_change_reference",
            "dollarDropThreshold": 3,
            "dollarDropEnabled": True,
            "sellAtBuyPriceEnabled": True,
        })
        settings.trading_method   # TradingMethod.DIRECTION_CHANGE_REFERENCE
    """
    max_investment_per_trade: float = DEFAULT_MAX_INVESTMENT_PER_TRADE
    investment_type: InvestmentType = InvestmentType.DOLLARS
    chart_period: ChartPeriod = ChartPeriod.FIVE_MIN
    strategy: StrategyParams = field(default_factory=TrendReversalParams)
    dollar_drop: DollarDropSettings = field(default_factory=DollarDropSettings)

    @property
    def trading_method(self) -> TradingMethod:
        return self.strategy.method

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BotSettings":
        """
        Parse the flat configuration surface.

        Zero or missing numeric thresholds fall back to their defaults, the
        same way an unset value would.
        """
        method = TradingMethod.from_string(data.get("tradingMethod"))

        if method == TradingMethod.DIRECTION_CHANGE_REFERENCE:
            strategy: StrategyParams = DirectionChangeReferenceParams(
                dollar_drop_threshold=_positive(
                    data.get("dollarDropThreshold"), StrategyDefaults.DOLLAR_DROP_THRESHOLD
                ),
            )
        elif method == TradingMethod.CONFIRMED_RECOVERY:
            strategy = ConfirmedRecoveryParams(
                first_delay_seconds=_positive_int(
                    data.get("confirmedRecoveryFirstDelay"),
                    StrategyDefaults.RECOVERY_FIRST_DELAY_SECONDS,
                ),
                second_delay_seconds=_positive_int(
                    data.get("confirmedRecoverySecondDelay"),
                    StrategyDefaults.RECOVERY_SECOND_DELAY_SECONDS,
                ),
            )
        else:
            strategy = _SIMPLE_PARAMS[method]()

        dollar_drop = DollarDropSettings(
            enabled=bool(data.get("dollarDropEnabled", False)),
            profit_taking_enabled=bool(data.get("profitTakingEnabled", False)),
            profit_taking_percentage=_positive(
                data.get("profitTakingPercentage"), OverlayDefaults.PROFIT_TAKING_PERCENTAGE
            ),
            profit_taking_dollar_amount=_positive(
                data.get("profitTakingDollarAmount"), OverlayDefaults.PROFIT_TAKING_DOLLAR_AMOUNT
            ),
            dollar_drop_trigger_amount=_positive(
                data.get("dollarDropTriggerAmount"), OverlayDefaults.DOLLAR_DROP_TRIGGER_AMOUNT
            ),
            sell_at_buy_price_enabled=bool(data.get("sellAtBuyPriceEnabled", False)),
            consecutive_falls_enabled=bool(data.get("consecutiveFallsEnabled", False)),
            consecutive_falls_count=_positive_int(
                data.get("consecutiveFallsCount"), OverlayDefaults.CONSECUTIVE_FALLS_COUNT
            ),
        )

        return cls(
            max_investment_per_trade=_positive(
                data.get("maxInvestmentPerTrade"), DEFAULT_MAX_INVESTMENT_PER_TRADE
            ),
            investment_type=InvestmentType.from_string(data.get("investmentType")),
            chart_period=ChartPeriod.from_string(data.get("chartPeriod")),
            strategy=strategy,
            dollar_drop=dollar_drop,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Inverse of ``from_dict``"""
        data: Dict[str, Any] = {
            "tradingMethod": self.trading_method.value,
            "maxInvestmentPerTrade": self.max_investment_per_trade,
            "investmentType": self.investment_type.value,
            "chartPeriod": self.chart_period.value,
            "dollarDropEnabled": self.dollar_drop.enabled,
            "profitTakingEnabled": self.dollar_drop.profit_taking_enabled,
            "profitTakingPercentage": self.dollar_drop.profit_taking_percentage,
            "profitTakingDollarAmount": self.dollar_drop.profit_taking_dollar_amount,
            "dollarDropTriggerAmount": self.dollar_drop.dollar_drop_trigger_amount,
            "sellAtBuyPriceEnabled": self.dollar_drop.sell_at_buy_price_enabled,
            "consecutiveFallsEnabled": self.dollar_drop.consecutive_falls_enabled,
            "consecutiveFallsCount": self.dollar_drop.consecutive_falls_count,
        }
        if isinstance(self.strategy, DirectionChangeReferenceParams):
            data["dollarDropThreshold"] = self.strategy.dollar_drop_threshold
        elif isinstance(self.strategy, ConfirmedRecoveryParams):
            data["confirmedRecoveryFirstDelay"] = self.strategy.first_delay_seconds
            data["confirmedRecoverySecondDelay"] = self.strategy.second_delay_seconds
        return data


_SIMPLE_PARAMS = {
    TradingMethod.TREND_REVERSAL: TrendReversalParams,
    TradingMethod.DIRECTION_CHANGE_BUY: DirectionChangeBuyParams,
    TradingMethod.PRICE_COMPARISON: PriceComparisonParams,
    TradingMethod.SLOPE_ANALYSIS: SlopeAnalysisParams,
}


def _positive(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if 0 < number < math.inf else default


def _positive_int(value: Any, default: int) -> int:
    """Like ``_positive``, but fractions that truncate to 0 also take the default"""
    number = int(_positive(value, default))
    return number if number > 0 else default
