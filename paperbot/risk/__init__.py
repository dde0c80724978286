# Paperbot Risk Module
# ====================
# Protective sell overlay and position sizing

from .dollar_drop import (
    OverlayResult,
    DollarDropProtection,
    count_trailing_falls,
    evaluate_profit_taking,
    evaluate_sell_at_buy_price,
    evaluate_consecutive_falls,
    should_sell_with_dollar_drop,
)
from .position_sizer import calculate_shares_to_buy, calculate_shares_to_sell

__all__ = [
    # Overlay
    "OverlayResult",
    "DollarDropProtection",
    "count_trailing_falls",
    "evaluate_profit_taking",
    "evaluate_sell_at_buy_price",
    "evaluate_consecutive_falls",
    "should_sell_with_dollar_drop",
    # Sizing
    "calculate_shares_to_buy",
    "calculate_shares_to_sell",
]
