"""
Position Sizer
==============
Share counts for paper buys and sells.

``max_investment`` is read in the unit named by ``investment_type``:
dollars caps the spend, shares caps the share count.
"""

import math

from ..strategies.settings import InvestmentType


def calculate_shares_to_buy(
    max_investment: float,
    investment_type: InvestmentType,
    price: float,
    available_cash: float,
) -> int:
    """
    Whole shares to buy.

    Args:
        max_investment: Spend cap (dollars) or share cap (shares)
        investment_type: Unit of ``max_investment``
        price: Price per share
        available_cash: Cash the buyer can spend

    Returns:
        Share count, 0 for a non-positive price or when nothing is affordable
    """
    if price <= 0 or available_cash <= 0:
        return 0

    if investment_type == InvestmentType.SHARES:
        affordable = math.floor(available_cash / price)
        return max(0, min(int(max_investment), affordable))

    spend = min(max_investment, available_cash)
    return max(0, math.floor(spend / price))


def calculate_shares_to_sell(
    max_investment: float,
    investment_type: InvestmentType,
    shares_held: int,
) -> int:
    """Shares mode sells up to the cap; dollars mode closes the whole position"""
    if shares_held <= 0:
        return 0
    if investment_type == InvestmentType.SHARES:
        return max(0, min(int(max_investment), shares_held))
    return shares_held
