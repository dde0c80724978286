"""
Display Formatting
==================
Human-readable strings for prices, times and detected sequences.
"""

from datetime import datetime, timezone, tzinfo
from typing import Dict, Union

from ..analysis.beats import BeatSequence, PotentialProfitSequence
from ..analysis.potential_loss import PotentialLossSequence


def format_currency(amount: float) -> str:
    """
    Format amount as US dollars

    Example:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-3)
        '-$3.00'
    """
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def format_signed_currency(amount: float) -> str:
    return f"+{format_currency(amount)}" if amount > 0 else format_currency(amount)


def format_percentage(value: float) -> str:
    return f"+{value:.2f}%" if value > 0 else f"{value:.2f}%"


def format_number(value: float) -> str:
    """Abbreviate large numbers (volume) with K / M suffixes"""
    if value >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"{value / 1_000:.2f}K"
    return f"{value:g}"


def format_time(timestamp_ms: int, tz: tzinfo = timezone.utc) -> str:
    """12-hour clock time, e.g. ``09:35 AM``"""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).strftime("%I:%M %p")


def format_date(timestamp_ms: int, tz: tzinfo = timezone.utc) -> str:
    """Short date, e.g. ``Mar 04, 2024``"""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).strftime("%b %d, %Y")


def format_beat_sequence(
    sequence: Union[BeatSequence, PotentialProfitSequence],
    tz: tzinfo = timezone.utc,
) -> Dict[str, str]:
    """Time range, price range, gain and percentage of a rising run"""
    return {
        "time_range": f"{format_time(sequence.start_time, tz)} - {format_time(sequence.end_time, tz)}",
        "price_range": f"{format_currency(sequence.start_price)} → {format_currency(sequence.end_price)}",
        "gain": format_signed_currency(sequence.dollar_gain),
        "percentage": format_percentage(sequence.percentage_change),
    }


def format_potential_profit_sequence(
    sequence: PotentialProfitSequence,
    tz: tzinfo = timezone.utc,
) -> Dict[str, str]:
    return format_beat_sequence(sequence, tz)


def format_potential_loss_sequence(
    sequence: PotentialLossSequence,
    tz: tzinfo = timezone.utc,
) -> Dict[str, str]:
    """Same fields as a beat, with the three-price pattern and the loss as negatives"""
    pattern = " → ".join(
        format_currency(p)
        for p in (
            sequence.before_reversal_price,
            sequence.reversal_price,
            sequence.after_reversal_price,
        )
    )
    return {
        "time_range": (
            f"{format_time(sequence.before_reversal_time, tz)} - "
            f"{format_time(sequence.after_reversal_time, tz)}"
        ),
        "price_range": pattern,
        "loss": f"-{format_currency(sequence.dollar_loss)}",
        "percentage": f"-{sequence.percentage_change:.2f}%",
        "full_pattern": pattern,
    }
