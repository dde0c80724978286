# Paperbot Utilities Module
# =========================
# Display formatting helpers

from .formatting import (
    format_currency,
    format_signed_currency,
    format_percentage,
    format_number,
    format_time,
    format_date,
    format_beat_sequence,
    format_potential_profit_sequence,
    format_potential_loss_sequence,
)

__all__ = [
    "format_currency",
    "format_signed_currency",
    "format_percentage",
    "format_number",
    "format_time",
    "format_date",
    "format_beat_sequence",
    "format_potential_profit_sequence",
    "format_potential_loss_sequence",
]
