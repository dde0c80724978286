"""
Unit Tests for Display Formatting (utils/formatting.py)

Test Coverage:
    - Currency, percentage and number formatting
    - Time and date rendering in a given timezone
    - Beat, potential-profit and potential-loss display fields
"""

import sys
from datetime import timedelta, timezone
from pathlib import Path

import pytest

# Add project root
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from paperbot.analysis import detect_beats, detect_down_up_down, trim_for_potential_profit
from paperbot.data.models import PriceSeries
from paperbot.utils import (
    format_beat_sequence,
    format_currency,
    format_date,
    format_number,
    format_percentage,
    format_potential_loss_sequence,
    format_potential_profit_sequence,
    format_signed_currency,
    format_time,
)

# 2024-03-04 14:30:00 UTC
START_MS = 1_709_562_600_000


# ==================== Scalars ====================


class TestScalars:
    @pytest.mark.parametrize("amount,expected", [
        (1234.5, "$1,234.50"),
        (0, "$0.00"),
        (-3, "-$3.00"),
        (1_000_000, "$1,000,000.00"),
    ])
    def test_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_signed_currency(self):
        assert format_signed_currency(3) == "+$3.00"
        assert format_signed_currency(-3) == "-$3.00"
        assert format_signed_currency(0) == "$0.00"

    def test_percentage(self):
        assert format_percentage(30) == "+30.00%"
        assert format_percentage(-1.234) == "-1.23%"

    @pytest.mark.parametrize("value,expected", [
        (950, "950"),
        (12_500, "12.50K"),
        (3_400_000, "3.40M"),
    ])
    def test_number(self, value, expected):
        assert format_number(value) == expected


class TestTimes:
    def test_time_utc(self):
        assert format_time(START_MS) == "02:30 PM"

    def test_time_in_other_zone(self):
        eastern = timezone(timedelta(hours=-5))
        assert format_time(START_MS, eastern) == "09:30 AM"

    def test_date(self):
        assert format_date(START_MS) == "Mar 04, 2024"


# ==================== Sequences ====================


class TestSequenceFormatting:
    """Display fields for detected runs and false reversals"""

    def test_beat_sequence(self):
        series = PriceSeries.from_prices([10, 11, 12, 13, 9], start_ms=START_MS)
        beat = detect_beats(series, min_consecutive_intervals=3)[0]

        formatted = format_beat_sequence(beat)

        assert formatted == {
            "time_range": "02:30 PM - 02:33 PM",
            "price_range": "$10.00 → $13.00",
            "gain": "+$3.00",
            "percentage": "+30.00%",
        }

    def test_potential_profit_sequence(self):
        series = PriceSeries.from_prices([10, 11, 12, 13, 14, 9], start_ms=START_MS)
        trimmed = trim_for_potential_profit(detect_beats(series))[0]

        formatted = format_potential_profit_sequence(trimmed)

        assert formatted["time_range"] == "02:31 PM - 02:33 PM"
        assert formatted["price_range"] == "$11.00 → $13.00"
        assert formatted["gain"] == "+$2.00"

    def test_potential_loss_sequence(self):
        series = PriceSeries.from_prices([10, 9, 11, 8], start_ms=START_MS)
        loss = detect_down_up_down(series)[0]

        formatted = format_potential_loss_sequence(loss)

        assert formatted["time_range"] == "02:31 PM - 02:33 PM"
        assert formatted["price_range"] == "$9.00 → $11.00 → $8.00"
        assert formatted["full_pattern"] == formatted["price_range"]
        assert formatted["loss"] == "-$3.00"
        assert formatted["percentage"] == "-27.27%"
