# Data module for the paper-trading bots
# Contains price series models, validators and quote sources

from .models import Sample, PriceSeries, Interval, ChartPeriod
from .validators import (
    validate_series,
    ValidationResult,
    ValidationIssue,
    Severity,
)
from .quote_source import QuoteSource, SimulatedQuoteSource, now_ms

__all__ = [
    # Models
    'Sample',
    'PriceSeries',
    'Interval',
    'ChartPeriod',
    # Validators
    'validate_series',
    'ValidationResult',
    'ValidationIssue',
    'Severity',
    # Quote sources
    'QuoteSource',
    'SimulatedQuoteSource',
    'now_ms',
]
