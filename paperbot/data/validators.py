"""
Series Validators
=================
Caller-side checks for price series before they reach the decision engine.

The detectors themselves never validate: NaN prices or out-of-order
timestamps pass straight through them. The tick runner calls
``validate_series`` first and skips a bot's tick when the result carries
errors.

Usage:
    from paperbot.data.validators import validate_series

    result = validate_series(series)
    if result.has_errors:
        for issue in result.issues:
            logger.warning(str(issue))
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .models import SeriesLike, is_finite_price

logger = logging.getLogger("paperbot.data.validators")


class Severity(Enum):
    """Issue severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """Represents a single validation issue found in a series."""
    severity: Severity
    field: str
    message: str
    row_index: Optional[int] = None
    original_value: Any = None

    def __str__(self) -> str:
        location = f"[row {self.row_index}]" if self.row_index is not None else ""
        return f"{self.severity.value.upper()}{location} {self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Result of validation operation."""
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == Severity.ERROR for i in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.ERROR)

    def summary(self) -> str:
        if not self.issues:
            return "OK"
        return "; ".join(str(i) for i in self.issues[:5])


def validate_series(series: SeriesLike, min_length: int = 0) -> ValidationResult:
    """
    Check a series for malformed samples.

    Errors: non-finite or non-positive prices, timestamps that go backwards.
    Warnings: duplicate timestamps, negative volume, fewer than
    ``min_length`` samples.

    Args:
        series: Samples in the order the engine will see them
        min_length: Warn when the series is shorter than this

    Returns:
        ValidationResult
    """
    issues: List[ValidationIssue] = []

    if len(series) < min_length:
        issues.append(ValidationIssue(
            Severity.WARNING, "length",
            f"{len(series)} samples, fewer than {min_length}",
        ))

    previous_ts = None
    for i, sample in enumerate(series):
        if not is_finite_price(sample.price):
            issues.append(ValidationIssue(
                Severity.ERROR, "price", "price is not a finite number",
                row_index=i, original_value=sample.price,
            ))
        elif sample.price <= 0:
            issues.append(ValidationIssue(
                Severity.ERROR, "price", "price must be positive",
                row_index=i, original_value=sample.price,
            ))

        if sample.volume is not None and sample.volume < 0:
            issues.append(ValidationIssue(
                Severity.WARNING, "volume", "negative volume",
                row_index=i, original_value=sample.volume,
            ))

        if previous_ts is not None:
            if sample.timestamp < previous_ts:
                issues.append(ValidationIssue(
                    Severity.ERROR, "timestamp", "timestamp goes backwards",
                    row_index=i, original_value=sample.timestamp,
                ))
            elif sample.timestamp == previous_ts:
                issues.append(ValidationIssue(
                    Severity.WARNING, "timestamp", "duplicate timestamp",
                    row_index=i, original_value=sample.timestamp,
                ))
        previous_ts = sample.timestamp

    result = ValidationResult(
        is_valid=not any(i.severity == Severity.ERROR for i in issues),
        issues=issues,
    )
    if result.has_errors:
        logger.debug("Series validation failed: %s", result.summary())
    return result
