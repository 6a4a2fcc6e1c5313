"""General utilities for DebtPath

Contents
--------
- Validation helpers
- Rate conversions (annual percent -> monthly decimal)
- "Never pays off" sentinel
- Calendar helpers (add_months, month_index)
- Safe ratios
"""

from __future__ import annotations

import math
from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from .constants import MONTHS_PER_YEAR
from .exceptions import ValidationError

__all__ = [
    # Validation
    "check_non_negative",
    # Rates
    "monthly_rate",
    # Sentinel
    "NEVER",
    "is_never",
    # Calendar
    "add_months",
    "month_index",
    # Ratios
    "safe_ratio",
]

NEVER: float = math.inf
"""Sentinel month count for a debt the given payment can never retire."""


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def check_non_negative(name: str, value: float) -> None:
    """Raise if *value* is negative or not finite."""
    if not np.isfinite(value):
        raise ValidationError(f"{name} must be finite (got {value}).")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative (got {value}).")


# ---------------------------------------------------------------------------
# Rates
# ---------------------------------------------------------------------------

def monthly_rate(annual_rate_percent: float) -> float:
    """Convert a nominal annual percentage rate to a monthly decimal rate.

    Uses simple division (APR / 100 / 12), which is how lenders quote
    monthly interest on amortizing debt. 6.0 -> 0.005.
    """
    return float(annual_rate_percent) / 100.0 / MONTHS_PER_YEAR


# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------

def is_never(months: Optional[float]) -> bool:
    """True if *months* is the `NEVER` sentinel (positive infinity)."""
    return months is not None and math.isinf(months) and months > 0


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def add_months(start: date, months: int) -> date:
    """Return *start* shifted forward by *months* calendar months.

    Days past the end of the target month clamp to its last day
    (Jan 31 + 1 month -> Feb 28/29).
    """
    shifted = pd.Timestamp(start) + pd.DateOffset(months=int(months))
    return shifted.date()


def month_index(start: Optional[date], months: int) -> pd.Index:
    """Index for a *months*-long monthly trace.

    With a *start* date, a first-of-month DatetimeIndex whose first label is
    the month after *start* (payment month 1). Without one, a 1-based integer
    index named "month".
    """
    if months <= 0:
        return pd.RangeIndex(1, 1, name="month")
    if start is None:
        return pd.RangeIndex(1, months + 1, name="month")
    first = pd.Timestamp(start.year, start.month, 1) + pd.DateOffset(months=1)
    return pd.date_range(start=first, periods=months, freq="MS", name="month")


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------

def safe_ratio(numerator: float, denominator: float, *, scale: float = 100.0) -> float:
    """Return numerator / denominator * scale, or 0.0 when denominator is 0."""
    if denominator == 0:
        return 0.0
    return float(numerator) / float(denominator) * scale
