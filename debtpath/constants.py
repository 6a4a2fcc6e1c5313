"""
Global constants for DebtPath.

Purpose
-------
Centralizes the policy thresholds and caps used by the amortization,
payoff and comparison code. Every value here is the default for a field
of `debtpath.config.PayoffPolicy`, so callers can override policy without
touching the algorithms.

Usage
-----
>>> from debtpath.constants import DEFAULT_SIMULATION_MONTH_CAP
>>> from debtpath.payoff import simulate_payoff
>>> timeline = simulate_payoff(debts, extra_payment=200.0)
>>> timeline.total_months <= DEFAULT_SIMULATION_MONTH_CAP
True

Categories
----------
- Time: months per year, loop caps
- Tolerances: currency epsilon
- Policy: recommendation, refinance and PMI thresholds
"""

__all__ = [
    # Time
    "MONTHS_PER_YEAR",
    "DEFAULT_SIMULATION_MONTH_CAP",
    "DEFAULT_SCHEDULE_MONTH_CAP",
    # Tolerances
    "DEFAULT_BALANCE_EPSILON",
    # Policy
    "DEFAULT_RECOMMENDATION_THRESHOLD",
    "DEFAULT_REFINANCE_BREAK_EVEN_MONTHS",
    "DEFAULT_REFINANCE_MIN_SAVINGS",
    "DEFAULT_PMI_REMOVAL_LTV",
]


# =============================================================================
# Time
# =============================================================================

MONTHS_PER_YEAR: int = 12
"""Number of months in a year (annual percent -> monthly rate)."""

DEFAULT_SIMULATION_MONTH_CAP: int = 600
"""Maximum months simulated for a multi-debt payoff plan (50 years)."""

DEFAULT_SCHEDULE_MONTH_CAP: int = 360
"""Maximum months for fixed-payment schedules and PMI searches (30 years)."""


# =============================================================================
# Tolerances
# =============================================================================

DEFAULT_BALANCE_EPSILON: float = 0.01
"""Balance at or below which a debt counts as paid off (one cent)."""


# =============================================================================
# Policy
# =============================================================================

DEFAULT_RECOMMENDATION_THRESHOLD: float = 1000.0
"""Interest saved by avalanche (currency units) above which it is recommended.

Below this absolute amount snowball is recommended for its quicker wins.
"""

DEFAULT_REFINANCE_BREAK_EVEN_MONTHS: float = 60.0
"""Break-even horizon a refinance must beat to be worth it (5 years)."""

DEFAULT_REFINANCE_MIN_SAVINGS: float = 0.0
"""Interest saved net of closing costs a refinance must exceed."""

DEFAULT_PMI_REMOVAL_LTV: float = 80.0
"""Loan-to-value percentage at or below which PMI can be removed."""
