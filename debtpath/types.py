"""
Type definitions for DebtPath.

Purpose
-------
Provides TypedDict definitions for the plain-dictionary shapes produced by
`debtpath.serialization`. Presentation code and JSON consumers read these
shapes; the calculation modules themselves work with frozen dataclasses.

Type Definitions
----------------
LedgerEntryDict
    One schedule row: {"month", "payment", "principal", "interest", "balance"}

ScheduleDict
    Serialized AmortizationSchedule

PayoffResultDict
    Serialized DebtPayoffResult

TimelineDict
    Serialized PayoffTimeline

ComparisonDict
    Serialized StrategyComparison
"""

from typing import List, Optional
from typing_extensions import TypedDict, NotRequired

__all__ = [
    "LedgerEntryDict",
    "ScheduleDict",
    "PayoffResultDict",
    "TimelineDict",
    "ComparisonDict",
]


class LedgerEntryDict(TypedDict):
    """
    One month of an amortization schedule.

    Attributes
    ----------
    month : int
        1-based payment month.
    payment, principal, interest : float
        Amounts paid this month; payment == principal + interest.
    balance : float
        Balance after the payment (never negative).
    cumulative_interest, cumulative_principal : float, optional
        Running totals, present for loan schedules only.
    """

    month: int
    payment: float
    principal: float
    interest: float
    balance: float
    cumulative_interest: NotRequired[float]
    cumulative_principal: NotRequired[float]


class ScheduleDict(TypedDict):
    """Serialized schedule with its outcome status."""

    status: str
    monthly_payment: float
    months: int
    total_interest: float
    total_paid: float
    entries: List[LedgerEntryDict]


class PayoffResultDict(TypedDict):
    """
    Per-debt payoff outcome.

    Examples
    --------
    >>> result: PayoffResultDict = {
    ...     "debt_id": "visa", "debt_name": "Visa", "status": "paid_off",
    ...     "payoff_month": 14, "total_interest": 312.5, "total_paid": 2812.5,
    ...     "remaining_balance": 0.0,
    ... }
    """

    debt_id: str
    debt_name: str
    status: str
    payoff_month: Optional[int]
    total_interest: float
    total_paid: float
    remaining_balance: float


class TimelineDict(TypedDict):
    """Serialized portfolio payoff timeline."""

    strategy: str
    completed: bool
    total_months: int
    total_interest: float
    total_paid: float
    debts: List[PayoffResultDict]


class ComparisonDict(TypedDict):
    """Serialized avalanche vs snowball comparison."""

    avalanche: TimelineDict
    snowball: TimelineDict
    interest_saved: float
    months_saved: int
    recommended_strategy: str
    threshold: float
