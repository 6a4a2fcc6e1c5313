"""
Amortization engine for DebtPath.

Purpose
-------
Builds month-by-month schedules for single amortizing debts (loans,
mortgages) and fixed-payment debts (credit cards), plus the summaries
derived from them.

Key components
--------------
- compute_monthly_payment : fixed annuity payment for a principal/rate/term
- generate_schedule : loan schedule at the annuity payment plus prepayment
- generate_payment_schedule : schedule for a caller-chosen fixed payment
- total_interest / payoff_date : reductions of `generate_schedule`
- prepayment_scenario : regular vs. prepaid comparison

Monthly recurrence
------------------
With balance B_t and monthly rate c = APR / 100 / 12:

    interest_t  = B_{t-1} * c
    principal_t = min(P - interest_t + extra, B_{t-1})
    payment_t   = principal_t + interest_t
    B_t         = B_{t-1} - principal_t

The `min` clamps the final month so the balance never goes negative.

Outcome statuses
----------------
- "paid_off"       : balance reached the paid-off tolerance
- "non_convergent" : the payment does not cover the month's interest, so
                     the balance could never fall; the schedule stops there
- "cap_exhausted"  : the term or month cap ran out with balance left

Example
-------
>>> schedule = generate_schedule(200_000, 6.0, 360)
>>> round(schedule.monthly_payment, 2)
1199.1
>>> schedule.status
'paid_off'
>>> schedule.to_frame().tail(1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Iterator, List, Literal, Optional, Tuple

import pandas as pd

from .config import PayoffPolicy, resolve_policy
from .utils import NEVER, add_months, month_index, monthly_rate

__all__ = [
    "ScheduleStatus",
    "LedgerEntry",
    "AmortizationSchedule",
    "PayoffSummary",
    "PrepaymentScenario",
    "compute_monthly_payment",
    "generate_schedule",
    "generate_payment_schedule",
    "total_interest",
    "payoff_date",
    "prepayment_scenario",
]

logger = logging.getLogger(__name__)

ScheduleStatus = Literal["paid_off", "non_convergent", "cap_exhausted"]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LedgerEntry:
    """One month of a schedule. Running totals are set for loan schedules."""
    month: int
    payment: float
    principal: float
    interest: float
    balance: float
    cumulative_interest: Optional[float] = None
    cumulative_principal: Optional[float] = None


@dataclass(frozen=True)
class AmortizationSchedule:
    """
    Ordered, immutable sequence of ledger entries with its outcome.

    Parameters
    ----------
    entries : tuple of LedgerEntry
        Chronological entries, month 1 first.
    status : {"paid_off", "non_convergent", "cap_exhausted"}
        How the schedule ended.
    monthly_payment : float
        Scheduled payment before any extra payment.
    initial_balance : float
        Balance before month 1.

    Notes
    -----
    Behaves like a read-only sequence (len, iteration, indexing).
    """
    entries: Tuple[LedgerEntry, ...]
    status: ScheduleStatus
    monthly_payment: float
    initial_balance: float

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries)

    def __getitem__(self, i):
        return self.entries[i]

    @property
    def converged(self) -> bool:
        return self.status == "paid_off"

    @property
    def months(self) -> int:
        return len(self.entries)

    @property
    def total_interest(self) -> float:
        return float(sum(e.interest for e in self.entries))

    @property
    def total_principal(self) -> float:
        return float(sum(e.principal for e in self.entries))

    @property
    def total_paid(self) -> float:
        return float(sum(e.payment for e in self.entries))

    @property
    def final_balance(self) -> float:
        return self.entries[-1].balance if self.entries else self.initial_balance

    def to_frame(self, start: Optional[date] = None) -> pd.DataFrame:
        """
        Schedule as a DataFrame, one row per month.

        Parameters
        ----------
        start : date, optional
            Loan start date. When given the index is first-of-month dates
            beginning the month after *start*; otherwise the 1-based month.

        Returns
        -------
        pd.DataFrame
            Columns payment, principal, interest, balance, plus the running
            totals when the schedule carries them.
        """
        columns = ["payment", "principal", "interest", "balance"]
        if self.entries and self.entries[0].cumulative_interest is not None:
            columns += ["cumulative_interest", "cumulative_principal"]
        rows = [asdict(e) for e in self.entries]
        df = pd.DataFrame(rows, columns=["month"] + columns)
        df = df.drop(columns="month")
        df.index = month_index(start, len(self.entries))
        return df


@dataclass(frozen=True)
class PayoffSummary:
    """Length and cost of one schedule."""
    months: int
    total_interest: float
    total_paid: float

    @classmethod
    def from_schedule(cls, schedule: AmortizationSchedule) -> "PayoffSummary":
        return cls(
            months=schedule.months,
            total_interest=schedule.total_interest,
            total_paid=schedule.total_paid,
        )


@dataclass(frozen=True)
class PrepaymentScenario:
    """Regular schedule vs. the same loan with a monthly prepayment."""
    regular: PayoffSummary
    with_extra: PayoffSummary
    interest_saved: float
    months_saved: int


# ---------------------------------------------------------------------------
# Payment formula
# ---------------------------------------------------------------------------

def compute_monthly_payment(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
) -> float:
    """
    Fixed monthly payment that retires *principal* in *term_months*.

    Uses the annuity formula with monthly rate c:

        P * c * (1 + c)^n / ((1 + c)^n - 1)

    Parameters
    ----------
    principal : float
        Amount borrowed.
    annual_rate_percent : float
        Nominal annual rate in percent (6.0 for 6%).
    term_months : int
        Number of monthly payments.

    Returns
    -------
    float
        Monthly payment. principal / term_months when the rate is exactly
        zero; 0.0 when principal <= 0 or term_months <= 0.

    Examples
    --------
    >>> compute_monthly_payment(1200, 0, 12)
    100.0
    """
    if principal <= 0 or term_months <= 0:
        return 0.0
    if annual_rate_percent == 0:
        return float(principal) / term_months

    c = monthly_rate(annual_rate_percent)
    growth = (1.0 + c) ** term_months
    return float(principal) * c * growth / (growth - 1.0)


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------

def generate_schedule(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    extra_payment: float = 0.0,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> AmortizationSchedule:
    """
    Loan schedule at the annuity payment plus an optional monthly prepayment.

    Iterates months 1..term_months while the balance exceeds the paid-off
    tolerance. Extra payments shorten the schedule; the last payment is
    clamped to the remaining balance.

    Parameters
    ----------
    principal : float
        Amount borrowed. <= 0 yields an empty "paid_off" schedule.
    annual_rate_percent : float
        Nominal annual rate in percent.
    term_months : int
        Contract term; <= 0 yields an empty "paid_off" schedule.
    extra_payment : float, default 0.0
        Added to the scheduled payment every month. A negative value models
        an under-payment and may make the schedule non-convergent.
    policy : PayoffPolicy, optional
        Supplies the paid-off tolerance.

    Returns
    -------
    AmortizationSchedule
        Entries carry cumulative interest and principal. Status is
        "non_convergent" as soon as a month's principal portion would not
        be positive; entries up to that month are kept.
    """
    policy = resolve_policy(policy)
    eps = policy.balance_epsilon
    base_payment = compute_monthly_payment(principal, annual_rate_percent, term_months)
    if principal <= 0 or term_months <= 0:
        return AmortizationSchedule((), "paid_off", base_payment, max(float(principal), 0.0))

    c = monthly_rate(annual_rate_percent)
    balance = float(principal)
    cum_interest = 0.0
    cum_principal = 0.0
    entries: List[LedgerEntry] = []
    status: Optional[ScheduleStatus] = None

    month = 1
    while month <= term_months and balance > eps:
        interest = balance * c
        principal_part = min(base_payment - interest + extra_payment, balance)
        if principal_part <= 0:
            status = "non_convergent"
            break

        balance -= principal_part
        cum_interest += interest
        cum_principal += principal_part
        entries.append(
            LedgerEntry(
                month=month,
                payment=principal_part + interest,
                principal=principal_part,
                interest=interest,
                balance=max(0.0, balance),
                cumulative_interest=cum_interest,
                cumulative_principal=cum_principal,
            )
        )
        month += 1

    if status is None:
        status = "paid_off" if balance <= eps else "cap_exhausted"
    if status != "paid_off":
        logger.info(
            "Schedule for principal=%.2f rate=%.4f%% ended %s after %d months",
            principal, annual_rate_percent, status, len(entries),
        )
    return AmortizationSchedule(tuple(entries), status, base_payment, float(principal))


def generate_payment_schedule(
    initial_balance: float,
    apr_percent: float,
    monthly_payment: float,
    max_months: Optional[int] = None,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> AmortizationSchedule:
    """
    Schedule for paying a fixed amount each month (credit-card style).

    Parameters
    ----------
    initial_balance : float
        Starting balance.
    apr_percent : float
        Nominal annual rate in percent.
    monthly_payment : float
        Amount paid every month.
    max_months : int, optional
        Month cap. Defaults to ``policy.schedule_month_cap`` (360).
    policy : PayoffPolicy, optional
        Supplies the tolerance and default cap.

    Returns
    -------
    AmortizationSchedule
        No running totals. Empty with status "non_convergent" when the
        payment does not exceed the first month's interest; "cap_exhausted"
        when *max_months* pass with balance left.
    """
    policy = resolve_policy(policy)
    eps = policy.balance_epsilon
    cap = policy.schedule_month_cap if max_months is None else int(max_months)
    balance = float(initial_balance)
    payment = float(monthly_payment)

    if balance <= eps:
        return AmortizationSchedule((), "paid_off", payment, max(balance, 0.0))

    c = monthly_rate(apr_percent)
    if payment <= 0 or payment <= balance * c:
        logger.info(
            "Payment %.2f never retires balance %.2f at %.4f%% APR",
            payment, balance, apr_percent,
        )
        return AmortizationSchedule((), "non_convergent", payment, balance)

    entries: List[LedgerEntry] = []
    month = 1
    while balance > eps and month <= cap:
        interest = balance * c
        principal_part = min(payment - interest, balance)
        balance -= principal_part
        entries.append(
            LedgerEntry(
                month=month,
                payment=principal_part + interest,
                principal=principal_part,
                interest=interest,
                balance=max(0.0, balance),
            )
        )
        month += 1

    status: ScheduleStatus = "paid_off" if balance <= eps else "cap_exhausted"
    if status == "cap_exhausted":
        logger.info("Payment schedule hit the %d-month cap with %.2f left", cap, balance)
    return AmortizationSchedule(tuple(entries), status, payment, float(initial_balance))


# ---------------------------------------------------------------------------
# Derived figures
# ---------------------------------------------------------------------------

def total_interest(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    extra_payment: float = 0.0,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> float:
    """
    Sum of the interest column of `generate_schedule`.

    `NEVER` when the schedule does not end paid off.
    """
    schedule = generate_schedule(
        principal, annual_rate_percent, term_months, extra_payment, policy=policy
    )
    if not schedule.converged:
        return NEVER
    return schedule.total_interest


def payoff_date(
    start_date: date,
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    extra_payment: float = 0.0,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> Optional[date]:
    """
    *start_date* advanced by the length of `generate_schedule` in months,
    or None when the schedule does not end paid off.
    """
    schedule = generate_schedule(
        principal, annual_rate_percent, term_months, extra_payment, policy=policy
    )
    if not schedule.converged:
        return None
    return add_months(start_date, schedule.months)


def prepayment_scenario(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    extra_payment: float,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> PrepaymentScenario:
    """
    Compare the regular schedule with one that adds *extra_payment* monthly.

    Examples
    --------
    >>> scenario = prepayment_scenario(200_000, 6.0, 360, 200.0)
    >>> scenario.months_saved > 0
    True
    """
    regular = generate_schedule(principal, annual_rate_percent, term_months, 0.0, policy=policy)
    prepaid = generate_schedule(
        principal, annual_rate_percent, term_months, extra_payment, policy=policy
    )
    regular_summary = PayoffSummary.from_schedule(regular)
    prepaid_summary = PayoffSummary.from_schedule(prepaid)
    return PrepaymentScenario(
        regular=regular_summary,
        with_extra=prepaid_summary,
        interest_saved=regular_summary.total_interest - prepaid_summary.total_interest,
        months_saved=regular_summary.months - prepaid_summary.months,
    )
