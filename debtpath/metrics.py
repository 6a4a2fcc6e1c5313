"""
Single-debt metrics for DebtPath.

Purpose
-------
Closed-form and small-loop figures for one debt: how long a payment takes
to retire a balance, what it costs, card and mortgage ratios, when PMI can
be dropped, and whether a refinance pays off.

Key components
--------------
- payoff_months : logarithmic closed form, `NEVER` when non-convergent
- total_interest_for_payment, payoff_date_for_payment : derived from it
- utilization, available_credit, equity, equity_percentage,
  loan_to_value, debt_to_income, total_housing_cost : pure ratios/sums
- pmi_removal_month, pmi_removal_date : LTV-driven month search
- refinance_analysis : current loan vs. new terms

Conventions
-----------
Rates are nominal annual percentages (19.99 for 19.99% APR). Ratios are
percentages and return 0.0 when their denominator is 0. Nothing here
reads the clock: every date result is relative to a caller-supplied date.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np

from .amortization import compute_monthly_payment
from .config import PayoffPolicy, resolve_policy
from .utils import NEVER, add_months, is_never, monthly_rate, safe_ratio

__all__ = [
    "payoff_months",
    "total_interest_for_payment",
    "payoff_date_for_payment",
    "utilization",
    "available_credit",
    "equity",
    "equity_percentage",
    "loan_to_value",
    "debt_to_income",
    "total_housing_cost",
    "pmi_removal_month",
    "pmi_removal_date",
    "CurrentLoanScenario",
    "RefinanceScenario",
    "RefinanceSavings",
    "RefinanceAnalysis",
    "refinance_analysis",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Payoff duration
# ---------------------------------------------------------------------------

def payoff_months(balance: float, apr_percent: float, monthly_payment: float) -> float:
    """
    Whole months a fixed payment needs to retire *balance*.

    Closed form with monthly rate r, balance B and payment P:

        n = -ln(1 - B * r / P) / ln(1 + r)

    rounded up. With r == 0 the count is ceil(B / P).

    Returns
    -------
    float
        0 when balance <= 0. `NEVER` (positive infinity) when the payment is
        <= 0 or does not exceed the first month's interest B * r.

    Examples
    --------
    >>> payoff_months(5000, 24, 90)
    inf
    >>> payoff_months(1200, 0, 100)
    12
    """
    if balance <= 0:
        return 0
    if monthly_payment <= 0:
        return NEVER

    r = monthly_rate(apr_percent)
    if monthly_payment <= balance * r:
        return NEVER

    if r == 0:
        months = float(balance) / float(monthly_payment)
    else:
        months = float(-np.log1p(-balance * r / monthly_payment) / np.log1p(r))
    # Round away float noise so an exact 12.0 does not ceil to 13.
    return math.ceil(round(months, 9))


def total_interest_for_payment(balance: float, apr_percent: float, monthly_payment: float) -> float:
    """
    Interest paid retiring *balance* at a fixed payment.

    Computed as payment * payoff_months - balance, which treats the final
    payment as a full one. `NEVER` when the payment never retires the debt.
    """
    months = payoff_months(balance, apr_percent, monthly_payment)
    if is_never(months):
        return NEVER
    return max(0.0, float(monthly_payment) * months - float(balance))


def payoff_date_for_payment(
    balance: float,
    apr_percent: float,
    monthly_payment: float,
    start_date: date,
) -> Optional[date]:
    """*start_date* plus `payoff_months`, or None when it never pays off."""
    months = payoff_months(balance, apr_percent, monthly_payment)
    if is_never(months):
        return None
    return add_months(start_date, int(months))


# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------

def utilization(balance: float, credit_limit: float) -> float:
    """Balance as a percentage of the credit limit."""
    return safe_ratio(balance, credit_limit)


def available_credit(balance: float, credit_limit: float) -> float:
    """Unused credit, floored at 0."""
    return max(0.0, float(credit_limit) - float(balance))


def equity(property_value: float, loan_balance: float) -> float:
    """Home equity, floored at 0."""
    return max(0.0, float(property_value) - float(loan_balance))


def equity_percentage(property_value: float, loan_balance: float) -> float:
    """Equity as a percentage of property value."""
    return safe_ratio(equity(property_value, loan_balance), property_value)


def loan_to_value(loan_balance: float, property_value: float) -> float:
    """LTV: loan balance as a percentage of property value."""
    return safe_ratio(loan_balance, property_value)


def debt_to_income(total_monthly_debt: float, monthly_income: float) -> float:
    """DTI: monthly debt obligations as a percentage of monthly income."""
    return safe_ratio(total_monthly_debt, monthly_income)


def total_housing_cost(
    principal_and_interest: float,
    monthly_property_tax: float = 0.0,
    monthly_insurance: float = 0.0,
    monthly_hoa: float = 0.0,
    monthly_pmi: float = 0.0,
) -> float:
    """Monthly housing outlay: P&I + property tax + insurance + HOA + PMI."""
    return float(
        principal_and_interest
        + monthly_property_tax
        + monthly_insurance
        + monthly_hoa
        + monthly_pmi
    )


# ---------------------------------------------------------------------------
# PMI removal
# ---------------------------------------------------------------------------

def pmi_removal_month(
    original_principal: float,
    monthly_payment: float,
    annual_rate_percent: float,
    property_value: float,
    pmi_removal_ltv: Optional[float] = None,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> Optional[int]:
    """
    First month offset at which LTV falls to the PMI removal threshold.

    Steps the balance forward one payment at a time (interest = B * r,
    principal = payment - interest) and checks LTV against the fixed
    *property_value* before each payment, so month 0 means PMI is not
    needed at all.

    Parameters
    ----------
    original_principal : float
        Loan balance at the start.
    monthly_payment : float
        Principal-and-interest payment.
    annual_rate_percent : float
        Nominal annual rate in percent.
    property_value : float
        Appraised value the LTV is measured against.
    pmi_removal_ltv : float, optional
        Threshold percentage. Defaults to ``policy.pmi_removal_ltv`` (80).
    policy : PayoffPolicy, optional
        Supplies the threshold default and the month cap (360).

    Returns
    -------
    int or None
        Month offset, or None when property_value <= 0, when the payment
        does not cover interest, or when the cap is reached first.
    """
    policy = resolve_policy(policy)
    threshold = policy.pmi_removal_ltv if pmi_removal_ltv is None else float(pmi_removal_ltv)
    if property_value <= 0:
        return None

    r = monthly_rate(annual_rate_percent)
    balance = float(original_principal)
    for month in range(policy.schedule_month_cap):
        if loan_to_value(balance, property_value) <= threshold:
            return month
        interest = balance * r
        principal = monthly_payment - interest
        if principal <= 0:
            logger.info("PMI never removable: payment %.2f does not cover interest", monthly_payment)
            return None
        balance = max(0.0, balance - principal)

    logger.info("PMI removal not reached within %d months", policy.schedule_month_cap)
    return None


def pmi_removal_date(
    start_date: date,
    original_principal: float,
    monthly_payment: float,
    annual_rate_percent: float,
    property_value: float,
    pmi_removal_ltv: Optional[float] = None,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> Optional[date]:
    """*start_date* plus `pmi_removal_month`, or None if never reached."""
    month = pmi_removal_month(
        original_principal,
        monthly_payment,
        annual_rate_percent,
        property_value,
        pmi_removal_ltv,
        policy=policy,
    )
    if month is None:
        return None
    return add_months(start_date, month)


# ---------------------------------------------------------------------------
# Refinance
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CurrentLoanScenario:
    remaining_balance: float
    monthly_payment: float
    remaining_months: int
    total_interest: float


@dataclass(frozen=True)
class RefinanceScenario:
    new_monthly_payment: float
    new_term_months: int
    total_interest: float
    closing_costs: float


@dataclass(frozen=True)
class RefinanceSavings:
    """
    Net effect of refinancing.

    total_interest_saved is net of closing costs. break_even_months is
    `NEVER` when the new payment is not strictly lower.
    """
    monthly_payment_difference: float
    total_interest_saved: float
    break_even_months: float
    worth_it: bool


@dataclass(frozen=True)
class RefinanceAnalysis:
    current: CurrentLoanScenario
    refinance: RefinanceScenario
    savings: RefinanceSavings


def _interest_over(balance: float, annual_rate_percent: float, payment: float,
                   months: int, eps: float) -> float:
    """Interest paid on *balance* over at most *months* payments."""
    r = monthly_rate(annual_rate_percent)
    total = 0.0
    for _ in range(max(int(months), 0)):
        if balance <= eps:
            break
        interest = balance * r
        principal = min(payment - interest, balance)
        total += interest
        balance -= principal
    return total


def refinance_analysis(
    current_balance: float,
    current_rate_percent: float,
    current_monthly_payment: float,
    remaining_months: int,
    new_rate_percent: float,
    new_term_months: int,
    closing_costs: float,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> RefinanceAnalysis:
    """
    Compare continuing the current loan with refinancing the balance.

    Both loans are run forward for their own horizon (remaining_months and
    new_term_months) and their interest summed. The refinance is worth it
    when interest saved net of closing costs exceeds
    ``policy.refinance_min_savings`` AND the break-even month
    (closing_costs / monthly payment reduction) is below
    ``policy.refinance_break_even_months``.

    Examples
    --------
    >>> analysis = refinance_analysis(250_000, 7.0, 1800, 300, 5.5, 300, 4000)
    >>> analysis.savings.worth_it
    True
    """
    policy = resolve_policy(policy)
    eps = policy.balance_epsilon

    current_interest = _interest_over(
        current_balance, current_rate_percent, current_monthly_payment, remaining_months, eps
    )
    new_payment = compute_monthly_payment(current_balance, new_rate_percent, new_term_months)
    refinance_interest = _interest_over(
        current_balance, new_rate_percent, new_payment, new_term_months, eps
    )

    interest_saved = current_interest - (refinance_interest + closing_costs)
    payment_diff = current_monthly_payment - new_payment
    break_even = closing_costs / payment_diff if payment_diff > 0 else NEVER
    worth_it = (
        interest_saved > policy.refinance_min_savings
        and break_even < policy.refinance_break_even_months
    )
    logger.debug(
        "Refinance: saved=%.2f break_even=%s worth_it=%s",
        interest_saved, break_even, worth_it,
    )

    return RefinanceAnalysis(
        current=CurrentLoanScenario(
            remaining_balance=float(current_balance),
            monthly_payment=float(current_monthly_payment),
            remaining_months=int(remaining_months),
            total_interest=current_interest,
        ),
        refinance=RefinanceScenario(
            new_monthly_payment=new_payment,
            new_term_months=int(new_term_months),
            total_interest=refinance_interest,
            closing_costs=float(closing_costs),
        ),
        savings=RefinanceSavings(
            monthly_payment_difference=payment_diff,
            total_interest_saved=interest_saved,
            break_even_months=break_even,
            worth_it=worth_it,
        ),
    )
