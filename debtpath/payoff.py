"""
Multi-debt payoff simulation for DebtPath.

Purpose
-------
Simulates paying down a portfolio of debts month by month under a chosen
priority strategy, with a shared extra-payment pool that grows as debts
are retired ("rolling" avalanche/snowball).

Key components
--------------
- DebtItem : one debt (balance, minimum payment, APR)
- sort_by_avalanche / sort_by_snowball / priority_order : strategy orderings
- simulate_payoff : the month-stepping simulation
- DebtPayoffResult / PayoffMonth / PayoffTimeline : outputs

Monthly step
------------
1. Every active debt, in input order, accrues interest (B * APR/100/12)
   and receives its own minimum payment, clamped so principal never
   exceeds the balance. A debt at or below the paid-off tolerance is
   retired this month.
2. The extra pool goes to exactly one debt: the first still-active debt in
   the strategy's priority order, capped at its balance. Any remainder is
   not carried to another debt that month.
3. The minimum payments of debts retired this month join the pool from the
   next month on.

The simulation stops when no debt is active or after
``policy.simulation_month_cap`` months (600). Debts still active at the cap
are reported with status "unresolved" and `PayoffTimeline.completed` is
False; they are never silently dropped.

Example
-------
>>> debts = [
...     DebtItem("visa", "Visa", 2500, 75, 22.9),
...     DebtItem("car", "Car loan", 9000, 250, 6.5),
... ]
>>> timeline = simulate_payoff(debts, extra_payment=200, strategy="avalanche")
>>> [r.debt_id for r in timeline.debts]
['visa', 'car']
>>> timeline.completed
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .config import PayoffPolicy, resolve_policy
from .exceptions import ValidationError
from .utils import check_non_negative, month_index, monthly_rate

__all__ = [
    "Strategy",
    "STRATEGIES",
    "PayoffStatus",
    "DebtItem",
    "DebtPayoffResult",
    "PayoffMonth",
    "PayoffTimeline",
    "sort_by_avalanche",
    "sort_by_snowball",
    "priority_order",
    "simulate_payoff",
]

logger = logging.getLogger(__name__)

Strategy = Literal["avalanche", "snowball", "custom"]
STRATEGIES: Tuple[str, ...] = ("avalanche", "snowball", "custom")

PayoffStatus = Literal["paid_off", "unresolved"]


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebtItem:
    """
    One debt in a payoff portfolio.

    Parameters
    ----------
    id : str
        Unique identifier within the portfolio.
    name : str
        Display name.
    balance : float
        Outstanding balance.
    minimum_payment : float
        Required monthly payment.
    interest_rate : float
        Nominal annual rate in percent (22.9 for 22.9% APR).

    Raises
    ------
    ValidationError
        If balance, minimum_payment or interest_rate is negative.
    """
    id: str
    name: str
    balance: float
    minimum_payment: float
    interest_rate: float

    def __post_init__(self) -> None:
        check_non_negative("balance", self.balance)
        check_non_negative("minimum_payment", self.minimum_payment)
        check_non_negative("interest_rate", self.interest_rate)


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DebtPayoffResult:
    """
    Outcome for one debt.

    total_interest and total_paid are lifetime sums for the debt (minimum
    payments plus any extra applied to it). A debt retired by the extra pool
    keeps its lifetime interest rather than recording zero, so the per-debt
    figures add up to the timeline totals. For an "unresolved" debt,
    payoff_month is None and remaining_balance is what was left at the cap.
    """
    debt_id: str
    debt_name: str
    payoff_month: Optional[int]
    total_interest: float
    total_paid: float
    status: PayoffStatus = "paid_off"
    remaining_balance: float = 0.0

    @property
    def resolved(self) -> bool:
        return self.status == "paid_off"


@dataclass(frozen=True)
class PayoffMonth:
    """State after one simulated month."""
    month: int
    balances: Mapping[str, float]
    interest: float
    paid: float
    extra_pool: float
    extra_applied: float
    target_id: Optional[str]
    retired: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PayoffTimeline:
    """
    Portfolio payoff outcome.

    Attributes
    ----------
    strategy : str
        Strategy simulated.
    debts : tuple of DebtPayoffResult
        Retired debts in payoff order, then unresolved debts in input order.
    total_months : int
        Months simulated (the cap when not completed).
    total_interest, total_paid : float
        Sums across all debts and months.
    months : tuple of PayoffMonth
        Month-by-month trace.
    """
    strategy: str
    debts: Tuple[DebtPayoffResult, ...]
    total_months: int
    total_interest: float
    total_paid: float
    months: Tuple[PayoffMonth, ...] = field(default=(), repr=False)

    @property
    def completed(self) -> bool:
        return all(r.resolved for r in self.debts)

    @property
    def unresolved(self) -> Tuple[DebtPayoffResult, ...]:
        return tuple(r for r in self.debts if not r.resolved)

    def result_for(self, debt_id: str) -> Optional[DebtPayoffResult]:
        """Result for *debt_id*, or None if the id was not simulated."""
        for r in self.debts:
            if r.debt_id == debt_id:
                return r
        return None

    def balance_frame(self, start: Optional[date] = None) -> pd.DataFrame:
        """
        Balances after each month, one column per debt id.

        Parameters
        ----------
        start : date, optional
            Plan start. When given the index is first-of-month dates;
            otherwise the 1-based month number.
        """
        rows = [dict(m.balances) for m in self.months]
        df = pd.DataFrame(rows)
        df.index = month_index(start, len(rows))
        return df


# ---------------------------------------------------------------------------
# Orderings
# ---------------------------------------------------------------------------

def sort_by_avalanche(debts: Iterable[DebtItem]) -> List[DebtItem]:
    """Highest interest rate first. Ties keep input order."""
    return sorted(debts, key=lambda d: d.interest_rate, reverse=True)


def sort_by_snowball(debts: Iterable[DebtItem]) -> List[DebtItem]:
    """Smallest balance first. Ties keep input order."""
    return sorted(debts, key=lambda d: d.balance)


def priority_order(debts: Sequence[DebtItem], strategy: str) -> List[DebtItem]:
    """
    Order in which the extra pool targets debts.

    "custom" keeps the caller's input order.

    Raises
    ------
    ValidationError
        For an unknown strategy name.
    """
    if strategy == "avalanche":
        return sort_by_avalanche(debts)
    if strategy == "snowball":
        return sort_by_snowball(debts)
    if strategy == "custom":
        return list(debts)
    raise ValidationError(
        f"Unknown payoff strategy {strategy!r}. Expected one of {STRATEGIES}."
    )


def _check_unique_ids(debts: Sequence[DebtItem]) -> None:
    seen = set()
    for debt in debts:
        if debt.id in seen:
            raise ValidationError(f"Duplicate debt id {debt.id!r}")
        seen.add(debt.id)


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

def simulate_payoff(
    debts: Iterable[DebtItem],
    extra_payment: float = 0.0,
    strategy: str = "avalanche",
    *,
    policy: Optional[PayoffPolicy] = None,
) -> PayoffTimeline:
    """
    Simulate paying off *debts* with minimums plus a rolling extra pool.

    Parameters
    ----------
    debts : iterable of DebtItem
        Portfolio. Read-only; the simulation keeps its own balances.
    extra_payment : float, default 0.0
        Monthly amount on top of all minimums. Negative values count as 0.
    strategy : {"avalanche", "snowball", "custom"}
        Priority order for the extra pool, computed once up front.
    policy : PayoffPolicy, optional
        Supplies the paid-off tolerance and month cap.

    Returns
    -------
    PayoffTimeline

    Notes
    -----
    - A minimum payment smaller than the month's interest is raised to the
      interest amount, so balances never grow; such a debt shrinks only
      through the extra pool.
    - A debt whose starting balance is already within tolerance is retired
      at month 0 and its minimum joins the pool from month 1.

    Raises
    ------
    ValidationError
        For an unknown strategy or duplicate debt ids.
    """
    policy = resolve_policy(policy)
    eps = policy.balance_epsilon
    cap = policy.simulation_month_cap

    debts = list(debts)
    _check_unique_ids(debts)
    order = priority_order(debts, strategy)
    logger.debug(
        "Simulating %d debts, strategy=%s, priority=%s",
        len(debts), strategy, [d.id for d in order],
    )

    balances: Dict[str, float] = {d.id: float(d.balance) for d in debts}
    interest_by_id: Dict[str, float] = {d.id: 0.0 for d in debts}
    paid_by_id: Dict[str, float] = {d.id: 0.0 for d in debts}
    active: Dict[str, DebtItem] = {}
    results: List[DebtPayoffResult] = []
    pool = max(0.0, float(extra_payment))

    for debt in debts:
        if balances[debt.id] <= eps:
            results.append(DebtPayoffResult(debt.id, debt.name, 0, 0.0, 0.0))
            pool += debt.minimum_payment
        else:
            active[debt.id] = debt

    total_interest = 0.0
    total_paid = 0.0
    trace: List[PayoffMonth] = []
    month = 0

    while active and month < cap:
        month += 1
        month_interest = 0.0
        month_paid = 0.0
        released = 0.0
        retired: List[str] = []

        def retire(debt: DebtItem) -> None:
            nonlocal released
            results.append(
                DebtPayoffResult(
                    debt_id=debt.id,
                    debt_name=debt.name,
                    payoff_month=month,
                    total_interest=interest_by_id[debt.id],
                    total_paid=paid_by_id[debt.id],
                )
            )
            balances[debt.id] = max(0.0, balances[debt.id])
            del active[debt.id]
            released += debt.minimum_payment
            retired.append(debt.id)

        # Minimum payments, input order
        for debt in list(active.values()):
            balance = balances[debt.id]
            interest = balance * monthly_rate(debt.interest_rate)
            principal = max(0.0, min(debt.minimum_payment - interest, balance))
            payment = principal + interest

            balances[debt.id] = balance - principal
            interest_by_id[debt.id] += interest
            paid_by_id[debt.id] += payment
            month_interest += interest
            month_paid += payment

            if balances[debt.id] <= eps:
                retire(debt)

        # Extra pool, one target by priority
        extra_applied = 0.0
        target_id: Optional[str] = None
        if pool > 0:
            target = next((d for d in order if d.id in active), None)
            if target is not None:
                target_id = target.id
                extra_applied = min(pool, balances[target.id])
                balances[target.id] -= extra_applied
                paid_by_id[target.id] += extra_applied
                month_paid += extra_applied
                if balances[target.id] <= eps:
                    retire(target)

        trace.append(
            PayoffMonth(
                month=month,
                balances={d.id: max(0.0, balances[d.id]) for d in debts},
                interest=month_interest,
                paid=month_paid,
                extra_pool=pool,
                extra_applied=extra_applied,
                target_id=target_id,
                retired=tuple(retired),
            )
        )
        total_interest += month_interest
        total_paid += month_paid
        pool += released

    if active:
        logger.info(
            "Payoff simulation (%s) hit the %d-month cap with %d debts unresolved",
            strategy, cap, len(active),
        )
        for debt in active.values():
            results.append(
                DebtPayoffResult(
                    debt_id=debt.id,
                    debt_name=debt.name,
                    payoff_month=None,
                    total_interest=interest_by_id[debt.id],
                    total_paid=paid_by_id[debt.id],
                    status="unresolved",
                    remaining_balance=balances[debt.id],
                )
            )
    else:
        logger.debug("Payoff simulation (%s) finished in %d months", strategy, month)

    return PayoffTimeline(
        strategy=strategy,
        debts=tuple(results),
        total_months=month,
        total_interest=total_interest,
        total_paid=total_paid,
        months=tuple(trace),
    )
