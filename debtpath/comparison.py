"""
Avalanche vs. snowball comparison for DebtPath.

Runs `simulate_payoff` twice on the same portfolio and extra payment and
reduces the pair to savings figures and a recommendation.

Recommendation policy
---------------------
Avalanche is recommended only when it saves strictly more interest than
``policy.recommendation_threshold`` (an absolute amount, 1000 by default).
Below that, snowball's earlier payoffs are preferred.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .config import PayoffPolicy, resolve_policy
from .payoff import DebtItem, PayoffTimeline, simulate_payoff

__all__ = ["StrategyComparison", "recommend_strategy", "compare_strategies"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyComparison:
    """
    Avalanche and snowball timelines for one portfolio.

    interest_saved = snowball.total_interest - avalanche.total_interest
    (positive when avalanche is cheaper); months_saved likewise on
    total_months.
    """
    avalanche: PayoffTimeline
    snowball: PayoffTimeline
    interest_saved: float
    months_saved: int
    recommended_strategy: str
    threshold: float

    @property
    def completed(self) -> bool:
        """True when both simulations retired every debt."""
        return self.avalanche.completed and self.snowball.completed

    @property
    def recommended(self) -> PayoffTimeline:
        return self.avalanche if self.recommended_strategy == "avalanche" else self.snowball


def recommend_strategy(interest_saved: float, threshold: float) -> str:
    """"avalanche" if *interest_saved* > *threshold*, else "snowball"."""
    return "avalanche" if interest_saved > threshold else "snowball"


def compare_strategies(
    debts: Iterable[DebtItem],
    extra_payment: float = 0.0,
    *,
    policy: Optional[PayoffPolicy] = None,
) -> StrategyComparison:
    """
    Simulate avalanche and snowball on identical inputs and compare.

    Parameters
    ----------
    debts : iterable of DebtItem
        Portfolio to pay off.
    extra_payment : float
        Monthly amount on top of all minimums.
    policy : PayoffPolicy, optional
        Supplies the recommendation threshold, tolerance and month cap.

    Returns
    -------
    StrategyComparison

    Examples
    --------
    >>> comparison = compare_strategies(debts, extra_payment=300)
    >>> comparison.recommended_strategy in ("avalanche", "snowball")
    True
    """
    policy = resolve_policy(policy)
    debts = list(debts)

    avalanche = simulate_payoff(debts, extra_payment, "avalanche", policy=policy)
    snowball = simulate_payoff(debts, extra_payment, "snowball", policy=policy)

    interest_saved = snowball.total_interest - avalanche.total_interest
    months_saved = snowball.total_months - avalanche.total_months
    recommended = recommend_strategy(interest_saved, policy.recommendation_threshold)

    if not (avalanche.completed and snowball.completed):
        logger.info("Strategy comparison includes unresolved debts; savings are partial")
    logger.debug(
        "Comparison: interest_saved=%.2f months_saved=%d recommended=%s",
        interest_saved, months_saved, recommended,
    )

    return StrategyComparison(
        avalanche=avalanche,
        snowball=snowball,
        interest_saved=interest_saved,
        months_saved=months_saved,
        recommended_strategy=recommended,
        threshold=policy.recommendation_threshold,
    )
