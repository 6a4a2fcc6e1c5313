"""
Pytest configuration and fixtures for DebtPath test suite.

This module provides reusable fixtures for testing all DebtPath components.
Fixtures follow the principle of "arrange-act-assert" with clear separation.
"""

import logging
from datetime import date
from typing import List

import pytest

from debtpath.config import PayoffPolicy
from debtpath.payoff import DebtItem


@pytest.fixture(autouse=True)
def reset_debtpath_logger():
    """Drop handlers installed by configure_logging (the CLI installs one per run)."""
    yield
    logger = logging.getLogger("debtpath")
    for handler in list(logger.handlers):
        if getattr(handler, "_debtpath_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Date / Policy Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def start_date() -> date:
    """Standard start date for tests."""
    return date(2025, 1, 1)


@pytest.fixture
def policy() -> PayoffPolicy:
    """Default payoff policy."""
    return PayoffPolicy()


@pytest.fixture
def short_cap_policy() -> PayoffPolicy:
    """Policy with a 24-month simulation cap for cap-exhaustion tests."""
    return PayoffPolicy(simulation_month_cap=24)


# ---------------------------------------------------------------------------
# Debt Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def visa() -> DebtItem:
    """
    High-rate credit card.

    Balance: 5,000
    APR: 22%
    Minimum: 150/month
    """
    return DebtItem(id="visa", name="Visa", balance=5000.0, minimum_payment=150.0, interest_rate=22.0)


@pytest.fixture
def store_card() -> DebtItem:
    """
    Smaller, lower-rate store card.

    Balance: 2,000
    APR: 12%
    Minimum: 60/month
    """
    return DebtItem(id="store", name="Store card", balance=2000.0, minimum_payment=60.0, interest_rate=12.0)


@pytest.fixture
def card_portfolio(visa, store_card) -> List[DebtItem]:
    """Two cards where avalanche and snowball pick different targets."""
    return [visa, store_card]


@pytest.fixture
def rolling_pair() -> List[DebtItem]:
    """
    Two zero-rate debts with equal minimums.

    Debt "a" (250 at 100/month) retires at month 3; from month 4 its
    minimum rolls into the extra pool applied to debt "b".
    """
    return [
        DebtItem(id="a", name="Debt A", balance=250.0, minimum_payment=100.0, interest_rate=0.0),
        DebtItem(id="b", name="Debt B", balance=5000.0, minimum_payment=100.0, interest_rate=0.0),
    ]


@pytest.fixture
def mixed_portfolio() -> List[DebtItem]:
    """Three everyday debts (card, car, student loan)."""
    return [
        DebtItem("card", "Credit card", 4200.0, 126.0, 24.99),
        DebtItem("car", "Car loan", 11500.0, 310.0, 6.9),
        DebtItem("student", "Student loan", 18000.0, 200.0, 4.5),
    ]
