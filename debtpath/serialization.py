"""
Serialization module for DebtPath.

Purpose
-------
JSON persistence for portfolio and loan inputs and plain-dict views of the
calculation outputs, for the CLI and for callers that store or transmit
results.

Design Principles
-----------------
- Type-safe: inputs are validated through the Pydantic configs
- Human-readable: indented JSON with a schema version
- Lossless for numbers: floats are written unrounded; `NEVER` becomes null

Example
-------
>>> from pathlib import Path
>>> from debtpath.serialization import save_portfolio, load_portfolio
>>> save_portfolio(Path("debts.json"), debts, extra_payment=200, strategy="snowball")
>>> config = load_portfolio(Path("debts.json"))
>>> debts = portfolio_debts(config)
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
from pathlib import Path
import json
import math
import warnings

from pydantic import ValidationError as PydanticValidationError

from .amortization import AmortizationSchedule, LedgerEntry
from .comparison import StrategyComparison
from .config import DebtConfig, LoanConfig, PortfolioConfig
from .exceptions import SerializationError
from .payoff import DebtItem, DebtPayoffResult, PayoffTimeline
from .types import (
    ComparisonDict,
    LedgerEntryDict,
    PayoffResultDict,
    ScheduleDict,
    TimelineDict,
)

__all__ = [
    "SCHEMA_VERSION",
    "debt_to_dict",
    "debt_from_dict",
    "portfolio_to_dict",
    "portfolio_debts",
    "save_portfolio",
    "load_portfolio",
    "load_loan",
    "schedule_to_dict",
    "result_to_dict",
    "timeline_to_dict",
    "comparison_to_dict",
    "save_result",
]


# ---------------------------------------------------------------------------
# Schema Version
# ---------------------------------------------------------------------------

SCHEMA_VERSION = "0.1.0"


def _finite_or_none(value: float) -> Optional[float]:
    """JSON has no infinity; the never-pays-off sentinel is written as null."""
    return None if math.isinf(value) else value


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SerializationError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise SerializationError(f"{path} must contain a JSON object")

    schema_version = data.get("schema_version", "0.0.0")
    if schema_version != SCHEMA_VERSION:
        warnings.warn(
            f"File schema version {schema_version} differs from current "
            f"version {SCHEMA_VERSION}. May encounter compatibility issues.",
            UserWarning,
        )
    return data


# ---------------------------------------------------------------------------
# Debt / Portfolio Serialization
# ---------------------------------------------------------------------------

def debt_to_dict(debt: DebtItem) -> Dict[str, Any]:
    """Convert DebtItem to dictionary representation."""
    return {
        "id": debt.id,
        "name": debt.name,
        "balance": debt.balance,
        "minimum_payment": debt.minimum_payment,
        "interest_rate": debt.interest_rate,
    }


def debt_from_dict(data: Dict[str, Any]) -> DebtItem:
    """
    Create DebtItem from dictionary representation.

    Validated through DebtConfig, so balances and minimum payments must be
    positive and rates non-negative. A missing name defaults to the id.
    """
    config = DebtConfig.model_validate(data)
    return _debt_from_config(config)


def _debt_from_config(config: DebtConfig) -> DebtItem:
    return DebtItem(
        id=config.id,
        name=config.name or config.id,
        balance=config.balance,
        minimum_payment=config.minimum_payment,
        interest_rate=config.interest_rate,
    )


def portfolio_to_dict(
    debts: Iterable[DebtItem],
    extra_payment: float = 0.0,
    strategy: str = "avalanche",
) -> Dict[str, Any]:
    """Portfolio file contents for *debts*."""
    return {
        "schema_version": SCHEMA_VERSION,
        "extra_payment": extra_payment,
        "strategy": strategy,
        "debts": [debt_to_dict(d) for d in debts],
    }


def portfolio_debts(config: PortfolioConfig) -> List[DebtItem]:
    """DebtItems of a validated portfolio, in file order."""
    return [_debt_from_config(d) for d in config.debts]


def save_portfolio(
    path: Path,
    debts: Iterable[DebtItem],
    extra_payment: float = 0.0,
    strategy: str = "avalanche",
) -> None:
    """
    Save a debt portfolio to a JSON file.

    Examples
    --------
    >>> save_portfolio(Path("debts.json"), debts, extra_payment=150)
    """
    data = portfolio_to_dict(debts, extra_payment, strategy)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_portfolio(path: Path) -> PortfolioConfig:
    """
    Load and validate a portfolio JSON file.

    Raises
    ------
    SerializationError
        If the file is unreadable or fails validation.
    """
    data = _read_json(path)
    data.pop("schema_version", None)
    try:
        return PortfolioConfig.model_validate(data)
    except PydanticValidationError as e:
        raise SerializationError(f"Invalid portfolio file {path}: {e}") from e


def load_loan(path: Path) -> LoanConfig:
    """Load and validate a single-loan JSON file."""
    data = _read_json(path)
    data.pop("schema_version", None)
    try:
        return LoanConfig.model_validate(data)
    except PydanticValidationError as e:
        raise SerializationError(f"Invalid loan file {path}: {e}") from e


# ---------------------------------------------------------------------------
# Output Views
# ---------------------------------------------------------------------------

def _entry_to_dict(entry: LedgerEntry) -> LedgerEntryDict:
    row: LedgerEntryDict = {
        "month": entry.month,
        "payment": entry.payment,
        "principal": entry.principal,
        "interest": entry.interest,
        "balance": entry.balance,
    }
    if entry.cumulative_interest is not None:
        row["cumulative_interest"] = entry.cumulative_interest
        row["cumulative_principal"] = entry.cumulative_principal
    return row


def schedule_to_dict(schedule: AmortizationSchedule) -> ScheduleDict:
    """Plain-dict view of a schedule, entries included."""
    return {
        "status": schedule.status,
        "monthly_payment": schedule.monthly_payment,
        "months": schedule.months,
        "total_interest": schedule.total_interest,
        "total_paid": schedule.total_paid,
        "entries": [_entry_to_dict(e) for e in schedule],
    }


def result_to_dict(result: DebtPayoffResult) -> PayoffResultDict:
    return {
        "debt_id": result.debt_id,
        "debt_name": result.debt_name,
        "status": result.status,
        "payoff_month": result.payoff_month,
        "total_interest": result.total_interest,
        "total_paid": result.total_paid,
        "remaining_balance": result.remaining_balance,
    }


def timeline_to_dict(timeline: PayoffTimeline, include_months: bool = False) -> TimelineDict:
    """
    Plain-dict view of a payoff timeline.

    Parameters
    ----------
    include_months : bool
        Add the month-by-month trace under "months".
    """
    data: Dict[str, Any] = {
        "strategy": timeline.strategy,
        "completed": timeline.completed,
        "total_months": timeline.total_months,
        "total_interest": timeline.total_interest,
        "total_paid": timeline.total_paid,
        "debts": [result_to_dict(r) for r in timeline.debts],
    }
    if include_months:
        data["months"] = [
            {
                "month": m.month,
                "balances": dict(m.balances),
                "interest": m.interest,
                "paid": m.paid,
                "extra_pool": m.extra_pool,
                "extra_applied": m.extra_applied,
                "target_id": m.target_id,
                "retired": list(m.retired),
            }
            for m in timeline.months
        ]
    return data  # type: ignore[return-value]


def comparison_to_dict(comparison: StrategyComparison) -> ComparisonDict:
    return {
        "avalanche": timeline_to_dict(comparison.avalanche),
        "snowball": timeline_to_dict(comparison.snowball),
        "interest_saved": comparison.interest_saved,
        "months_saved": comparison.months_saved,
        "recommended_strategy": comparison.recommended_strategy,
        "threshold": comparison.threshold,
    }


def save_result(data: Dict[str, Any], path: Path) -> None:
    """
    Write a result dict to JSON with the schema version stamped in.

    Infinite values (the never-pays-off sentinel) are written as null.
    """
    payload = {"schema_version": SCHEMA_VERSION, **_replace_infinities(data)}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)


def _replace_infinities(value: Any) -> Any:
    if isinstance(value, float):
        return _finite_or_none(value)
    if isinstance(value, dict):
        return {k: _replace_infinities(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_replace_infinities(v) for v in value]
    return value
