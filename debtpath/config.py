"""
Configuration management module for DebtPath.

Purpose
-------
Centralized configuration using Pydantic models for type-safe parameter
management, validation, and serialization. Holds the payoff policy
thresholds, the input schemas read by the CLI, and environment-driven
application settings.

Design Principles
-----------------
- Type-safe: Pydantic enforces types and validates ranges
- Immutable: Frozen models prevent accidental mutation
- Serializable: Easy conversion to/from JSON for config files
- Environment-aware: Supports .env files and DEBTPATH_ variables

Example
-------
>>> from debtpath.config import PayoffPolicy, PortfolioConfig
>>> policy = PayoffPolicy(recommendation_threshold=500)
>>> policy.simulation_month_cap
600
>>>
>>> # Serialize to dict/JSON
>>> policy_dict = policy.model_dump()
>>> loaded = PayoffPolicy.model_validate(policy_dict)
"""

from __future__ import annotations
from typing import Optional, Literal, List, Any, Dict
import datetime

from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_BALANCE_EPSILON,
    DEFAULT_SIMULATION_MONTH_CAP,
    DEFAULT_SCHEDULE_MONTH_CAP,
    DEFAULT_RECOMMENDATION_THRESHOLD,
    DEFAULT_REFINANCE_BREAK_EVEN_MONTHS,
    DEFAULT_REFINANCE_MIN_SAVINGS,
    DEFAULT_PMI_REMOVAL_LTV,
)
from .exceptions import ConfigurationError

__all__ = [
    "PayoffPolicy",
    "DEFAULT_POLICY",
    "resolve_policy",
    "build_policy",
    "DebtConfig",
    "PortfolioConfig",
    "LoanConfig",
    "AppSettings",
]


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------

class PayoffPolicy(BaseModel):
    """
    Policy thresholds shared by every calculation.

    Attributes
    ----------
    balance_epsilon : float
        Balance at or below which a debt counts as retired.
    simulation_month_cap : int
        Upper bound on months simulated by `simulate_payoff`.
    schedule_month_cap : int
        Upper bound for fixed-payment schedules and PMI searches.
    recommendation_threshold : float
        Avalanche is recommended only when it saves strictly more interest
        than this (absolute currency amount).
    refinance_break_even_months : float
        A refinance must break even strictly before this many months.
    refinance_min_savings : float
        Interest saved net of closing costs must strictly exceed this.
    pmi_removal_ltv : float
        LTV percentage at or below which PMI can be dropped.

    Examples
    --------
    >>> policy = PayoffPolicy(recommendation_threshold=250)
    >>> policy.recommendation_threshold
    250.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    balance_epsilon: float = Field(
        default=DEFAULT_BALANCE_EPSILON,
        ge=0,
        le=1.0,
        description="Paid-off tolerance in currency units"
    )
    simulation_month_cap: int = Field(
        default=DEFAULT_SIMULATION_MONTH_CAP,
        ge=1,
        le=2400,
        description="Maximum months for multi-debt simulation"
    )
    schedule_month_cap: int = Field(
        default=DEFAULT_SCHEDULE_MONTH_CAP,
        ge=1,
        le=2400,
        description="Maximum months for fixed-payment schedules"
    )
    recommendation_threshold: float = Field(
        default=DEFAULT_RECOMMENDATION_THRESHOLD,
        ge=0,
        description="Interest saved needed to recommend avalanche"
    )
    refinance_break_even_months: float = Field(
        default=DEFAULT_REFINANCE_BREAK_EVEN_MONTHS,
        gt=0,
        description="Break-even horizon for a worthwhile refinance"
    )
    refinance_min_savings: float = Field(
        default=DEFAULT_REFINANCE_MIN_SAVINGS,
        description="Net interest savings a refinance must exceed"
    )
    pmi_removal_ltv: float = Field(
        default=DEFAULT_PMI_REMOVAL_LTV,
        gt=0,
        le=100,
        description="LTV percentage at which PMI is removable"
    )


DEFAULT_POLICY = PayoffPolicy()


def resolve_policy(policy: Optional[PayoffPolicy]) -> PayoffPolicy:
    """Return *policy*, or the module default when None."""
    return DEFAULT_POLICY if policy is None else policy


def build_policy(**overrides: Any) -> PayoffPolicy:
    """
    Build a policy from keyword overrides, skipping None values.

    Raises
    ------
    ConfigurationError
        If any override is out of range or unknown.
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return PayoffPolicy(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid payoff policy: {e}") from e


# ---------------------------------------------------------------------------
# Input Schemas
# ---------------------------------------------------------------------------

class DebtConfig(BaseModel):
    """Configuration for one debt in a payoff portfolio."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(
        min_length=1,
        description="Unique identifier within the portfolio"
    )
    name: str = Field(
        default="",
        description="Display name"
    )
    balance: float = Field(
        gt=0,
        description="Outstanding balance"
    )
    minimum_payment: float = Field(
        gt=0,
        description="Required monthly payment"
    )
    interest_rate: float = Field(
        ge=0,
        le=1000,
        description="Nominal annual rate in percent (e.g., 19.99)"
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Accept integer ids from hand-written files."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class PortfolioConfig(BaseModel):
    """
    Configuration for a multi-debt payoff run.

    Attributes
    ----------
    debts : List[DebtConfig]
        Debts in the portfolio (input order matters for minimum payments
        and for the "custom" strategy).
    extra_payment : float
        Monthly amount paid on top of all minimums.
    strategy : str
        "avalanche", "snowball" or "custom".

    Examples
    --------
    >>> config = PortfolioConfig(
    ...     debts=[DebtConfig(id="visa", balance=2500, minimum_payment=75,
    ...                       interest_rate=22.9)],
    ...     extra_payment=150,
    ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    debts: List[DebtConfig] = Field(
        min_length=1,
        description="Debts to pay off"
    )
    extra_payment: float = Field(
        default=0.0,
        ge=0,
        description="Monthly payment on top of minimums"
    )
    strategy: Literal["avalanche", "snowball", "custom"] = Field(
        default="avalanche",
        description="Priority order for the extra payment pool"
    )

    @model_validator(mode="after")
    def validate_unique_ids(self):
        """Ensure debt ids are unique."""
        seen = set()
        for debt in self.debts:
            if debt.id in seen:
                raise ValueError(f"Duplicate debt id {debt.id!r}")
            seen.add(debt.id)
        return self


class LoanConfig(BaseModel):
    """Configuration for a single amortizing loan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    principal: float = Field(
        gt=0,
        description="Amount borrowed"
    )
    annual_rate: float = Field(
        ge=0,
        le=100,
        description="Nominal annual rate in percent"
    )
    term_months: int = Field(
        ge=1,
        le=600,
        description="Loan term in months"
    )
    extra_payment: float = Field(
        default=0.0,
        ge=0,
        description="Monthly prepayment on top of the scheduled payment"
    )
    start_date: Optional[datetime.date] = Field(
        default=None,
        description="First-payment reference date"
    )


# ---------------------------------------------------------------------------
# Application Settings
# ---------------------------------------------------------------------------

class AppSettings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Supports .env files for local development. Environment variables
    are prefixed with DEBTPATH_; policy fields nest with a double
    underscore (e.g., DEBTPATH_POLICY__RECOMMENDATION_THRESHOLD=500).

    Attributes
    ----------
    debug : bool
        Enable debug mode (forces DEBUG logging)
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR"
    json_logs : bool
        Emit log records as JSON lines
    policy : PayoffPolicy
        Policy thresholds used by the CLI

    Examples
    --------
    >>> settings = AppSettings()
    >>> settings.log_level
    'WARNING'
    """

    model_config = SettingsConfigDict(
        env_prefix="DEBTPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    json_logs: bool = Field(
        default=False,
        description="Format log records as JSON"
    )
    policy: PayoffPolicy = Field(
        default_factory=PayoffPolicy,
        description="Payoff policy thresholds"
    )

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug flag."""
        return "DEBUG" if self.debug else self.log_level

    def policy_dict(self) -> Dict[str, Any]:
        """Policy as a plain dict (for display)."""
        return self.policy.model_dump()
