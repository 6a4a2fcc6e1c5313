"""
Custom exceptions for DebtPath.

Purpose
-------
Provides a unified exception hierarchy for the structural errors DebtPath
can raise. Numeric outcomes such as a payment that never retires a debt or
a simulation that hits its month cap are NOT exceptions: they come back as
data (`NEVER`, schedule statuses, unresolved payoff results) so UI callers
can retry with adjusted inputs without special handling.

Exception Hierarchy
-------------------
DebtPathError (base)
├── ConfigurationError - Invalid policy or settings
├── ValidationError - Structurally invalid inputs
└── SerializationError - Unreadable or malformed files

Usage
-----
>>> from debtpath.exceptions import ValidationError
>>>
>>> raise ValidationError("Duplicate debt id 'visa'")
>>>
>>> # Catch all DebtPath exceptions
>>> try:
...     debts = load_debts(path)
... except DebtPathError as e:
...     print(f"DebtPath error: {e}")
"""


class DebtPathError(Exception):
    """
    Base exception for all DebtPath errors.

    Examples
    --------
    >>> try:
    ...     timeline = simulate_payoff(debts, 100.0, strategy="fastest")
    ... except DebtPathError as e:
    ...     logger.error("Payoff failed: %s", e)
    """
    pass


class ConfigurationError(DebtPathError):
    """
    Invalid configuration or policy parameters.

    Raised when a policy or settings object cannot be built, such as:
    - Non-positive month caps
    - Negative tolerances or thresholds

    Examples
    --------
    >>> raise ConfigurationError(
    ...     "simulation_month_cap must be >= 1, got 0."
    ... )
    """
    pass


class ValidationError(DebtPathError):
    """
    Structurally invalid inputs.

    Raised when inputs cannot describe a debt at all:
    - Negative interest rates or minimum payments
    - Duplicate debt identifiers in one portfolio
    - Unknown payoff strategy names

    Degenerate but well-formed inputs (zero principal, zero term) are not
    errors; they resolve to neutral values.

    Examples
    --------
    >>> raise ValidationError(
    ...     "interest_rate must be non-negative (got -3.0)."
    ... )
    """
    pass


class SerializationError(DebtPathError):
    """
    File loading or schema failures.

    Raised when a debts or loan file is not valid JSON or does not match
    the expected structure.

    Examples
    --------
    >>> raise SerializationError(
    ...     f"Could not parse {path}: Expecting value: line 1 column 1"
    ... )
    """
    pass
