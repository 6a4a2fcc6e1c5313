"""
DebtPath - Debt Amortization and Payoff Planning

Deterministic, side-effect-free calculations behind a personal debt
planner: loan schedules, card payoff estimates, mortgage ratios, and
multi-debt avalanche/snowball simulations.

Modules
-------
- amortization : single-debt schedules and the annuity payment
- metrics      : closed-form payoff figures, ratios, PMI, refinance
- payoff       : multi-debt payoff simulation with a rolling extra pool
- comparison   : avalanche vs. snowball with a recommendation
- config       : payoff policy, input schemas, settings
- utils        : shared helpers (rates, calendar, sentinel)

"""

from .amortization import (
    AmortizationSchedule,
    LedgerEntry,
    compute_monthly_payment,
    generate_schedule,
    generate_payment_schedule,
)
from .metrics import payoff_months, refinance_analysis
from .payoff import DebtItem, PayoffTimeline, simulate_payoff
from .comparison import StrategyComparison, compare_strategies
from .config import PayoffPolicy
from .utils import NEVER, is_never
from . import utils
