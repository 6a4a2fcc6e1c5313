"""
Unit tests for amortization.py module.

Tests the annuity payment formula, loan and fixed-payment schedules,
and the summaries derived from them.
"""

from datetime import date

import pandas as pd
import pytest

from debtpath.amortization import (
    AmortizationSchedule,
    LedgerEntry,
    compute_monthly_payment,
    generate_schedule,
    generate_payment_schedule,
    total_interest,
    payoff_date,
    prepayment_scenario,
)
from debtpath.config import PayoffPolicy
from debtpath.utils import is_never


# ============================================================================
# PAYMENT FORMULA TESTS
# ============================================================================

class TestComputeMonthlyPayment:
    """Test the annuity payment formula."""

    def test_zero_rate_is_linear(self):
        """Zero rate divides principal evenly over the term."""
        assert compute_monthly_payment(1200, 0, 12) == 100

    def test_standard_mortgage(self):
        """200k at 6% over 30 years is about 1199.10."""
        payment = compute_monthly_payment(200_000, 6, 360)
        assert payment == pytest.approx(1199.10, abs=0.01)

    def test_degenerate_inputs_return_zero(self):
        """Non-positive principal or term returns 0, not an error."""
        assert compute_monthly_payment(0, 5, 60) == 0.0
        assert compute_monthly_payment(-500, 5, 60) == 0.0
        assert compute_monthly_payment(10_000, 5, 0) == 0.0
        assert compute_monthly_payment(10_000, 5, -12) == 0.0

    def test_higher_rate_means_higher_payment(self):
        low = compute_monthly_payment(25_000, 4, 60)
        high = compute_monthly_payment(25_000, 9, 60)
        assert high > low > 25_000 / 60


# ============================================================================
# LOAN SCHEDULE TESTS
# ============================================================================

class TestGenerateSchedule:
    """Test loan schedule generation."""

    def test_standard_loan_runs_full_term(self):
        """A 30-year loan without prepayment uses all 360 months."""
        schedule = generate_schedule(200_000, 6, 360)

        assert len(schedule) == 360
        assert schedule.status == "paid_off"
        assert schedule.converged
        assert schedule.final_balance <= 0.01

    def test_standard_loan_total_interest(self):
        """Total interest over 360 months is about 231,676."""
        schedule = generate_schedule(200_000, 6, 360)
        assert schedule.total_interest == pytest.approx(231_676, abs=1.0)

    def test_payment_equals_principal_plus_interest(self):
        schedule = generate_schedule(35_000, 7.5, 72)
        for entry in schedule:
            assert entry.payment == pytest.approx(entry.principal + entry.interest)

    def test_interest_charged_on_prior_balance(self):
        """interest_t = balance_{t-1} * monthly rate."""
        schedule = generate_schedule(35_000, 7.5, 72)
        rate = 7.5 / 100 / 12

        assert schedule[0].interest == pytest.approx(35_000 * rate)
        for prev, cur in zip(schedule.entries, schedule.entries[1:]):
            assert cur.interest == pytest.approx(prev.balance * rate)

    def test_balance_never_negative_and_non_increasing(self):
        schedule = generate_schedule(12_000, 9, 48, extra_payment=333)
        balances = [e.balance for e in schedule]

        assert all(b >= 0 for b in balances)
        assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))

    def test_cumulative_totals(self):
        schedule = generate_schedule(10_000, 5, 36)
        last = schedule[-1]

        assert last.cumulative_interest == pytest.approx(schedule.total_interest)
        assert last.cumulative_principal == pytest.approx(10_000, abs=0.01)

    def test_zero_rate_schedule_has_no_interest(self):
        schedule = generate_schedule(1200, 0, 12)

        assert len(schedule) == 12
        assert all(e.interest == 0 for e in schedule)
        assert all(e.payment == pytest.approx(100) for e in schedule)
        assert schedule.final_balance == pytest.approx(0.0, abs=0.01)

    def test_extra_payment_terminates_early(self):
        """Prepayment retires the loan before the term ends."""
        base = generate_schedule(10_000, 5, 60)
        prepaid = generate_schedule(10_000, 5, 60, extra_payment=200)

        assert len(prepaid) < len(base)
        assert prepaid.status == "paid_off"
        assert prepaid[-1].balance <= 0.01
        # Final month clamps to the remaining balance
        assert prepaid[-1].payment <= prepaid.monthly_payment + 200 + 1e-9

    @pytest.mark.parametrize("principal,rate,term", [
        (5_000, 0, 10),
        (18_500, 3.25, 120),
        (450_000, 6.875, 360),
        (999.99, 29.99, 7),
    ])
    def test_final_balance_within_tolerance(self, principal, rate, term):
        schedule = generate_schedule(principal, rate, term)
        assert len(schedule) <= term
        assert schedule.final_balance <= 0.01

    def test_degenerate_inputs_give_empty_schedule(self):
        for args in [(0, 5, 60), (-100, 5, 60), (10_000, 5, 0)]:
            schedule = generate_schedule(*args)
            assert len(schedule) == 0
            assert schedule.status == "paid_off"

    def test_payment_below_interest_is_non_convergent(self):
        """A negative extra that drops the payment under interest stops immediately."""
        schedule = generate_schedule(10_000, 5, 60, extra_payment=-10_000)

        assert len(schedule) == 0
        assert schedule.status == "non_convergent"
        assert not schedule.converged
        assert schedule.final_balance == 10_000

    def test_deterministic(self):
        first = generate_schedule(75_000, 4.2, 180, extra_payment=50)
        second = generate_schedule(75_000, 4.2, 180, extra_payment=50)
        assert first == second

    def test_immutable_entries(self):
        schedule = generate_schedule(1200, 0, 12)
        with pytest.raises(Exception):
            schedule[0].balance = 5.0


# ============================================================================
# FRAME VIEW TESTS
# ============================================================================

class TestScheduleFrame:
    """Test DataFrame view of schedules."""

    def test_columns_and_length(self):
        df = generate_schedule(10_000, 5, 36).to_frame()

        assert len(df) == 36
        assert list(df.columns) == [
            "payment", "principal", "interest", "balance",
            "cumulative_interest", "cumulative_principal",
        ]
        assert df.index[0] == 1

    def test_dated_index(self):
        df = generate_schedule(1200, 0, 12).to_frame(start=date(2025, 1, 15))

        assert isinstance(df.index, pd.DatetimeIndex)
        assert df.index[0] == pd.Timestamp(2025, 2, 1)
        assert df.index[-1] == pd.Timestamp(2026, 1, 1)

    def test_payment_schedule_has_no_running_totals(self):
        df = generate_payment_schedule(1000, 12, 100).to_frame()
        assert list(df.columns) == ["payment", "principal", "interest", "balance"]

    def test_empty_schedule_frame(self):
        df = generate_schedule(0, 5, 60).to_frame()
        assert df.empty


# ============================================================================
# FIXED PAYMENT SCHEDULE TESTS
# ============================================================================

class TestGeneratePaymentSchedule:
    """Test credit-card style fixed payment schedules."""

    def test_pays_off(self):
        schedule = generate_payment_schedule(1000, 12, 100)

        assert schedule.status == "paid_off"
        assert len(schedule) == 11
        assert schedule[0].interest == pytest.approx(10.0)
        assert schedule[-1].balance <= 0.01

    def test_entries_have_no_running_totals(self):
        schedule = generate_payment_schedule(1000, 12, 100)
        assert schedule[0].cumulative_interest is None

    def test_payment_below_interest_is_non_convergent(self):
        schedule = generate_payment_schedule(5000, 24, 90)

        assert len(schedule) == 0
        assert schedule.status == "non_convergent"

    def test_cap_exhausted(self):
        schedule = generate_payment_schedule(10_000, 12, 101, max_months=12)

        assert len(schedule) == 12
        assert schedule.status == "cap_exhausted"
        assert schedule.final_balance > 0.01

    def test_default_cap_from_policy(self):
        policy = PayoffPolicy(schedule_month_cap=6)
        schedule = generate_payment_schedule(10_000, 12, 150, policy=policy)

        assert len(schedule) == 6
        assert schedule.status == "cap_exhausted"

    def test_zero_balance(self):
        schedule = generate_payment_schedule(0, 19.99, 50)
        assert len(schedule) == 0
        assert schedule.status == "paid_off"


# ============================================================================
# DERIVED FIGURES TESTS
# ============================================================================

class TestDerivedFigures:
    """Test total_interest, payoff_date and prepayment_scenario."""

    def test_total_interest_matches_schedule(self):
        assert total_interest(200_000, 6, 360) == pytest.approx(
            generate_schedule(200_000, 6, 360).total_interest
        )

    def test_total_interest_zero_rate(self):
        assert total_interest(1200, 0, 12) == 0.0

    def test_payoff_date(self):
        assert payoff_date(date(2025, 1, 15), 1200, 0, 12) == date(2026, 1, 15)

    def test_payoff_date_with_extra(self):
        """1200 at 0% with 100 scheduled + 100 extra takes 6 months."""
        assert payoff_date(date(2025, 1, 1), 1200, 0, 12, extra_payment=100) == date(2025, 7, 1)

    def test_underpayment_never_pays_off(self):
        """A payment short of the first month's interest never retires the loan."""
        assert generate_schedule(10_000, 12, 60, extra_payment=-500).status == "non_convergent"
        assert is_never(total_interest(10_000, 12, 60, extra_payment=-500))
        assert payoff_date(date(2025, 1, 1), 10_000, 12, 60, extra_payment=-500) is None

    def test_term_runs_out_before_payoff(self):
        """50 a month against 1200 at 0% leaves 600 after the 12-month term."""
        assert generate_schedule(1200, 0, 12, extra_payment=-50).status == "cap_exhausted"
        assert is_never(total_interest(1200, 0, 12, extra_payment=-50))
        assert payoff_date(date(2025, 1, 1), 1200, 0, 12, extra_payment=-50) is None

    def test_prepayment_scenario(self):
        scenario = prepayment_scenario(200_000, 6, 360, 200)

        assert scenario.regular.months == 360
        assert scenario.with_extra.months < 360
        assert scenario.months_saved == scenario.regular.months - scenario.with_extra.months
        assert scenario.interest_saved > 0
        assert scenario.interest_saved == pytest.approx(
            scenario.regular.total_interest - scenario.with_extra.total_interest
        )

    def test_prepayment_scenario_without_extra(self):
        scenario = prepayment_scenario(10_000, 5, 60, 0)
        assert scenario.months_saved == 0
        assert scenario.interest_saved == pytest.approx(0.0)


class TestScheduleRecords:
    """Test AmortizationSchedule sequence behaviour."""

    def test_sequence_protocol(self):
        entry = LedgerEntry(month=1, payment=100.0, principal=100.0, interest=0.0, balance=0.0)
        schedule = AmortizationSchedule((entry,), "paid_off", 100.0, 100.0)

        assert len(schedule) == 1
        assert list(schedule) == [entry]
        assert schedule[0] is entry
        assert schedule.total_paid == 100.0
        assert schedule.total_principal == 100.0
