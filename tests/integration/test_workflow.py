"""
Integration test for full DebtPath workflow.

Tests the pipeline from a debts file through simulation and comparison to
saved results, and the single-loan path from schedule to derived figures.
"""

import json

import pytest
from click.testing import CliRunner

from debtpath.amortization import compute_monthly_payment, generate_schedule, prepayment_scenario
from debtpath.cli import main
from debtpath.comparison import compare_strategies
from debtpath.config import PayoffPolicy
from debtpath.metrics import (
    loan_to_value,
    pmi_removal_date,
    pmi_removal_month,
    total_housing_cost,
)
from debtpath.payoff import DebtItem, simulate_payoff
from debtpath.serialization import (
    comparison_to_dict,
    load_portfolio,
    portfolio_debts,
    save_portfolio,
    save_result,
)


@pytest.mark.integration
class TestFullWorkflow:
    """Integration tests for complete payoff planning workflow."""

    def test_portfolio_file_to_comparison(self, tmp_path, mixed_portfolio):
        """
        Save a portfolio, load it back, compare strategies, save the result.
        """
        # 1. Persist inputs
        debts_path = tmp_path / "debts.json"
        save_portfolio(debts_path, mixed_portfolio, extra_payment=300.0, strategy="snowball")

        # 2. Load and rebuild debts
        config = load_portfolio(debts_path)
        debts = portfolio_debts(config)
        assert debts == mixed_portfolio

        # 3. Simulate the configured strategy
        timeline = simulate_payoff(debts, config.extra_payment, config.strategy)
        assert timeline.completed
        assert timeline.strategy == "snowball"
        assert [r.debt_id for r in timeline.debts][0] == "card"

        # 4. Compare strategies
        comparison = compare_strategies(debts, config.extra_payment)
        assert comparison.snowball == timeline
        assert comparison.avalanche.total_interest <= comparison.snowball.total_interest

        # 5. Persist output
        out = tmp_path / "results" / "comparison.json"
        save_result(comparison_to_dict(comparison), out)
        data = json.loads(out.read_text())
        assert data["snowball"]["total_months"] == timeline.total_months

    def test_extra_payment_shortens_plan(self, mixed_portfolio):
        """More extra payment never lengthens the plan or raises its cost."""
        previous = None
        for extra in (0.0, 100.0, 250.0, 500.0):
            timeline = simulate_payoff(mixed_portfolio, extra, "avalanche")
            assert timeline.completed
            if previous is not None:
                assert timeline.total_months <= previous.total_months
                assert timeline.total_interest <= previous.total_interest
            previous = timeline

    def test_balance_frame_matches_results(self, mixed_portfolio, start_date):
        timeline = simulate_payoff(mixed_portfolio, 200.0, "avalanche")
        frame = timeline.balance_frame(start=start_date)

        assert len(frame) == timeline.total_months
        for result in timeline.debts:
            column = frame[result.debt_id]
            assert column.iloc[result.payoff_month - 1] <= 0.01
            if result.payoff_month > 1:
                assert column.iloc[result.payoff_month - 2] > 0.0

    def test_cap_with_custom_policy(self):
        """A policy month cap flows through comparison to both strategies."""
        debts = [
            DebtItem("stuck", "Stuck", 20_000.0, 50.0, 29.99),
            DebtItem("small", "Small", 300.0, 25.0, 0.0),
        ]
        policy = PayoffPolicy(simulation_month_cap=36)
        comparison = compare_strategies(debts, 0.0, policy=policy)

        assert not comparison.completed
        assert comparison.avalanche.total_months == 36
        assert comparison.snowball.total_months == 36


@pytest.mark.integration
class TestMortgageWorkflow:
    """Mortgage figures computed from one schedule."""

    def test_mortgage_summary(self, start_date):
        principal, value, rate, term = 360_000.0, 400_000.0, 6.5, 360
        payment = compute_monthly_payment(principal, rate, term)
        schedule = generate_schedule(principal, rate, term)

        assert loan_to_value(principal, value) == pytest.approx(90.0)
        assert total_housing_cost(payment, 400, 120, 0, 150) == pytest.approx(payment + 670)

        month = pmi_removal_month(principal, payment, rate, value)
        assert month is not None
        assert loan_to_value(schedule[month - 1].balance, value) <= 80.0
        assert pmi_removal_date(start_date, principal, payment, rate, value) > start_date

        scenario = prepayment_scenario(principal, rate, term, 250.0)
        assert scenario.with_extra.months < term
        # Prepaying also reaches 80% LTV sooner
        prepaid = pmi_removal_month(principal, payment + 250.0, rate, value)
        assert prepaid < month


@pytest.mark.integration
class TestCliWorkflow:
    """End-to-end CLI usage."""

    def test_create_validate_compare(self, tmp_path):
        runner = CliRunner()
        debts_path = tmp_path / "debts.json"
        output = tmp_path / "plan.json"

        result = runner.invoke(main, ["config", "create", str(debts_path)])
        assert result.exit_code == 0

        result = runner.invoke(main, ["config", "validate", str(debts_path)])
        assert result.exit_code == 0

        result = runner.invoke(main, ["compare", "-d", str(debts_path)])
        assert result.exit_code == 0
        assert "Recommended:" in result.output

        result = runner.invoke(main, ["--quiet", "payoff", "-d", str(debts_path), "-o", str(output)])
        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["completed"] is True
        assert {d["debt_id"] for d in data["debts"]} == {"card", "car", "student"}
