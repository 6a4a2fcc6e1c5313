"""
Command-Line Interface for DebtPath.

Purpose
-------
Runs the loan, card, payoff and comparison calculations from the shell
and renders the results as tables. All currency and percentage formatting
lives here; the calculation modules return raw numbers.

Commands
--------
- loan: Payment, cost and payoff date of an amortizing loan
- card: Payoff time and interest for a fixed card payment
- payoff: Simulate a debts file under one strategy
- compare: Avalanche vs. snowball with a recommendation
- refinance: Is refinancing worth it?
- config: Create and validate debts files
- info: Version and dependency information

Example Usage
-------------
    $ debtpath loan --principal 200000 --rate 6 --term 360 --extra 200
    $ debtpath loan --file loan.json
    $ debtpath config create debts.json
    $ debtpath compare --debts debts.json --extra 300
    $ debtpath payoff --debts debts.json --strategy snowball -o plan.json
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from .config import AppSettings, build_policy
from .exceptions import DebtPathError
from .logging_config import configure_logging
from .utils import is_never

__version__ = "0.1.0"


def _money(value: Optional[float]) -> str:
    if value is None or is_never(value):
        return "never"
    return f"${value:,.2f}"


def _months(value: Optional[float]) -> str:
    if value is None or is_never(value):
        return "never"
    return f"{int(value)} months"


def _date(value: Optional[date]) -> str:
    return value.isoformat() if value else "never"


def _echo_table(ctx: click.Context, table: Table) -> None:
    if not ctx.obj["quiet"]:
        ctx.obj["console"].print(table)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="debtpath")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    DebtPath - Debt amortization and payoff planning.

    Builds loan schedules, card payoff estimates and multi-debt
    avalanche/snowball plans.

    Use 'debtpath COMMAND --help' for command-specific help.
    """
    settings = AppSettings()
    configure_logging(settings)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = Console()
    ctx.obj["settings"] = settings
    ctx.obj["policy"] = settings.policy


# ---------------------------------------------------------------------------
# Single debts
# ---------------------------------------------------------------------------

@main.command()
@click.option(
    "--file", "-f", "loan_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Loan JSON file; options given on the command line override it"
)
@click.option("--principal", "-p", type=float, default=None, help="Amount borrowed")
@click.option("--rate", "-r", type=float, default=None, help="Annual rate in percent (e.g., 6.5)")
@click.option("--term", "-t", type=int, default=None, help="Term in months")
@click.option("--extra", "-e", type=float, default=None, help="Monthly prepayment (default: 0)")
@click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Loan start date YYYY-MM-DD (default: today)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the full schedule to this JSON file"
)
@click.pass_context
def loan(
    ctx: click.Context,
    loan_file: Optional[Path],
    principal: Optional[float],
    rate: Optional[float],
    term: Optional[int],
    extra: Optional[float],
    start,
    output: Optional[Path],
) -> None:
    """
    Amortize a loan.

    Example:
        debtpath loan -p 25000 -r 7.9 -t 60 --extra 100
        debtpath loan -f loan.json
    """
    from .amortization import generate_schedule, prepayment_scenario
    from .serialization import load_loan, schedule_to_dict, save_result
    from .utils import add_months

    start_date = start.date() if start else None
    if loan_file:
        try:
            loan_config = load_loan(loan_file)
        except DebtPathError as e:
            _fail(str(e))
        principal = loan_config.principal if principal is None else principal
        rate = loan_config.annual_rate if rate is None else rate
        term = loan_config.term_months if term is None else term
        extra = loan_config.extra_payment if extra is None else extra
        start_date = start_date or loan_config.start_date

    missing = [
        name for name, value in (("--principal", principal), ("--rate", rate), ("--term", term))
        if value is None
    ]
    if missing:
        raise click.UsageError(f"Missing option(s) {', '.join(missing)} (or give --file)")
    extra = extra or 0.0
    start_date = start_date or date.today()

    policy = ctx.obj["policy"]
    schedule = generate_schedule(principal, rate, term, extra, policy=policy)
    paid_off = schedule.converged

    table = Table(title="Loan Summary", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Monthly payment", _money(schedule.monthly_payment))
    table.add_row("Months", f"{schedule.months}" if paid_off else "never")
    table.add_row("Total interest", _money(schedule.total_interest) if paid_off else "never")
    table.add_row("Total paid", _money(schedule.total_paid))
    table.add_row(
        "Payoff date",
        _date(add_months(start_date, schedule.months) if paid_off else None),
    )
    table.add_row("Status", schedule.status)

    if extra > 0:
        scenario = prepayment_scenario(principal, rate, term, extra, policy=policy)
        table.add_row("", "")
        table.add_row("Interest saved", _money(scenario.interest_saved))
        table.add_row("Months saved", f"{scenario.months_saved}")

    _echo_table(ctx, table)

    if not paid_off and not ctx.obj["quiet"]:
        click.echo(
            f"Warning: loan is not paid off ({schedule.status}), "
            f"{_money(schedule.final_balance)} left after {schedule.months} months"
        )

    if output:
        save_result(schedule_to_dict(schedule), output)
        if not ctx.obj["quiet"]:
            click.echo(f"Schedule saved to {output}")


@main.command()
@click.option("--balance", "-b", type=float, required=True, help="Card balance")
@click.option("--apr", "-a", type=float, required=True, help="APR in percent")
@click.option("--payment", "-p", type=float, required=True, help="Monthly payment")
@click.option("--limit", "-l", type=float, default=None, help="Credit limit")
@click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Start date YYYY-MM-DD (default: today)"
)
@click.pass_context
def card(
    ctx: click.Context,
    balance: float,
    apr: float,
    payment: float,
    limit: Optional[float],
    start,
) -> None:
    """
    Estimate credit card payoff at a fixed payment.

    Example:
        debtpath card -b 4200 -a 24.99 -p 150 --limit 8000
    """
    from .metrics import (
        available_credit,
        payoff_date_for_payment,
        payoff_months,
        total_interest_for_payment,
        utilization,
    )

    start_date = start.date() if start else date.today()
    months = payoff_months(balance, apr, payment)

    table = Table(title="Card Payoff", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Months to payoff", _months(months))
    table.add_row("Total interest", _money(total_interest_for_payment(balance, apr, payment)))
    table.add_row("Payoff date", _date(payoff_date_for_payment(balance, apr, payment, start_date)))
    if limit is not None:
        table.add_row("Utilization", f"{utilization(balance, limit):.1f}%")
        table.add_row("Available credit", _money(available_credit(balance, limit)))
    _echo_table(ctx, table)

    if is_never(months):
        click.echo("Warning: payment does not cover monthly interest", err=True)


@main.command()
@click.option("--balance", type=float, required=True, help="Current loan balance")
@click.option("--rate", type=float, required=True, help="Current annual rate in percent")
@click.option("--payment", type=float, required=True, help="Current monthly payment")
@click.option("--remaining", type=int, required=True, help="Remaining months on current loan")
@click.option("--new-rate", type=float, required=True, help="New annual rate in percent")
@click.option("--new-term", type=int, required=True, help="New term in months")
@click.option("--closing-costs", type=float, default=0.0, help="Refinance closing costs")
@click.option("--break-even", type=float, default=None, help="Override break-even threshold (months)")
@click.pass_context
def refinance(
    ctx: click.Context,
    balance: float,
    rate: float,
    payment: float,
    remaining: int,
    new_rate: float,
    new_term: int,
    closing_costs: float,
    break_even: Optional[float],
) -> None:
    """
    Compare keeping a loan with refinancing it.

    Example:
        debtpath refinance --balance 250000 --rate 7 --payment 1800 \\
            --remaining 300 --new-rate 5.5 --new-term 300 --closing-costs 4000
    """
    from .metrics import refinance_analysis

    try:
        policy = ctx.obj["policy"]
        if break_even is not None:
            policy = build_policy(**{**policy.model_dump(), "refinance_break_even_months": break_even})
    except DebtPathError as e:
        _fail(str(e))

    analysis = refinance_analysis(
        balance, rate, payment, remaining, new_rate, new_term, closing_costs, policy=policy
    )

    table = Table(title="Refinance Analysis", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Current", justify="right")
    table.add_column("Refinance", justify="right")
    table.add_row(
        "Monthly payment",
        _money(analysis.current.monthly_payment),
        _money(analysis.refinance.new_monthly_payment),
    )
    table.add_row(
        "Total interest",
        _money(analysis.current.total_interest),
        _money(analysis.refinance.total_interest),
    )
    table.add_row("Closing costs", "", _money(analysis.refinance.closing_costs))
    _echo_table(ctx, table)

    savings = analysis.savings
    verdict = "worth it" if savings.worth_it else "not worth it"
    click.echo(f"Net interest saved: {_money(savings.total_interest_saved)}")
    click.echo(f"Break-even: {_months(savings.break_even_months)}")
    click.echo(f"Verdict: {verdict}")


# ---------------------------------------------------------------------------
# Portfolios
# ---------------------------------------------------------------------------

def _load_debts(path: Path):
    from .serialization import load_portfolio, portfolio_debts

    try:
        config = load_portfolio(path)
    except DebtPathError as e:
        _fail(str(e))
    return config, portfolio_debts(config)


def _timeline_table(timeline, title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Debt", style="cyan")
    table.add_column("Paid off", justify="right")
    table.add_column("Interest", justify="right")
    table.add_column("Total paid", justify="right")
    for r in timeline.debts:
        when = f"month {r.payoff_month}" if r.resolved else "unresolved"
        table.add_row(r.debt_name, when, _money(r.total_interest), _money(r.total_paid))
    table.add_row("Total", f"{timeline.total_months} months",
                  _money(timeline.total_interest), _money(timeline.total_paid))
    return table


@main.command()
@click.option(
    "--debts", "-d",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to debts file (JSON)"
)
@click.option(
    "--strategy", "-s",
    type=click.Choice(["avalanche", "snowball", "custom"]),
    default=None,
    help="Payoff strategy (default: from file)"
)
@click.option("--extra", "-e", type=float, default=None, help="Monthly extra payment (default: from file)")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the timeline to this JSON file"
)
@click.pass_context
def payoff(
    ctx: click.Context,
    debts: Path,
    strategy: Optional[str],
    extra: Optional[float],
    output: Optional[Path],
) -> None:
    """
    Simulate paying off a portfolio of debts.

    Example:
        debtpath payoff -d debts.json --strategy snowball --extra 250
    """
    from .payoff import simulate_payoff
    from .serialization import save_result, timeline_to_dict

    config, items = _load_debts(debts)
    strategy = strategy or config.strategy
    extra = config.extra_payment if extra is None else extra

    timeline = simulate_payoff(items, extra, strategy, policy=ctx.obj["policy"])
    _echo_table(ctx, _timeline_table(timeline, f"{strategy.title()} Plan"))

    if not timeline.completed:
        click.echo(
            f"Warning: {len(timeline.unresolved)} debt(s) not paid off within "
            f"{timeline.total_months} months",
            err=True,
        )

    if output:
        save_result(timeline_to_dict(timeline, include_months=True), output)
        if not ctx.obj["quiet"]:
            click.echo(f"Timeline saved to {output}")


@main.command()
@click.option(
    "--debts", "-d",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to debts file (JSON)"
)
@click.option("--extra", "-e", type=float, default=None, help="Monthly extra payment (default: from file)")
@click.option("--threshold", type=float, default=None, help="Interest saved needed to recommend avalanche")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the comparison to this JSON file"
)
@click.pass_context
def compare(
    ctx: click.Context,
    debts: Path,
    extra: Optional[float],
    threshold: Optional[float],
    output: Optional[Path],
) -> None:
    """
    Compare avalanche and snowball payoff.

    Example:
        debtpath compare -d debts.json --extra 300
    """
    from .comparison import compare_strategies
    from .serialization import comparison_to_dict, save_result

    config, items = _load_debts(debts)
    extra = config.extra_payment if extra is None else extra

    policy = ctx.obj["policy"]
    if threshold is not None:
        try:
            policy = build_policy(**{**policy.model_dump(), "recommendation_threshold": threshold})
        except DebtPathError as e:
            _fail(str(e))

    comparison = compare_strategies(items, extra, policy=policy)

    table = Table(title="Strategy Comparison", show_header=True)
    table.add_column("Strategy", style="cyan")
    table.add_column("Months", justify="right")
    table.add_column("Interest", justify="right")
    table.add_column("Total paid", justify="right")
    for timeline in (comparison.avalanche, comparison.snowball):
        table.add_row(
            timeline.strategy.title(),
            f"{timeline.total_months}",
            _money(timeline.total_interest),
            _money(timeline.total_paid),
        )
    _echo_table(ctx, table)

    click.echo(f"Interest saved by avalanche: {_money(comparison.interest_saved)}")
    click.echo(f"Months saved by avalanche: {comparison.months_saved}")
    click.echo(f"Recommended: {comparison.recommended_strategy}")
    if not comparison.completed:
        click.echo("Warning: some debts are not paid off within the month cap", err=True)

    if output:
        save_result(comparison_to_dict(comparison), output)
        if not ctx.obj["quiet"]:
            click.echo(f"Comparison saved to {output}")


# ---------------------------------------------------------------------------
# Config management
# ---------------------------------------------------------------------------

@main.group()
def config() -> None:
    """
    Debts file management commands.
    """
    pass


@config.command("create")
@click.argument("output_file", type=click.Path(path_type=Path))
@click.pass_context
def config_create(ctx: click.Context, output_file: Path) -> None:
    """
    Create a starter debts file.

    Example:
        debtpath config create debts.json
    """
    from .payoff import DebtItem
    from .serialization import save_portfolio

    template = [
        DebtItem("card", "Credit card", 4200.0, 126.0, 24.99),
        DebtItem("car", "Car loan", 11500.0, 310.0, 6.9),
        DebtItem("student", "Student loan", 18000.0, 200.0, 4.5),
    ]
    save_portfolio(output_file, template, extra_payment=200.0, strategy="avalanche")

    if not ctx.obj["quiet"]:
        click.echo(f"Created debts file: {output_file}")


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, config_file: Path) -> None:
    """
    Validate a debts file.

    Example:
        debtpath config validate debts.json
    """
    config_data, items = _load_debts(config_file)

    if ctx.obj["quiet"]:
        return
    lines = [
        f"Debts: {len(items)}",
        f"Total balance: {_money(sum(d.balance for d in items))}",
        f"Total minimums: {_money(sum(d.minimum_payment for d in items))}",
        f"Extra payment: {_money(config_data.extra_payment)}",
        f"Strategy: {config_data.strategy}",
    ]
    ctx.obj["console"].print(Panel("\n".join(lines), title="Debts File Valid", border_style="green"))


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display version, dependencies and active policy.
    """
    info_lines = [
        f"DebtPath Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    for name in ("numpy", "pandas", "pydantic", "click", "rich"):
        try:
            mod = __import__(name)
            info_lines.append(f"{name}: {getattr(mod, '__version__', 'installed')}")
        except ImportError:
            info_lines.append(f"{name}: not installed")

    info_lines.append("")
    for key, value in ctx.obj["policy"].model_dump().items():
        info_lines.append(f"{key}: {value}")

    ctx.obj["console"].print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
