"""Command-line entry points for PayoffPilot."""

from __future__ import annotations

import json
from datetime import date

import click

from .config import BaseConfig
from .errors import DebtError
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelDebtRepository
from .logging_config import setup_logging
from .services import debt_service, payment_scheduler
from .services.debts import PayoffPlan


def _repo(ctx: click.Context) -> SQLModelDebtRepository:
    """Create the repository on first use so --help never touches the database."""

    obj = ctx.ensure_object(dict)
    if "repo" not in obj:
        config: BaseConfig = obj.get("config") or BaseConfig()
        setup_logging(config)
        _engine, session_factory = bootstrap_database(config)
        obj["repo"] = SQLModelDebtRepository(session_factory)
    return obj["repo"]


def _fail(exc: DebtError) -> None:
    raise click.ClickException(exc.user_message())


def _echo_plan(plan: PayoffPlan, *, plan_id: int | None, as_json: bool) -> None:
    if as_json:
        data = plan.to_dict()
        if plan_id is not None:
            data["plan_id"] = plan_id
        click.echo(json.dumps(data, indent=2))
        return

    header = f"Plan #{plan_id} " if plan_id is not None else ""
    click.echo(f"{header}({plan.strategy.value})")
    click.echo(f"  Debt-free by:   {plan.payoff_date.isoformat()} ({plan.months} months)")
    click.echo(f"  Total interest: ${plan.total_interest:,.2f}")
    for summary in plan.debt_summaries:
        click.echo(
            f"  - {summary.debt_name}: month {summary.payoff_month}, "
            f"interest ${summary.total_interest_paid:,.2f}"
        )


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track debts and plan their payoff."""

    ctx.ensure_object(dict)


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""

    _repo(ctx)
    click.echo("Database ready.")


@cli.command("add-debt")
@click.option("--name", required=True)
@click.option("--balance", type=float, required=True)
@click.option("--rate", "interest_rate", type=float, required=True, help="Annual percentage rate")
@click.option("--min-payment", type=float, required=True)
@click.pass_context
def add_debt(
    ctx: click.Context, name: str, balance: float, interest_rate: float, min_payment: float
) -> None:
    """Add a debt."""

    try:
        debt = debt_service.create_debt(
            _repo(ctx),
            name=name,
            balance=balance,
            interest_rate=interest_rate,
            min_payment=min_payment,
        )
    except DebtError as exc:
        _fail(exc)
    click.echo(f"Added debt #{debt.id}: {debt.name}")


@cli.command("list-debts")
@click.pass_context
def list_debts(ctx: click.Context) -> None:
    """List debts, largest balance first."""

    try:
        debts = debt_service.list_debts(_repo(ctx))
    except DebtError as exc:
        _fail(exc)
    if not debts:
        click.echo("No debts recorded.")
        return
    for debt in debts:
        click.echo(
            f"#{debt.id} {debt.name}: ${debt.balance:,.2f} at {debt.interest_rate:g}% "
            f"(min ${debt.min_payment:,.2f})"
        )


@cli.command("plan")
@click.option(
    "--strategy",
    type=click.Choice(["avalanche", "snowball"]),
    default="avalanche",
    show_default=True,
)
@click.option("--budget", type=float, required=True, help="Total monthly payment")
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def plan(ctx: click.Context, strategy: str, budget: float, as_json: bool) -> None:
    """Calculate and save a payoff plan."""

    try:
        plan_id, payoff = debt_service.create_payoff_plan(_repo(ctx), strategy, budget)
    except DebtError as exc:
        _fail(exc)
    _echo_plan(payoff, plan_id=plan_id, as_json=as_json)


@cli.command("show-plan")
@click.argument("plan_id", type=int)
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def show_plan(ctx: click.Context, plan_id: int, as_json: bool) -> None:
    """Recompute a saved plan against current balances."""

    try:
        payoff = debt_service.get_payoff_plan(_repo(ctx), plan_id)
    except DebtError as exc:
        _fail(exc)
    _echo_plan(payoff, plan_id=plan_id, as_json=as_json)


@cli.command("compare")
@click.option("--budget", type=float, required=True)
@click.option("--json", "as_json", is_flag=True, default=False)
@click.pass_context
def compare(ctx: click.Context, budget: float, as_json: bool) -> None:
    """Compare avalanche and snowball for the current debts."""

    try:
        result = debt_service.compare_strategies(_repo(ctx), budget)
    except DebtError as exc:
        _fail(exc)
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    for option in (result.avalanche, result.snowball):
        click.echo(
            f"{option.strategy.value:<10} {option.payoff_months:>4} months  "
            f"interest ${option.total_interest:,.2f}"
        )
    click.echo(
        f"Avalanche saves ${result.interest_saved:,.2f} and {result.months_saved} month(s)."
    )


@cli.command("pay")
@click.argument("debt_id", type=int)
@click.argument("amount", type=float)
@click.option("--date", "paid_on", type=click.DateTime(formats=["%Y-%m-%d"]), default=None)
@click.option("--plan-id", type=int, default=None)
@click.pass_context
def pay(ctx: click.Context, debt_id: int, amount: float, paid_on, plan_id: int | None) -> None:
    """Record a payment toward a debt."""

    when = paid_on.date() if paid_on else date.today()
    try:
        payment_id, balance = debt_service.record_payment(
            _repo(ctx), debt_id, amount, when, plan_id
        )
    except DebtError as exc:
        _fail(exc)
    click.echo(f"Payment #{payment_id} recorded. Remaining balance: ${balance:,.2f}")


@cli.command("schedule")
@click.option("--months", type=int, default=3, show_default=True)
@click.pass_context
def schedule(ctx: click.Context, months: int) -> None:
    """Show upcoming minimum payments."""

    try:
        debts = debt_service.list_debts(_repo(ctx))
    except DebtError as exc:
        _fail(exc)
    for bucket in payment_scheduler.generate_future_schedules(debts, months):
        click.echo(f"{bucket.month}: ${bucket.total_amount:,.2f}")
        for item in bucket.payments:
            click.echo(f"  {item.due_date.isoformat()}  {item.debt_name}  ${item.amount:,.2f}")


def main() -> None:  # pragma: no cover - console entry
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
