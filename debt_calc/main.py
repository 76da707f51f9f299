"""Command-line interface for the debt calculator.

This module uses the ``click`` library to implement a multi-command
interface. Users can simulate a debt given inline, keep a profile and a list
of debts in the store, and review the amortization schedule of a stored debt.
Schedules can be printed to the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .config import Settings
from .data_models import RISK_PROFILES, AmortizationResult, Debt
from .engine import PaymentInsufficientError, calculate_amortization, rate_equivalences
from .formatter import (
    print_debts,
    print_profile,
    print_rate_equivalences,
    print_schedule,
    print_summary,
    serialize_schedule,
    serialize_summary,
)
from .logging_config import configure_logging
from .planner import DebtPlanner
from .store import FinancialStore, create_store_from_env, debt_to_dict
from .utils import decimal_from_str, parse_date
from .validation import InputValidationError, parse_debt_input


def parse_amount(value: str) -> str:
    """Expand shorthand amounts with ``k``/``m`` suffixes.

    Accepts plain numbers ("25000") and shorthand (e.g., "25k" meaning
    25_000). Returns a plain numeric string for the validators.
    """
    text = value.strip().lower().replace(",", "")
    factor = 1
    if text.endswith("k"):
        factor = 1_000
        text = text[:-1]
    elif text.endswith("m"):
        factor = 1_000_000
        text = text[:-1]
    try:
        return str(decimal_from_str(text) * factor)
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def _amount_callback(ctx, param, value):
    return parse_amount(value) if value is not None else None


def _start_date_callback(ctx, param, value) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_debt(fields: Dict[str, Any], debt_id: str = "inline") -> Debt:
    """Build an unsaved ``Debt`` from validated fields."""
    now = datetime.now()
    return Debt(id=debt_id, created_at=now, updated_at=now, **fields)


def export_to_json(path: Path, result: AmortizationResult) -> None:
    """Export schedule and summary to a JSON file."""
    data = {
        "summary": serialize_summary(result.summary),
        "schedule": serialize_schedule(result.schedule),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, result: AmortizationResult) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Month",
        "Payment_Date",
        "Principal",
        "Interest",
        "Insurance",
        "Total_Payment",
        "Remaining_Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in result.schedule:
            writer.writerow(
                [
                    row.month_number,
                    row.payment_date.isoformat(),
                    f"{row.principal_paid:.2f}",
                    f"{row.interest_paid:.2f}",
                    f"{row.insurance_paid:.2f}",
                    f"{row.total_payment:.2f}",
                    f"{row.remaining_balance:.2f}",
                ]
            )


def _amortize(debt: Debt, start_date: Optional[date]) -> AmortizationResult:
    try:
        return calculate_amortization(debt, start_date)
    except PaymentInsufficientError as exc:
        raise click.ClickException(str(exc))


def _output_result(result: AmortizationResult, output: Optional[str], full: bool, max_rows: int) -> None:
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result.summary)
    schedule = result.schedule
    # Limit schedule length printed to avoid flooding the terminal
    if not full and len(schedule) > max_rows:
        click.echo(f"Schedule has {len(schedule)} rows; showing first {max_rows} rows.")
        schedule = schedule[:max_rows]
    print_schedule(schedule)


def _store(ctx: click.Context) -> FinancialStore:
    settings: Settings = ctx.obj
    return create_store_from_env(settings.database_url)


def _validated(parse, data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return parse(data)
    except InputValidationError as exc:
        raise click.ClickException("; ".join(exc.errors))


schedule_options = [
    click.option("--start-date", "-s", "start_date", callback=_start_date_callback, help="First payment date (YYYY-MM-DD); defaults to today"),
    click.option("--output", "output", type=str, help="Output file path (.json or .csv)"),
    click.option("--full", "full", is_flag=True, help="Print every row instead of the first rows only"),
]


def with_schedule_options(func):
    for option in reversed(schedule_options):
        func = option(func)
    return func


@click.group()
@click.option("--database-url", "database_url", help="SQLAlchemy database URL (overrides DEBT_CALC_DATABASE_URL)")
@click.option("--log-level", "log_level", help="Logging level (overrides DEBT_CALC_LOG_LEVEL)")
@click.pass_context
def cli(ctx: click.Context, database_url: Optional[str], log_level: Optional[str]) -> None:
    """Record a financial profile and fixed-rate debts, and amortize them."""
    settings = Settings.from_env()
    if database_url:
        settings.database_url = database_url
    if log_level:
        settings.log_level = log_level.upper()
    configure_logging(settings.log_level, settings.log_json)
    ctx.obj = settings


@cli.command()
@click.option("--balance", "-b", "current_balance", required=True, callback=_amount_callback, help="Current balance")
@click.option("--rate", "-r", "interest_rate_annual", required=True, help="Annual interest rate (percent)")
@click.option("--payment", "-p", "monthly_payment", required=True, callback=_amount_callback, help="Fixed monthly payment, insurance included")
@click.option("--insurance", "-i", "insurance_cost", default="0", show_default=True, callback=_amount_callback, help="Monthly insurance cost")
@click.option("--months", "-m", "months_remaining", required=True, help="Months remaining on the loan")
@with_schedule_options
@click.pass_context
def simulate(
    ctx: click.Context,
    current_balance: str,
    interest_rate_annual: str,
    monthly_payment: str,
    insurance_cost: str,
    months_remaining: str,
    start_date: Optional[date],
    output: Optional[str],
    full: bool,
) -> None:
    """Amortize a debt given on the command line without saving it."""
    fields = _validated(
        parse_debt_input,
        {
            "loan_name": "inline",
            "original_amount": current_balance,
            "current_balance": current_balance,
            "interest_rate_annual": interest_rate_annual,
            "monthly_payment": monthly_payment,
            "insurance_cost": insurance_cost,
            "months_remaining": months_remaining,
        },
    )
    result = _amortize(build_debt(fields), start_date)
    _output_result(result, output, full, ctx.obj.max_rows)


@cli.command()
@click.option("--rate", "-r", "interest_rate_annual", required=True, help="Annual interest rate (percent)")
def rates(interest_rate_annual: str) -> None:
    """Show effective and nominal equivalents of an annual rate."""
    try:
        rate = decimal_from_str(interest_rate_annual)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    if rate < 0:
        raise click.BadParameter("Interest rate cannot be negative")
    print_rate_equivalences(rate_equivalences(rate))


@cli.group()
def debt() -> None:
    """Manage stored debts."""


@debt.command("add")
@click.option("--id", "debt_id", help="Id of an existing debt to update")
@click.option("--name", "-n", "loan_name", required=True, help="Loan name")
@click.option("--original-amount", "original_amount", callback=_amount_callback, help="Original loan amount (defaults to the balance)")
@click.option("--balance", "-b", "current_balance", required=True, callback=_amount_callback, help="Current balance")
@click.option("--rate", "-r", "interest_rate_annual", required=True, help="Annual interest rate (percent)")
@click.option("--payment", "-p", "monthly_payment", required=True, callback=_amount_callback, help="Fixed monthly payment, insurance included")
@click.option("--insurance", "-i", "insurance_cost", default="0", show_default=True, callback=_amount_callback, help="Monthly insurance cost")
@click.option("--months", "-m", "months_remaining", required=True, help="Months remaining on the loan")
@click.pass_context
def debt_add(ctx: click.Context, debt_id: Optional[str], original_amount: Optional[str], **fields: str) -> None:
    """Save a new debt, or update one with --id."""
    fields["original_amount"] = original_amount or fields["current_balance"]
    planner = DebtPlanner(_store(ctx))
    planner.init()
    try:
        saved = planner.save_debt(fields, debt_id=debt_id)
    except InputValidationError as exc:
        raise click.ClickException("; ".join(exc.errors))
    click.echo(f"Saved debt {saved.id} ({saved.loan_name})")
    failure = planner.failures.get(saved.id)
    if failure:
        click.echo(f"Warning: {failure}", err=True)


@debt.command("list")
@click.pass_context
def debt_list(ctx: click.Context) -> None:
    """List stored debts."""
    planner = DebtPlanner(_store(ctx))
    planner.init()
    if not planner.debts:
        click.echo("No debts saved.")
        return
    print_debts(planner.debts)
    for debt_id, message in planner.failures.items():
        click.echo(f"{debt_id}: {message}", err=True)


@debt.command("show")
@click.argument("debt_id")
@with_schedule_options
@click.pass_context
def debt_show(ctx: click.Context, debt_id: str, start_date: Optional[date], output: Optional[str], full: bool) -> None:
    """Print the amortization schedule of a stored debt."""
    stored = _store(ctx).get_debt(debt_id)
    if stored is None:
        raise click.ClickException(f"No debt with id {debt_id}")
    print_debts([stored])
    print_rate_equivalences(rate_equivalences(stored.interest_rate_annual))
    result = _amortize(stored, start_date)
    _output_result(result, output, full, ctx.obj.max_rows)


@debt.command("edit")
@click.argument("debt_id")
@click.option("--name", "-n", "loan_name", help="Loan name")
@click.option("--original-amount", "original_amount", callback=_amount_callback, help="Original loan amount")
@click.option("--balance", "-b", "current_balance", callback=_amount_callback, help="Current balance")
@click.option("--rate", "-r", "interest_rate_annual", help="Annual interest rate (percent)")
@click.option("--payment", "-p", "monthly_payment", callback=_amount_callback, help="Fixed monthly payment, insurance included")
@click.option("--insurance", "-i", "insurance_cost", callback=_amount_callback, help="Monthly insurance cost")
@click.option("--months", "-m", "months_remaining", help="Months remaining on the loan")
@click.pass_context
def debt_edit(ctx: click.Context, debt_id: str, **changes: Optional[str]) -> None:
    """Change some fields of a stored debt."""
    planner = DebtPlanner(_store(ctx))
    planner.init()
    stored = planner.store.get_debt(debt_id)
    if stored is None:
        raise click.ClickException(f"No debt with id {debt_id}")
    fields = debt_to_dict(stored)
    fields.update({key: value for key, value in changes.items() if value is not None})
    try:
        saved = planner.save_debt(fields, debt_id=debt_id)
    except InputValidationError as exc:
        raise click.ClickException("; ".join(exc.errors))
    click.echo(f"Saved debt {saved.id} ({saved.loan_name})")
    failure = planner.failures.get(saved.id)
    if failure:
        click.echo(f"Warning: {failure}", err=True)


@debt.command("remove")
@click.argument("debt_id")
@click.pass_context
def debt_remove(ctx: click.Context, debt_id: str) -> None:
    """Delete a stored debt."""
    if not _store(ctx).remove_debt(debt_id):
        raise click.ClickException(f"No debt with id {debt_id}")
    click.echo(f"Removed debt {debt_id}")


@cli.group()
def profile() -> None:
    """Manage the financial profile."""


@profile.command("set")
@click.option("--name", "-n", "name", required=True, help="Your name")
@click.option("--income", "monthly_income", required=True, callback=_amount_callback, help="Monthly income")
@click.option("--expenses", "monthly_expenses", required=True, callback=_amount_callback, help="Monthly expenses")
@click.option("--risk", "risk_profile", type=click.Choice(RISK_PROFILES), default="moderate", show_default=True, help="Risk profile")
@click.pass_context
def profile_set(ctx: click.Context, **fields: str) -> None:
    """Save the financial profile."""
    try:
        saved = _store(ctx).save_profile(fields)
    except InputValidationError as exc:
        raise click.ClickException("; ".join(exc.errors))
    print_profile(saved)


@profile.command("show")
@click.pass_context
def profile_show(ctx: click.Context) -> None:
    """Print the financial profile."""
    print_profile(_store(ctx).load_profile())


if __name__ == "__main__":
    cli()
