"""Output helpers for the debt calculator.

This module provides simple functions to render profiles, debts,
amortization schedules and summaries in a tabular text format using built-in
printing and string formatting.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from .data_models import AmortizationRow, AmortizationSummary, Debt, RateEquivalences, UserProfile


def format_currency(value: Decimal) -> str:
    return f"{value:,.2f}"


def format_percent(fraction: Decimal, places: int = 4) -> str:
    """Format a fraction (``0.12``) as a percentage (``12.0000%``)."""
    return f"{fraction * 100:.{places}f}%"


def print_profile(profile: Optional[UserProfile]) -> None:
    if profile is None:
        print("No profile saved.")
        return
    surplus = profile.monthly_income - profile.monthly_expenses
    print("Profile")
    print("-" * 72)
    print(f"Name               : {profile.name}")
    print(f"Monthly income     : {format_currency(profile.monthly_income)}")
    print(f"Monthly expenses   : {format_currency(profile.monthly_expenses)}")
    print(f"Monthly surplus    : {format_currency(surplus)}")
    print(f"Risk profile       : {profile.risk_profile}")
    print("-" * 72)


def print_debts(debts: Iterable[Debt]) -> None:
    """Print one line per debt."""
    headers = ["Id", "Name", "Balance", "Rate", "Payment", "Insurance", "Months"]
    print("\t".join(headers))
    for debt in debts:
        row = [
            debt.id,
            debt.loan_name,
            format_currency(debt.current_balance),
            f"{debt.interest_rate_annual:.2f}%",
            format_currency(debt.monthly_payment),
            format_currency(debt.insurance_cost),
            str(debt.months_remaining),
        ]
        print("\t".join(row))


def print_summary(summary: AmortizationSummary) -> None:
    """Print the totals of a schedule in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Total principal    : {format_currency(summary.total_principal)}")
    print(f"Total interest     : {format_currency(summary.total_interest)}")
    print(f"Total insurance    : {format_currency(summary.total_insurance)}")
    print(f"Total paid         : {format_currency(summary.total_paid)}")
    print(f"Months             : {summary.months}")
    print(f"Payoff date        : {summary.payoff_date.isoformat()}")
    print("-" * 72)


def print_rate_equivalences(rates: RateEquivalences) -> None:
    print(f"EA: {format_percent(rates.effective_annual)}")
    print(f"EM: {format_percent(rates.effective_monthly)}")
    print(f"Nominal annual: {format_percent(rates.nominal_annual)}")
    print(f"Nominal monthly: {format_percent(rates.nominal_monthly)}")


def print_schedule(schedule: Iterable[AmortizationRow]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Month", "Date", "Principal", "Interest", "Insurance", "Payment", "Balance"]
    print("\t".join(headers))
    for row in schedule:
        print(
            "\t".join(
                [
                    str(row.month_number),
                    row.payment_date.isoformat(),
                    f"{row.principal_paid:.2f}",
                    f"{row.interest_paid:.2f}",
                    f"{row.insurance_paid:.2f}",
                    f"{row.total_payment:.2f}",
                    f"{row.remaining_balance:.2f}",
                ]
            )
        )


def serialize_summary(summary: AmortizationSummary) -> Dict[str, Any]:
    """Convert a summary into a JSON-serialisable dictionary."""
    return {
        "total_principal": float(summary.total_principal),
        "total_interest": float(summary.total_interest),
        "total_insurance": float(summary.total_insurance),
        "total_paid": float(summary.total_paid),
        "months": summary.months,
        "payoff_date": summary.payoff_date.isoformat(),
    }


def serialize_schedule(schedule: Iterable[AmortizationRow]) -> List[Dict[str, Any]]:
    """Convert schedule rows into JSON-serialisable dictionaries."""
    return [
        {
            "month_number": row.month_number,
            "payment_date": row.payment_date.isoformat(),
            "principal_paid": float(row.principal_paid),
            "interest_paid": float(row.interest_paid),
            "insurance_paid": float(row.insurance_paid),
            "total_payment": float(row.total_payment),
            "remaining_balance": float(row.remaining_balance),
        }
        for row in schedule
    ]
