"""Data models for the debt calculator.

This module defines dataclasses representing the entities used by the
calculator: the user's financial profile, a debt snapshot, the rows and
summary of an amortization schedule, and the rate equivalences shown next to a
simulation. Using dataclasses makes it easy to construct, inspect and
serialize these structures.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Tuple

RISK_PROFILES: Tuple[str, ...] = ("conservative", "moderate", "aggressive")

PROFILE_ID = "current-profile"


@dataclass
class UserProfile:
    """The single financial profile kept by the application.

    Attributes
    ----------
    name: str
        Display name of the user.
    monthly_income: Decimal
        Net income per month.
    monthly_expenses: Decimal
        Recurring expenses per month, excluding debt payments.
    risk_profile: str
        One of ``RISK_PROFILES``.
    """

    name: str
    monthly_income: Decimal
    monthly_expenses: Decimal
    risk_profile: str
    updated_at: datetime
    id: str = PROFILE_ID


@dataclass
class Debt:
    """A fixed-rate debt as stored by the user.

    Attributes
    ----------
    current_balance: Decimal
        Principal owed today. The schedule starts from this amount.
    interest_rate_annual: Decimal
        Nominal annual rate in percent (``12`` means 12 %/year), compounded
        monthly by dividing by 12.
    monthly_payment: Decimal
        Fixed total paid each month: principal, interest and insurance.
    insurance_cost: Decimal
        Fixed insurance charge added every month regardless of balance.
    months_remaining: int
        Contractual months left. Only bounds the length of a simulation.
    """

    id: str
    loan_name: str
    original_amount: Decimal
    current_balance: Decimal
    interest_rate_annual: Decimal
    monthly_payment: Decimal
    insurance_cost: Decimal
    months_remaining: int
    created_at: datetime
    updated_at: datetime


@dataclass
class AmortizationRow:
    """One month of an amortization schedule.

    Monetary fields are rounded to cents. ``total_payment`` is always the
    debt's fixed monthly payment, even on the final month when less principal
    remains to be paid.
    """

    month_number: int
    payment_date: date
    principal_paid: Decimal
    interest_paid: Decimal
    insurance_paid: Decimal
    total_payment: Decimal
    remaining_balance: Decimal


@dataclass
class AmortizationSummary:
    """Aggregate figures of a schedule.

    Totals are accumulated at full precision and rounded once, so they may
    differ by a cent or two from summing the rounded rows.
    """

    total_principal: Decimal
    total_interest: Decimal
    total_insurance: Decimal
    total_paid: Decimal
    months: int
    payoff_date: date


@dataclass
class AmortizationResult:
    schedule: List[AmortizationRow]
    summary: AmortizationSummary


@dataclass
class RateEquivalences:
    """Equivalent expressions of a debt's annual rate (as fractions)."""

    effective_annual: Decimal
    effective_monthly: Decimal
    nominal_annual: Decimal
    nominal_monthly: Decimal
