"""Core calculation engine for the debt calculator.

This module implements the amortization of a single fixed-rate debt: each
month the fixed payment first covers interest on the outstanding balance and
the fixed insurance charge, and whatever is left reduces principal. The
result is a list of ``AmortizationRow`` objects along with an
``AmortizationSummary``.

Monetary values are ``Decimal``. Rows are rounded to cents for reporting while
the summary totals are accumulated unrounded and rounded once at the end.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import List, Optional

from .data_models import (
    AmortizationResult,
    AmortizationRow,
    AmortizationSummary,
    Debt,
    RateEquivalences,
)
from .utils import add_months, round_money

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Residual balance treated as fully paid.
PAID_OFF_EPSILON = Decimal("0.01")
# Months simulated beyond the contractual term before giving up.
EXTRA_MONTHS = 120
MAX_PERIODS = 1200


class PaymentInsufficientError(ValueError):
    """Raised when a fixed payment cannot cover interest plus insurance.

    The loan would never amortize, so no schedule is produced. ``payment``
    holds the offending monthly payment.
    """

    def __init__(self, payment: Decimal) -> None:
        self.payment = payment
        super().__init__(
            f"Monthly payment {round_money(payment):.2f} is too low to cover "
            "interest and insurance"
        )


def monthly_rate_from_annual(interest_rate_annual: Decimal) -> Decimal:
    """Convert an annual nominal percentage into a monthly decimal rate."""
    return interest_rate_annual / Decimal(100) / Decimal(12)


def max_periods_for(months_remaining: int) -> int:
    """Return the number of months a simulation may run for a debt.

    The contractual term plus ten years of slack, never more than
    ``MAX_PERIODS``. This only stops runaway schedules; a debt that pays off
    earlier always stops earlier.
    """
    return min(max(months_remaining, 1) + EXTRA_MONTHS, MAX_PERIODS)


def calculate_amortization(debt: Debt, start_date: Optional[date] = None) -> AmortizationResult:
    """Compute the month-by-month amortization schedule for a debt.

    Parameters
    ----------
    debt: Debt
        A validated debt snapshot. The engine trusts the input invariants
        (non-negative amounts and rate, positive payment and term).
    start_date: date, optional
        Date of the first payment. Defaults to today. Later payments fall on
        the same day of following months; when that day does not exist the
        date is clamped to the end of the month and the schedule keeps the
        clamped day from then on (Jan 31 -> Feb 28 -> Mar 28).

    Returns
    -------
    AmortizationResult
        ``schedule`` with one row per month and the aggregate ``summary``.

    Raises
    ------
    PaymentInsufficientError
        If, for a loan with a positive rate, the payment leaves nothing for
        principal while a balance is still owed. Zero-rate loans never raise;
        an insufficient payment simply runs until the period limit.
    """
    anchor = start_date or date.today()
    monthly_rate = monthly_rate_from_annual(debt.interest_rate_annual)
    max_periods = max_periods_for(debt.months_remaining)

    schedule: List[AmortizationRow] = []
    balance = debt.current_balance
    period = 0
    total_principal = Decimal("0")
    total_interest = Decimal("0")
    total_insurance = Decimal("0")
    payment_date = anchor

    logger.debug(
        "Amortizing debt %s: balance=%s rate=%s payment=%s insurance=%s",
        debt.id,
        debt.current_balance,
        debt.interest_rate_annual,
        debt.monthly_payment,
        debt.insurance_cost,
    )

    while balance > PAID_OFF_EPSILON and period < max_periods:
        period += 1
        if period > 1:
            payment_date = add_months(payment_date, 1)

        interest_paid = balance * monthly_rate if monthly_rate > 0 else Decimal("0")
        insurance_paid = debt.insurance_cost
        total_payment = debt.monthly_payment
        principal_raw = total_payment - interest_paid - insurance_paid
        principal_paid = balance if principal_raw > balance else max(principal_raw, Decimal("0"))

        if principal_paid <= 0 and balance > PAID_OFF_EPSILON and monthly_rate > 0:
            logger.info(
                "Debt %s does not amortize: payment %s, interest %s, insurance %s",
                debt.id,
                total_payment,
                round_money(interest_paid),
                insurance_paid,
            )
            raise PaymentInsufficientError(total_payment)

        balance = max(balance - principal_paid, Decimal("0"))

        total_principal += principal_paid
        total_interest += interest_paid
        total_insurance += insurance_paid

        schedule.append(
            AmortizationRow(
                month_number=period,
                payment_date=payment_date,
                principal_paid=round_money(principal_paid),
                interest_paid=round_money(interest_paid),
                insurance_paid=round_money(insurance_paid),
                total_payment=round_money(total_payment),
                remaining_balance=round_money(balance),
            )
        )

    if balance > PAID_OFF_EPSILON:
        logger.warning(
            "Debt %s still owes %s after %d months; schedule stopped at the period limit",
            debt.id,
            round_money(balance),
            period,
        )

    payoff_date = schedule[-1].payment_date if schedule else anchor
    summary = AmortizationSummary(
        total_principal=round_money(total_principal),
        total_interest=round_money(total_interest),
        total_insurance=round_money(total_insurance),
        total_paid=round_money(total_principal + total_interest + total_insurance),
        months=len(schedule),
        payoff_date=payoff_date,
    )
    logger.debug("Debt %s amortized in %d months", debt.id, summary.months)
    return AmortizationResult(schedule=schedule, summary=summary)


def rate_equivalences(interest_rate_annual: Decimal) -> RateEquivalences:
    """Express a stored annual rate as effective and nominal equivalents.

    The stored percentage is read as an effective annual rate (EA). The
    effective monthly rate is ``(1 + EA) ** (1/12) - 1`` and the nominal
    annual rate is twelve times that.
    """
    effective_annual = interest_rate_annual / Decimal(100)
    effective_monthly = (Decimal(1) + effective_annual) ** (Decimal(1) / Decimal(12)) - 1
    nominal_annual = effective_monthly * 12
    return RateEquivalences(
        effective_annual=effective_annual,
        effective_monthly=effective_monthly,
        nominal_annual=nominal_annual,
        nominal_monthly=nominal_annual / 12,
    )
