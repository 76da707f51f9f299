"""Validation of profile and debt payloads.

Payloads come from forms and command-line options, so every value may arrive
as a string. The parsers coerce them into ``Decimal``/``int`` and check the
invariants the engine relies on. All problems are collected and raised
together as an ``InputValidationError``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from .data_models import RISK_PROFILES
from .utils import decimal_from_str

# Upper bounds keep every schedule figure within the 28-digit decimal context.
MAX_AMOUNT = Decimal("1e15")
MAX_RATE = Decimal("10000")
MAX_MONTHS = 1200


class InputValidationError(ValueError):
    """A payload failed validation.

    ``errors`` lists every message; ``str()`` of the exception is the first.
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__(self.errors[0] if self.errors else "Invalid input")


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value).strip()


def _decimal(
    data: Mapping[str, Any],
    key: str,
    label: str,
    errors: List[str],
    limit: Optional[Decimal] = MAX_AMOUNT,
) -> Optional[Decimal]:
    raw = data.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        errors.append(f"{label} is required")
        return None
    try:
        value = decimal_from_str(raw)
    except ValueError:
        errors.append(f"{label} must be a number")
        return None
    if limit is not None and value >= limit:
        errors.append(f"{label} is too large")
        return None
    return value


def _non_negative(value: Optional[Decimal], message: str, errors: List[str]) -> None:
    if value is not None and value < 0:
        errors.append(message)


def parse_profile_input(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a profile payload and return normalized field values."""
    errors: List[str] = []

    name = _text(data, "name")
    if not name:
        errors.append("Name is required")

    income = _decimal(data, "monthly_income", "Monthly income", errors)
    _non_negative(income, "Monthly income cannot be negative", errors)
    expenses = _decimal(data, "monthly_expenses", "Monthly expenses", errors)
    _non_negative(expenses, "Monthly expenses cannot be negative", errors)

    risk_profile = _text(data, "risk_profile").lower()
    if risk_profile not in RISK_PROFILES:
        errors.append(f"Risk profile must be one of: {', '.join(RISK_PROFILES)}")

    if errors:
        raise InputValidationError(errors)
    return {
        "name": name,
        "monthly_income": income,
        "monthly_expenses": expenses,
        "risk_profile": risk_profile,
    }


def parse_debt_input(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a debt payload and return normalized field values.

    The returned mapping holds ``Decimal`` amounts and an ``int``
    ``months_remaining``, ready to build a ``Debt``.
    """
    errors: List[str] = []

    loan_name = _text(data, "loan_name")
    if not loan_name:
        errors.append("Loan name is required")

    original_amount = _decimal(data, "original_amount", "Original amount", errors)
    _non_negative(original_amount, "Original amount cannot be negative", errors)
    current_balance = _decimal(data, "current_balance", "Current balance", errors)
    _non_negative(current_balance, "Current balance cannot be negative", errors)
    rate = _decimal(data, "interest_rate_annual", "Interest rate", errors, limit=MAX_RATE)
    _non_negative(rate, "Interest rate cannot be negative", errors)
    monthly_payment = _decimal(data, "monthly_payment", "Monthly payment", errors)
    if monthly_payment is not None and monthly_payment <= 0:
        errors.append("Monthly payment must be greater than zero")
    insurance_cost = _decimal(data, "insurance_cost", "Insurance cost", errors)
    _non_negative(insurance_cost, "Insurance cost cannot be negative", errors)

    months_remaining: Optional[int] = None
    months = _decimal(data, "months_remaining", "Months remaining", errors, limit=None)
    if months is not None:
        if months != months.to_integral_value():
            errors.append("Months remaining must be an integer")
        elif months <= 0:
            errors.append("Months remaining must be greater than zero")
        elif months > MAX_MONTHS:
            errors.append(f"Months remaining cannot exceed {MAX_MONTHS}")
        else:
            months_remaining = int(months)

    if errors:
        raise InputValidationError(errors)
    return {
        "loan_name": loan_name,
        "original_amount": original_amount,
        "current_balance": current_balance,
        "interest_rate_annual": rate,
        "monthly_payment": monthly_payment,
        "insurance_cost": insurance_cost,
        "months_remaining": months_remaining,
    }
