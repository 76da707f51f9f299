"""Utility functions for the debt calculator.

This module provides helpers for parsing user input into Python data types,
for rounding money to cents and for handling dates, including adding months
to a payment date. It uses Python's ``datetime`` module to calculate month
offsets.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def decimal_from_str(value: Number) -> Decimal:
    """Convert a numeric string (or number) into a ``Decimal``.

    The function strips any commas and surrounding whitespace. Floats are
    converted through ``str`` so that ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion. It raises ``ValueError`` if conversion fails.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value}")
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round a monetary amount to two decimal places (half up)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` (or ``YYYY-MM``) string into a ``date``.

    A bare year-month resolves to the first day of that month.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    text = value.strip()
    for fmt in ("%Y-%m-%d", "%Y-%m"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date string: {value}")
