"""Shared fixtures for the debt calculator tests."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from debt_calc.data_models import Debt
from debt_calc.logging_config import LOGGER_NAME
from debt_calc.store import FinancialStore

ANCHOR = date(2026, 1, 15)


def _money(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers installed by the CLI/web entry points after each test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def anchor() -> date:
    """Fixed first payment date so schedules are deterministic."""
    return ANCHOR


@pytest.fixture
def make_debt():
    """Factory for ``Debt`` snapshots; defaults match the sample loan."""

    def _make(**overrides) -> Debt:
        values = {
            "id": "test-debt",
            "loan_name": "Sample Loan",
            "original_amount": 10000,
            "current_balance": 10000,
            "interest_rate_annual": 12,
            "monthly_payment": 900,
            "insurance_cost": 40,
            "months_remaining": 18,
        }
        values.update(overrides)
        for key in (
            "original_amount",
            "current_balance",
            "interest_rate_annual",
            "monthly_payment",
            "insurance_cost",
        ):
            values[key] = _money(values[key])
        now = datetime(2026, 1, 1, 12, 0, 0)
        return Debt(created_at=now, updated_at=now, **values)

    return _make


@pytest.fixture
def debt_form():
    """Raw form payload for a valid debt, as strings."""
    return {
        "loan_name": "Car loan",
        "original_amount": "12000",
        "current_balance": "10000",
        "interest_rate_annual": "12",
        "monthly_payment": "900",
        "insurance_cost": "40",
        "months_remaining": "18",
    }


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'debt_calc_test.sqlite3'}"


@pytest.fixture
def store(database_url):
    store = FinancialStore(database_url)
    yield store
    store.dispose()


@pytest.fixture
def money_close():
    """Assert two amounts are within ``tolerance`` of each other."""

    def _check(actual, expected, tolerance="0.005") -> None:
        diff = abs(_money(actual) - _money(expected))
        assert diff <= _money(tolerance), f"{actual} != {expected} (diff {diff})"

    return _check
