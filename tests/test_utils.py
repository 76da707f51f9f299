from datetime import date
from decimal import Decimal

import pytest

from debt_calc.config import Settings
from debt_calc.utils import add_months, decimal_from_str, parse_date, round_money


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (date(2026, 1, 15), 1, date(2026, 2, 15)),
        (date(2026, 12, 15), 1, date(2027, 1, 15)),
        (date(2026, 1, 31), 1, date(2026, 2, 28)),
        (date(2028, 1, 31), 1, date(2028, 2, 29)),
        (date(2026, 3, 31), 13, date(2027, 4, 30)),
    ],
)
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1,000.50", Decimal("1000.50")),
        (" 42 ", Decimal("42")),
        (0.1, Decimal("0.1")),
        (7, Decimal("7")),
        (Decimal("3.25"), Decimal("3.25")),
    ],
)
def test_decimal_from_str(value, expected):
    assert decimal_from_str(value) == expected


@pytest.mark.parametrize("value", ["abc", "", "inf", "NaN", True])
def test_decimal_from_str_rejects(value):
    with pytest.raises(ValueError):
        decimal_from_str(value)


def test_round_money_half_up():
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert round_money(Decimal("2.674999")) == Decimal("2.67")
    assert round_money(Decimal("-0.005")) == Decimal("-0.01")


def test_parse_date():
    assert parse_date("2026-03-31") == date(2026, 3, 31)
    assert parse_date("2026-03") == date(2026, 3, 1)
    with pytest.raises(ValueError, match="Invalid date string"):
        parse_date("31/03/2026")


def test_settings_defaults():
    settings = Settings.from_env({})

    assert settings.database_url == "sqlite:///debt_calc.sqlite3"
    assert settings.log_level == "WARNING"
    assert settings.log_json is False
    assert settings.max_rows == 120


def test_settings_from_env():
    settings = Settings.from_env(
        {
            "DEBT_CALC_DATABASE_URL": "sqlite:///other.db",
            "DEBT_CALC_LOG_LEVEL": "debug",
            "DEBT_CALC_LOG_JSON": "yes",
            "DEBT_CALC_MAX_ROWS": "24",
            "FLASK_SECRET_KEY": "s3cret",
        }
    )

    assert settings.database_url == "sqlite:///other.db"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True
    assert settings.max_rows == 24
    assert settings.secret_key == "s3cret"


def test_settings_rejects_bad_integer():
    with pytest.raises(ValueError, match="Invalid integer setting"):
        Settings.from_env({"DEBT_CALC_MAX_ROWS": "many"})
