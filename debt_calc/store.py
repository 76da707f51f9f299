"""Persistence layer for the profile and the debts.

This module abstracts persistence so the CLI and the web app share the same
records. It defaults to SQLite for local use, but accepts any
SQLAlchemy-compatible URL (e.g. PostgreSQL/MySQL).

Amounts are stored as decimal strings so that values round-trip exactly on
every backend, including SQLite which has no native decimal type.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, Integer, String, create_engine, select
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator

from .data_models import PROFILE_ID, Debt, UserProfile
from .validation import parse_debt_input, parse_profile_input

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///debt_calc.sqlite3"

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DecimalText(TypeDecorator):
    """Store ``Decimal`` values as their exact string form."""

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else Decimal(value)


class ProfileModel(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    monthly_income = Column(DecimalText, nullable=False)
    monthly_expenses = Column(DecimalText, nullable=False)
    risk_profile = Column(String(32), nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)


class DebtModel(Base):
    __tablename__ = "debts"

    id = Column(String(64), primary_key=True)
    loan_name = Column(String(255), index=True, nullable=False)
    original_amount = Column(DecimalText, nullable=False)
    current_balance = Column(DecimalText, nullable=False)
    interest_rate_annual = Column(DecimalText, nullable=False)
    monthly_payment = Column(DecimalText, nullable=False)
    insurance_cost = Column(DecimalText, nullable=False)
    months_remaining = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)


class FinancialStore:
    """Database-backed store for the user profile and debts."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def load_profile(self) -> Optional[UserProfile]:
        with self._session_factory() as session:
            row = session.get(ProfileModel, PROFILE_ID)
            return self._to_profile(row) if row else None

    def save_profile(self, data: Mapping[str, Any]) -> UserProfile:
        """Validate ``data`` and replace the stored profile."""
        fields = parse_profile_input(data)
        with self._session_factory() as session:
            row = session.get(ProfileModel, PROFILE_ID)
            if row is None:
                row = ProfileModel(id=PROFILE_ID)
                session.add(row)
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = _utcnow()
            session.commit()
            logger.info("Saved profile %r", row.name)
            return self._to_profile(row)

    def list_debts(self) -> List[Debt]:
        with self._session_factory() as session:
            rows = session.execute(
                select(DebtModel).order_by(DebtModel.created_at.asc(), DebtModel.id.asc())
            ).scalars()
            return [self._to_debt(row) for row in rows]

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        if not debt_id:
            return None
        with self._session_factory() as session:
            row = session.get(DebtModel, debt_id)
            return self._to_debt(row) if row else None

    def save_debt(self, data: Mapping[str, Any], debt_id: Optional[str] = None) -> Debt:
        """Validate ``data`` and insert or update a debt.

        A new id is generated when ``debt_id`` is not given. Updating an
        existing debt keeps its ``created_at``.
        """
        fields = parse_debt_input(data)
        debt_id = debt_id or uuid4().hex
        now = _utcnow()
        with self._session_factory() as session:
            row = session.get(DebtModel, debt_id)
            if row is None:
                row = DebtModel(id=debt_id, created_at=now)
                session.add(row)
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = now
            session.commit()
            logger.info("Saved debt %s (%s)", row.id, row.loan_name)
            return self._to_debt(row)

    def remove_debt(self, debt_id: str) -> bool:
        """Delete a debt. Returns ``False`` when no such debt exists."""
        with self._session_factory() as session:
            row = session.get(DebtModel, debt_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            logger.info("Removed debt %s", debt_id)
            return True

    def dispose(self) -> None:
        self._engine.dispose()

    @staticmethod
    def _to_profile(row: ProfileModel) -> UserProfile:
        return UserProfile(
            id=row.id,
            name=row.name,
            monthly_income=row.monthly_income,
            monthly_expenses=row.monthly_expenses,
            risk_profile=row.risk_profile,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _to_debt(row: DebtModel) -> Debt:
        return Debt(
            id=row.id,
            loan_name=row.loan_name,
            original_amount=row.original_amount,
            current_balance=row.current_balance,
            interest_rate_annual=row.interest_rate_annual,
            monthly_payment=row.monthly_payment,
            insurance_cost=row.insurance_cost,
            months_remaining=row.months_remaining,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


def create_store_from_env(url: Optional[str]) -> FinancialStore:
    return FinancialStore(url or DEFAULT_DATABASE_URL)


def debt_to_dict(debt: Debt) -> Dict[str, Any]:
    """Return the editable fields of a debt, e.g. to prefill a form."""
    return {
        "loan_name": debt.loan_name,
        "original_amount": debt.original_amount,
        "current_balance": debt.current_balance,
        "interest_rate_annual": debt.interest_rate_annual,
        "monthly_payment": debt.monthly_payment,
        "insurance_cost": debt.insurance_cost,
        "months_remaining": debt.months_remaining,
    }
