"""Application state shared by the CLI and the web app.

``DebtPlanner`` keeps the profile, the debts and one simulation per debt. The
engine remembers nothing between runs, so every write to the store recomputes
the simulations from the freshly listed debts.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from .data_models import AmortizationResult, Debt, UserProfile
from .engine import PaymentInsufficientError, calculate_amortization
from .store import FinancialStore

logger = logging.getLogger(__name__)


class DebtPlanner:
    """Profile, debts and cached simulations, with a selected debt.

    A debt whose payment cannot amortize it has no simulation; its error
    message is kept in ``failures`` so the other debts still get schedules.
    """

    def __init__(self, store: FinancialStore, start_date: Optional[date] = None) -> None:
        self.store = store
        self.start_date = start_date
        self.profile: Optional[UserProfile] = None
        self.debts: List[Debt] = []
        self.simulations: Dict[str, AmortizationResult] = {}
        self.failures: Dict[str, str] = {}
        self.selected_debt_id: Optional[str] = None
        self.initialized = False

    def init(self) -> None:
        self.profile = self.store.load_profile()
        self._refresh()
        self.selected_debt_id = self.debts[0].id if self.debts else None
        self.initialized = True

    def save_profile(self, data: Mapping[str, Any]) -> UserProfile:
        self.profile = self.store.save_profile(data)
        return self.profile

    def save_debt(self, data: Mapping[str, Any], debt_id: Optional[str] = None) -> Debt:
        saved = self.store.save_debt(data, debt_id=debt_id)
        self._refresh()
        if not self._exists(self.selected_debt_id):
            self.selected_debt_id = saved.id
        return saved

    def delete_debt(self, debt_id: str) -> bool:
        removed = self.store.remove_debt(debt_id)
        self._refresh()
        if self.selected_debt_id == debt_id:
            self.selected_debt_id = self.debts[0].id if self.debts else None
        return removed

    def select_debt(self, debt_id: Optional[str]) -> None:
        self.selected_debt_id = debt_id if self._exists(debt_id) else None

    @property
    def selected_debt(self) -> Optional[Debt]:
        for debt in self.debts:
            if debt.id == self.selected_debt_id:
                return debt
        return None

    @property
    def selected_simulation(self) -> Optional[AmortizationResult]:
        if self.selected_debt_id is None:
            return None
        return self.simulations.get(self.selected_debt_id)

    @property
    def selected_failure(self) -> Optional[str]:
        if self.selected_debt_id is None:
            return None
        return self.failures.get(self.selected_debt_id)

    def _exists(self, debt_id: Optional[str]) -> bool:
        return debt_id is not None and any(d.id == debt_id for d in self.debts)

    def _refresh(self) -> None:
        self.debts = self.store.list_debts()
        self.simulations, self.failures = compute_simulations(self.debts, self.start_date)


def compute_simulations(debts: List[Debt], start_date: Optional[date] = None):
    """Amortize every debt; return ``(simulations, failures)`` keyed by id."""
    simulations: Dict[str, AmortizationResult] = {}
    failures: Dict[str, str] = {}
    for debt in debts:
        try:
            simulations[debt.id] = calculate_amortization(debt, start_date)
        except PaymentInsufficientError as exc:
            logger.warning("Cannot simulate debt %s: %s", debt.id, exc)
            failures[debt.id] = str(exc)
    return simulations, failures
