from decimal import Decimal

import pytest

from debt_calc.planner import DebtPlanner, compute_simulations
from debt_calc.validation import InputValidationError


@pytest.fixture
def planner(store, anchor):
    planner = DebtPlanner(store, start_date=anchor)
    planner.init()
    return planner


def test_init_on_empty_store(planner):
    assert planner.initialized
    assert planner.profile is None
    assert planner.debts == []
    assert planner.selected_debt is None
    assert planner.selected_simulation is None


def test_init_selects_first_debt(store, debt_form, anchor):
    first = store.save_debt(dict(debt_form, loan_name="First"))
    store.save_debt(dict(debt_form, loan_name="Second"))

    planner = DebtPlanner(store, start_date=anchor)
    planner.init()

    assert planner.selected_debt_id == first.id
    assert set(planner.simulations) == {d.id for d in planner.debts}


def test_save_selects_new_debt_when_nothing_selected(planner, debt_form):
    saved = planner.save_debt(debt_form)

    assert planner.selected_debt_id == saved.id
    assert planner.selected_simulation.summary.months == 13


def test_save_keeps_existing_selection(planner, debt_form):
    first = planner.save_debt(dict(debt_form, loan_name="First"))
    planner.save_debt(dict(debt_form, loan_name="Second"))

    assert planner.selected_debt_id == first.id


def test_update_recomputes_simulation(planner, debt_form):
    saved = planner.save_debt(debt_form)
    before = planner.simulations[saved.id].summary.months

    planner.save_debt(dict(debt_form, monthly_payment="1500"), debt_id=saved.id)

    assert planner.simulations[saved.id].summary.months < before
    assert planner.selected_debt.monthly_payment == Decimal("1500")


def test_delete_selected_falls_back_to_first(planner, debt_form):
    first = planner.save_debt(dict(debt_form, loan_name="First"))
    second = planner.save_debt(dict(debt_form, loan_name="Second"))
    planner.select_debt(second.id)

    planner.delete_debt(second.id)
    assert planner.selected_debt_id == first.id
    assert second.id not in planner.simulations

    planner.delete_debt(first.id)
    assert planner.selected_debt_id is None


def test_delete_other_keeps_selection(planner, debt_form):
    first = planner.save_debt(dict(debt_form, loan_name="First"))
    second = planner.save_debt(dict(debt_form, loan_name="Second"))

    planner.delete_debt(second.id)

    assert planner.selected_debt_id == first.id


def test_select_unknown_debt_clears_selection(planner, debt_form):
    planner.save_debt(debt_form)

    planner.select_debt("missing")

    assert planner.selected_debt is None


def test_insufficient_debt_does_not_break_others(planner, debt_form):
    good = planner.save_debt(debt_form)
    bad = planner.save_debt(
        dict(debt_form, loan_name="Bad", current_balance="5000", interest_rate_annual="24", monthly_payment="20", insurance_cost="20")
    )

    assert good.id in planner.simulations
    assert bad.id not in planner.simulations
    assert "too low to cover interest" in planner.failures[bad.id]

    planner.select_debt(bad.id)
    assert planner.selected_simulation is None
    assert planner.selected_failure == planner.failures[bad.id]


def test_invalid_debt_leaves_state_untouched(planner, debt_form):
    with pytest.raises(InputValidationError):
        planner.save_debt(dict(debt_form, months_remaining="0"))

    assert planner.debts == []


def test_oversized_debt_is_rejected_and_others_still_simulate(planner, store, debt_form, anchor):
    good = planner.save_debt(debt_form)

    with pytest.raises(InputValidationError, match="Current balance is too large"):
        planner.save_debt(dict(debt_form, loan_name="Huge", current_balance="1e26", monthly_payment="1e14"))

    reloaded = DebtPlanner(store, start_date=anchor)
    reloaded.init()
    assert [d.id for d in reloaded.debts] == [good.id]
    assert reloaded.simulations[good.id].summary.months == 13


def test_save_profile(planner):
    profile = planner.save_profile({"name": "Alex", "monthly_income": "5200", "monthly_expenses": "3100", "risk_profile": "conservative"})

    assert planner.profile == profile
    assert profile.risk_profile == "conservative"


def test_compute_simulations_splits_results(make_debt, anchor):
    good = make_debt(id="good")
    bad = make_debt(id="bad", current_balance=5000, interest_rate_annual=24, monthly_payment=20, insurance_cost=20)

    simulations, failures = compute_simulations([good, bad], anchor)

    assert list(simulations) == ["good"]
    assert list(failures) == ["bad"]
