from decimal import Decimal
from typing import Optional

from flask import Flask, abort, current_app, jsonify, redirect, render_template, request, url_for

from debt_calc.config import Settings
from debt_calc.data_models import RISK_PROFILES
from debt_calc.engine import rate_equivalences
from debt_calc.formatter import format_currency, format_percent, serialize_schedule, serialize_summary
from debt_calc.logging_config import configure_logging
from debt_calc.planner import DebtPlanner
from debt_calc.store import FinancialStore, create_store_from_env, debt_to_dict
from debt_calc.validation import InputValidationError


def _planner(app: Flask) -> DebtPlanner:
    # START_DATE pins the first payment date; unset means today
    planner = DebtPlanner(app.extensions["debt_calc_store"], start_date=app.config.get("START_DATE"))
    planner.init()
    return planner


def _render_index(planner: DebtPlanner, *, error: Optional[str] = None, debt_form=None, profile_form=None, status: int = 200):
    selected = planner.selected_debt
    simulation = planner.selected_simulation
    max_rows = current_app.config["DEBT_CALC_SETTINGS"].max_rows
    schedule = simulation.schedule if simulation else []
    truncated = max(len(schedule) - max_rows, 0)
    profile_values = profile_form
    if profile_values is None and planner.profile is not None:
        profile_values = {
            "name": planner.profile.name,
            "monthly_income": planner.profile.monthly_income,
            "monthly_expenses": planner.profile.monthly_expenses,
            "risk_profile": planner.profile.risk_profile,
        }
    return (
        render_template(
            "index.html",
            profile=planner.profile,
            profile_form=profile_values or {},
            risk_profiles=RISK_PROFILES,
            debts=planner.debts,
            failures=planner.failures,
            selected=selected,
            simulation=simulation,
            schedule=schedule[:max_rows],
            truncated=truncated,
            selected_failure=planner.selected_failure,
            rates=rate_equivalences(selected.interest_rate_annual) if selected else None,
            debt_form=debt_form or {},
            error=error,
        ),
        status,
    )


def create_app(settings: Optional[Settings] = None, store: Optional[FinancialStore] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["DEBT_CALC_SETTINGS"] = settings
    app.extensions["debt_calc_store"] = store or create_store_from_env(settings.database_url)

    @app.template_filter("currency")
    def currency_filter(value: Decimal) -> str:
        return format_currency(value)

    @app.template_filter("percent")
    def percent_filter(value: Decimal) -> str:
        return format_percent(value)

    @app.route("/", methods=["GET"])
    def index():
        planner = _planner(app)
        requested = request.args.get("debt")
        if requested:
            planner.select_debt(requested)
        debt_form = None
        edit_id = request.args.get("edit")
        if edit_id:
            stored = planner.store.get_debt(edit_id)
            if stored is not None:
                debt_form = dict(debt_to_dict(stored), debt_id=stored.id)
        return _render_index(planner, debt_form=debt_form)

    @app.post("/profile")
    def save_profile():
        planner = _planner(app)
        try:
            planner.save_profile(request.form)
        except InputValidationError as exc:
            return _render_index(planner, error=str(exc), profile_form=request.form, status=400)
        return redirect(url_for("index"))

    @app.post("/debts")
    def save_debt():
        planner = _planner(app)
        debt_id = request.form.get("debt_id", "").strip() or None
        try:
            saved = planner.save_debt(request.form, debt_id=debt_id)
        except InputValidationError as exc:
            return _render_index(planner, error=str(exc), debt_form=request.form, status=400)
        return redirect(url_for("index", debt=saved.id))

    @app.post("/debts/<debt_id>/delete")
    def delete_debt(debt_id: str):
        planner = _planner(app)
        planner.delete_debt(debt_id)
        return redirect(url_for("index"))

    @app.get("/debts/<debt_id>/schedule.json")
    def debt_schedule(debt_id: str):
        planner = _planner(app)
        planner.select_debt(debt_id)
        if planner.selected_debt is None:
            abort(404)
        if planner.selected_failure:
            return jsonify({"error": planner.selected_failure}), 422
        simulation = planner.selected_simulation
        return jsonify(
            {
                "summary": serialize_summary(simulation.summary),
                "schedule": serialize_schedule(simulation.schedule),
            }
        )

    return app


if __name__ == "__main__":
    print("Starting debt calculator web app...")
    create_app().run(host="0.0.0.0", port=8710, debug=True)
