"""Forecast service: daily balance projection with bands and alerts.

Implements:
1. Day-by-day projection (today through today + N) from recurring
   transactions plus an average variable daily expense
2. Optimistic / pessimistic bands: a flat ±30% of the variable daily
   expense around each projected balance (not a re-simulation)
3. Low-balance alert: earliest breach of the threshold within the alert window
4. Surplus alert: first of the next 7 days above 120% of the 30-day average
5. Summary: 30/60/90-day balances and normalized daily income/expenses
"""

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from pydantic import ValidationError

from finplan.config import settings
from finplan.core.dates import today
from finplan.core.errors import InvalidInputError, to_decimal, validate_records
from finplan.models.forecast import AlertSeverity, AlertType
from finplan.schemas.forecast import (
    ForecastAlert,
    ForecastResult,
    ForecastSettings,
    ForecastSummary,
    ProjectionPoint,
)
from finplan.schemas.recurring import RecurringTransactionIn
from finplan.services.recurring_service import is_recurring_due, monthly_equivalent

logger = logging.getLogger("finplan.forecast")

# Fraction of variable spending the bands assume saved / overspent
BAND_VARIATION = Decimal("0.3")

# Surplus alert: balance above this multiple of the average balance
SURPLUS_FACTOR = Decimal("1.2")
SURPLUS_AVERAGE_WINDOW = 30
SURPLUS_SCAN_DAYS = 7

SUMMARY_HORIZONS = (30, 60, 90)

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# --- Settings ---

def resolve_forecast_settings(stored=None) -> ForecastSettings:
    """Return the user's stored settings, or configured defaults when none exist."""
    if stored is None:
        return ForecastSettings()
    if isinstance(stored, ForecastSettings):
        return stored
    try:
        return ForecastSettings.model_validate(stored)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc, "forecast settings") from exc


# --- Projection ---

def project_balances(
    current_balance: Decimal,
    recurring: list[RecurringTransactionIn],
    variable_daily_expense: Decimal,
    days: int,
    include_variable: bool,
    *,
    start: date | None = None,
) -> list[ProjectionPoint]:
    """Project the balance for each day from `start` to `start + days` inclusive."""
    start = start or today()
    active = [r for r in recurring if r.is_active]

    projections = []
    balance = current_balance

    for offset in range(days + 1):
        day = start + timedelta(days=offset)
        income = ZERO
        expenses = ZERO
        fired = False

        for rec in active:
            if not is_recurring_due(rec, day):
                continue
            fired = True
            if rec.amount_avg > 0:
                income += rec.amount_avg
            else:
                expenses += abs(rec.amount_avg)

        if include_variable:
            expenses += variable_daily_expense

        balance = balance + income - expenses

        projections.append(ProjectionPoint(
            date=day,
            balance=_cents(balance),
            income=_cents(income),
            expenses=_cents(expenses),
            is_recurring_day=fired,
        ))

    return projections


def confidence_bands(
    projections: list[ProjectionPoint],
    variable_daily_expense: Decimal,
    include_variable: bool,
) -> tuple[list[ProjectionPoint], list[ProjectionPoint]]:
    """Return (optimistic, pessimistic) series offset by 30% of variable spending."""
    delta = variable_daily_expense * BAND_VARIATION if include_variable else ZERO

    optimistic = [
        p.model_copy(update={"balance": _cents(p.balance + delta)}) for p in projections
    ]
    pessimistic = [
        p.model_copy(update={"balance": _cents(p.balance - delta)}) for p in projections
    ]
    return optimistic, pessimistic


# --- Alerts ---

def _low_balance_alert(
    projections: list[ProjectionPoint],
    forecast_settings: ForecastSettings,
) -> ForecastAlert | None:
    threshold = forecast_settings.low_balance_threshold
    for point in projections[: forecast_settings.alert_days_ahead]:
        if point.balance < threshold:
            return ForecastAlert(
                type=AlertType.low_balance,
                severity=AlertSeverity.warning,
                date=point.date,
                message=f"Balance projected to drop to ${point.balance:.2f} on {point.date.isoformat()}",
                balance=point.balance,
            )
    return None


def _surplus_alert(projections: list[ProjectionPoint]) -> ForecastAlert | None:
    window = projections[:SURPLUS_AVERAGE_WINDOW]
    if not window:
        return None

    avg_balance = sum((p.balance for p in window), ZERO) / len(window)
    surplus_threshold = avg_balance * SURPLUS_FACTOR

    for point in projections[:SURPLUS_SCAN_DAYS]:
        if point.balance > surplus_threshold:
            amount = _cents(point.balance - avg_balance)
            return ForecastAlert(
                type=AlertType.surplus,
                severity=AlertSeverity.info,
                date=point.date,
                message=f"Surplus of ${amount:.2f} projected on {point.date.isoformat()}",
                amount=amount,
            )
    return None


def generate_alerts(
    projections: list[ProjectionPoint],
    forecast_settings: ForecastSettings,
) -> list[ForecastAlert]:
    """At most one low-balance and one surplus alert, each at its earliest date."""
    alerts = []
    for alert in (_low_balance_alert(projections, forecast_settings), _surplus_alert(projections)):
        if alert is not None:
            alerts.append(alert)
    return alerts


# --- Summary ---

def build_summary(
    current_balance: Decimal,
    recurring: list[RecurringTransactionIn],
    projections: list[ProjectionPoint],
    variable_daily_expense: Decimal,
    include_variable: bool,
) -> ForecastSummary:
    active = [r for r in recurring if r.is_active]

    monthly_income = sum(
        (monthly_equivalent(r.amount_avg, r.frequency) for r in active if r.amount_avg > 0),
        ZERO,
    )
    monthly_expenses = sum(
        (monthly_equivalent(abs(r.amount_avg), r.frequency) for r in active if r.amount_avg < 0),
        ZERO,
    )
    daily_expenses = monthly_expenses / 30
    if include_variable:
        daily_expenses += variable_daily_expense

    horizons = {
        f"projected_{h}_day": projections[h].balance if len(projections) > h else None
        for h in SUMMARY_HORIZONS
    }

    return ForecastSummary(
        current_balance=current_balance,
        avg_daily_income=_cents(monthly_income / 30),
        avg_daily_expenses=_cents(daily_expenses),
        **horizons,
    )


# --- Main forecast computation ---

def _validate_days(days) -> int:
    if isinstance(days, bool) or not isinstance(days, int) or days < 0:
        raise InvalidInputError(
            "days must be a non-negative integer",
            [{"loc": ["days"], "msg": "must be a non-negative integer", "type": "int_type"}],
        )
    return days


def compute_forecast(
    current_balance,
    recurring,
    variable_daily_expense,
    days=None,
    forecast_settings=None,
    *,
    start: date | None = None,
) -> ForecastResult:
    """Compute a balance forecast with bands, alerts, and a summary.

    Inputs are validated here; malformed numbers raise InvalidInputError
    before the projection starts. No recurring records is valid: the
    forecast is then driven by variable spending alone.
    """
    balance = to_decimal(current_balance, "current_balance")
    records = validate_records(RecurringTransactionIn, recurring, "recurring transaction")
    variable = to_decimal(variable_daily_expense, "variable_daily_expense", allow_negative=False)
    days = _validate_days(settings.forecast_default_days if days is None else days)
    resolved = resolve_forecast_settings(forecast_settings)
    include_variable = resolved.include_variable_spending

    projections = project_balances(
        balance, records, variable, days, include_variable, start=start,
    )
    optimistic, pessimistic = confidence_bands(projections, variable, include_variable)
    alerts = generate_alerts(projections, resolved)
    summary = build_summary(balance, records, projections, variable, include_variable)

    logger.info(
        "forecast computed days=%d recurring=%d include_variable=%s end_balance=%s alerts=%d",
        days,
        len(records),
        include_variable,
        projections[-1].balance,
        len(alerts),
    )
    for alert in alerts:
        logger.debug("forecast alert type=%s date=%s", alert.type.value, alert.date.isoformat())

    return ForecastResult(
        projections=projections,
        optimistic=optimistic,
        pessimistic=pessimistic,
        alerts=alerts,
        summary=summary,
    )
