"""Forecast schemas: settings, daily projection points, alerts, and results."""

from datetime import date as date_type
from decimal import Decimal

from pydantic import BaseModel, Field

from finplan.config import settings
from finplan.models.forecast import AlertSeverity, AlertType


class ForecastSettings(BaseModel):
    """Per-user alerting preferences. Missing fields fall back to configured defaults."""
    low_balance_threshold: Decimal = Field(
        default_factory=lambda: settings.default_low_balance_threshold,
        allow_inf_nan=False,
    )
    alert_days_ahead: int = Field(
        default_factory=lambda: settings.default_alert_days_ahead, ge=0,
    )
    include_variable_spending: bool = Field(
        default_factory=lambda: settings.default_include_variable_spending,
    )

    model_config = {"from_attributes": True}


class ProjectionPoint(BaseModel):
    date: date_type
    balance: Decimal
    income: Decimal
    expenses: Decimal
    is_recurring_day: bool


class ForecastAlert(BaseModel):
    type: AlertType
    severity: AlertSeverity
    date: date_type
    message: str
    balance: Decimal | None = None
    amount: Decimal | None = None


class ForecastSummary(BaseModel):
    current_balance: Decimal
    projected_30_day: Decimal | None = None
    projected_60_day: Decimal | None = None
    projected_90_day: Decimal | None = None
    avg_daily_income: Decimal
    avg_daily_expenses: Decimal


class ForecastResult(BaseModel):
    projections: list[ProjectionPoint]
    optimistic: list[ProjectionPoint]
    pessimistic: list[ProjectionPoint]
    alerts: list[ForecastAlert]
    summary: ForecastSummary


class VariableSpending(BaseModel):
    avg_daily_expense: Decimal
    avg_monthly_expense: Decimal
