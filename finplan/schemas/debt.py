"""Debt planning schemas: debt input records and payoff plan results."""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from finplan.models.debt import PayoffMethod


class DebtIn(BaseModel):
    """A debt as loaded by the caller. Read-only to the planner."""
    id: int | str | uuid.UUID
    title: str = ""
    remaining_amount: Decimal = Field(ge=0, allow_inf_nan=False)
    interest_rate: Decimal = Field(default=Decimal("0"), ge=0, allow_inf_nan=False)
    installments_total: int = 12
    installments_paid: int = 0

    model_config = {"from_attributes": True}


class DebtSnapshotEntry(BaseModel):
    id: int | str | uuid.UUID
    title: str
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining: Decimal


class MonthlySnapshot(BaseModel):
    month: int
    debts: list[DebtSnapshotEntry]


class PayoffOrderItem(BaseModel):
    id: int | str | uuid.UUID
    title: str


class PayoffPlan(BaseModel):
    method: PayoffMethod
    months: int
    years: Decimal
    total_interest_paid: Decimal
    total_paid: Decimal
    monthly_snapshots: list[MonthlySnapshot]
    payoff_order: list[PayoffOrderItem]
    reached_month_cap: bool = False


class StrategyComparison(BaseModel):
    interest_saved: Decimal
    months_saved: int
    recommendation: PayoffMethod
    reasoning: str


class DebtStrategyResult(BaseModel):
    avalanche: PayoffPlan
    snowball: PayoffPlan
    comparison: StrategyComparison


class PaymentSuggestion(BaseModel):
    conservative: Decimal
    moderate: Decimal
    aggressive: Decimal
    available: Decimal
    message: str


class PayoffScenario(BaseModel):
    """Avalanche payoff outcome for one candidate extra payment."""
    extra_payment: Decimal
    months: int
    debt_free_date: date
    total_interest: Decimal
    reached_month_cap: bool = False
