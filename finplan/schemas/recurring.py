import uuid
from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from finplan.models.transaction import TransactionType


def _drop_time(value):
    """Stored rows carry timestamps; the planners work on calendar days."""
    if isinstance(value, datetime):
        return value.date()
    return value


class RecurringTransactionIn(BaseModel):
    """A recurring income or expense. Positive amount_avg is income."""
    merchant_pattern: str = ""
    amount_avg: Decimal = Field(allow_inf_nan=False)
    amount_variance: Decimal = Field(default=Decimal("0.00"), allow_inf_nan=False)
    # Kept as a plain string: unknown frequencies never match rather than fail
    frequency: str
    next_expected_date: date_type
    is_active: bool = True
    category: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("next_expected_date", mode="before")
    @classmethod
    def next_expected_date_as_day(cls, v):
        return _drop_time(v)


class TransactionIn(BaseModel):
    id: int | str | uuid.UUID | None = None
    title: str = ""
    amount: Decimal = Field(allow_inf_nan=False)
    type: TransactionType
    date: date_type
    category: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("date", mode="before")
    @classmethod
    def date_as_day(cls, v):
        return _drop_time(v)


class SampleTransaction(BaseModel):
    id: int | str | uuid.UUID | None = None
    title: str
    amount: Decimal
    date: date_type


class DetectedRecurring(BaseModel):
    merchant_pattern: str
    amount_avg: Decimal
    amount_variance: Decimal
    frequency: str
    next_expected_date: date_type
    category: str | None = None
    sample_transactions: list[SampleTransaction]
