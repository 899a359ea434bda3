"""Shared test fixtures: fixed forecast start date and sample debt sets."""

from datetime import date
from decimal import Decimal

import pytest

from finplan.schemas.debt import DebtIn


@pytest.fixture
def start_date() -> date:
    """A fixed 'today' so projections are deterministic."""
    return date(2026, 1, 1)


@pytest.fixture
def single_debt() -> DebtIn:
    """1200 at 12%/year (1%/month) over 12 installments: minimum payment 100."""
    return DebtIn(
        id=1,
        title="Laptop loan",
        remaining_amount=Decimal("1200"),
        interest_rate=Decimal("12"),
        installments_total=12,
        installments_paid=0,
    )


@pytest.fixture
def mixed_debts() -> list[DebtIn]:
    """A high-rate large card balance and a small low-rate loan."""
    return [
        DebtIn(
            id="card",
            title="Credit card",
            remaining_amount=Decimal("10000"),
            interest_rate=Decimal("24"),
            installments_total=60,
            installments_paid=0,
        ),
        DebtIn(
            id="loan",
            title="Family loan",
            remaining_amount=Decimal("1000"),
            interest_rate=Decimal("1"),
            installments_total=10,
            installments_paid=0,
        ),
    ]
