"""Tests for the transaction aggregates that feed the forecast and suggestions."""

from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from finplan.core.errors import InvalidInputError
from finplan.services import transaction_service


def _txn(amount: str, txn_type: str, on: date, title: str = "txn") -> dict:
    return {"title": title, "amount": amount, "type": txn_type, "date": on}


# --- Current balance ---

def test_current_balance_income_minus_expenses():
    transactions = [
        _txn("1000", "income", date(2026, 1, 1)),
        _txn("200", "expense", date(2026, 1, 2)),
        _txn("-50", "expense", date(2026, 1, 3)),  # sign is ignored for expenses
    ]
    assert transaction_service.compute_current_balance(transactions) == Decimal("750")


def test_current_balance_empty_history():
    assert transaction_service.compute_current_balance([]) == Decimal("0")


def test_current_balance_reads_attribute_objects():
    """Rows loaded by the caller's ORM are accepted as-is."""
    rows = [
        SimpleNamespace(id=1, title="Salary", amount=Decimal("2500"), type="income",
                        date=date(2026, 1, 1), category=None),
        SimpleNamespace(id=2, title="Rent", amount=Decimal("900"), type="expense",
                        date=date(2026, 1, 2), category="housing"),
    ]
    assert transaction_service.compute_current_balance(rows) == Decimal("1600")


def test_current_balance_rejects_unknown_type():
    with pytest.raises(InvalidInputError):
        transaction_service.compute_current_balance([_txn("10", "refund", date(2026, 1, 1))])


# --- Variable spending ---

def test_variable_spending_trailing_window():
    transactions = [
        _txn("30", "expense", date(2026, 3, 20)),
        _txn("60", "expense", date(2026, 3, 10)),
        _txn("90", "expense", date(2026, 1, 1)),   # outside the 30-day window
        _txn("4000", "income", date(2026, 3, 15)),  # income is not spending
    ]

    spending = transaction_service.compute_variable_spending(transactions, as_of=date(2026, 3, 31))

    assert spending.avg_monthly_expense == Decimal("45")
    assert spending.avg_daily_expense == Decimal("1.5")


def test_variable_spending_without_expenses():
    spending = transaction_service.compute_variable_spending(
        [_txn("100", "income", date(2026, 3, 1))], as_of=date(2026, 3, 10),
    )
    assert spending.avg_daily_expense == Decimal("0")
    assert spending.avg_monthly_expense == Decimal("0")


def test_aggregates_accept_timestamped_rows():
    transactions = [
        _txn("1000", "income", datetime(2026, 3, 1, 8, 15)),
        _txn("40", "expense", datetime(2026, 3, 20, 14, 0)),
        _txn("20", "expense", datetime(2026, 3, 1, 23, 59)),
    ]

    assert transaction_service.compute_current_balance(transactions) == Decimal("940")
    spending = transaction_service.compute_variable_spending(transactions, as_of=date(2026, 3, 31))
    assert spending.avg_monthly_expense == Decimal("30")
