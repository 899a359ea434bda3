"""Transaction aggregates feeding the planners.

The collaborator layer loads raw transactions; these helpers reduce them to
the figures the forecast and extra-payment suggestion take as input.
"""

from datetime import date, timedelta
from decimal import Decimal

from finplan.core.dates import today
from finplan.core.errors import validate_records
from finplan.models.transaction import TransactionType
from finplan.schemas.forecast import VariableSpending
from finplan.schemas.recurring import TransactionIn

# Trailing window used for the variable spending estimate
VARIABLE_SPENDING_WINDOW_DAYS = 30


def compute_current_balance(transactions) -> Decimal:
    """Income minus expenses over the whole history. Expense signs are ignored."""
    records = validate_records(TransactionIn, transactions, "transaction")
    balance = Decimal("0")
    for txn in records:
        if txn.type == TransactionType.income:
            balance += txn.amount
        else:
            balance -= abs(txn.amount)
    return balance


def compute_variable_spending(
    transactions,
    *,
    as_of: date | None = None,
) -> VariableSpending:
    """Average expense size over the trailing 30 days, spread per day.

    avg_monthly_expense is the mean absolute amount of expense transactions
    dated on or after as_of - 30 days; avg_daily_expense is that mean / 30.
    """
    records = validate_records(TransactionIn, transactions, "transaction")
    cutoff = (as_of or today()) - timedelta(days=VARIABLE_SPENDING_WINDOW_DAYS)

    amounts = [
        abs(txn.amount)
        for txn in records
        if txn.type == TransactionType.expense and txn.date >= cutoff
    ]
    if not amounts:
        return VariableSpending(avg_daily_expense=Decimal("0"), avg_monthly_expense=Decimal("0"))

    avg_expense = sum(amounts, Decimal("0")) / len(amounts)
    return VariableSpending(
        avg_daily_expense=avg_expense / VARIABLE_SPENDING_WINDOW_DAYS,
        avg_monthly_expense=avg_expense,
    )
