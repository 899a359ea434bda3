"""Recurring transactions: due-date matching and pattern detection.

Matching rules (a record is due on a date on or after next_expected_date when):
- weekly: whole number of weeks since next_expected_date
- biweekly: whole number of two-week periods
- monthly: same day of month
- quarterly: same day of month and a month offset divisible by 3
Any other frequency never matches.

Detection logic:
1. Walk transactions newest first
2. Group each one with later transactions of the same type whose titles are
   similar and whose amounts are within 10%
3. Groups of 3+ are classified by their average date interval
"""

import logging
import re
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from statistics import mean

from finplan.core.dates import add_months
from finplan.core.errors import validate_records
from finplan.models.recurring import Frequency
from finplan.models.transaction import TransactionType
from finplan.schemas.recurring import (
    DetectedRecurring,
    RecurringTransactionIn,
    SampleTransaction,
    TransactionIn,
)

logger = logging.getLogger("finplan.recurring")

# Minimum group size (base transaction included) to call something recurring
MIN_OCCURRENCES = 3

# Tolerance for amount similarity (fraction of the pair's average)
AMOUNT_TOLERANCE_FRACTION = Decimal("0.10")

# Leading characters compared when titles do not contain one another
MERCHANT_PREFIX_LENGTH = 5

# Average interval ranges (days, inclusive) for frequency classification
FREQUENCY_RANGES = {
    Frequency.weekly: (6, 8),
    Frequency.biweekly: (13, 15),
    Frequency.monthly: (28, 32),
    Frequency.quarterly: (88, 95),
}

# Multipliers to a monthly equivalent; quarterly is divided by 3 instead
MONTHLY_MULTIPLIERS = {
    Frequency.weekly: Decimal("4.33"),
    Frequency.biweekly: Decimal("2.17"),
    Frequency.monthly: Decimal("1"),
}


def _parse_frequency(value: str) -> Frequency | None:
    try:
        return Frequency(value)
    except ValueError:
        return None


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


# --- Due-date matching ---

def is_recurring_due(recurring: RecurringTransactionIn, on_date: date) -> bool:
    """Return True when the recurring record fires on `on_date`."""
    check = _as_date(on_date)
    next_date = recurring.next_expected_date
    if check < next_date:
        return False

    days_diff = (check - next_date).days
    frequency = _parse_frequency(recurring.frequency)

    if frequency == Frequency.weekly:
        return days_diff % 7 == 0
    if frequency == Frequency.biweekly:
        return days_diff % 14 == 0
    if frequency == Frequency.monthly:
        return check.day == next_date.day
    if frequency == Frequency.quarterly:
        return check.day == next_date.day and (check.month - next_date.month) % 3 == 0
    return False


# --- Monthly equivalents ---

def monthly_equivalent(amount: Decimal, frequency: str) -> Decimal:
    """Convert a per-occurrence amount to an approximate monthly amount."""
    parsed = _parse_frequency(frequency)
    if parsed == Frequency.quarterly:
        return amount / 3
    if parsed in MONTHLY_MULTIPLIERS:
        return amount * MONTHLY_MULTIPLIERS[parsed]
    return Decimal("0")


def monthly_recurring_expenses(recurring) -> Decimal:
    """Sum of |amount_avg| over active recurring expenses.

    Each record counts once regardless of frequency, as the caller's
    extra-payment suggestion expects.
    """
    records = validate_records(RecurringTransactionIn, recurring, "recurring transaction")
    return sum(
        (abs(r.amount_avg) for r in records if r.is_active and r.amount_avg < 0),
        Decimal("0"),
    )


# --- Detection ---

def _normalize_title(title: str) -> str:
    return re.sub(r"[^a-z0-9]", "", title.lower())


def _is_similar_merchant(title1: str, title2: str) -> bool:
    """Titles match when one contains the other or their first 5 characters agree."""
    n1 = _normalize_title(title1)
    n2 = _normalize_title(title2)
    if n1 in n2 or n2 in n1:
        return True
    return n1[:MERCHANT_PREFIX_LENGTH] == n2[:MERCHANT_PREFIX_LENGTH]


def _amounts_similar(amount1: Decimal, amount2: Decimal) -> bool:
    a1, a2 = abs(amount1), abs(amount2)
    avg = (a1 + a2) / 2
    if avg == 0:
        return False
    return abs(a1 - a2) / avg <= AMOUNT_TOLERANCE_FRACTION


def _extract_merchant(title: str) -> str:
    """First three words with digits, '#' and '*' stripped."""
    words = " ".join(title.split()[:3])
    return re.sub(r"[0-9#*]", "", words).strip()


def _classify_frequency(avg_interval_days: float) -> Frequency | None:
    for freq, (low, high) in FREQUENCY_RANGES.items():
        if low <= avg_interval_days <= high:
            return freq
    return None


def _next_expected_date(last_date: date, frequency: Frequency) -> date:
    if frequency == Frequency.weekly:
        return last_date + timedelta(weeks=1)
    if frequency == Frequency.biweekly:
        return last_date + timedelta(weeks=2)
    if frequency == Frequency.monthly:
        return add_months(last_date, 1)
    return add_months(last_date, 3)


def _build_detected(group: list[TransactionIn]) -> DetectedRecurring | None:
    """Classify a group of similar transactions, or None when irregular."""
    ordered = sorted(group, key=lambda t: t.date)
    intervals = [
        (ordered[i].date - ordered[i - 1].date).days
        for i in range(1, len(ordered))
    ]
    frequency = _classify_frequency(mean(intervals))
    if frequency is None:
        return None

    amounts = [abs(t.amount) for t in ordered]
    avg_amount = (sum(amounts, Decimal("0")) / len(amounts)).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    # Expenses are stored as negative averages
    base = group[0]
    if base.type == TransactionType.expense:
        avg_amount = -avg_amount

    return DetectedRecurring(
        merchant_pattern=_extract_merchant(base.title),
        amount_avg=avg_amount,
        amount_variance=max(amounts) - min(amounts),
        frequency=frequency.value,
        next_expected_date=_next_expected_date(ordered[-1].date, frequency),
        category=base.category,
        sample_transactions=[
            SampleTransaction(id=t.id, title=t.title, amount=t.amount, date=t.date)
            for t in ordered[:3]
        ],
    )


def detect_recurring(transactions) -> list[DetectedRecurring]:
    """Detect recurring income and expenses in a user's transaction history."""
    records = validate_records(TransactionIn, transactions, "transaction")
    newest_first = sorted(records, key=lambda t: t.date, reverse=True)

    detected: list[DetectedRecurring] = []
    processed: set[int] = set()

    for i, base in enumerate(newest_first):
        if i in processed:
            continue

        group = [base]
        for j in range(i + 1, len(newest_first)):
            if j in processed:
                continue
            candidate = newest_first[j]
            if candidate.type != base.type:
                continue
            if _is_similar_merchant(base.title, candidate.title) and _amounts_similar(
                base.amount, candidate.amount
            ):
                group.append(candidate)
                processed.add(j)

        if len(group) < MIN_OCCURRENCES:
            continue
        processed.add(i)

        pattern = _build_detected(group)
        if pattern is not None:
            detected.append(pattern)

    logger.info(
        "recurring detection transactions=%d patterns_found=%d",
        len(records),
        len(detected),
    )
    return detected
