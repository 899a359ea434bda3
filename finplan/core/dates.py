"""Calendar helpers shared by the planning services."""

import calendar
from datetime import date


def today() -> date:
    """Current local date. Patched in tests for deterministic projections."""
    return date.today()


def add_months(value: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the last day of the month.

    Jan 31 + 1 month -> Feb 28 (or 29 in leap years).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
