"""Date helpers for monthly schedules."""

import calendar
from datetime import date


def add_months(start: date, months: int) -> date:
    """Shift ``start`` by ``months``, clamping the day to the month's end.

    Example: 2025-01-31 + 1 month -> 2025-02-28.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def monthly_schedule(first_due_date: date, count: int) -> list[date]:
    """``count`` due dates, one month apart, anchored on ``first_due_date``."""
    return [add_months(first_due_date, i) for i in range(count)]
