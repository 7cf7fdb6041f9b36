"""Delivery date arithmetic for recurring subscriptions."""

import calendar as cal
from datetime import date, timedelta

from foodcare.models.subscription import Frequency


def _add_months(d: date, months: int) -> date:
    """Add months to a date, clamping to last day of month."""
    month = d.month - 1 + months
    year = d.year + month // 12
    month = month % 12 + 1
    max_day = cal.monthrange(year, month)[1]
    return d.replace(year=year, month=month, day=min(d.day, max_day))


def next_delivery_date(frequency: Frequency | str, from_date: date) -> date:
    """Return the delivery date one frequency step after ``from_date``.

    Monthly steps keep the day of month where possible and otherwise land on
    the last day of the target month (Jan 31 -> Feb 28/29).
    """
    value = frequency.value if isinstance(frequency, Frequency) else str(frequency)
    if value == Frequency.WEEKLY.value:
        return from_date + timedelta(days=7)
    elif value == Frequency.BIWEEKLY.value:
        return from_date + timedelta(days=14)
    elif value == Frequency.MONTHLY.value:
        return _add_months(from_date, 1)
    raise ValueError(f"Unknown frequency: {frequency}")


def reminder_window(today: date, days_before: int) -> tuple[date, date]:
    """Inclusive range of delivery dates that are due for a reminder today."""
    return today, today + timedelta(days=days_before)
