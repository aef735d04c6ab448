"""Date arithmetic for recurring tasks.

Month and year steps clamp to the last valid day of the target month, so
Jan 31 + 1 month is Feb 28 (or 29) and Feb 29 + 1 year is Feb 28.
Time of day is kept as is.
"""
from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import TypeVar

from .enums import RecurrenceRule

D = TypeVar("D", date, datetime)


def resolve_interval(value: int | None) -> int:
    return max(int(value or 1), 1)


def advance(current: D, rule: str | None, interval: int) -> D:
    """Return the due date one recurrence step after ``current``.

    Unknown rules leave the date unchanged.
    """
    if rule == RecurrenceRule.DAILY.value:
        return current + timedelta(days=interval)
    if rule == RecurrenceRule.WEEKLY.value:
        return current + timedelta(weeks=interval)
    if rule == RecurrenceRule.MONTHLY.value:
        return add_months(current, interval)
    if rule == RecurrenceRule.YEARLY.value:
        return add_months(current, 12 * interval)
    return current


def add_months(base: D, months: int) -> D:
    year = base.year + (base.month - 1 + months) // 12
    month = (base.month - 1 + months) % 12 + 1
    day = min(base.day, monthrange(year, month)[1])
    return base.replace(year=year, month=month, day=day)
