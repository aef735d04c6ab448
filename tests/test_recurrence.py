from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from flowly.domain.enums import RecurrenceRule
from flowly.domain.recurrence import add_months, advance, resolve_interval


@pytest.mark.parametrize("interval", [1, 2, 10])
def test_daily_adds_interval_days(interval: int) -> None:
    start = datetime(2024, 1, 10, 9, 30)
    assert advance(start, RecurrenceRule.DAILY.value, interval) == start + timedelta(days=interval)


@pytest.mark.parametrize("interval", [1, 3])
def test_weekly_adds_seven_days_per_step(interval: int) -> None:
    start = datetime(2024, 12, 28, 8, 0)
    assert advance(start, "weekly", interval) == start + timedelta(days=7 * interval)


def test_monthly_keeps_day_and_time() -> None:
    assert advance(datetime(2024, 1, 15, 18, 45), "monthly", 1) == datetime(2024, 2, 15, 18, 45)


def test_monthly_rolls_over_year() -> None:
    assert advance(date(2024, 11, 5), "monthly", 3) == date(2025, 2, 5)


def test_monthly_clamps_to_end_of_month() -> None:
    assert advance(date(2023, 1, 31), "monthly", 1) == date(2023, 2, 28)
    assert advance(date(2024, 1, 31), "monthly", 1) == date(2024, 2, 29)
    assert advance(date(2024, 3, 31), "monthly", 1) == date(2024, 4, 30)


def test_yearly_keeps_month_and_day() -> None:
    assert advance(datetime(2024, 6, 1, 12), "yearly", 2) == datetime(2026, 6, 1, 12)


def test_yearly_from_leap_day_clamps_to_feb_28() -> None:
    assert advance(date(2024, 2, 29), "yearly", 1) == date(2025, 2, 28)
    assert advance(date(2024, 2, 29), "yearly", 4) == date(2028, 2, 29)


@pytest.mark.parametrize("rule", ["hourly", "", None, "DAILY"])
def test_unknown_rule_returns_date_unchanged(rule) -> None:
    start = datetime(2024, 1, 10)
    assert advance(start, rule, 1) == start


def test_add_months_handles_negative_offsets() -> None:
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 1), (0, 1), (1, 1), (4, 4), (-2, 1)],
)
def test_resolve_interval(value, expected) -> None:
    assert resolve_interval(value) == expected
